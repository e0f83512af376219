"""
Stage 0: structural sanity warnings.

Raised before anything is compiled so that "nothing installed" shows up
on its own instead of as a flood of per-field errors.
"""

from __future__ import annotations

from typing import List

from letterpress.app.schemas.diagnostics import Diagnostic, DiagnosticKind
from letterpress.app.validation.context import AssemblyContext
from letterpress.app.validation.result import StageResult


class SanityStage:
    stage_id = "sanity"
    name = "Registry sanity"

    def run(self, context: AssemblyContext) -> StageResult:
        diagnostics: List[Diagnostic] = []
        table = context.table
        index = context.schema_index

        if table.is_empty():
            diagnostics.append(
                Diagnostic.warning(
                    DiagnosticKind.EMPTY_REGISTRY,
                    stage=self.stage_id,
                    message="No data schemas or templates installed",
                    collection="templates",
                )
            )

        if index.is_empty():
            diagnostics.append(
                Diagnostic.warning(
                    DiagnosticKind.EMPTY_REGISTRY,
                    stage=self.stage_id,
                    message="No document schemas installed",
                    collection="documents",
                )
            )

        if not table.is_empty() and not index.is_empty():
            used = {
                target_id
                for cell in table.cells()
                for target_id in cell.definition.target_ids
            }
            for document in index:
                if document.schema_id not in used:
                    diagnostics.append(
                        Diagnostic.warning(
                            DiagnosticKind.DANGLING_DOCUMENT,
                            stage=self.stage_id,
                            message=(
                                f"Document schema [{document.schema_id}] is installed "
                                "but not used as a target by any installed template"
                            ),
                            document_schema=document.schema_id,
                        )
                    )

        return StageResult.from_diagnostics(self.stage_id, diagnostics)
