"""
Stage 1: per-cell integrity checks and compilation.

A cell is compiled only when its own checks pass: the definition must be
installed under its declared source, and every target must be installed.
"""

from __future__ import annotations

import logging
from typing import List

from letterpress.app.errors import TemplateCompilationError
from letterpress.app.index.template_table import TemplateCell
from letterpress.app.schemas.diagnostics import Diagnostic, DiagnosticKind, Severity
from letterpress.app.validation.context import AssemblyContext
from letterpress.app.validation.result import StageResult

logger = logging.getLogger(__name__)


class CompileStage:
    stage_id = "compile"
    name = "Template compilation"

    def run(self, context: AssemblyContext) -> StageResult:
        diagnostics: List[Diagnostic] = []

        for cell in context.table.cells():
            cell_diagnostics = self._check_cell(cell, context)
            diagnostics.extend(cell_diagnostics)

            if any(d.severity is Severity.ERROR for d in cell_diagnostics):
                continue

            diagnostics.extend(self._encoding_conflicts(cell, context))

            try:
                compiled = context.compiler.compile(cell.definition, context.schema_index)
            except TemplateCompilationError as exc:
                diagnostics.extend(self._syntax_errors(cell, exc))
                continue

            context.compiled[(cell.data_schema.schema_id, cell.locale)] = compiled

        return StageResult.from_diagnostics(self.stage_id, diagnostics)

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def _check_cell(self, cell: TemplateCell, context: AssemblyContext) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        definition = cell.definition

        if definition.source != cell.data_schema:
            diagnostics.append(
                Diagnostic.error(
                    DiagnosticKind.SOURCE_MISMATCH,
                    stage=self.stage_id,
                    message=(
                        "Template installed with a data schema not specified as its "
                        f"source. Template source: [{definition.source.schema_id}], "
                        f"installed under: [{cell.data_schema.schema_id}], "
                        f"locale [{cell.locale}]"
                    ),
                    data_schema=cell.data_schema.schema_id,
                    template_source=definition.source.schema_id,
                    locale=cell.locale,
                )
            )

        missing = [t.schema_id for t in definition.targets if t not in context.schema_index]
        if missing:
            diagnostics.append(
                Diagnostic.error(
                    DiagnosticKind.UNREGISTERED_TARGET,
                    stage=self.stage_id,
                    message=(
                        f"Template for [{cell.data_schema.schema_id}] locale "
                        f"[{cell.locale}] targets document schema(s) that are not "
                        f"installed: {missing}"
                    ),
                    data_schema=cell.data_schema.schema_id,
                    locale=cell.locale,
                    document_schemas=missing,
                )
            )

        return diagnostics

    def _encoding_conflicts(
        self, cell: TemplateCell, context: AssemblyContext
    ) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        for name in cell.definition.fields:
            declared = context.schema_index.conflicting_encodings(
                name, cell.definition.targets, context.compiler.default_encoding
            )
            if not declared:
                continue
            chosen = context.schema_index.resolve_encoding(
                name, cell.definition.targets, context.compiler.default_encoding
            )
            diagnostics.append(
                Diagnostic.warning(
                    DiagnosticKind.ENCODING_CONFLICT,
                    stage=self.stage_id,
                    message=(
                        f"Field [{name}] of template [{cell.data_schema.schema_id}] "
                        f"locale [{cell.locale}] has conflicting encodings across "
                        f"targets {[f'{doc}={enc.value}' for doc, enc in declared]}; "
                        f"compiling as [{chosen.value}]"
                    ),
                    data_schema=cell.data_schema.schema_id,
                    locale=cell.locale,
                    field=name,
                    encoding=chosen.value,
                )
            )
        return diagnostics

    def _syntax_errors(
        self, cell: TemplateCell, exc: TemplateCompilationError
    ) -> List[Diagnostic]:
        logger.debug(
            "Compilation failed for %s/%s: %s",
            cell.data_schema.schema_id,
            cell.locale,
            exc,
        )
        return [
            Diagnostic.error(
                DiagnosticKind.TEMPLATE_SYNTAX,
                stage=self.stage_id,
                message=(
                    f"Template field [{failure.field}] for "
                    f"[{cell.data_schema.schema_id}] locale [{cell.locale}] does "
                    f"not compile (line {failure.lineno}): {failure.message}"
                ),
                data_schema=cell.data_schema.schema_id,
                locale=cell.locale,
                field=failure.field,
                lineno=failure.lineno,
            )
            for failure in (exc.failures or [exc])
        ]
