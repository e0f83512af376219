"""
Stage 3: unused data field audit.

A data schema field that no installed locale ever references is most
likely a mistake in either the schema or the templates. Advisory only.
"""

from __future__ import annotations

from typing import List

from letterpress.app.schemas.diagnostics import Diagnostic, DiagnosticKind
from letterpress.app.validation.context import AssemblyContext
from letterpress.app.validation.result import StageResult


class UnusedVariablesStage:
    stage_id = "unused_variables"
    name = "Unused data fields"

    def run(self, context: AssemblyContext) -> StageResult:
        diagnostics: List[Diagnostic] = []

        for data_schema in context.table.data_schemas():
            compiled_row = context.compiled_row(data_schema.schema_id)
            if not compiled_row:
                continue

            referenced = set()
            for compiled in compiled_row.values():
                referenced |= compiled.referenced_variables

            locales = list(compiled_row)
            for name in sorted(data_schema.fields - referenced):
                diagnostics.append(
                    Diagnostic.warning(
                        DiagnosticKind.UNUSED_DATA_FIELD,
                        stage=self.stage_id,
                        message=(
                            f"Unused data field [{name}] in [{data_schema.schema_id}]: "
                            f"not referenced by any installed locale {locales}"
                        ),
                        data_schema=data_schema.schema_id,
                        field=name,
                        locales=locales,
                    )
                )

        return StageResult.from_diagnostics(self.stage_id, diagnostics)
