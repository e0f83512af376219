"""
Stage 2: field-level cross-validation of compiled templates.

For every compiled cell:

a. every variable root referenced by a fragment must be a field of the
   cell's data schema or an engine global;
b. the authored fields must cover every field some target requires, and
   must not include fields no target declares;
c. every declared target must be listed by every locale installed for
   the data schema, since one renderer serves all of them.
"""

from __future__ import annotations

from typing import Dict, List

from letterpress.app.compiler.compiled import CompiledTemplate
from letterpress.app.index.template_table import TemplateCell
from letterpress.app.schemas.diagnostics import Diagnostic, DiagnosticKind
from letterpress.app.validation.context import AssemblyContext
from letterpress.app.validation.result import StageResult


class CrossValidationStage:
    stage_id = "cross_validation"
    name = "Field cross-validation"

    def run(self, context: AssemblyContext) -> StageResult:
        diagnostics: List[Diagnostic] = []

        for cell, compiled in context.compiled_cells():
            diagnostics.extend(self._missing_variables(cell, compiled))
            diagnostics.extend(self._field_coverage(cell))
            diagnostics.extend(self._target_reachability(cell, context))

        return StageResult.from_diagnostics(self.stage_id, diagnostics)

    # ------------------------------------------------------------------
    # a. Unknown variables
    # ------------------------------------------------------------------

    def _missing_variables(
        self, cell: TemplateCell, compiled: CompiledTemplate
    ) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        data_schema = cell.data_schema

        for name, fragment in compiled.fields.items():
            if fragment is None:
                continue
            unknown = fragment.variables - data_schema.fields - fragment.builtins
            for variable in sorted(unknown):
                diagnostics.append(
                    Diagnostic.error(
                        DiagnosticKind.MISSING_VARIABLE,
                        stage=self.stage_id,
                        message=(
                            f"Missing variable [{variable}] in data schema "
                            f"[{data_schema.schema_id}] for template field [{name}] "
                            f"locale [{cell.locale}]: {fragment.source!r}"
                        ),
                        data_schema=data_schema.schema_id,
                        locale=cell.locale,
                        field=name,
                        variable=variable,
                    )
                )

        return diagnostics

    # ------------------------------------------------------------------
    # b. Required and extra fields
    # ------------------------------------------------------------------

    def _field_coverage(self, cell: TemplateCell) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        definition = cell.definition
        authored = set(definition.fields)

        all_fields = set()
        required_fields = set()
        for target in definition.targets:
            all_fields.update(target.field_names)
            required_fields.update(target.required_fields)

        missing = required_fields - authored
        if missing:
            requirements: Dict[str, List[str]] = {}
            for target in definition.targets:
                needed = [n for n in target.required_fields if n in missing]
                if needed:
                    requirements[target.schema_id] = needed

            for document_id, needed in requirements.items():
                diagnostics.append(
                    Diagnostic.error(
                        DiagnosticKind.MISSING_REQUIRED_FIELD,
                        stage=self.stage_id,
                        message=(
                            f"Template for [{cell.data_schema.schema_id}] locale "
                            f"[{cell.locale}] is missing fields required by document "
                            f"schema [{document_id}]: {needed}"
                        ),
                        data_schema=cell.data_schema.schema_id,
                        locale=cell.locale,
                        document_schema=document_id,
                        fields=needed,
                    )
                )

        extra = [n for n in definition.fields if n not in all_fields]
        if extra:
            diagnostics.append(
                Diagnostic.error(
                    DiagnosticKind.EXTRA_FIELD,
                    stage=self.stage_id,
                    message=(
                        f"Template for [{cell.data_schema.schema_id}] locale "
                        f"[{cell.locale}] has fields not used by any target document "
                        f"schema: {extra}"
                    ),
                    data_schema=cell.data_schema.schema_id,
                    locale=cell.locale,
                    fields=extra,
                )
            )

        return diagnostics

    # ------------------------------------------------------------------
    # c. Target reachability
    # ------------------------------------------------------------------

    def _target_reachability(
        self, cell: TemplateCell, context: AssemblyContext
    ) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        data_schema_id = cell.data_schema.schema_id
        row = context.table.row(data_schema_id)

        for target_id in cell.definition.target_ids:
            if not row:
                diagnostics.append(
                    Diagnostic.error(
                        DiagnosticKind.UNREACHABLE_TARGET,
                        stage=self.stage_id,
                        message=(
                            f"Cannot build renderer [{data_schema_id}, {target_id}]: "
                            f"no templates installed for data schema [{data_schema_id}]"
                        ),
                        data_schema=data_schema_id,
                        document_schema=target_id,
                        locales=[],
                    )
                )
                continue

            lacking = [
                locale
                for locale, definition in row.items()
                if target_id not in definition.target_ids
            ]
            if lacking:
                diagnostics.append(
                    Diagnostic.error(
                        DiagnosticKind.UNREACHABLE_TARGET,
                        stage=self.stage_id,
                        message=(
                            f"Document schema [{target_id}] targeted by "
                            f"[{data_schema_id}] locale [{cell.locale}] is not a "
                            f"target of locale(s) {lacking}"
                        ),
                        data_schema=data_schema_id,
                        document_schema=target_id,
                        locale=cell.locale,
                        locales=lacking,
                    )
                )

        return diagnostics
