"""
Staged assembly validator.

Runs validation stages in a fixed order over one AssemblyContext and
gates progression between them.

After every stage the collected diagnostics are checked: any error, or
any warning while warnings-as-errors is set, aborts the build with
everything gathered so far. Structural problems (nothing installed,
unregistered targets) therefore surface before the per-field errors they
would otherwise cause.

The validator does NOT build renderers. On success it hands the compiled
templates and accumulated warnings back to the caller.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple
from uuid import uuid4

from letterpress.app.compiler.compiled import CompiledTemplate
from letterpress.app.errors import AssemblyError
from letterpress.app.events import (
    AssemblyEvent,
    AssemblyEventEmitter,
    AssemblyEventType,
    NullEventEmitter,
)
from letterpress.app.schemas.diagnostics import Diagnostic
from letterpress.app.validation.context import AssemblyContext
from letterpress.app.validation.stage_base import AssemblyStage
from letterpress.app.validation.stages.compile import CompileStage
from letterpress.app.validation.stages.cross_validation import CrossValidationStage
from letterpress.app.validation.stages.sanity import SanityStage
from letterpress.app.validation.stages.unused_variables import UnusedVariablesStage

logger = logging.getLogger(__name__)


def default_stages() -> List[AssemblyStage]:
    return [
        SanityStage(),
        CompileStage(),
        CrossValidationStage(),
        UnusedVariablesStage(),
    ]


class ValidationOutcome:
    """
    Result of a successful validation run.
    """

    def __init__(
        self,
        *,
        compiled: Dict[Tuple[str, str], CompiledTemplate],
        warnings: List[Diagnostic],
        stages_executed: List[str],
    ) -> None:
        self.compiled = compiled
        self.warnings = warnings
        self.stages_executed = stages_executed


class AssemblyValidator:
    def __init__(
        self,
        *,
        warnings_as_errors: bool = False,
        stages: Optional[Sequence[AssemblyStage]] = None,
    ) -> None:
        self.warnings_as_errors = warnings_as_errors
        self._stages = list(stages) if stages is not None else default_stages()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(
        self,
        context: AssemblyContext,
        *,
        build_id: Optional[str] = None,
        emitter: Optional[AssemblyEventEmitter] = None,
    ) -> ValidationOutcome:
        """
        Execute every stage in order, aborting at the first failing gate.

        Raises AssemblyError carrying all errors and warnings collected up
        to and including the aborting stage.
        """
        build_id = build_id or uuid4().hex
        emitter = emitter or NullEventEmitter()

        errors: List[Diagnostic] = []
        warnings: List[Diagnostic] = []
        stages_executed: List[str] = []

        self._emit(emitter, build_id, AssemblyEventType.BUILD_STARTED, {
            "templates": len(context.table),
            "documents": len(context.schema_index),
            "warnings_as_errors": self.warnings_as_errors,
        })

        for stage in self._stages:
            self._emit(emitter, build_id, AssemblyEventType.STAGE_STARTED, {
                "stage_id": stage.stage_id,
            })

            result = stage.run(context)
            stages_executed.append(stage.stage_id)
            errors.extend(result.errors)
            warnings.extend(result.warnings)

            logger.debug(
                "Stage %s finished with %d error(s), %d warning(s)",
                stage.stage_id,
                len(result.errors),
                len(result.warnings),
            )

            self._emit(emitter, build_id, AssemblyEventType.STAGE_COMPLETED, {
                "stage_id": stage.stage_id,
                "errors_count": len(result.errors),
                "warnings_count": len(result.warnings),
            })

            if self._should_abort(errors, warnings):
                logger.warning(
                    "Registry assembly aborted after stage %s: %d error(s), %d warning(s)",
                    stage.stage_id,
                    len(errors),
                    len(warnings),
                )
                self._emit(emitter, build_id, AssemblyEventType.BUILD_FAILED, {
                    "stage_id": stage.stage_id,
                    "errors": [d.code for d in errors],
                    "warnings": [d.code for d in warnings],
                })
                raise AssemblyError(errors=errors, warnings=warnings)

        for warning in warnings:
            logger.info("%s", warning)

        self._emit(emitter, build_id, AssemblyEventType.BUILD_COMPLETED, {
            "stages_executed": stages_executed,
            "compiled_templates": len(context.compiled),
            "warnings_count": len(warnings),
        })

        return ValidationOutcome(
            compiled=dict(context.compiled),
            warnings=warnings,
            stages_executed=stages_executed,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _should_abort(self, errors: List[Diagnostic], warnings: List[Diagnostic]) -> bool:
        return bool(errors) or (bool(warnings) and self.warnings_as_errors)

    @staticmethod
    def _emit(
        emitter: AssemblyEventEmitter,
        build_id: str,
        event_type: AssemblyEventType,
        details: Dict,
    ) -> None:
        try:
            emitter.emit(
                AssemblyEvent(
                    build_id=build_id,
                    event_type=event_type,
                    details=details,
                )
            )
        except Exception:
            # Fail-safe: never let observability break the build
            logger.warning("Event emission failed for %s", event_type.value, exc_info=True)
