"""
Exceptions raised by letterpress.

Install-time problems (duplicate templates, unusable schemas) are raised
immediately. Everything found while building is accumulated into
diagnostics and raised once as an AssemblyError.
"""

from __future__ import annotations

from typing import FrozenSet, List, Optional, Sequence

from letterpress.app.schemas.diagnostics import Diagnostic, DiagnosticKind


class LetterpressError(Exception):
    """Base exception for letterpress failures."""


class DuplicateTemplateError(LetterpressError):
    """Raised when a template is installed twice for the same data schema and locale."""


class InvalidSchemaError(LetterpressError):
    """Raised when a data or document schema cannot be installed."""


class TemplateCompilationError(LetterpressError):
    """
    Raised when a template string does not compile.

    The engine raises one per field. The compiler collects every failing
    field of a definition into ``failures`` and raises once.
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        lineno: Optional[int] = None,
        failures: Sequence["TemplateCompilationError"] = (),
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.lineno = lineno
        self.failures: List[TemplateCompilationError] = list(failures)


class RenderError(LetterpressError):
    """Raised when a renderer is invoked with unusable input."""


class AssemblyError(LetterpressError):
    """
    Raised when building a registry fails.

    Carries every error and warning collected up to the aborting stage.
    Errors and warnings stay separate even when warnings-as-errors is
    what caused the failure.
    """

    def __init__(
        self,
        *,
        errors: Sequence[Diagnostic],
        warnings: Sequence[Diagnostic] = (),
    ) -> None:
        self.errors: List[Diagnostic] = list(errors)
        self.warnings: List[Diagnostic] = list(warnings)
        super().__init__(self._format())

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return self.errors + self.warnings

    @property
    def kinds(self) -> FrozenSet[DiagnosticKind]:
        return frozenset(d.kind for d in self.diagnostics)

    def has(self, kind: DiagnosticKind) -> bool:
        return kind in self.kinds

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.kind == kind]

    def _format(self) -> str:
        lines = [
            f"Registry assembly failed with {len(self.errors)} error(s) "
            f"and {len(self.warnings)} warning(s)."
        ]
        if self.errors:
            lines.append("Errors:")
            lines.extend(f"  {d}" for d in self.errors)
        if self.warnings:
            lines.append("Warnings:")
            lines.extend(f"  {d}" for d in self.warnings)
        return "\n".join(lines)
