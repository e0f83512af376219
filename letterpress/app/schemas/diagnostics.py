"""
Structured assembly diagnostics.

Every problem found while assembling a registry is reported as a
Diagnostic rather than raised on the spot. Diagnostics are accumulated
per validation stage and surfaced together, either on the AssemblyError
raised by a failed build or on the registry returned by a successful one.

Messages are human-readable. The context mapping keeps the structured
attributes (schema ids, locale, field, variable) for tooling.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations (FROZEN CONTRACTS)
# ---------------------------------------------------------------------------


class Severity(str, Enum):
    """
    Severity of a diagnostic.

    ERROR always fails the build. WARNING fails the build only when
    warnings-as-errors is enabled.
    """

    ERROR = "error"
    WARNING = "warning"


class DiagnosticKind(str, Enum):
    """
    Taxonomy of assembly problems.
    """

    # Errors
    MISSING_VARIABLE = "missing_variable"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    EXTRA_FIELD = "extra_field"
    UNREACHABLE_TARGET = "unreachable_target"
    UNREGISTERED_TARGET = "unregistered_target"
    SOURCE_MISMATCH = "source_mismatch"
    TEMPLATE_SYNTAX = "template_syntax"

    # Warnings
    UNUSED_DATA_FIELD = "unused_data_field"
    EMPTY_REGISTRY = "empty_registry"
    DANGLING_DOCUMENT = "dangling_document"
    ENCODING_CONFLICT = "encoding_conflict"


# Stable codes. Existing entries MUST NOT be renumbered.
DIAGNOSTIC_CODES: Dict[DiagnosticKind, str] = {
    DiagnosticKind.SOURCE_MISMATCH: "LP-E001",
    DiagnosticKind.UNREGISTERED_TARGET: "LP-E002",
    DiagnosticKind.TEMPLATE_SYNTAX: "LP-E003",
    DiagnosticKind.MISSING_VARIABLE: "LP-E101",
    DiagnosticKind.MISSING_REQUIRED_FIELD: "LP-E102",
    DiagnosticKind.EXTRA_FIELD: "LP-E103",
    DiagnosticKind.UNREACHABLE_TARGET: "LP-E104",
    DiagnosticKind.EMPTY_REGISTRY: "LP-W001",
    DiagnosticKind.DANGLING_DOCUMENT: "LP-W002",
    DiagnosticKind.ENCODING_CONFLICT: "LP-W003",
    DiagnosticKind.UNUSED_DATA_FIELD: "LP-W101",
}


# ---------------------------------------------------------------------------
# Canonical diagnostic object
# ---------------------------------------------------------------------------


class Diagnostic(BaseModel):
    """
    A single immutable assembly error or warning.
    """

    code: str = Field(
        ...,
        description="Stable identifier of the diagnostic kind (e.g. 'LP-E101')",
    )

    kind: DiagnosticKind = Field(
        ...,
        description="Classification of the problem",
    )

    severity: Severity = Field(
        ...,
        description="Whether the diagnostic is an error or a warning",
    )

    stage: str = Field(
        ...,
        description="Identifier of the validation stage that produced it",
    )

    message: str = Field(
        ...,
        description="Human-readable explanation",
    )

    context: Dict[str, Any] = Field(
        default_factory=dict,
        description="Structured attributes (schema ids, locale, field, ...)",
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    @classmethod
    def error(
        cls,
        kind: DiagnosticKind,
        *,
        stage: str,
        message: str,
        **context: Any,
    ) -> "Diagnostic":
        return cls(
            code=DIAGNOSTIC_CODES[kind],
            kind=kind,
            severity=Severity.ERROR,
            stage=stage,
            message=message,
            context=context,
        )

    @classmethod
    def warning(
        cls,
        kind: DiagnosticKind,
        *,
        stage: str,
        message: str,
        **context: Any,
    ) -> "Diagnostic":
        return cls(
            code=DIAGNOSTIC_CODES[kind],
            kind=kind,
            severity=Severity.WARNING,
            stage=stage,
            message=message,
            context=context,
        )
