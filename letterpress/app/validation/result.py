from typing import List

from pydantic import BaseModel, ConfigDict, Field

from letterpress.app.schemas.diagnostics import Diagnostic, Severity


class StageResult(BaseModel):
    """
    Diagnostics produced by a single validation stage.
    """

    stage_id: str = Field(
        ...,
        description="Identifier of the executed stage (e.g. 'compile')",
    )

    errors: List[Diagnostic] = Field(
        default_factory=list,
        description="Hard failures found by the stage",
    )

    warnings: List[Diagnostic] = Field(
        default_factory=list,
        description="Advisory issues found by the stage",
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    @classmethod
    def from_diagnostics(
        cls, stage_id: str, diagnostics: List[Diagnostic]
    ) -> "StageResult":
        return cls(
            stage_id=stage_id,
            errors=[d for d in diagnostics if d.severity is Severity.ERROR],
            warnings=[d for d in diagnostics if d.severity is Severity.WARNING],
        )
