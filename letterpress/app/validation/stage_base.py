from typing import Protocol

from letterpress.app.validation.context import AssemblyContext
from letterpress.app.validation.result import StageResult


class AssemblyStage(Protocol):
    """
    Interface for a single validation stage.

    A stage:
    - inspects the table and schema index
    - reports problems as diagnostics, never by raising
    - MUST NOT decide whether the build continues
    """

    # ------------------------------------------------------------------
    # Static identity (required)
    # ------------------------------------------------------------------
    stage_id: str   # e.g. "compile"
    name: str       # Human-readable name

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    def run(self, context: AssemblyContext) -> StageResult:
        ...
