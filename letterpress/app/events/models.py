from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


# ----------------------------------------------------------------------
# Event Types (Finite and Versioned)
# ----------------------------------------------------------------------
class AssemblyEventType(str, Enum):
    """
    Progression events emitted while a registry is being built.

    NOTE:
    This enum is finite and versioned.
    New entries must preserve observational semantics.
    """

    BUILD_STARTED = "build_started"
    BUILD_COMPLETED = "build_completed"
    BUILD_FAILED = "build_failed"

    STAGE_STARTED = "stage_started"
    STAGE_COMPLETED = "stage_completed"


# ----------------------------------------------------------------------
# Event Model
# ----------------------------------------------------------------------
class AssemblyEvent(BaseModel):
    """
    An immutable observation of a phase transition during assembly.

    Events are strictly observational and never influence the build.
    """

    event_id: UUID = Field(default_factory=uuid4)
    build_id: str = Field(..., description="Identifier of the build run")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    event_type: AssemblyEventType

    # Optional contextual metadata (stage_id, counts, ...)
    details: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )
