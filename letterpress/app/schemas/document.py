"""
Default rendered document.

Returned by a renderer whose DocumentSchema has no model class attached.
"""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """
    Rendered output of a single renderer invocation.
    """

    schema_id: str = Field(..., description="DocumentSchema that was rendered")

    locale: str = Field(..., description="Locale of the template actually used")

    fields: Dict[str, Optional[str]] = Field(
        ...,
        description="Rendered field values, in descriptor order",
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    def __getitem__(self, name: str) -> Optional[str]:
        return self.fields[name]
