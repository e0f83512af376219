"""
Template definitions.

A TemplateDefinition is one locale's authoring unit: a mapping from
document field name to a raw template string, written against a single
DataSchema and able to render into one or more DocumentSchemas.
"""

from __future__ import annotations

from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from letterpress.app.schemas.schema import DataSchema, DocumentSchema


class TemplateDefinition(BaseModel):
    """
    Locale-specific templates for the fields of a set of target documents.
    """

    fields: Dict[str, str] = Field(
        ...,
        description="Document field name to raw template string",
    )

    source: DataSchema = Field(
        ...,
        description="Data schema the templates are written against",
    )

    targets: Tuple[DocumentSchema, ...] = Field(
        ...,
        min_length=1,
        description="Document schemas the definition can render into",
    )

    locale: str = Field(
        ...,
        description="Locale identifier (e.g. 'en-US')",
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    @field_validator("targets")
    @classmethod
    def dedupe_targets(
        cls, v: Tuple[DocumentSchema, ...]
    ) -> Tuple[DocumentSchema, ...]:
        seen = set()
        unique = []
        for target in v:
            if target.schema_id in seen:
                continue
            seen.add(target.schema_id)
            unique.append(target)
        return tuple(unique)

    @field_validator("locale")
    @classmethod
    def validate_locale(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Locale must be a non-empty string")
        return v

    @property
    def target_ids(self) -> Tuple[str, ...]:
        return tuple(t.schema_id for t in self.targets)

    def __str__(self) -> str:
        return (
            f"TemplateDefinition(source={self.source.schema_id}, "
            f"locale={self.locale}, targets={list(self.target_ids)}, "
            f"fields={sorted(self.fields)})"
        )
