"""
Data and document schema descriptions.

Schemas are described explicitly. A DataSchema names the variables a
template may reference; a DocumentSchema lists the output fields a
renderer produces, each with its nullability and optional encoding
override. Nothing here is derived from runtime type metadata: the
optional ``model`` attached to a DocumentSchema is only used to construct
rendered instances and is checked against the descriptors at install time.
"""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Encoding(str, Enum):
    """
    Output escaping strategy applied when compiling a field template.
    """

    PLAIN_TEXT = "plain_text"
    HTML = "html"


def _check_field_name(name: str) -> str:
    if not isinstance(name, str) or not name.isidentifier():
        raise ValueError(f"Field name must be a valid identifier, got {name!r}")
    return name


class FieldDescriptor(BaseModel):
    """
    One output field of a DocumentSchema.
    """

    name: str = Field(..., description="Document field name")

    nullable: bool = Field(
        False,
        description="Whether templates may omit the field",
    )

    encoding: Optional[Encoding] = Field(
        None,
        description="Encoding override; None uses the builder default",
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_field_name(v)


class DataSchema(BaseModel):
    """
    A document data record type.

    Its field names are the vocabulary available to templates.
    """

    schema_id: str = Field(..., min_length=1, description="Stable type identifier")

    fields: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="Field names available for substitution",
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    @field_validator("fields")
    @classmethod
    def validate_fields(cls, v: FrozenSet[str]) -> FrozenSet[str]:
        for name in v:
            _check_field_name(name)
        return v

    def __str__(self) -> str:
        return self.schema_id


class DocumentSchema(BaseModel):
    """
    An output record type.

    Field order is significant: rendered documents list their fields in
    descriptor order.
    """

    schema_id: str = Field(..., min_length=1, description="Stable type identifier")

    fields: Tuple[FieldDescriptor, ...] = Field(
        default_factory=tuple,
        description="Ordered field descriptors",
    )

    model: Optional[Type[BaseModel]] = Field(
        None,
        description="Optional model class constructed from rendered fields",
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    def __str__(self) -> str:
        return self.schema_id

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @property
    def required_fields(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields if not f.nullable)

    @property
    def nullable_fields(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.nullable)

    def descriptor(self, name: str) -> Optional[FieldDescriptor]:
        for f in self.fields:
            if f.name == name:
                return f
        return None
