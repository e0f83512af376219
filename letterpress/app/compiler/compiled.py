"""
Compiled, render-ready template artifacts.

Both types are immutable after construction and safe to share between
threads: the field map is a read-only proxy and Jinja2 templates render
without shared mutable state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, FrozenSet, Mapping, Optional, Tuple

from jinja2 import Template

from letterpress.app.schemas.schema import DataSchema, DocumentSchema, Encoding


@dataclass(frozen=True)
class CompiledFragment:
    """
    One field's compiled template and the variable roots it references.
    """

    source: str
    encoding: Encoding
    template: Template = field(repr=False, compare=False)
    variables: FrozenSet[str] = frozenset()
    # Subset of variables that name engine globals
    builtins: FrozenSet[str] = frozenset()

    def render(self, context: Mapping[str, Any]) -> str:
        return str(self.template.render(context))


@dataclass(frozen=True)
class CompiledTemplate:
    """
    Compiled form of one TemplateDefinition.

    ``fields`` holds a fragment for every authored field and ``None`` for
    every nullable target field the author left out.
    """

    fields: Mapping[str, Optional[CompiledFragment]]
    source: DataSchema
    targets: Tuple[DocumentSchema, ...]
    locale: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def referenced_variables(self) -> FrozenSet[str]:
        roots: FrozenSet[str] = frozenset()
        for fragment in self.fields.values():
            if fragment is not None:
                roots = roots | fragment.variables
        return roots

    def authored_fields(self) -> Tuple[str, ...]:
        return tuple(name for name, fragment in self.fields.items() if fragment is not None)
