"""
Frozen renderer registry.

The artifact returned by a successful build. Renderers are keyed by
(data schema id, document schema id) in insertion order. Nothing here is
mutated after construction, so lookups and renders need no locking.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Sequence, Tuple, Union

from letterpress.app.assembly.renderer import Renderer
from letterpress.app.schemas.diagnostics import Diagnostic
from letterpress.app.schemas.schema import DataSchema, DocumentSchema


RendererKey = Tuple[str, str]

DataSchemaRef = Union[DataSchema, str]
DocumentSchemaRef = Union[DocumentSchema, str]


def _schema_id(ref: Union[DataSchema, DocumentSchema, str]) -> str:
    return ref if isinstance(ref, str) else ref.schema_id


class RendererRegistry:
    def __init__(
        self,
        *,
        renderers: Mapping[RendererKey, Renderer],
        warnings: Sequence[Diagnostic] = (),
    ) -> None:
        self._renderers = MappingProxyType(dict(renderers))
        self._warnings: Tuple[Diagnostic, ...] = tuple(warnings)

    def __repr__(self) -> str:
        return f"RendererRegistry(renderers={list(self._renderers)!r})"

    def __len__(self) -> int:
        return len(self._renderers)

    def __iter__(self) -> Iterator[RendererKey]:
        return iter(self._renderers)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        return (_schema_id(key[0]), _schema_id(key[1])) in self._renderers

    @property
    def warnings(self) -> Tuple[Diagnostic, ...]:
        """
        Non-fatal warnings accumulated while building.
        """
        return self._warnings

    def get(
        self,
        data_schema: DataSchemaRef,
        document_schema: DocumentSchemaRef,
    ) -> Optional[Renderer]:
        return self._renderers.get((_schema_id(data_schema), _schema_id(document_schema)))

    def keys(self) -> Tuple[RendererKey, ...]:
        return tuple(self._renderers)

    def renderers(self) -> Mapping[RendererKey, Renderer]:
        return self._renderers
