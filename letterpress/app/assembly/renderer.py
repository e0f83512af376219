"""
Renderer for one (data schema, document schema) pair.

A renderer holds every locale variant installed for its data schema and
delegates locale selection to the configured resolver. It is immutable
after construction; ``render`` keeps no state between calls.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from jinja2 import TemplateError
from pydantic import BaseModel, ValidationError

from letterpress.app.compiler.compiled import CompiledTemplate
from letterpress.app.errors import RenderError
from letterpress.app.locale.resolver import LocaleResolver
from letterpress.app.schemas.document import Document
from letterpress.app.schemas.schema import DataSchema, DocumentSchema


DataInstance = Union[Mapping[str, Any], BaseModel]


class Renderer:
    def __init__(
        self,
        *,
        data_schema: DataSchema,
        document_schema: DocumentSchema,
        templates: Mapping[str, CompiledTemplate],
        locale_resolver: LocaleResolver,
    ) -> None:
        if not templates:
            raise ValueError(
                f"Renderer [{data_schema.schema_id}, {document_schema.schema_id}] "
                "requires at least one compiled template"
            )
        self._data_schema = data_schema
        self._document_schema = document_schema
        self._templates = MappingProxyType(dict(templates))
        self._locales: Tuple[str, ...] = tuple(self._templates)
        self._resolver = locale_resolver

    def __repr__(self) -> str:
        return (
            f"Renderer(data_schema={self._data_schema.schema_id!r}, "
            f"document_schema={self._document_schema.schema_id!r}, "
            f"locales={list(self._locales)!r})"
        )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def data_schema(self) -> DataSchema:
        return self._data_schema

    @property
    def document_schema(self) -> DocumentSchema:
        return self._document_schema

    @property
    def locales(self) -> Tuple[str, ...]:
        return self._locales

    @property
    def templates(self) -> Mapping[str, CompiledTemplate]:
        return self._templates

    def resolve_locale(self, locale: str) -> str:
        return self._resolver.resolve(locale, self._locales)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, data: DataInstance, locale: str) -> Union[Document, BaseModel]:
        """
        Render ``data`` into the document schema using the template that
        best matches ``locale``.

        Returns the document schema's model when it has one, otherwise a
        Document. Raises RenderError when the data does not supply every
        data schema field or a template fails at render time.
        """
        context = self._context(data)
        resolved = self.resolve_locale(locale)
        template = self._templates.get(resolved)
        if template is None:
            raise RenderError(
                f"Locale resolver returned [{resolved}], which is not one of "
                f"the installed locales {list(self._locales)}"
            )

        fields: Dict[str, Optional[str]] = {}
        for name in self._document_schema.field_names:
            fragment = template.fields.get(name)
            if fragment is None:
                fields[name] = None
                continue
            try:
                fields[name] = fragment.render(context)
            except TemplateError as exc:
                raise RenderError(
                    f"Failed to render field [{name}] of "
                    f"[{self._document_schema.schema_id}] with locale "
                    f"[{resolved}]: {exc}"
                ) from exc

        model = self._document_schema.model
        if model is None:
            return Document(
                schema_id=self._document_schema.schema_id,
                locale=resolved,
                fields=fields,
            )

        try:
            return model.model_validate(fields)
        except ValidationError as exc:
            raise RenderError(
                f"Rendered fields do not validate as {model.__name__}: {exc}"
            ) from exc

    def _context(self, data: DataInstance) -> Dict[str, Any]:
        if isinstance(data, BaseModel):
            # Declared fields and extras only; BaseModel methods never count
            declared = type(data).model_fields
            extra = data.model_extra or {}
            values: Dict[str, Any] = {}
            for name in self._data_schema.fields:
                if name in declared:
                    values[name] = getattr(data, name)
                elif name in extra:
                    values[name] = extra[name]
        elif isinstance(data, Mapping):
            values = {
                name: data[name]
                for name in self._data_schema.fields
                if name in data
            }
        else:
            raise RenderError(
                f"Data for [{self._data_schema.schema_id}] must be a mapping or "
                f"a pydantic model, got {type(data).__name__}"
            )

        missing = sorted(self._data_schema.fields - values.keys())
        if missing:
            raise RenderError(
                f"Data for [{self._data_schema.schema_id}] is missing fields {missing}"
            )
        return values
