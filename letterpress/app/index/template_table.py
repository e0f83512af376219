"""
Two-key template table.

Maps (data schema id, locale) to the installed TemplateDefinition. Rows
and the locales inside each row keep installation order, which is what
makes locale fallback deterministic. This is the single point of
duplicate detection.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Mapping, NamedTuple, Optional

from letterpress.app.errors import DuplicateTemplateError, InvalidSchemaError
from letterpress.app.schemas.schema import DataSchema
from letterpress.app.schemas.template import TemplateDefinition

logger = logging.getLogger(__name__)


class TemplateCell(NamedTuple):
    data_schema: DataSchema
    locale: str
    definition: TemplateDefinition


class TemplateTable:
    """
    Installed template definitions, outer key data schema, inner key locale.
    """

    def __init__(self) -> None:
        self._data_schemas: Dict[str, DataSchema] = {}
        self._rows: Dict[str, Dict[str, TemplateDefinition]] = {}

    def install(self, data_schema: DataSchema, definition: TemplateDefinition) -> None:
        row = self._rows.get(data_schema.schema_id, {})
        if definition.locale in row:
            raise DuplicateTemplateError(
                "Attempted to install a template that would overwrite an "
                f"already installed template with locale [{definition.locale}].\n"
                f"Data schema: {data_schema.schema_id}\n"
                f"Installed locales: {list(row)}\n"
                f"Installed: {row[definition.locale]}\n"
                f"Attempted: {definition}"
            )

        known = self._data_schemas.get(data_schema.schema_id)
        if known is not None and known != data_schema:
            raise InvalidSchemaError(
                f"Data schema [{data_schema.schema_id}] is already installed "
                "with different fields."
            )

        self._data_schemas[data_schema.schema_id] = data_schema
        self._rows.setdefault(data_schema.schema_id, {})[definition.locale] = definition

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        data_schema_id, locale = key
        return locale in self._rows.get(data_schema_id, {})

    def __len__(self) -> int:
        return sum(len(row) for row in self._rows.values())

    def is_empty(self) -> bool:
        return len(self) == 0

    def data_schemas(self) -> List[DataSchema]:
        return list(self._data_schemas.values())

    def row(self, data_schema_id: str) -> Mapping[str, TemplateDefinition]:
        """
        Locale to definition for one data schema, in installation order.
        """
        return dict(self._rows.get(data_schema_id, {}))

    def get(self, data_schema_id: str, locale: str) -> Optional[TemplateDefinition]:
        return self._rows.get(data_schema_id, {}).get(locale)

    def cells(self) -> Iterator[TemplateCell]:
        for schema_id, row in self._rows.items():
            data_schema = self._data_schemas[schema_id]
            for locale, definition in row.items():
                yield TemplateCell(data_schema, locale, definition)
