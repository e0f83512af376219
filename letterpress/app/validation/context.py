"""
Mutable state shared by the validation stages of one build.

The table and index are read-only inputs. ``compiled`` is filled by the
compile stage and read by every later stage; it is owned by the
validator and handed to assembly only after all stages pass.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Tuple

from letterpress.app.compiler.compiled import CompiledTemplate
from letterpress.app.compiler.template_compiler import TemplateCompiler
from letterpress.app.index.schema_index import SchemaIndex
from letterpress.app.index.template_table import TemplateCell, TemplateTable


class AssemblyContext:
    def __init__(
        self,
        *,
        table: TemplateTable,
        schema_index: SchemaIndex,
        compiler: TemplateCompiler,
    ) -> None:
        self.table = table
        self.schema_index = schema_index
        self.compiler = compiler
        self.compiled: Dict[Tuple[str, str], CompiledTemplate] = {}

    def compiled_cells(self) -> List[Tuple[TemplateCell, CompiledTemplate]]:
        """
        Table cells that compiled, in table order.
        """
        cells = []
        for cell in self.table.cells():
            compiled = self.compiled.get((cell.data_schema.schema_id, cell.locale))
            if compiled is not None:
                cells.append((cell, compiled))
        return cells

    def compiled_row(self, data_schema_id: str) -> Mapping[str, CompiledTemplate]:
        """
        Locale to compiled template for one data schema, in table order.
        """
        return {
            locale: self.compiled[(data_schema_id, locale)]
            for locale in self.table.row(data_schema_id)
            if (data_schema_id, locale) in self.compiled
        }
