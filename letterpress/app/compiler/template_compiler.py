"""
Template compiler.

Turns one TemplateDefinition into a CompiledTemplate:

1. Each authored field is compiled under its resolved encoding: the
   effective encoding the targets agree on (descriptor override, else
   the builder default), or HTML when they disagree.
2. Every nullable field of any target that the author did not supply is
   recorded with an explicit ``None``, so the compiled key set always
   covers every nullable target field and renderers only need a null
   check for optional fields.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from letterpress.app.compiler.compiled import CompiledFragment, CompiledTemplate
from letterpress.app.compiler.engine import TemplateEngine
from letterpress.app.errors import TemplateCompilationError
from letterpress.app.index.schema_index import SchemaIndex
from letterpress.app.schemas.schema import Encoding
from letterpress.app.schemas.template import TemplateDefinition

logger = logging.getLogger(__name__)


class TemplateCompiler:
    def __init__(
        self,
        *,
        default_encoding: Encoding = Encoding.HTML,
        engine: Optional[TemplateEngine] = None,
    ) -> None:
        self.default_encoding = default_encoding
        self._engine = engine or TemplateEngine()

    def compile(
        self,
        definition: TemplateDefinition,
        schema_index: SchemaIndex,
    ) -> CompiledTemplate:
        """
        Compile every field of ``definition``.

        Raises TemplateCompilationError listing every field that failed.
        """
        compiled: Dict[str, Optional[CompiledFragment]] = {}
        failures: List[TemplateCompilationError] = []

        for name, raw in definition.fields.items():
            encoding = schema_index.resolve_encoding(
                name, definition.targets, self.default_encoding
            )
            try:
                compiled[name] = self._engine.compile(raw, encoding)
            except TemplateCompilationError as exc:
                failures.append(
                    TemplateCompilationError(exc.message, field=name, lineno=exc.lineno)
                )

        if failures:
            raise TemplateCompilationError(
                f"{len(failures)} field(s) failed to compile for "
                f"[{definition.source.schema_id}] locale [{definition.locale}]",
                failures=failures,
            )

        # Backfill nullable target fields the author left out
        for target in definition.targets:
            for name in target.nullable_fields:
                compiled.setdefault(name, None)

        logger.debug(
            "Compiled %d field(s) for %s/%s",
            len(compiled),
            definition.source.schema_id,
            definition.locale,
        )

        return CompiledTemplate(
            fields=compiled,
            source=definition.source,
            targets=definition.targets,
            locale=definition.locale,
        )
