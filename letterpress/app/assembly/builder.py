"""
Registry builder.

Accumulates document schemas and per-locale templates, then assembles
them into a frozen RendererRegistry.

Installation does almost no validation: apart from duplicate templates
and unusable schemas, which fail immediately, every check is deferred to
``build()`` so that installation order never matters. ``build()`` runs
the staged validator and, only if every stage passes, creates one
renderer per (data schema, document schema) pair.

Building is single-threaded and synchronous. The builder itself is not
thread-safe; the registry it returns is.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional
from uuid import uuid4

from letterpress.app.assembly.registry import RendererKey, RendererRegistry
from letterpress.app.assembly.renderer import Renderer
from letterpress.app.compiler.compiled import CompiledTemplate
from letterpress.app.compiler.engine import TemplateEngine
from letterpress.app.compiler.template_compiler import TemplateCompiler
from letterpress.app.config import LetterpressSettings
from letterpress.app.events import AssemblyEventEmitter, NullEventEmitter
from letterpress.app.index.schema_index import SchemaIndex
from letterpress.app.index.template_table import TemplateTable
from letterpress.app.locale.resolver import LocaleResolver, MatchOrFirstLocaleResolver
from letterpress.app.schemas.schema import DataSchema, DocumentSchema, Encoding
from letterpress.app.schemas.template import TemplateDefinition
from letterpress.app.validation.context import AssemblyContext
from letterpress.app.validation.pipeline import AssemblyValidator, ValidationOutcome

logger = logging.getLogger(__name__)


class RegistryBuilder:
    def __init__(
        self,
        *,
        engine: Optional[TemplateEngine] = None,
    ) -> None:
        self._table = TemplateTable()
        self._schema_index = SchemaIndex()
        self._engine = engine or TemplateEngine()
        self._locale_resolver: LocaleResolver = MatchOrFirstLocaleResolver()
        self._warnings_as_errors = False
        self._default_encoding = Encoding.HTML
        self._emitter: AssemblyEventEmitter = NullEventEmitter()

    # ------------------------------------------------------------------
    # Integration constructor
    # ------------------------------------------------------------------

    @classmethod
    def from_settings(cls, settings: LetterpressSettings) -> "RegistryBuilder":
        builder = cls()
        builder.set_default_encoding(settings.default_encoding)
        builder.set_warnings_as_errors(settings.warnings_as_errors)
        return builder

    # ------------------------------------------------------------------
    # Installation
    # ------------------------------------------------------------------

    def install_template(
        self,
        data_schema: DataSchema,
        definition: TemplateDefinition,
    ) -> "RegistryBuilder":
        """
        Install ``definition`` under ``data_schema``.

        Raises DuplicateTemplateError if a template for the same data
        schema and locale is already installed.
        """
        self._table.install(data_schema, definition)
        logger.debug(
            "Installed template %s/%s -> %s",
            data_schema.schema_id,
            definition.locale,
            list(definition.target_ids),
        )
        return self

    def install_document_schema(self, document_schema: DocumentSchema) -> "RegistryBuilder":
        """
        Install a document schema.

        Raises InvalidSchemaError if it declares no fields, repeats a
        field name, disagrees with its model, or reuses an installed id.
        """
        self._schema_index.install(document_schema)
        logger.debug(
            "Installed document schema %s with fields %s",
            document_schema.schema_id,
            list(document_schema.field_names),
        )
        return self

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_locale_resolver(self, resolver: LocaleResolver) -> "RegistryBuilder":
        self._locale_resolver = resolver
        return self

    def set_warnings_as_errors(self, enabled: bool = True) -> "RegistryBuilder":
        self._warnings_as_errors = enabled
        return self

    def set_default_encoding(self, encoding: Encoding) -> "RegistryBuilder":
        self._default_encoding = Encoding(encoding)
        return self

    def set_event_emitter(self, emitter: AssemblyEventEmitter) -> "RegistryBuilder":
        self._emitter = emitter
        return self

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build(self, *, build_id: Optional[str] = None) -> RendererRegistry:
        """
        Validate, compile and assemble everything installed so far.

        Raises AssemblyError with every diagnostic collected up to the
        stage that failed.
        """
        build_id = build_id or uuid4().hex
        context = AssemblyContext(
            table=self._table,
            schema_index=self._schema_index,
            compiler=TemplateCompiler(
                default_encoding=self._default_encoding,
                engine=self._engine,
            ),
        )
        validator = AssemblyValidator(
            warnings_as_errors=self._warnings_as_errors,
        )

        logger.debug("Building registry %s", build_id)
        outcome = validator.run(context, build_id=build_id, emitter=self._emitter)
        registry = self._assemble(outcome)

        logger.info(
            "Built registry %s with %d renderer(s) and %d warning(s) after stages %s",
            build_id,
            len(registry),
            len(registry.warnings),
            outcome.stages_executed,
        )
        return registry

    def _assemble(self, outcome: ValidationOutcome) -> RendererRegistry:
        renderers: Dict[RendererKey, Renderer] = {}

        for cell in self._table.cells():
            data_schema_id = cell.data_schema.schema_id
            compiled = outcome.compiled[(data_schema_id, cell.locale)]

            for target in compiled.targets:
                key = (data_schema_id, target.schema_id)
                if key in renderers:
                    continue
                renderers[key] = Renderer(
                    data_schema=cell.data_schema,
                    document_schema=target,
                    templates=self._locale_variants(data_schema_id, outcome),
                    locale_resolver=self._locale_resolver,
                )

        return RendererRegistry(renderers=renderers, warnings=outcome.warnings)

    def _locale_variants(
        self, data_schema_id: str, outcome: ValidationOutcome
    ) -> Dict[str, CompiledTemplate]:
        return {
            locale: outcome.compiled[(data_schema_id, locale)]
            for locale in self._table.row(data_schema_id)
        }
