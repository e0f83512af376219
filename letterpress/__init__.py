"""
letterpress - typed, locale-aware document templating.

Document data schemas, document schemas and per-locale templates are
installed into a builder, cross-checked at assembly time and frozen into
a registry of renderers.
"""

__version__ = "0.1.0"

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Re-export the public API
from letterpress.app.assembly.builder import RegistryBuilder
from letterpress.app.assembly.registry import RendererRegistry
from letterpress.app.assembly.renderer import Renderer
from letterpress.app.errors import (
    AssemblyError,
    DuplicateTemplateError,
    InvalidSchemaError,
    LetterpressError,
    RenderError,
)
from letterpress.app.locale.resolver import (
    LanguageFallbackLocaleResolver,
    LocaleResolver,
    MatchOrDefaultLocaleResolver,
    MatchOrFirstLocaleResolver,
)
from letterpress.app.schemas.diagnostics import Diagnostic, DiagnosticKind, Severity
from letterpress.app.schemas.document import Document
from letterpress.app.schemas.schema import (
    DataSchema,
    DocumentSchema,
    Encoding,
    FieldDescriptor,
)
from letterpress.app.schemas.template import TemplateDefinition

__all__ = [
    "RegistryBuilder",
    "RendererRegistry",
    "Renderer",
    "AssemblyError",
    "DuplicateTemplateError",
    "InvalidSchemaError",
    "LetterpressError",
    "RenderError",
    "LocaleResolver",
    "MatchOrFirstLocaleResolver",
    "MatchOrDefaultLocaleResolver",
    "LanguageFallbackLocaleResolver",
    "Diagnostic",
    "DiagnosticKind",
    "Severity",
    "Document",
    "DataSchema",
    "DocumentSchema",
    "Encoding",
    "FieldDescriptor",
    "TemplateDefinition",
]
