import logging

import pytest
from pydantic import ValidationError

from letterpress.app.assembly.builder import RegistryBuilder
from letterpress.app.config import LetterpressSettings, configure_logging, get_settings
from letterpress.app.errors import AssemblyError
from letterpress.app.schemas.diagnostics import DiagnosticKind
from letterpress.app.schemas.schema import Encoding
from letterpress.tests.fixtures.schema_factory import (
    ORDER,
    RECEIPT,
    order_receipt_template,
)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = LetterpressSettings()

    assert settings.warnings_as_errors is False
    assert settings.default_encoding is Encoding.HTML
    assert settings.log_level == "WARNING"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LETTERPRESS_WARNINGS_AS_ERRORS", "true")
    monkeypatch.setenv("LETTERPRESS_DEFAULT_ENCODING", "plain_text")
    monkeypatch.setenv("LETTERPRESS_LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.warnings_as_errors is True
    assert settings.default_encoding is Encoding.PLAIN_TEXT
    assert settings.log_level == "DEBUG"


def test_invalid_log_level_is_rejected():
    with pytest.raises(ValidationError):
        LetterpressSettings(log_level="chatty")


def test_builder_from_settings_applies_defaults():
    settings = LetterpressSettings(
        warnings_as_errors=True,
        default_encoding=Encoding.PLAIN_TEXT,
    )
    builder = (
        RegistryBuilder.from_settings(settings)
        .install_document_schema(RECEIPT)
        .install_template(ORDER, order_receipt_template(fields={"title": "{{ id }}"}))
    )

    with pytest.raises(AssemblyError) as exc_info:
        builder.build()
    assert exc_info.value.has(DiagnosticKind.UNUSED_DATA_FIELD)

    registry = builder.set_warnings_as_errors(False).build()
    document = registry.get(ORDER, RECEIPT).render({"id": "<b>", "total": "1"}, "en")
    assert document["title"] == "<b>"


def test_configure_logging_sets_package_level():
    logger = logging.getLogger("letterpress")
    previous = logger.level
    try:
        configure_logging(LetterpressSettings(log_level="info"))
        assert logger.level == logging.INFO
    finally:
        logger.setLevel(previous)
