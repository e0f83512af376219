"""
Environment-driven configuration.

Pydantic v2 settings management. Values are read from ``LETTERPRESS_*``
environment variables (or passed explicitly), validated once and frozen.
A builder created from settings starts with these defaults; the builder
setters still override them.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Annotated, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from letterpress.app.schemas.schema import Encoding

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}


class LetterpressSettings(BaseSettings):
    """
    Builder defaults and logging configuration.
    """

    warnings_as_errors: Annotated[
        bool,
        Field(
            default=False,
            description="Fail builds that produce warnings",
        ),
    ]

    default_encoding: Annotated[
        Encoding,
        Field(
            default=Encoding.HTML,
            description=(
                "Encoding for document fields whose descriptor does not "
                "declare one"
            ),
        ),
    ]

    log_level: Annotated[
        str,
        Field(
            default="WARNING",
            description="Level applied to the 'letterpress' logger",
        ),
    ]

    model_config = SettingsConfigDict(
        env_prefix="LETTERPRESS_",
        frozen=True,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unsupported log level '{v}'")
        return level


@lru_cache
def get_settings() -> LetterpressSettings:
    """
    Cached settings, parsed once from the environment.
    """
    return LetterpressSettings()


def configure_logging(settings: Optional[LetterpressSettings] = None) -> None:
    """
    Apply the configured level to the package logger.

    Handlers are left to the application.
    """
    settings = settings or get_settings()
    logging.getLogger("letterpress").setLevel(settings.log_level)
