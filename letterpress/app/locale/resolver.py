"""
Locale resolution policies.

A resolver picks which installed locale variant serves a requested
locale. Resolution must be a pure function of the requested locale and
the available locales (in installation order): no state is kept between
calls, so a single resolver can be shared by concurrent renders.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence


class LocaleResolver(Protocol):
    """
    Interface for locale selection.

    ``available`` is never empty and is ordered by installation.
    Implementations must return one of its members.
    """

    def resolve(self, requested: str, available: Sequence[str]) -> str:
        ...


def _normalize(locale: str) -> str:
    return locale.strip().replace("_", "-").lower()


def _loose_match(requested: str, available: Sequence[str]) -> Optional[str]:
    if requested in available:
        return requested
    wanted = _normalize(requested)
    for locale in available:
        if _normalize(locale) == wanted:
            return locale
    return None


class MatchOrFirstLocaleResolver:
    """
    Exact match, otherwise the first installed locale.
    """

    def resolve(self, requested: str, available: Sequence[str]) -> str:
        if not available:
            raise ValueError("No locales available to resolve against")
        return requested if requested in available else available[0]


class MatchOrDefaultLocaleResolver:
    """
    Exact match, otherwise a configured default, otherwise the first
    installed locale.
    """

    def __init__(self, default: str) -> None:
        self.default = default

    def resolve(self, requested: str, available: Sequence[str]) -> str:
        if not available:
            raise ValueError("No locales available to resolve against")
        for candidate in (requested, self.default):
            if candidate in available:
                return candidate
        return available[0]


class LanguageFallbackLocaleResolver:
    """
    Exact match, then any locale sharing the primary language subtag
    ('en-GB' falls back to 'en', then to the first installed 'en-*'),
    otherwise the first installed locale.

    Matching ignores case and treats '_' and '-' as the same separator.
    """

    def resolve(self, requested: str, available: Sequence[str]) -> str:
        if not available:
            raise ValueError("No locales available to resolve against")

        match = _loose_match(requested, available)
        if match is not None:
            return match

        language = _normalize(requested).split("-", 1)[0]
        bare = _loose_match(language, available)
        if bare is not None:
            return bare

        for locale in available:
            if _normalize(locale).split("-", 1)[0] == language:
                return locale

        return available[0]
