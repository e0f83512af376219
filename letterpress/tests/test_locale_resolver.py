import pytest

from letterpress.app.locale.resolver import (
    LanguageFallbackLocaleResolver,
    MatchOrDefaultLocaleResolver,
    MatchOrFirstLocaleResolver,
)


def test_match_or_first():
    resolver = MatchOrFirstLocaleResolver()

    assert resolver.resolve("fr", ["en", "fr"]) == "fr"
    assert resolver.resolve("de", ["en-GB", "en"]) == "en-GB"
    # Matching is exact
    assert resolver.resolve("EN_gb", ["en", "en-GB"]) == "en"


def test_match_or_default():
    resolver = MatchOrDefaultLocaleResolver("en")

    assert resolver.resolve("fr", ["fr", "en"]) == "fr"
    assert resolver.resolve("de", ["fr", "en"]) == "en"
    assert resolver.resolve("de", ["fr", "es"]) == "fr"
    assert resolver.resolve("en_gb", ["fr", "en-GB"]) == "fr"


def test_language_fallback():
    resolver = LanguageFallbackLocaleResolver()
    available = ["fr", "en-US", "en", "en-GB"]

    assert resolver.resolve("en-GB", available) == "en-GB"
    assert resolver.resolve("en-AU", available) == "en"
    assert resolver.resolve("pt-BR", available) == "fr"
    assert resolver.resolve("EN_gb", available) == "en-GB"


def test_language_fallback_without_bare_language():
    resolver = LanguageFallbackLocaleResolver()

    assert resolver.resolve("en-AU", ["fr", "en-US", "en-GB"]) == "en-US"


@pytest.mark.parametrize(
    "resolver",
    [
        MatchOrFirstLocaleResolver(),
        MatchOrDefaultLocaleResolver("en"),
        LanguageFallbackLocaleResolver(),
    ],
)
def test_resolvers_reject_empty_locale_list(resolver):
    with pytest.raises(ValueError):
        resolver.resolve("en", [])
