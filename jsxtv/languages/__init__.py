"""Built-in target languages."""

from __future__ import annotations

from jsxtv.language import LanguageRegistry
from jsxtv.languages.handlebars import HANDLEBARS
from jsxtv.languages.php import PHP


DEFAULT_LANGUAGE = "handlebars"

BUILTIN_LANGUAGES = (PHP, HANDLEBARS)


def build_builtin_language_registry() -> LanguageRegistry:
    """Create a registry holding the built-in languages."""
    registry = LanguageRegistry()
    for language in BUILTIN_LANGUAGES:
        registry.register(language)
    return registry


__all__ = ["BUILTIN_LANGUAGES", "DEFAULT_LANGUAGE", "HANDLEBARS", "PHP", "build_builtin_language_registry"]
