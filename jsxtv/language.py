"""Target-language token tables, substitution and the language registry."""

from __future__ import annotations

import importlib
import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any, Iterable, Mapping

from jsxtv.errors import LanguageError


logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"\|\|%(\d+|var|subVar)\|\|")

CONTROL_INTENTS = ("ifTruthy", "ifFalsy", "ifEqual", "ifNotEqual")
LIST_TARGETS = ("open", "close", "formatObjectProperty", "formatPrimitive")


def context_name(base: str, context: int) -> str:
    """`base` at depth 0, `base_N` below it."""
    return base if context == 0 else f"{base}_{context}"


def _arg_text(arg: Any) -> str:
    if arg is None:
        return ""
    if isinstance(arg, Mapping):
        return str(arg.get("value", ""))
    text = getattr(arg, "text", None)
    if text is not None:
        return str(text)
    return str(arg)


def substitute(template: str, args: Iterable[Any] = (), context: int = 0, base: str = "data") -> str:
    """Fill `||%N||`, `||%var||` and `||%subVar||` tokens in `template`.

    Positional args may be `Arg` objects, `{type, value}` mappings or plain
    strings. A missing positional arg renders as an empty string.
    """
    values = [_arg_text(arg) for arg in args]

    def _replace(match: re.Match[str]) -> str:
        token = match.group(1)
        if token == "var":
            return context_name(base, context)
        if token == "subVar":
            return context_name(base, context + 1)
        index = int(token) - 1
        if 0 <= index < len(values):
            return values[index]
        return ""

    return TOKEN_PATTERN.sub(_replace, template)


@dataclass
class Language:
    """Token table for one target templating grammar."""

    name: str
    replace: dict[str, str]
    list: dict[str, str]
    control: dict[str, dict[str, str]]
    context_base: str = "data"
    aliases: tuple[str, ...] = ()
    description: str = ""

    def table(self) -> dict[str, Any]:
        return {"replace": self.replace, "list": self.list, "control": self.control}

    def lookup(self, kind: str, path: Iterable[str]) -> str:
        """Resolve a template by category path, descending permissively.

        Unknown segments are skipped, so a mistyped path yields the deepest
        node reached. A node that is not a string resolves to "".
        """
        node: Any = self.table().get(kind)
        segments = list(path)
        for segment in segments:
            if isinstance(node, Mapping) and node.get(segment):
                node = node[segment]
        if isinstance(node, str):
            return node
        logger.debug("Language %s has no template at %s %s.", self.name, kind, "/".join(segments))
        return ""

    def render(self, kind: str, path: Iterable[str], args: Iterable[Any] = (), context: int = 0) -> str:
        return substitute(self.lookup(kind, path), args, context, self.context_base)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "aliases": list(self.aliases),
            "description": self.description,
            "contextBase": self.context_base,
            **self.table(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Language:
        aliases = data.get("aliases") or ()
        return cls(
            name=str(data.get("name", "")),
            replace=dict(data.get("replace") or {}),
            list=dict(data.get("list") or {}),
            control={key: dict(value) for key, value in (data.get("control") or {}).items() if isinstance(value, Mapping)},
            context_base=str(data.get("contextBase", data.get("context_base", "data"))),
            aliases=tuple(str(alias) for alias in aliases),
            description=str(data.get("description", "")),
        )


@dataclass
class LanguageValidationResult:
    """Validation summary for one language table."""

    name: str
    ok: bool
    errors: list[str] = field(default_factory=list)


def validate_language(language: Language) -> list[str]:
    errors: list[str] = []
    if not language.name.strip():
        errors.append("name is required")
    if not isinstance(language.replace.get("format"), str):
        errors.append("replace.format must be a string")
    for target in LIST_TARGETS:
        if not isinstance(language.list.get(target), str):
            errors.append(f"list.{target} must be a string")
    for intent in CONTROL_INTENTS:
        entry = language.control.get(intent)
        if not isinstance(entry, Mapping):
            errors.append(f"control.{intent} is required")
            continue
        for edge in ("open", "close"):
            if not isinstance(entry.get(edge), str):
                errors.append(f"control.{intent}.{edge} must be a string")
    if not re.fullmatch(r"[A-Za-z_][A-Za-z0-9_]*", language.context_base):
        errors.append("context_base must be an identifier")
    return errors


class LanguageRegistry:
    """Registered languages, looked up by name or alias."""

    def __init__(self) -> None:
        self._languages: dict[str, Language] = {}
        self._alias_to_name: dict[str, str] = {}

    def register(self, language: Language) -> None:
        errors = validate_language(language)
        if errors:
            raise LanguageError(
                code="LNG002",
                message=f"Invalid language table '{language.name}'.",
                span=None,
                hint="; ".join(errors),
            )
        self._languages[language.name] = language
        self._alias_to_name[language.name] = language.name
        for alias in language.aliases:
            self._alias_to_name[alias] = language.name

    def has(self, name: str) -> bool:
        return name in self._alias_to_name

    def get(self, name: str) -> Language:
        canonical = self._alias_to_name.get(name)
        if canonical is None:
            raise LanguageError(
                code="LNG001",
                message=f"Unknown language '{name}'.",
                span=None,
                hint=f"Available languages: {', '.join(self.names())}",
            )
        return self._languages[canonical]

    def names(self) -> list[str]:
        return sorted(self._languages)

    def languages(self) -> list[Language]:
        return [self._languages[name] for name in self.names()]

    def validate(self) -> list[LanguageValidationResult]:
        results: list[LanguageValidationResult] = []
        for language in self.languages():
            errors = validate_language(language)
            results.append(LanguageValidationResult(name=language.name, ok=not errors, errors=errors))
        return results


def load_language_spec(registry: LanguageRegistry, spec: str) -> None:
    """Load a custom language from a JSON file or a `module[:symbol]` spec."""
    if spec.strip().endswith(".json"):
        load_language_file(registry, spec.strip())
        return

    module_name, symbol_name = _split_spec(spec)
    try:
        module = importlib.import_module(module_name)
    except Exception as exc:  # pragma: no cover - import failure path
        raise LanguageError(
            code="LNG003",
            message=f"Failed to import language module '{module_name}': {exc}",
            span=None,
            hint="Ensure the module is importable and on PYTHONPATH.",
        ) from exc

    if symbol_name is None:
        target_obj: Any = module
    else:
        if not hasattr(module, symbol_name):
            raise LanguageError(
                code="LNG004",
                message=f"Language symbol '{symbol_name}' not found in module '{module_name}'.",
                span=None,
                hint="Use module[:symbol] with an exported Language, table or register function.",
            )
        target_obj = getattr(module, symbol_name)

    _apply_loaded_object(registry, target_obj, spec)


def load_language_specs(registry: LanguageRegistry, specs: Iterable[str]) -> None:
    for spec in specs:
        load_language_spec(registry, spec)


def load_language_file(registry: LanguageRegistry, path: str | Path) -> None:
    """Register the language table(s) stored in a JSON file."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise LanguageError(
            code="LNG003",
            message=f"Failed to load language file '{path}': {exc}",
            span=None,
            hint="The file must contain a JSON object or a list of objects.",
        ) from exc
    _apply_loaded_object(registry, data, str(path))


def register_custom_languages(registry: LanguageRegistry, tables: Iterable[Any]) -> None:
    """Register caller-supplied tables (Language objects or mappings)."""
    for table in tables:
        _apply_loaded_object(registry, table, "<custom>")


def _split_spec(spec: str) -> tuple[str, str | None]:
    if not spec.strip():
        raise LanguageError(code="LNG005", message="Language spec cannot be empty.", span=None, hint="Use module[:symbol].")

    if ":" not in spec:
        return spec.strip(), "register"

    module_name, symbol_name = spec.split(":", 1)
    symbol = symbol_name.strip() or None
    return module_name.strip(), symbol


def _apply_loaded_object(registry: LanguageRegistry, obj: Any, spec: str) -> None:
    if isinstance(obj, Language):
        registry.register(obj)
        return

    if isinstance(obj, Mapping):
        registry.register(Language.from_dict(obj))
        return

    if isinstance(obj, (list, tuple, set)):
        for item in obj:
            _apply_loaded_object(registry, item, spec)
        return

    if isinstance(obj, ModuleType) and hasattr(obj, "register"):
        _apply_callable(registry, getattr(obj, "register"), spec)
        return

    if callable(obj):
        _apply_callable(registry, obj, spec)
        return

    raise LanguageError(
        code="LNG006",
        message=f"Unsupported custom language export type '{type(obj).__name__}' for spec '{spec}'.",
        span=None,
        hint="Export a Language, a table mapping, an iterable of those, or a callable returning them.",
    )


def _apply_callable(registry: LanguageRegistry, fn: Any, spec: str) -> None:
    try:
        produced = fn()
    except TypeError:
        produced = fn(registry)
    except Exception as exc:
        raise LanguageError(
            code="LNG007",
            message=f"Language callable failed for spec '{spec}': {exc}",
            span=None,
            hint="Check the callable signature and its runtime errors.",
        ) from exc

    if produced is None:
        return
    _apply_loaded_object(registry, produced, spec)
