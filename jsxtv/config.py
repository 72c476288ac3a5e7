"""Transform options and their JSON file form."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

from jsxtv.errors import ConfigError
from jsxtv.languages import DEFAULT_LANGUAGE
from jsxtv.passes.context import ComponentPredicate, default_is_component


# JSON option name -> TransformConfig field.
_FILE_OPTIONS = {
    "language": "language",
    "tidyOnly": "tidy_only",
    "inlineRuntime": "inline_runtime",
    "languageSpecs": "language_specs",
    "customLanguage": "custom_languages",
    "customLanguages": "custom_languages",
    "configProperty": "config_property",
    "contextProp": "context_prop",
    "textInputAttribute": "text_input_attribute",
}


@dataclass
class TransformConfig:
    """Options controlling one transform run."""

    language: str = DEFAULT_LANGUAGE
    tidy_only: bool = False
    config_property: str = "templateVars"
    context_prop: str = "__context__"
    text_input_attribute: str = "jsxtv_value"
    inline_runtime: bool = False
    language_specs: list[str] = field(default_factory=list)
    custom_languages: list[Any] = field(default_factory=list)
    is_component: ComponentPredicate = default_is_component

    def with_overrides(self, **changes: Any) -> TransformConfig:
        """Copy with every non-None keyword applied."""
        return replace(self, **{key: value for key, value in changes.items() if value is not None})


def config_from_mapping(data: Mapping[str, Any], source: str = "<config>") -> TransformConfig:
    unknown = sorted(key for key in data if key not in _FILE_OPTIONS)
    if unknown:
        raise ConfigError(
            code="CFG002",
            message=f"Unknown option(s) in {source}: {', '.join(unknown)}.",
            span=None,
            hint=f"Supported options: {', '.join(sorted(_FILE_OPTIONS))}",
        )

    values: dict[str, Any] = {}
    for key, value in data.items():
        name = _FILE_OPTIONS[key]
        if name == "custom_languages":
            items = value if isinstance(value, list) else [value]
            values.setdefault(name, []).extend(items)
        elif name == "language_specs":
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                raise ConfigError(
                    code="CFG003",
                    message=f"Option 'languageSpecs' in {source} must be a string or a list of strings.",
                    span=None,
                    hint='Example: ["my_languages:register"]',
                )
            values[name] = list(value)
        else:
            values[name] = value

    for flag in ("tidy_only", "inline_runtime"):
        if flag in values and not isinstance(values[flag], bool):
            raise ConfigError(
                code="CFG003",
                message=f"Option '{flag}' in {source} must be true or false.",
                span=None,
                hint="Use a JSON boolean.",
            )
    return TransformConfig(**values)


def load_config(path: str | Path) -> TransformConfig:
    """Read a JSON options file (`language`, `tidyOnly`, `customLanguages`, ...)."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(
            code="CFG001",
            message=f"Cannot read config file '{path}': {exc}",
            span=None,
            hint="Pass a readable JSON object file.",
        ) from exc
    if not isinstance(data, dict):
        raise ConfigError(
            code="CFG001",
            message=f"Config file '{path}' must contain a JSON object.",
            span=None,
            hint="Wrap the options in {...}.",
        )
    return config_from_mapping(data, str(path))
