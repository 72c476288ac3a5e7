"""JSON-in, JSON-out request handlers used by the stdio adapter and embedders.

Every handler takes a payload dict and returns a JSON-ready dict. Source is
given either inline (`source`, optional `filename`) or as `input_path`.
Options come from an `options` object using the config file names
(`tidyOnly`, `customLanguages`, ...) plus the top-level shortcuts
`language`, `tidy_only`, `inline_runtime` and `language_specs`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from jsxtv.config import TransformConfig, config_from_mapping
from jsxtv.errors import CLIError, CompilerError
from jsxtv.main import ast_to_dict, build_language_registry, explain_source, transform_source
from jsxtv.runtime import render_runtime


logger = logging.getLogger(__name__)

VERSION = "0.1.0"

Handler = Callable[[dict[str, Any]], dict[str, Any]]


def transform_request(payload: dict[str, Any]) -> dict[str, Any]:
    source, filename = _read_source(payload)
    artifacts = transform_source(source, filename=filename, config=_config_for(payload))
    result: dict[str, Any] = {
        "language": artifacts.language.name,
        "code": artifacts.code,
        "components": [report.to_dict() for report in artifacts.components],
    }
    if payload.get("include_ast"):
        result["ast"] = ast_to_dict(artifacts.program)
    return result


def check_request(payload: dict[str, Any]) -> dict[str, Any]:
    """Parse and transform; report which configured components were found."""
    source, filename = _read_source(payload)
    artifacts = transform_source(source, filename=filename, config=_config_for(payload))
    found = {report.name: report.found for report in artifacts.components}
    return {"ok": True, "components": found}


def explain_request(payload: dict[str, Any]) -> dict[str, Any]:
    source, filename = _read_source(payload)
    return explain_source(source, filename=filename, config=_config_for(payload))


def languages_request(payload: dict[str, Any]) -> dict[str, Any]:
    registry = build_language_registry(_config_for(payload))
    return {"languages": [language.to_dict() for language in registry.languages()]}


def runtime_request(payload: dict[str, Any]) -> dict[str, Any]:
    config = _config_for(payload)
    language = build_language_registry(config).get(config.language)
    return {"language": language.name, "code": render_runtime(language)}


def capabilities_request(payload: dict[str, Any] | None = None) -> dict[str, Any]:
    """Service name, version, method names and built-in languages."""
    return {
        "service": "jsxtv",
        "version": VERSION,
        "methods": sorted(_HANDLERS),
        "languages": build_language_registry().names(),
    }


_HANDLERS: dict[str, Handler] = {
    "transform": transform_request,
    "check": check_request,
    "explain": explain_request,
    "languages": languages_request,
    "runtime": runtime_request,
    "capabilities": capabilities_request,
}


def dispatch(method: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
    """Run the handler registered for `method`; raises `CompilerError` subclasses."""
    handler = _HANDLERS.get(method)
    if handler is None:
        raise CLIError(
            code="SRV001",
            message=f"No service method named '{method}'.",
            span=None,
            hint=f"Methods: {', '.join(sorted(_HANDLERS))}",
        )
    return handler(payload or {})


def safe_dispatch(method: str, payload: dict[str, Any] | None = None) -> tuple[bool, dict[str, Any]]:
    """Like `dispatch`, but returns `(ok, result_or_error_payload)` instead of raising."""
    try:
        return True, dispatch(method, payload)
    except CompilerError as err:
        return False, {"error": err.to_diagnostic().to_dict()}
    except Exception as err:  # pragma: no cover
        logger.exception("Service method %s failed.", method)
        return False, {
            "error": {
                "code": "SRV999",
                "message": f"Internal service error: {err}",
                "hint": "See the jsxtv log output for the traceback.",
            }
        }


def _read_source(payload: dict[str, Any]) -> tuple[str, str]:
    inline = payload.get("source")
    input_path = payload.get("input_path")

    if inline is not None and input_path is not None:
        raise CLIError(
            code="SRV002",
            message="Both 'source' and 'input_path' were given.",
            span=None,
            hint="Send inline source or a file path, not both.",
        )
    if inline is not None:
        return str(inline), str(payload.get("filename", "<inline>"))
    if input_path is None:
        raise CLIError(code="SRV004", message="No source given.", span=None, hint="Set 'source' or 'input_path'.")

    path = Path(str(input_path))
    try:
        return path.read_text(encoding="utf-8"), str(path)
    except OSError as exc:
        raise CLIError(
            code="SRV003",
            message=f"Cannot read input file {path}: {exc.strerror or exc}",
            span=None,
            hint="Check that input_path exists and is readable.",
        ) from exc


def _config_for(payload: dict[str, Any]) -> TransformConfig:
    options = payload.get("options", {})
    if not isinstance(options, dict):
        raise CLIError(
            code="SRV005",
            message="'options' must be a JSON object.",
            span=None,
            hint='Example: {"language": "php", "tidyOnly": false}',
        )
    config = config_from_mapping(options, "options") if options else TransformConfig()

    language = payload.get("language")
    extra_specs = _as_spec_list(payload.get("language_specs"))
    return config.with_overrides(
        language=str(language) if language is not None else None,
        tidy_only=True if payload.get("tidy_only") else None,
        inline_runtime=True if payload.get("inline_runtime") else None,
        language_specs=[*config.language_specs, *extra_specs] if extra_specs else None,
    )


def _as_spec_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    raise CLIError(
        code="SRV006",
        message="'language_specs' must be a string or a list of strings.",
        span=None,
        hint='Example: ["my_languages:register", "erb.json"]',
    )
