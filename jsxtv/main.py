"""Top-level transform orchestration for jsxtv."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jsxtv.ast import Node, Program
from jsxtv.classifier import ARG_IDENTIFIER, Arg, ControlIntent
from jsxtv.component import ComponentReport, transform_program
from jsxtv.config import TransformConfig
from jsxtv.language import Language, LanguageRegistry, load_language_specs, register_custom_languages
from jsxtv.languages import build_builtin_language_registry
from jsxtv.parser import parse_source
from jsxtv.printer import print_program
from jsxtv.runtime import render_runtime
from jsxtv.traverse import child_fields
from jsxtv.variables import CHILD_OBJECT


logger = logging.getLogger(__name__)


@dataclass
class TransformArtifacts:
    """Pipeline output for one source unit."""

    source_program: Program
    program: Program
    code: str
    components: list[ComponentReport]
    language: Language


def build_language_registry(config: TransformConfig | None = None) -> LanguageRegistry:
    """Built-in languages plus the custom ones named by `config`."""
    registry = build_builtin_language_registry()
    if config is not None:
        if config.language_specs:
            load_language_specs(registry, config.language_specs)
        if config.custom_languages:
            register_custom_languages(registry, config.custom_languages)
    return registry


def transform_source(
    source: str,
    *,
    filename: str = "<input>",
    config: TransformConfig | None = None,
    language_registry: LanguageRegistry | None = None,
    output_path: str | Path | None = None,
) -> TransformArtifacts:
    """Parse, rewrite and print one source unit."""
    config = config or TransformConfig()
    registry = language_registry or build_language_registry(config)
    language = registry.get(config.language)

    source_program = parse_source(source, filename)
    program, reports = transform_program(source_program, config)

    code = print_program(program)
    if config.inline_runtime and any(report.found for report in reports):
        code = render_runtime(language) + "\n" + code

    for report in reports:
        if report.found:
            logger.info("%s: rewrote component %s.", filename, report.name)
        else:
            logger.info("%s: removed configuration of %s (%s).", filename, report.name, report.skipped_reason)

    if output_path is not None:
        out = Path(output_path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(code, encoding="utf-8")

    return TransformArtifacts(
        source_program=source_program,
        program=program,
        code=code,
        components=reports,
        language=language,
    )


def transform_file(
    input_path: str | Path,
    *,
    config: TransformConfig | None = None,
    language_registry: LanguageRegistry | None = None,
    output_path: str | Path | None = None,
) -> TransformArtifacts:
    """Transform a component file, optionally writing the result."""
    path = Path(input_path)
    source = path.read_text(encoding="utf-8")
    return transform_source(
        source,
        filename=str(path),
        config=config,
        language_registry=language_registry,
        output_path=output_path,
    )


def check_source(
    source: str,
    *,
    filename: str = "<input>",
    config: TransformConfig | None = None,
    language_registry: LanguageRegistry | None = None,
) -> list[ComponentReport]:
    """Run the pipeline without keeping output; raises on syntax errors."""
    return transform_source(
        source,
        filename=filename,
        config=config,
        language_registry=language_registry,
    ).components


def explain_source(
    source: str,
    *,
    filename: str = "<input>",
    config: TransformConfig | None = None,
    language_registry: LanguageRegistry | None = None,
) -> dict[str, Any]:
    """Describe what the transform does to each configured component.

    Marker previews are rendered with the selected language at context 0.
    """
    artifacts = transform_source(source, filename=filename, config=config, language_registry=language_registry)
    language = artifacts.language
    components: list[dict[str, Any]] = []
    for report in artifacts.components:
        payload = report.to_dict()
        if report.registry is not None:
            payload["markers"] = marker_previews(report, language)
        components.append(payload)
    return {
        "filename": filename,
        "language": language.name,
        "components": components,
    }


def marker_previews(report: ComponentReport, language: Language) -> dict[str, Any]:
    previews: dict[str, Any] = {"replace": {}, "list": {}, "control": {}}
    registry = report.registry
    if registry is None:
        return previews

    for name in registry.replace.names:
        previews["replace"][name] = language.render("replace", ["format"], [Arg(ARG_IDENTIFIER, name)])

    for name in registry.list.names:
        arg = [Arg(ARG_IDENTIFIER, name)]
        entry: dict[str, Any] = {
            "open": language.render("list", ["open"], arg),
            "close": language.render("list", ["close"], arg),
        }
        var = registry.list.get(name)
        if var is not None and var.child is not None and var.child.type == CHILD_OBJECT:
            entry["props"] = {
                prop: language.render("list", ["formatObjectProperty"], [Arg(ARG_IDENTIFIER, prop)])
                for prop in var.child.props
            }
        else:
            entry["item"] = language.render("list", ["formatPrimitive"])
        previews["list"][name] = entry

    for name in registry.control.names:
        arg = [Arg(ARG_IDENTIFIER, name)]
        previews["control"][name] = {
            intent.value: {
                "open": language.render("control", [intent.value, "open"], arg),
                "close": language.render("control", [intent.value, "close"], arg),
            }
            for intent in (ControlIntent.TRUTHY, ControlIntent.FALSY)
        }
    return previews


def ast_to_dict(node: Any) -> Any:
    """Serialize AST nodes recursively into JSON-compatible dicts."""
    if isinstance(node, list):
        return [ast_to_dict(item) for item in node]
    if isinstance(node, Node):
        payload: dict[str, Any] = {"node_type": node.type}
        for name, value in child_fields(node):
            payload[name] = ast_to_dict(value)
        if node.span is not None:
            payload["span"] = node.span.to_dict()
        return payload
    return node


if __name__ == "__main__":
    from jsxtv.cli import run

    raise SystemExit(run())
