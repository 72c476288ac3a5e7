"""Command-line interface for jsxtv."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from jsxtv.config import TransformConfig, load_config
from jsxtv.errors import CompilerError, Diagnostic, format_diagnostic
from jsxtv.main import TransformArtifacts, build_language_registry, check_source, explain_source, transform_source
from jsxtv.runtime import render_runtime


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", nargs="?", help="Input .jsx/.js file")
    parser.add_argument("--code", help="Inline source string")


def _add_language_arguments(parser: argparse.ArgumentParser, *, with_language: bool = True) -> None:
    if with_language:
        parser.add_argument("--language", help="Target language name or alias (default: handlebars)")
    parser.add_argument(
        "--language-spec",
        action="append",
        default=[],
        help="Custom language as module[:symbol] or a .json file; can be repeated.",
    )
    parser.add_argument("--config", help="JSON options file")


def build_parser() -> argparse.ArgumentParser:
    """Build argparse command tree for the jsxtv CLI."""
    parser = argparse.ArgumentParser(prog="jsxtv", description="JSX template-variable transformer")
    subparsers = parser.add_subparsers(dest="command", required=True)

    transform_parser = subparsers.add_parser("transform", help="Rewrite configured components into template markup")
    _add_source_arguments(transform_parser)
    _add_language_arguments(transform_parser)
    transform_parser.add_argument(
        "--tidy-only",
        action="store_true",
        help="Only remove configuration statements, leaving components untouched",
    )
    transform_parser.add_argument("--runtime", action="store_true", help="Prepend the marker helper functions")
    transform_parser.add_argument("-o", "--output", help="Output file path")
    transform_parser.add_argument("--debug", action="store_true", help="Emit debug info to stderr")

    check_parser = subparsers.add_parser("check", help="Parse and transform without writing output")
    _add_source_arguments(check_parser)
    _add_language_arguments(check_parser)

    explain_parser = subparsers.add_parser("explain", help="Print variable buckets and marker previews as JSON")
    _add_source_arguments(explain_parser)
    _add_language_arguments(explain_parser)

    languages_parser = subparsers.add_parser("languages", help="List available target languages")
    _add_language_arguments(languages_parser, with_language=False)
    languages_parser.add_argument("--json", action="store_true", help="Print full language tables as JSON")

    runtime_parser = subparsers.add_parser("runtime", help="Print the JavaScript helper prelude for a language")
    _add_language_arguments(runtime_parser)
    runtime_parser.add_argument("-o", "--output", help="Output file path")

    return parser


def run(argv: list[str] | None = None) -> int:
    """Run CLI and return shell exit code."""
    args = build_parser().parse_args(argv)
    debug = bool(getattr(args, "debug", False))
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    source: str | None = None
    try:
        config = _resolve_config(args)

        if args.command == "transform":
            source, filename = _resolve_source(args.input, args.code)
            artifacts = transform_source(source, filename=filename, config=config, output_path=args.output)
            if debug:
                _print_debug_summary(artifacts)
            if not args.output:
                sys.stdout.write(artifacts.code)
            return 0

        if args.command == "check":
            source, filename = _resolve_source(args.input, args.code)
            reports = check_source(source, filename=filename, config=config)
            rewritten = sum(1 for report in reports if report.found)
            print(f"OK ({rewritten}/{len(reports)} components rewritten)")
            return 0

        if args.command == "explain":
            source, filename = _resolve_source(args.input, args.code)
            payload = explain_source(source, filename=filename, config=config)
            print(json.dumps(payload, indent=2, sort_keys=True))
            return 0

        if args.command == "languages":
            registry = build_language_registry(config)
            if args.json:
                print(json.dumps([language.to_dict() for language in registry.languages()], indent=2, sort_keys=True))
                return 0
            for language in registry.languages():
                aliases = f" ({', '.join(language.aliases)})" if language.aliases else ""
                print(f"{language.name}{aliases}")
            return 0

        if args.command == "runtime":
            language = build_language_registry(config).get(config.language)
            code = render_runtime(language)
            if args.output:
                Path(args.output).write_text(code, encoding="utf-8")
            else:
                sys.stdout.write(code)
            return 0

        raise argparse.ArgumentTypeError(f"Unsupported command '{args.command}'.")

    except CompilerError as err:
        diag = err.to_diagnostic()
        print(format_diagnostic(diag, source), file=sys.stderr)
        return 1
    except argparse.ArgumentTypeError as err:
        diag = Diagnostic(code="CLI001", message=str(err), span=None, hint="Run jsxtv --help for usage.")
        print(format_diagnostic(diag), file=sys.stderr)
        return 2
    except Exception as err:  # pragma: no cover
        diag = Diagnostic(code="CLI999", message=f"Internal error: {err}", span=None, hint="Run with --debug")
        print(format_diagnostic(diag), file=sys.stderr)
        return 3


def _resolve_config(args: argparse.Namespace) -> TransformConfig:
    config = load_config(args.config) if args.config else TransformConfig()
    return config.with_overrides(
        language=getattr(args, "language", None),
        tidy_only=True if getattr(args, "tidy_only", False) else None,
        inline_runtime=True if getattr(args, "runtime", False) else None,
        language_specs=[*config.language_specs, *args.language_spec] if args.language_spec else None,
    )


def _resolve_source(input_path: str | None, inline_code: str | None) -> tuple[str, str]:
    if input_path and inline_code:
        raise argparse.ArgumentTypeError("Use either input file path or --code, not both.")
    if input_path:
        path = Path(input_path)
        try:
            return path.read_text(encoding="utf-8"), str(path)
        except FileNotFoundError as exc:
            raise argparse.ArgumentTypeError(f"Input file not found: {path}") from exc
    if inline_code is not None:
        return inline_code, "<inline>"
    raise argparse.ArgumentTypeError("No source provided. Pass input file path or --code.")


def _print_debug_summary(artifacts: TransformArtifacts) -> None:
    print(f"debug: language={artifacts.language.name} components={len(artifacts.components)}", file=sys.stderr)
    for report in artifacts.components:
        if not report.found:
            print(f"debug: component={report.name} skipped={report.skipped_reason}", file=sys.stderr)
            continue
        print(
            f"debug: component={report.name} control={report.control_rewrites} "
            f"lists={report.list_rewrites} renamed={report.renamed} contexts={report.contexts_injected}",
            file=sys.stderr,
        )


if __name__ == "__main__":
    raise SystemExit(run())
