"""Coded diagnostics and the exception hierarchy shared by every phase."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jsxtv.source_map import SourceSpan


@dataclass(frozen=True)
class Diagnostic:
    """A coded problem report (`PAR002`, `LNG001`, ...) ready for JSON or a terminal."""

    code: str
    message: str
    span: SourceSpan | None = None
    hint: str = ""

    @property
    def location(self) -> str:
        """`file:line:col`, or an empty string without a span."""
        if self.span is None:
            return ""
        return f"{self.span.file}:{self.span.line}:{self.span.column}"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message, "hint": self.hint}
        if self.span is not None:
            payload["span"] = self.span.to_dict()
        return payload


class CompilerError(Exception):
    """Base error for lexing, parsing, language loading and configuration.

    Transform passes never raise; a component they cannot rewrite is logged
    and skipped instead.
    """

    def __init__(self, code: str, message: str, span: SourceSpan | None = None, hint: str = "") -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.span = span
        self.hint = hint

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(code=self.code, message=self.message, span=self.span, hint=self.hint)

    def __str__(self) -> str:
        location = self.to_diagnostic().location
        suffix = f" ({location})" if location else ""
        return f"[{self.code}] {self.message}{suffix}"


class LexError(CompilerError):
    """Raised for characters or literals the tokenizer cannot read."""


class ParseError(CompilerError):
    """Raised for JavaScript/JSX the parser does not accept."""


class LanguageError(CompilerError):
    """Raised by language lookups and custom language loading."""


class ConfigError(CompilerError):
    """Raised when transform options cannot be read."""


class CLIError(CompilerError):
    """Raised for invalid requests to the service layer."""


def source_excerpt(source: str, span: SourceSpan) -> str:
    """The offending source line with a caret under the span start."""
    lines = source.splitlines()
    if not 1 <= span.line <= len(lines):
        return ""
    text = lines[span.line - 1].expandtabs(1)
    width = 1
    if span.end_line == span.line and span.end_column > span.column:
        width = span.end_column - span.column
    return f"  {text}\n  {' ' * (span.column - 1)}{'^' * width}"


def format_diagnostic(diag: Diagnostic, source: str | None = None) -> str:
    """`CODE file:line:col: message Hint: ...`, plus an excerpt when `source` is given."""
    location = f" {diag.location}" if diag.location else ""
    hint = f" Hint: {diag.hint}" if diag.hint else ""
    line = f"{diag.code}{location}: {diag.message}{hint}"
    if source is not None and diag.span is not None:
        excerpt = source_excerpt(source, diag.span)
        if excerpt:
            line = f"{line}\n{excerpt}"
    return line
