"""Token definitions for JavaScript/JSX lexical analysis."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from jsxtv.source_map import SourceSpan


class TokenType(Enum):
    """Finite token categories used by lexer and parser."""

    IDENT = auto()
    KEYWORD = auto()
    NUMBER = auto()
    STRING = auto()
    TEMPLATE = auto()  # `...` (raw body, expressions split by the parser)
    REGEX = auto()
    PUNCT = auto()

    JSX_TEXT = auto()
    JSX_IDENT = auto()  # tag and attribute names, may contain '-'
    JSX_STRING = auto()  # attribute string, no escapes

    EOF = auto()


KEYWORDS: frozenset[str] = frozenset(
    {
        "break",
        "case",
        "catch",
        "class",
        "const",
        "continue",
        "debugger",
        "default",
        "delete",
        "do",
        "else",
        "export",
        "extends",
        "false",
        "finally",
        "for",
        "function",
        "if",
        "import",
        "in",
        "instanceof",
        "new",
        "null",
        "return",
        "super",
        "switch",
        "this",
        "throw",
        "true",
        "try",
        "typeof",
        "var",
        "void",
        "while",
        "with",
    }
)

# Longest first so the lexer can match greedily.
PUNCTUATORS: tuple[str, ...] = (
    ">>>=",
    "...",
    "===",
    "!==",
    "**=",
    "<<=",
    ">>=",
    ">>>",
    "&&=",
    "||=",
    "??=",
    "=>",
    "==",
    "!=",
    "<=",
    ">=",
    "&&",
    "||",
    "??",
    "?.",
    "++",
    "--",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "&=",
    "|=",
    "^=",
    "**",
    "<<",
    ">>",
    "{",
    "}",
    "(",
    ")",
    "[",
    "]",
    ";",
    ",",
    "<",
    ">",
    "+",
    "-",
    "*",
    "/",
    "%",
    "&",
    "|",
    "^",
    "!",
    "~",
    "?",
    ":",
    "=",
    ".",
    "@",
    "#",
)


@dataclass(frozen=True)
class Token:
    """A single lexical token with original source span."""

    token_type: TokenType
    value: str
    span: SourceSpan
    start: int
    end: int
    raw: str = ""
    newline_before: bool = False

    def is_punct(self, *values: str) -> bool:
        return self.token_type == TokenType.PUNCT and self.value in values

    def is_keyword(self, *values: str) -> bool:
        return self.token_type == TokenType.KEYWORD and self.value in values

    def __str__(self) -> str:
        return f"{self.token_type.name}({self.value!r})@{self.span.line}:{self.span.column}"
