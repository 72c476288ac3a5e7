"""JavaScript/JSX lexical analyzer.

JSX cannot be tokenized ahead of time: whether `<`, `/` or plain text is a
token depends on where the parser currently is. The lexer therefore works on
demand in three modes (normal, JSX tag, JSX children) and exposes
`snapshot`/`restore` so the parser can re-lex a buffered token in another
mode or look ahead speculatively.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from jsxtv.errors import LexError
from jsxtv.source_map import SourceSpan
from jsxtv.tokens import KEYWORDS, PUNCTUATORS, Token, TokenType


_NUMBER_RE: Final = re.compile(
    r"0[xX][0-9a-fA-F_]+n?"
    r"|0[oO][0-7_]+n?"
    r"|0[bB][01_]+n?"
    r"|(?:\d[\d_]*(?:\.[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?\d[\d_]*)?n?"
)

_STRING_ESCAPES: Final[dict[str, str]] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

# After these tokens a `/` starts a division, anywhere else a regex literal.
_OPERAND_END_PUNCT: Final = frozenset({")", "]", "}"})
_OPERAND_END_KEYWORDS: Final = frozenset({"this", "super", "null", "true", "false"})

_JSX_TAG_PUNCT: Final = frozenset({"{", "}", "<", ">", "/", "=", ".", ":"})


@dataclass(frozen=True)
class LexerState:
    """Restorable lexer position."""

    index: int
    line: int
    column: int
    regex_allowed: bool


def _is_ident_start(ch: str) -> bool:
    return ch.isalpha() or ch in "_$"


def _is_ident_part(ch: str) -> bool:
    return ch.isalnum() or ch in "_$"


class Lexer:
    """Converts JavaScript/JSX source text into tokens on demand."""

    def __init__(self, source: str, filename: str = "<input>") -> None:
        self.source = source
        self.filename = filename
        self.index = 0
        self.line = 1
        self.column = 1
        self.regex_allowed = True

    def tokenize(self) -> list[Token]:
        """Tokenize plain JavaScript (no JSX) and return the token stream."""
        tokens: list[Token] = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.token_type == TokenType.EOF:
                return tokens

    def snapshot(self) -> LexerState:
        return LexerState(self.index, self.line, self.column, self.regex_allowed)

    def restore(self, state: LexerState) -> None:
        self.index = state.index
        self.line = state.line
        self.column = state.column
        self.regex_allowed = state.regex_allowed

    def mark_operand_end(self) -> None:
        """Record that an operand (e.g. a JSX element) just ended."""
        self.regex_allowed = False

    # -- normal mode -----------------------------------------------------

    def next_token(self) -> Token:
        """Lex the next token in normal JavaScript mode."""
        newline = self._skip_trivia()
        if self._is_eof():
            return self._make(TokenType.EOF, "", self.index, self.line, self.column, newline=newline)

        ch = self._peek()
        start, start_line, start_col = self.index, self.line, self.column

        if _is_ident_start(ch) or (ch == "\\" and self._peek(1) == "u"):
            value = self._read_identifier()
            token_type = TokenType.KEYWORD if value in KEYWORDS else TokenType.IDENT
            token = self._make(token_type, value, start, start_line, start_col, newline=newline)
        elif ch.isdigit() or (ch == "." and self._peek(1).isdigit()):
            token = self._lex_number(start, start_line, start_col, newline)
        elif ch in "'\"":
            token = self._lex_string(start, start_line, start_col, newline)
        elif ch == "`":
            token = self._lex_template(start, start_line, start_col, newline)
        elif ch == "/" and self.regex_allowed:
            token = self._lex_regex(start, start_line, start_col, newline)
        else:
            token = self._lex_punctuator(start, start_line, start_col, newline)

        self.regex_allowed = self._allows_regex_after(token)
        return token

    def _lex_number(self, start: int, line: int, col: int, newline: bool) -> Token:
        match = _NUMBER_RE.match(self.source, self.index)
        if match is None:  # pragma: no cover - guarded by caller
            raise LexError(
                code="LEX001",
                message=f"Unexpected character {self._peek()!r}.",
                span=self._span(line, col, line, col + 1),
                hint="Check the numeric literal.",
            )
        for _ in range(match.end() - match.start()):
            self._advance()
        raw = match.group(0)
        return self._make(TokenType.NUMBER, raw, start, line, col, raw=raw, newline=newline)

    def _lex_string(self, start: int, line: int, col: int, newline: bool) -> Token:
        quote = self._advance()
        value_chars: list[str] = []

        while not self._is_eof():
            ch = self._advance()
            if ch == quote:
                raw = self.source[start : self.index]
                return self._make(TokenType.STRING, "".join(value_chars), start, line, col, raw=raw, newline=newline)
            if ch == "\n":
                break
            if ch == "\\":
                if self._is_eof():
                    break
                value_chars.append(self._read_escape())
                continue
            value_chars.append(ch)

        raise LexError(
            code="LEX002",
            message="Unterminated string literal.",
            span=self._span(line, col, self.line, self.column),
            hint=f"Close the string with {quote}.",
        )

    def _read_escape(self) -> str:
        esc = self._advance()
        if esc in _STRING_ESCAPES:
            return _STRING_ESCAPES[esc]
        if esc == "\n":
            return ""
        if esc == "x":
            digits = self._advance() + self._advance()
            return chr(int(digits, 16))
        if esc == "u":
            if self._peek() == "{":
                self._advance()
                digits = []
                while not self._is_eof() and self._peek() != "}":
                    digits.append(self._advance())
                self._advance()
                return chr(int("".join(digits), 16))
            digits = "".join(self._advance() for _ in range(4))
            return chr(int(digits, 16))
        return esc

    def _lex_template(self, start: int, line: int, col: int, newline: bool) -> Token:
        self._advance()  # opening backtick
        end = scan_template(self.source, self.index)
        if end < 0:
            raise LexError(
                code="LEX003",
                message="Unterminated template literal.",
                span=self._span(line, col, self.line, self.column),
                hint="Close the template literal with a backtick.",
            )
        while self.index < end:
            self._advance()
        raw = self.source[start : self.index]
        return self._make(TokenType.TEMPLATE, raw[1:-1], start, line, col, raw=raw, newline=newline)

    def _lex_regex(self, start: int, line: int, col: int, newline: bool) -> Token:
        self._advance()  # opening slash
        in_class = False
        while not self._is_eof():
            ch = self._advance()
            if ch == "\n":
                break
            if ch == "\\":
                self._advance()
                continue
            if ch == "[":
                in_class = True
            elif ch == "]":
                in_class = False
            elif ch == "/" and not in_class:
                while not self._is_eof() and _is_ident_part(self._peek()):
                    self._advance()
                raw = self.source[start : self.index]
                return self._make(TokenType.REGEX, raw, start, line, col, raw=raw, newline=newline)

        raise LexError(
            code="LEX004",
            message="Unterminated regular expression literal.",
            span=self._span(line, col, self.line, self.column),
            hint="Close the pattern with '/' or escape the slash.",
        )

    def _lex_punctuator(self, start: int, line: int, col: int, newline: bool) -> Token:
        for punct in PUNCTUATORS:
            if self.source.startswith(punct, self.index):
                # `?.` followed by a digit is a conditional and a number (`a?.5:b`).
                if punct == "?." and self._peek(2).isdigit():
                    continue
                for _ in punct:
                    self._advance()
                return self._make(TokenType.PUNCT, punct, start, line, col, raw=punct, newline=newline)

        ch = self._peek()
        raise LexError(
            code="LEX001",
            message=f"Unexpected character {ch!r}.",
            span=self._span(line, col, line, col + 1),
            hint="Remove the character or escape it inside a string literal.",
        )

    @staticmethod
    def _allows_regex_after(token: Token) -> bool:
        if token.token_type in (TokenType.IDENT, TokenType.NUMBER, TokenType.STRING, TokenType.TEMPLATE, TokenType.REGEX):
            return False
        if token.token_type == TokenType.PUNCT and token.value in _OPERAND_END_PUNCT:
            return False
        if token.token_type == TokenType.KEYWORD and token.value in _OPERAND_END_KEYWORDS:
            return False
        return True

    # -- JSX modes -------------------------------------------------------

    def next_jsx_tag_token(self) -> Token:
        """Lex the next token inside a JSX tag (`<name attr="x" ...>`)."""
        newline = self._skip_trivia()
        start, line, col = self.index, self.line, self.column
        if self._is_eof():
            return self._make(TokenType.EOF, "", start, line, col, newline=newline)

        ch = self._peek()
        if _is_ident_start(ch):
            chars: list[str] = []
            while not self._is_eof() and (_is_ident_part(self._peek()) or self._peek() == "-"):
                chars.append(self._advance())
            return self._make(TokenType.JSX_IDENT, "".join(chars), start, line, col, newline=newline)

        if ch in "'\"":
            quote = self._advance()
            chars = []
            while not self._is_eof() and self._peek() != quote:
                chars.append(self._advance())
            if self._is_eof():
                raise LexError(
                    code="LEX006",
                    message="Unterminated JSX attribute string.",
                    span=self._span(line, col, self.line, self.column),
                    hint=f"Close the attribute value with {quote}.",
                )
            self._advance()
            raw = self.source[start : self.index]
            return self._make(TokenType.JSX_STRING, "".join(chars), start, line, col, raw=raw, newline=newline)

        if ch in _JSX_TAG_PUNCT:
            self._advance()
            return self._make(TokenType.PUNCT, ch, start, line, col, raw=ch, newline=newline)

        raise LexError(
            code="LEX001",
            message=f"Unexpected character {ch!r} in JSX tag.",
            span=self._span(line, col, line, col + 1),
            hint="JSX attributes take a string or an expression in braces.",
        )

    def next_jsx_child_token(self) -> Token:
        """Lex the next JSX child: text, `{` or `<`."""
        start, line, col = self.index, self.line, self.column
        if self._is_eof():
            return self._make(TokenType.EOF, "", start, line, col)

        ch = self._peek()
        if ch in "{<":
            self._advance()
            return self._make(TokenType.PUNCT, ch, start, line, col, raw=ch)

        while not self._is_eof() and self._peek() not in "{<":
            self._advance()
        raw = self.source[start : self.index]
        return self._make(TokenType.JSX_TEXT, raw, start, line, col, raw=raw)

    # -- helpers ---------------------------------------------------------

    def _skip_trivia(self) -> bool:
        newline = False
        while not self._is_eof():
            ch = self._peek()
            if ch in " \t\r\n\f\v﻿ ":
                if ch == "\n":
                    newline = True
                self._advance()
                continue
            if ch == "/" and self._peek(1) == "/":
                while not self._is_eof() and self._peek() != "\n":
                    self._advance()
                continue
            if ch == "/" and self._peek(1) == "*":
                start_line, start_col = self.line, self.column
                self._advance()
                self._advance()
                while not (self._peek() == "*" and self._peek(1) == "/"):
                    if self._is_eof():
                        raise LexError(
                            code="LEX005",
                            message="Unterminated block comment.",
                            span=self._span(start_line, start_col, self.line, self.column),
                            hint="Close the comment with '*/'.",
                        )
                    if self._advance() == "\n":
                        newline = True
                self._advance()
                self._advance()
                continue
            break
        return newline

    def _read_identifier(self) -> str:
        chars: list[str] = []
        while not self._is_eof():
            ch = self._peek()
            if _is_ident_part(ch):
                chars.append(self._advance())
                continue
            if ch == "\\" and self._peek(1) == "u":
                self._advance()
                self._advance()
                chars.append(self._read_unicode_digits())
                continue
            break
        return "".join(chars)

    def _read_unicode_digits(self) -> str:
        if self._peek() == "{":
            self._advance()
            digits = []
            while not self._is_eof() and self._peek() != "}":
                digits.append(self._advance())
            self._advance()
            return chr(int("".join(digits), 16))
        return chr(int("".join(self._advance() for _ in range(4)), 16))

    def _make(
        self,
        token_type: TokenType,
        value: str,
        start: int,
        line: int,
        col: int,
        *,
        raw: str = "",
        newline: bool = False,
    ) -> Token:
        return Token(
            token_type=token_type,
            value=value,
            span=self._span(line, col, self.line, self.column),
            start=start,
            end=self.index,
            raw=raw or value,
            newline_before=newline,
        )

    def _peek(self, offset: int = 0) -> str:
        idx = self.index + offset
        if idx >= len(self.source):
            return "\0"
        return self.source[idx]

    def _advance(self) -> str:
        if self.index >= len(self.source):
            return "\0"
        ch = self.source[self.index]
        self.index += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _is_eof(self) -> bool:
        return self.index >= len(self.source)

    def _span(self, start_line: int, start_col: int, end_line: int, end_col: int) -> SourceSpan:
        return SourceSpan(
            file=self.filename,
            line=start_line,
            column=start_col,
            end_line=end_line,
            end_column=end_col,
        )


def scan_template(text: str, index: int) -> int:
    """Return the index just past the closing backtick, or -1.

    `index` points just after the opening backtick.
    """
    while index < len(text):
        ch = text[index]
        if ch == "\\":
            index += 2
            continue
        if ch == "`":
            return index + 1
        if ch == "$" and text.startswith("${", index):
            index = _scan_substitution(text, index + 2)
            if index < 0:
                return -1
            continue
        index += 1
    return -1


def _scan_substitution(text: str, index: int) -> int:
    depth = 1
    while index < len(text):
        ch = text[index]
        if ch in "'\"":
            index = _skip_quoted(text, index)
            continue
        if ch == "`":
            index = scan_template(text, index + 1)
            if index < 0:
                return -1
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return index + 1
        index += 1
    return -1


def _skip_quoted(text: str, index: int) -> int:
    quote = text[index]
    index += 1
    while index < len(text) and text[index] != quote:
        if text[index] == "\\":
            index += 1
        index += 1
    return index + 1


def split_template(body: str) -> tuple[list[str], list[str]]:
    """Split a raw template body into quasis and expression sources."""
    quasis: list[str] = []
    expressions: list[str] = []
    current: list[str] = []
    index = 0
    while index < len(body):
        ch = body[index]
        if ch == "\\":
            current.append(body[index : index + 2])
            index += 2
            continue
        if ch == "$" and body.startswith("${", index):
            end = _scan_substitution(body, index + 2)
            quasis.append("".join(current))
            current = []
            expressions.append(body[index + 2 : end - 1])
            index = end
            continue
        current.append(ch)
        index += 1
    quasis.append("".join(current))
    return quasis, expressions
