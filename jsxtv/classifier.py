"""Guard-expression classification.

Reduces a guard such as `isOpen`, `!isOpen` or `size === 'large'` to a
language-agnostic description: the operands (`Arg`) and the control intent
that selects the open/close tokens of a target language.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from jsxtv.ast import (
    BinaryExpression,
    BooleanLiteral,
    Identifier,
    MemberExpression,
    Node,
    NullLiteral,
    NumericLiteral,
    StringLiteral,
    UnaryExpression,
)


logger = logging.getLogger(__name__)

ARG_IDENTIFIER = "identifier"
ARG_VALUE = "value"


class ControlIntent(str, Enum):
    """Control intents, valued by their key in a language's control table."""

    TRUTHY = "ifTruthy"
    FALSY = "ifFalsy"
    EQUALS = "ifEqual"
    NOT_EQUALS = "ifNotEqual"

    @property
    def complement(self) -> ControlIntent:
        """The intent that renders the opposite branch."""
        return _COMPLEMENTS[self]


_COMPLEMENTS = {
    ControlIntent.TRUTHY: ControlIntent.FALSY,
    ControlIntent.FALSY: ControlIntent.TRUTHY,
    ControlIntent.EQUALS: ControlIntent.NOT_EQUALS,
    ControlIntent.NOT_EQUALS: ControlIntent.EQUALS,
}


@dataclass(frozen=True)
class Arg:
    """One guard operand: an identifier path or a literal in source form."""

    kind: str
    text: str

    @property
    def root(self) -> str:
        """Leading name of an identifier path (`user` for `user.name`)."""
        return self.text.split(".", 1)[0]

    def to_dict(self) -> dict[str, str]:
        return {"type": self.kind, "value": self.text}


@dataclass(frozen=True)
class Guard:
    intent: ControlIntent
    args: tuple[Arg, ...]


def member_path(node: Node) -> str | None:
    """Dotted text of an identifier or non-computed member chain."""
    if isinstance(node, Identifier):
        return node.name
    if isinstance(node, MemberExpression) and not node.computed and isinstance(node.property, Identifier):
        base = member_path(node.object)
        if base is None:
            return None
        return f"{base}.{node.property.name}"
    return None


def literal_text(node: Node) -> str | None:
    """Canonical source text of a string, number, boolean or null literal."""
    if isinstance(node, StringLiteral):
        return f"'{node.value}'"
    if isinstance(node, NumericLiteral):
        value = node.value
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(node, BooleanLiteral):
        return "true" if node.value else "false"
    if isinstance(node, NullLiteral):
        return "null"
    return None


def classify(expression: Node) -> list[Arg]:
    """Extract the ordered operands of a guard expression."""
    path = member_path(expression)
    if path is not None:
        return [Arg(ARG_IDENTIFIER, path)]

    text = literal_text(expression)
    if text is not None:
        return [Arg(ARG_VALUE, text)]

    if isinstance(expression, UnaryExpression) and expression.operator == "!":
        return classify(expression.argument)

    if isinstance(expression, BinaryExpression):
        return classify(expression.left) + classify(expression.right)

    return []


def resolve_intent(expression: Node) -> ControlIntent | None:
    """Map a guard's shape to a control intent, or None if unsupported."""
    if isinstance(expression, Identifier):
        return ControlIntent.TRUTHY
    if isinstance(expression, UnaryExpression) and expression.operator == "!":
        if member_path(expression.argument) is not None:
            return ControlIntent.FALSY
        return None
    if isinstance(expression, BinaryExpression):
        if expression.operator == "===":
            return ControlIntent.EQUALS
        if expression.operator == "!==":
            return ControlIntent.NOT_EQUALS
    return None


def resolve_guard(expression: Node, control_names: Iterable[str]) -> Guard | None:
    """Classify `expression` as a guard on one of `control_names`.

    Returns None (and the guard stays as written) when the shape is not
    supported or no identifier operand refers to a control variable.
    """
    names = set(control_names)
    args = classify(expression)
    identifiers = [arg for arg in args if arg.kind == ARG_IDENTIFIER]
    if not identifiers:
        return None
    if not any(arg.text in names or arg.root in names for arg in identifiers):
        return None

    intent = resolve_intent(expression)
    if intent is None:
        logger.debug("Unsupported guard shape %s; left as written.", expression.type)
        return None

    if intent in (ControlIntent.EQUALS, ControlIntent.NOT_EQUALS):
        args = identifiers + [arg for arg in args if arg.kind != ARG_IDENTIFIER]
    return Guard(intent=intent, args=tuple(args))
