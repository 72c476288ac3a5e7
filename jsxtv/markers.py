"""Builders for the marker calls embedded into rewritten components.

Markers stay calls into the runtime helpers so that they are evaluated with
the live nesting context of the rendered component:

    getLanguageReplace('format', { type: 'identifier', value: 'title' }, ctx)
    getLanguageList('open', { type: 'identifier', value: 'items' }, ctx)
    getLanguageControl(['ifTruthy', 'open'], [{ type: 'identifier', value: 'flag' }], ctx)
"""

from __future__ import annotations

from typing import Iterable

from jsxtv.ast import (
    ArrayExpression,
    CallExpression,
    Identifier,
    JSXExpressionContainer,
    Node,
    NullLiteral,
    ObjectExpression,
    Property,
    StringLiteral,
)
from jsxtv.classifier import ARG_IDENTIFIER, Arg, ControlIntent


REPLACE_HELPER = "getLanguageReplace"
LIST_HELPER = "getLanguageList"
CONTROL_HELPER = "getLanguageControl"

OPEN = "open"
CLOSE = "close"


def string(value: str) -> StringLiteral:
    return StringLiteral(value=value)


def object_literal(entries: Iterable[tuple[str, Node]]) -> ObjectExpression:
    return ObjectExpression(properties=[Property(key=Identifier(name=key), value=value) for key, value in entries])


def arg_object(arg: Arg) -> ObjectExpression:
    return object_literal([("type", string(arg.kind)), ("value", string(arg.text))])


def identifier_arg(name: str) -> ObjectExpression:
    return arg_object(Arg(ARG_IDENTIFIER, name))


def _call(helper: str, *arguments: Node) -> CallExpression:
    return CallExpression(callee=Identifier(name=helper), arguments=list(arguments))


def replace_call(name: str, context: str) -> CallExpression:
    """Marker printing the value of replace variable `name`."""
    return _call(REPLACE_HELPER, string("format"), identifier_arg(name), Identifier(name=context))


def list_call(target: str, name: str | None, context: str) -> CallExpression:
    """List marker (`open`, `close`, `formatObjectProperty`, `formatPrimitive`)."""
    arg: Node = NullLiteral() if name is None else identifier_arg(name)
    return _call(LIST_HELPER, string(target), arg, Identifier(name=context))


def control_call(intent: ControlIntent, edge: str, args: Iterable[Arg], context: str) -> CallExpression:
    """Control marker for one edge of a guarded region."""
    path = ArrayExpression(elements=[string(intent.value), string(edge)])
    arguments = ArrayExpression(elements=[arg_object(arg) for arg in args])
    return _call(CONTROL_HELPER, path, arguments, Identifier(name=context))


def as_child(node: Node) -> JSXExpressionContainer:
    return JSXExpressionContainer(expression=node)
