"""Declarations prepended to a rewritten component body."""

from __future__ import annotations

from jsxtv.ast import (
    BinaryExpression,
    ConditionalExpression,
    Identifier,
    MemberExpression,
    Node,
    NumericLiteral,
    StringLiteral,
    UnaryExpression,
    VariableDeclaration,
    VariableDeclarator,
)
from jsxtv.markers import replace_call
from jsxtv.passes.lists import list_placeholder_declarations
from jsxtv.variables import VariableRegistry


def context_source(props_name: str | None, context_prop: str = "__context__") -> Node:
    """`props.__context__` for an identifier parameter, else `__context__`."""
    if props_name is None:
        return Identifier(name=context_prop)
    return MemberExpression(object=Identifier(name=props_name), property=Identifier(name=context_prop))


def context_declaration(context: str, source: Node) -> VariableDeclaration:
    """`let ctx = typeof <source> === 'number' ? <source> : 0;`"""
    test = BinaryExpression(
        operator="===",
        left=UnaryExpression(operator="typeof", argument=source),
        right=StringLiteral(value="number"),
    )
    init = ConditionalExpression(test=test, consequent=source, alternate=NumericLiteral(value=0))
    return _let(context, init)


def _let(name: str, init: Node) -> VariableDeclaration:
    return VariableDeclaration(kind="let", declarations=[VariableDeclarator(id=Identifier(name=name), init=init)])


def build_declarations(registry: VariableRegistry, source: Node) -> list[Node]:
    """Context, replace and list declarations, in that order."""
    statements: list[Node] = [context_declaration(registry.context, source)]
    for name in registry.replace.names:
        statements.append(_let(registry.replace.mapped[name], replace_call(name, registry.context)))
    statements.extend(list_placeholder_declarations(registry.list, registry.context))
    return statements
