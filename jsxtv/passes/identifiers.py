"""Renames references to replace and list variables."""

from __future__ import annotations

from dataclasses import replace

from jsxtv.ast import (
    ArrayPattern,
    AssignmentPattern,
    BreakStatement,
    CatchClause,
    ContinueStatement,
    ExportSpecifier,
    FunctionDeclaration,
    FunctionExpression,
    ArrowFunctionExpression,
    Identifier,
    ImportDefaultSpecifier,
    ImportNamespaceSpecifier,
    ImportSpecifier,
    MemberExpression,
    Node,
    ObjectExpression,
    ObjectPattern,
    Property,
    RestElement,
    VariableDeclarator,
)
from jsxtv.traverse import NodePath, Transformer
from jsxtv.variables import VariableRegistry


_NAMING_PARENTS = (
    ImportSpecifier,
    ImportDefaultSpecifier,
    ImportNamespaceSpecifier,
    ExportSpecifier,
    BreakStatement,
    ContinueStatement,
)


def is_binding_position(path: NodePath) -> bool:
    """True when the identifier at `path` declares a name instead of using one."""
    parent = path.parent_node
    if isinstance(parent, VariableDeclarator):
        return path.key == "id"
    if isinstance(parent, (FunctionDeclaration, FunctionExpression)):
        return path.key in ("id", "params")
    if isinstance(parent, ArrowFunctionExpression):
        return path.key == "params"
    if isinstance(parent, CatchClause):
        return path.key == "param"
    if isinstance(parent, (ArrayPattern, RestElement)):
        return True
    if isinstance(parent, AssignmentPattern):
        return path.key == "left"
    if isinstance(parent, Property) and path.key == "value":
        return isinstance(path.parent.parent_node, ObjectPattern)
    return isinstance(parent, _NAMING_PARENTS)


class IdentifierRenamePass(Transformer):
    """Points uses of replace and list variables at their generated names.

    Left untouched: object keys, non-computed member properties and every
    binding position (declarators, parameters, destructuring). Object literal
    values are redirected for replace variables only. Replace wins when a
    name is registered in both buckets.
    """

    def __init__(self, registry: VariableRegistry) -> None:
        self.replace = registry.replace.mapped
        self.list = registry.list.mapped
        self.renamed = 0

    def visit_Identifier(self, node: Identifier, path: NodePath) -> Node | None:
        name = node.name
        is_replace = name in self.replace
        if not is_replace and name not in self.list:
            return None

        parent = path.parent_node
        if isinstance(parent, Property):
            if path.key == "key" and not parent.computed:
                return None
            if path.key == "value" and isinstance(path.parent.parent_node, ObjectExpression) and not is_replace:
                return None
        if isinstance(parent, MemberExpression) and path.key == "property" and not parent.computed:
            return None
        if is_binding_position(path):
            return None

        self.renamed += 1
        target = self.replace[name] if is_replace else self.list[name]
        return Identifier(name=target, span=node.span)

    def visit_Property(self, node: Property, path: NodePath) -> Node | None:
        if not node.shorthand or isinstance(path.parent_node, ObjectPattern):
            return None
        if isinstance(node.key, Identifier) and isinstance(node.value, Identifier) and node.key.name != node.value.name:
            return replace(node, shorthand=False)
        return None
