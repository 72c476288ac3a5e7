"""List variables: `.map()` alias tracking, markup bracketing, placeholders."""

from __future__ import annotations

import logging

from jsxtv.ast import (
    ArrayExpression,
    CallExpression,
    Identifier,
    JSXElement,
    JSXExpressionContainer,
    JSXFragment,
    MemberExpression,
    Node,
    VariableDeclaration,
    VariableDeclarator,
)
from jsxtv.markers import CLOSE, OPEN, as_child, list_call, object_literal
from jsxtv.traverse import NodePath, Transformer, iter_paths
from jsxtv.variables import CHILD_OBJECT, VariableBucket


logger = logging.getLogger(__name__)


def map_call_base(node: Node) -> str | None:
    """Name of `x` for a `x.map(...)` call, else None."""
    if not isinstance(node, CallExpression):
        return None
    callee = node.callee
    if (
        isinstance(callee, MemberExpression)
        and not callee.computed
        and isinstance(callee.property, Identifier)
        and callee.property.name == "map"
        and isinstance(callee.object, Identifier)
    ):
        return callee.object.name
    return None


def is_map_call(node: Node) -> bool:
    """True for any `<expr>.map(...)` call."""
    if not isinstance(node, CallExpression):
        return False
    callee = node.callee
    return (
        isinstance(callee, MemberExpression)
        and not callee.computed
        and isinstance(callee.property, Identifier)
        and callee.property.name == "map"
    )


def collect_map_aliases(body: Node, bucket: VariableBucket) -> dict[str, str]:
    """Finalize `bucket.to_tag` with names bound to `.map()` results.

    `const rows = items.map(...)` tags `rows` with the origin of `items`.
    Declarations are visited in source order, so aliases of aliases resolve.
    """
    to_tag = dict(bucket.to_tag)
    for path in iter_paths(body):
        node = path.node
        if not isinstance(node, VariableDeclarator) or not isinstance(node.id, Identifier):
            continue
        base = map_call_base(node.init) if node.init is not None else None
        if base is not None and base in to_tag:
            to_tag[node.id.name] = to_tag[base]
            logger.debug("Tagged %s as an alias of list %s.", node.id.name, to_tag[base])
    bucket.to_tag = to_tag
    return to_tag


class ListMarkupPass(Transformer):
    """Brackets `{alias}` and `{alias.map(...)}` children with list markers."""

    def __init__(self, to_tag: dict[str, str], context: str) -> None:
        self.to_tag = to_tag
        self.context = context
        self.rewrites = 0

    def visit_JSXElement(self, node: JSXElement, path: NodePath) -> Node | None:
        children = self._bracket_children(node.children)
        if children is None:
            return None
        return JSXElement(
            name=node.name,
            attributes=node.attributes,
            children=children,
            self_closing=False,
            span=node.span,
        )

    def visit_JSXFragment(self, node: JSXFragment, path: NodePath) -> Node | None:
        children = self._bracket_children(node.children)
        if children is None:
            return None
        return JSXFragment(children=children, span=node.span)

    def _origin(self, expression: Node) -> str | None:
        if isinstance(expression, Identifier):
            return self.to_tag.get(expression.name)
        base = map_call_base(expression)
        if base is not None:
            return self.to_tag.get(base)
        return None

    def _bracket_children(self, children: list[Node]) -> list[Node] | None:
        result: list[Node] = []
        changed = False
        for child in children:
            origin = None
            if isinstance(child, JSXExpressionContainer):
                origin = self._origin(child.expression)
            if origin is None:
                result.append(child)
                continue
            result.append(as_child(list_call(OPEN, origin, self.context)))
            result.append(child)
            result.append(as_child(list_call(CLOSE, origin, self.context)))
            self.rewrites += 1
            changed = True
        return result if changed else None


def list_placeholder_declarations(bucket: VariableBucket, context: str) -> list[Node]:
    """One-element placeholder arrays for every list variable, in declaration order."""
    declarations: list[Node] = []
    for name in bucket.names:
        var = bucket.get(name)
        if var is None:
            continue
        if var.child is not None and var.child.type == CHILD_OBJECT:
            element: Node = object_literal(
                (prop, list_call("formatObjectProperty", prop, context)) for prop in var.child.props
            )
        else:
            element = list_call("formatPrimitive", None, context)
        declarations.append(
            VariableDeclaration(
                kind="let",
                declarations=[
                    VariableDeclarator(
                        id=Identifier(name=bucket.mapped[name]),
                        init=ArrayExpression(elements=[element]),
                    )
                ],
            )
        )
    return declarations
