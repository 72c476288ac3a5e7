"""Nesting-context plumbing for component instantiations."""

from __future__ import annotations

from typing import Callable

from jsxtv.ast import (
    BinaryExpression,
    Identifier,
    JSXAttribute,
    JSXElement,
    JSXExpressionContainer,
    JSXIdentifier,
    JSXMemberExpression,
    Node,
    NumericLiteral,
    StringLiteral,
)
from jsxtv.passes.lists import is_map_call
from jsxtv.traverse import NodePath, Transformer


ComponentPredicate = Callable[[Node], bool]


def default_is_component(name: Node) -> bool:
    """Capitalised tags (`<Row>`) and member tags (`<UI.Row>`) are components."""
    if isinstance(name, JSXMemberExpression):
        return True
    return isinstance(name, JSXIdentifier) and name.name[:1].isupper()


def attribute_named(element: JSXElement, name: str) -> JSXAttribute | None:
    for attr in element.attributes:
        if isinstance(attr, JSXAttribute) and isinstance(attr.name, JSXIdentifier) and attr.name.name == name:
            return attr
    return None


def is_text_input(element: JSXElement) -> bool:
    if not isinstance(element.name, JSXIdentifier) or element.name.name != "input":
        return False
    type_attr = attribute_named(element, "type")
    return type_attr is not None and isinstance(type_attr.value, StringLiteral) and type_attr.value.value == "text"


class ContextInjectionPass(Transformer):
    """Passes the nesting context to nested components.

    A component inside any `.map()` call receives `ctx + 1`, elsewhere `ctx`.
    Text inputs also get their `value` copied to a second attribute, because
    captured markup loses `value` on such inputs.
    """

    def __init__(
        self,
        context: str,
        *,
        context_prop: str = "__context__",
        text_input_attribute: str = "jsxtv_value",
        is_component: ComponentPredicate = default_is_component,
    ) -> None:
        self.context = context
        self.context_prop = context_prop
        self.text_input_attribute = text_input_attribute
        self.is_component = is_component
        self.injected = 0

    def visit_JSXElement(self, node: JSXElement, path: NodePath) -> Node | None:
        extra: list[Node] = []

        if self.is_component(node.name) and attribute_named(node, self.context_prop) is None:
            value: Node = Identifier(name=self.context)
            if path.find_ancestor(lambda ancestor: is_map_call(ancestor.node)) is not None:
                value = BinaryExpression(operator="+", left=value, right=NumericLiteral(value=1))
            extra.append(
                JSXAttribute(
                    name=JSXIdentifier(name=self.context_prop),
                    value=JSXExpressionContainer(expression=value),
                )
            )
            self.injected += 1

        if is_text_input(node) and attribute_named(node, self.text_input_attribute) is None:
            value_attr = attribute_named(node, "value")
            if value_attr is not None and value_attr.value is not None:
                extra.append(JSXAttribute(name=JSXIdentifier(name=self.text_input_attribute), value=value_attr.value))

        if not extra:
            return None
        return JSXElement(
            name=node.name,
            attributes=[*node.attributes, *extra],
            children=node.children,
            self_closing=node.self_closing,
            span=node.span,
        )
