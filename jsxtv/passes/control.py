"""Control-variable guards: ternaries and `cond && content` children."""

from __future__ import annotations

import logging

from jsxtv.ast import (
    BinaryExpression,
    ConditionalExpression,
    JSXElement,
    JSXExpressionContainer,
    JSXFragment,
    LogicalExpression,
    Node,
)
from jsxtv.classifier import Guard, resolve_guard
from jsxtv.markers import CLOSE, OPEN, as_child, control_call
from jsxtv.traverse import NodePath, Transformer
from jsxtv.variables import VariableRegistry


logger = logging.getLogger(__name__)


def _is_markup(node: Node) -> bool:
    return isinstance(node, (JSXElement, JSXFragment))


class ControlPass(Transformer):
    """Brackets guarded content with control open/close markers.

    As markup children, guards are spliced into sibling nodes:

        {flag ? <A /> : <B />}  ->  {open}<A />{close}{elseOpen}<B />{elseClose}
        {flag && <A />}         ->  {open}<A />{close}

    Elsewhere a guarded ternary with a markup branch becomes a fragment of the
    same parts, and any other guarded ternary a `+` chain of them. The else
    branch uses the complementary intent. Guards that do not resolve are
    left as written.
    """

    def __init__(self, registry: VariableRegistry) -> None:
        self.registry = registry
        self.rewrites = 0

    def _guard(self, test: Node) -> Guard | None:
        return resolve_guard(test, self.registry.control.names)

    def visit_ConditionalExpression(self, node: ConditionalExpression, path: NodePath) -> Node | None:
        guard = self._guard(node.test)
        if guard is None or not guard.args:
            return None
        if self._in_child_position(path):
            return None
        if _is_markup(node.consequent) or _is_markup(node.alternate):
            # Markup branches cannot be joined as strings; splice them into a fragment.
            return JSXFragment(children=self._expand(node) or [], span=node.span)

        context = self.registry.context
        parts = [
            control_call(guard.intent, OPEN, guard.args, context),
            node.consequent,
            control_call(guard.intent, CLOSE, guard.args, context),
            control_call(guard.intent.complement, OPEN, guard.args, context),
            node.alternate,
            control_call(guard.intent.complement, CLOSE, guard.args, context),
        ]
        combined = parts[0]
        for part in parts[1:]:
            combined = BinaryExpression(operator="+", left=combined, right=part)
        self.rewrites += 1
        return combined

    def visit_JSXElement(self, node: JSXElement, path: NodePath) -> Node | None:
        children = self._splice_children(node.children)
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
        children = self._splice_children(node.children)
        if children is None:
            return None
        return JSXFragment(children=children, span=node.span)

    def _splice_children(self, children: list[Node]) -> list[Node] | None:
        result: list[Node] = []
        changed = False
        for child in children:
            expanded = None
            if isinstance(child, JSXExpressionContainer):
                expanded = self._expand(child.expression)
            if expanded is None:
                result.append(child)
            else:
                result.extend(expanded)
                changed = True
        return result if changed else None

    def _expand(self, expression: Node) -> list[Node] | None:
        context = self.registry.context

        if isinstance(expression, ConditionalExpression):
            guard = self._guard(expression.test)
            if guard is None or not guard.args:
                return None
            self.rewrites += 1
            return [
                as_child(control_call(guard.intent, OPEN, guard.args, context)),
                *self._expand_or_wrap(expression.consequent),
                as_child(control_call(guard.intent, CLOSE, guard.args, context)),
                as_child(control_call(guard.intent.complement, OPEN, guard.args, context)),
                *self._expand_or_wrap(expression.alternate),
                as_child(control_call(guard.intent.complement, CLOSE, guard.args, context)),
            ]

        if isinstance(expression, LogicalExpression) and expression.operator == "&&":
            guard = self._guard(expression.left)
            if guard is None or not guard.args:
                logger.debug("Guard %s is not a control guard; left as written.", expression.left.type)
                return None
            self.rewrites += 1
            return [
                as_child(control_call(guard.intent, OPEN, guard.args, context)),
                *self._expand_or_wrap(expression.right),
                as_child(control_call(guard.intent, CLOSE, guard.args, context)),
            ]

        return None

    def _expand_or_wrap(self, expression: Node) -> list[Node]:
        expanded = self._expand(expression)
        if expanded is not None:
            return expanded
        if isinstance(expression, (JSXElement, JSXFragment)):
            return [expression]
        return [as_child(expression)]

    def _in_child_position(self, path: NodePath) -> bool:
        """True when the node is spliced by its enclosing markup instead."""
        current = path
        while current.parent is not None:
            parent = current.parent.node
            if isinstance(parent, JSXExpressionContainer):
                return current.parent.key == "children"
            if isinstance(parent, ConditionalExpression) and current.key in ("consequent", "alternate"):
                if self._guard(parent.test) is None:
                    return False
            elif isinstance(parent, LogicalExpression) and parent.operator == "&&" and current.key == "right":
                if self._guard(parent.left) is None:
                    return False
            else:
                return False
            current = current.parent
        return False
