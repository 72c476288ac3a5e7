"""Component discovery and the per-component rewrite pipeline.

A component is configured by a top-level statement such as

    Card.templateVars = [ 'title', [ 'items', { type: 'list' } ] ];

The statement is removed and the function named `Card` in the same source
unit is rewritten by an ordered series of passes, each producing a new tree:
control guards, list markup, identifier renames, context injection, and
finally the prepended declarations and parameter plumbing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any

from jsxtv.ast import (
    ArrayExpression,
    ArrowFunctionExpression,
    AssignmentExpression,
    AssignmentPattern,
    BlockStatement,
    ExportDefaultDeclaration,
    ExportNamedDeclaration,
    ExpressionStatement,
    FunctionDeclaration,
    FunctionExpression,
    Identifier,
    MemberExpression,
    Node,
    ObjectPattern,
    Program,
    Property,
    RestElement,
    ReturnStatement,
    VariableDeclaration,
)
from jsxtv.config import TransformConfig
from jsxtv.passes.context import ContextInjectionPass
from jsxtv.passes.control import ControlPass
from jsxtv.passes.declarations import build_declarations, context_source
from jsxtv.passes.identifiers import IdentifierRenamePass
from jsxtv.passes.lists import ListMarkupPass, collect_map_aliases
from jsxtv.scope import UidGenerator
from jsxtv.variables import TemplateVar, VariableRegistry, parse_template_vars, register


logger = logging.getLogger(__name__)

FunctionNode = FunctionDeclaration | FunctionExpression | ArrowFunctionExpression


@dataclass(frozen=True)
class ConfigStatement:
    """A `<Component>.<property> = [...]` statement found at top level."""

    index: int
    component: str
    value: Node


@dataclass
class ComponentReport:
    """Outcome of processing one configuration statement."""

    name: str
    found: bool
    template_vars: list[TemplateVar] = field(default_factory=list)
    registry: VariableRegistry | None = None
    context_source: str = ""
    control_rewrites: int = 0
    list_rewrites: int = 0
    renamed: int = 0
    contexts_injected: int = 0
    skipped_reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "found": self.found,
            "template_vars": [var.to_dict() for var in self.template_vars],
            "stats": {
                "control_rewrites": self.control_rewrites,
                "list_rewrites": self.list_rewrites,
                "renamed": self.renamed,
                "contexts_injected": self.contexts_injected,
            },
        }
        if self.registry is not None:
            payload["registry"] = self.registry.to_dict()
            payload["context_source"] = self.context_source
        if self.skipped_reason:
            payload["skipped_reason"] = self.skipped_reason
        return payload


def find_config_statements(program: Program, property_name: str = "templateVars") -> list[ConfigStatement]:
    found: list[ConfigStatement] = []
    for index, stmt in enumerate(program.body):
        if not isinstance(stmt, ExpressionStatement):
            continue
        expr = stmt.expression
        if not isinstance(expr, AssignmentExpression) or expr.operator != "=":
            continue
        target = expr.left
        if (
            isinstance(target, MemberExpression)
            and not target.computed
            and isinstance(target.object, Identifier)
            and isinstance(target.property, Identifier)
            and target.property.name == property_name
        ):
            found.append(ConfigStatement(index=index, component=target.object.name, value=expr.right))
    return found


def _component_in(stmt: Node, name: str) -> FunctionNode | None:
    if isinstance(stmt, (ExportNamedDeclaration, ExportDefaultDeclaration)):
        inner = stmt.declaration
        return None if inner is None else _component_in(inner, name)
    if isinstance(stmt, FunctionDeclaration):
        return stmt if stmt.id is not None and stmt.id.name == name else None
    if isinstance(stmt, VariableDeclaration):
        for decl in stmt.declarations:
            if (
                isinstance(decl.id, Identifier)
                and decl.id.name == name
                and isinstance(decl.init, (ArrowFunctionExpression, FunctionExpression))
            ):
                return decl.init
    return None


def _replace_component(stmt: Node, name: str, new_fn: FunctionNode) -> Node:
    if isinstance(stmt, (ExportNamedDeclaration, ExportDefaultDeclaration)):
        return replace(stmt, declaration=_replace_component(stmt.declaration, name, new_fn))
    if isinstance(stmt, FunctionDeclaration):
        return new_fn
    if isinstance(stmt, VariableDeclaration):
        declarations = [
            replace(decl, init=new_fn) if isinstance(decl.id, Identifier) and decl.id.name == name else decl
            for decl in stmt.declarations
        ]
        return replace(stmt, declarations=declarations)
    return stmt


def locate_component(program: Program, name: str) -> tuple[int, FunctionNode] | None:
    """First top-level function bound to `name`, with its statement index."""
    for index, stmt in enumerate(program.body):
        fn = _component_in(stmt, name)
        if fn is not None:
            return index, fn
    return None


def normalize_body(fn: FunctionNode) -> BlockStatement:
    """Block body of `fn`; an expression body becomes `{ return <expr>; }`."""
    if isinstance(fn.body, BlockStatement):
        return fn.body
    return BlockStatement(body=[ReturnStatement(argument=fn.body, span=fn.body.span)], span=fn.body.span)


def plumb_context_param(params: list[Node], context_prop: str = "__context__") -> tuple[list[Node], Node]:
    """Make the first parameter receive the context prop.

    Returns the new parameter list and the expression the context is read from.
    """
    if not params:
        prop = Identifier(name=context_prop)
        return [ObjectPattern(properties=[Property(key=prop, value=prop, shorthand=True)])], context_source(None, context_prop)

    first = params[0]
    if isinstance(first, AssignmentPattern) and isinstance(first.left, Identifier):
        return list(params), context_source(first.left.name, context_prop)
    if isinstance(first, Identifier):
        return list(params), context_source(first.name, context_prop)

    pattern = first.left if isinstance(first, AssignmentPattern) else first
    if isinstance(pattern, ObjectPattern):
        present = any(
            isinstance(prop, Property) and isinstance(prop.key, Identifier) and prop.key.name == context_prop
            for prop in pattern.properties
        )
        if not present:
            prop = Identifier(name=context_prop)
            entry = Property(key=prop, value=prop, shorthand=True)
            properties = list(pattern.properties)
            rest_at = next((i for i, item in enumerate(properties) if isinstance(item, RestElement)), len(properties))
            properties.insert(rest_at, entry)
            pattern = replace(pattern, properties=properties)
            first = replace(first, left=pattern) if isinstance(first, AssignmentPattern) else pattern
        return [first, *params[1:]], context_source(None, context_prop)

    return list(params), context_source(None, context_prop)


def rewrite_component(fn: FunctionNode, registry: VariableRegistry, config: TransformConfig, report: ComponentReport) -> FunctionNode:
    """Run the pass pipeline over one component function."""
    body: Node = normalize_body(fn)

    to_tag = collect_map_aliases(body, registry.list)

    control = ControlPass(registry)
    body = control.transform(body)

    lists = ListMarkupPass(to_tag, registry.context)
    body = lists.transform(body)

    renames = IdentifierRenamePass(registry)
    body = renames.transform(body)

    contexts = ContextInjectionPass(
        registry.context,
        context_prop=config.context_prop,
        text_input_attribute=config.text_input_attribute,
        is_component=config.is_component,
    )
    body = contexts.transform(body)

    params, source = plumb_context_param(fn.params, config.context_prop)
    if not isinstance(body, BlockStatement):
        raise TypeError(f"Component body of {report.name} became {body.type}, not a block")
    body = replace(body, body=[*build_declarations(registry, source), *body.body])

    report.control_rewrites = control.rewrites
    report.list_rewrites = lists.rewrites
    report.renamed = renames.renamed
    report.contexts_injected = contexts.injected
    report.context_source = _source_text(source)
    return replace(fn, params=params, body=body)


def _source_text(source: Node) -> str:
    if isinstance(source, MemberExpression):
        return f"{source.object.name}.{source.property.name}"
    return source.name


def transform_program(program: Program, config: TransformConfig) -> tuple[Program, list[ComponentReport]]:
    """Remove configuration statements and rewrite their components in order."""
    statements = find_config_statements(program, config.config_property)
    if not statements:
        return program, []

    uids = UidGenerator.for_tree(program)
    removed = {stmt.index for stmt in statements}
    body = [stmt for index, stmt in enumerate(program.body) if index not in removed]
    current = replace(program, body=body)
    reports: list[ComponentReport] = []
    last_index = {stmt.component: stmt.index for stmt in statements}

    for stmt in statements:
        report = ComponentReport(name=stmt.component, found=False)
        reports.append(report)

        if config.tidy_only:
            report.skipped_reason = "tidy-only"
            continue

        # The last assignment is the one in effect at runtime.
        if last_index[stmt.component] != stmt.index:
            logger.warning("Configuration of %s is overwritten by a later one; skipping it.", stmt.component)
            report.skipped_reason = "superseded by a later configuration"
            continue

        template_vars = parse_template_vars(stmt.value)
        report.template_vars = template_vars
        if not template_vars and not _is_array(stmt.value):
            report.skipped_reason = "configuration is not an array literal"
            continue

        located = locate_component(current, stmt.component)
        if located is None:
            logger.warning("Component %s not found; its configuration was removed without rewriting.", stmt.component)
            report.skipped_reason = "component not found"
            continue

        index, fn = located
        report.found = True
        registry = register(template_vars, uids)
        report.registry = registry
        new_fn = rewrite_component(fn, registry, config, report)
        new_body = list(current.body)
        new_body[index] = _replace_component(current.body[index], stmt.component, new_fn)
        current = replace(current, body=new_body)
        logger.debug(
            "Rewrote %s: %d control, %d list, %d renamed, %d contexts.",
            stmt.component,
            report.control_rewrites,
            report.list_rewrites,
            report.renamed,
            report.contexts_injected,
        )

    return current, reports


def _is_array(node: Node) -> bool:
    return isinstance(node, ArrayExpression)
