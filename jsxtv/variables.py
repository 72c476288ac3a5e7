"""Template-variable configuration and the per-component registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from jsxtv.ast import (
    ArrayExpression,
    BooleanLiteral,
    Identifier,
    Node,
    NullLiteral,
    NumericLiteral,
    ObjectExpression,
    Property,
    StringLiteral,
)
from jsxtv.scope import UidGenerator


logger = logging.getLogger(__name__)

VAR_REPLACE = "replace"
VAR_CONTROL = "control"
VAR_LIST = "list"
VAR_TYPES = (VAR_REPLACE, VAR_CONTROL, VAR_LIST)

CHILD_PRIMITIVE = "primitive"
CHILD_OBJECT = "object"


@dataclass(frozen=True)
class ChildShape:
    """Element shape of a list variable."""

    type: str = CHILD_PRIMITIVE
    props: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        if self.type == CHILD_OBJECT:
            return {"type": self.type, "props": list(self.props)}
        return {"type": self.type}


@dataclass(frozen=True)
class TemplateVar:
    """One declared variable, normalized from `'name'` or `['name', {...}]`."""

    name: str
    type: str = VAR_REPLACE
    child: ChildShape | None = None
    aliases: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name, "type": self.type}
        if self.child is not None:
            payload["child"] = self.child.to_dict()
        if self.aliases:
            payload["aliases"] = list(self.aliases)
        return payload


@dataclass
class VariableBucket:
    """Variables of one kind with their generated identifiers."""

    kind: str
    raw: list[TemplateVar] = field(default_factory=list)
    mapped: dict[str, str] = field(default_factory=dict)
    names: list[str] = field(default_factory=list)
    to_tag: dict[str, str] = field(default_factory=dict)

    def __contains__(self, name: object) -> bool:
        return name in self.mapped

    def get(self, name: str) -> TemplateVar | None:
        found = None
        for var in self.raw:
            if var.name == name:
                found = var
        return found

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "vars": [var.to_dict() for var in self.raw],
            "mapped": dict(self.mapped),
        }
        if self.kind == VAR_LIST:
            payload["to_tag"] = dict(self.to_tag)
        return payload


@dataclass
class VariableRegistry:
    """Replace, control and list buckets plus the context identifier."""

    replace: VariableBucket
    control: VariableBucket
    list: VariableBucket
    context: str

    def buckets(self) -> tuple[VariableBucket, VariableBucket, VariableBucket]:
        return self.replace, self.control, self.list

    def to_dict(self) -> dict[str, Any]:
        return {
            "context": self.context,
            "replace": self.replace.to_dict(),
            "control": self.control.to_dict(),
            "list": self.list.to_dict(),
        }


def node_to_value(node: Node | None) -> Any:
    """Convert a literal configuration node to plain Python data.

    Unsupported nodes (calls, identifiers, ...) become None.
    """
    if isinstance(node, StringLiteral):
        return node.value
    if isinstance(node, NumericLiteral):
        return node.value
    if isinstance(node, BooleanLiteral):
        return node.value
    if isinstance(node, NullLiteral):
        return None
    if isinstance(node, ArrayExpression):
        return [node_to_value(element) for element in node.elements if element is not None]
    if isinstance(node, ObjectExpression):
        result: dict[str, Any] = {}
        for prop in node.properties:
            if not isinstance(prop, Property) or prop.computed:
                continue
            if isinstance(prop.key, Identifier):
                key = prop.key.name
            elif isinstance(prop.key, StringLiteral):
                key = prop.key.value
            else:
                continue
            result[key] = node_to_value(prop.value)
        return result
    return None


def parse_template_vars(node: Node) -> list[TemplateVar]:
    """Normalize a configuration array literal; malformed entries are skipped."""
    if not isinstance(node, ArrayExpression):
        logger.warning("Template variable configuration is not an array literal; ignored.")
        return []
    result: list[TemplateVar] = []
    for index, element in enumerate(node.elements):
        var = _parse_entry(node_to_value(element))
        if var is None:
            logger.debug("Skipping malformed template variable entry at index %d.", index)
            continue
        result.append(var)
    return result


def template_vars_from_data(entries: Iterable[Any]) -> list[TemplateVar]:
    """Normalize configuration given as plain data (JSON or Python lists)."""
    result: list[TemplateVar] = []
    for entry in entries:
        var = _parse_entry(entry)
        if var is not None:
            result.append(var)
    return result


def _parse_entry(entry: Any) -> TemplateVar | None:
    if isinstance(entry, str):
        return TemplateVar(name=entry) if entry else None
    if not isinstance(entry, list) or not entry or not isinstance(entry[0], str) or not entry[0]:
        return None

    name = entry[0]
    config = entry[1] if len(entry) > 1 else {}
    if not isinstance(config, dict):
        config = {}

    var_type = config.get("type", VAR_REPLACE)
    if var_type not in VAR_TYPES:
        logger.warning("Unknown template variable type %r for %r; treating as replace.", var_type, name)
        var_type = VAR_REPLACE

    aliases = config.get("aliases") or []
    alias_names = tuple(alias for alias in aliases if isinstance(alias, str) and alias) if isinstance(aliases, list) else ()

    child: ChildShape | None = None
    if var_type == VAR_LIST:
        child = _parse_child(config.get("child"))
    return TemplateVar(name=name, type=var_type, child=child, aliases=alias_names)


def _parse_child(raw: Any) -> ChildShape:
    if isinstance(raw, dict) and raw.get("type") == CHILD_OBJECT:
        props = raw.get("props") or []
        if isinstance(props, list):
            return ChildShape(type=CHILD_OBJECT, props=tuple(prop for prop in props if isinstance(prop, str)))
        return ChildShape(type=CHILD_OBJECT)
    return ChildShape(type=CHILD_PRIMITIVE)


def register(template_vars: Iterable[TemplateVar], uids: UidGenerator) -> VariableRegistry:
    """Partition variables into buckets and mint their identifiers.

    Identifiers are generated bucket by bucket (replace, control, list), each in
    declaration order, and the context identifier last.
    """
    buckets = {kind: VariableBucket(kind=kind) for kind in VAR_TYPES}
    for var in template_vars:
        buckets[var.type].raw.append(var)

    for kind in VAR_TYPES:
        bucket = buckets[kind]
        for var in bucket.raw:
            # A repeated name keeps the latest identifier.
            bucket.mapped[var.name] = uids.generate()
            if var.name not in bucket.names:
                bucket.names.append(var.name)

    list_bucket = buckets[VAR_LIST]
    for var in list_bucket.raw:
        list_bucket.to_tag[var.name] = var.name
        for alias in var.aliases:
            list_bucket.to_tag[alias] = var.name

    return VariableRegistry(
        replace=buckets[VAR_REPLACE],
        control=buckets[VAR_CONTROL],
        list=list_bucket,
        context=uids.generate(),
    )
