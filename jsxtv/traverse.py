"""Tree walking primitives shared by all rewrite passes."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Callable, Iterator, Union

from jsxtv.ast import Node


VisitResult = Union[Node, list[Node], None]


def child_fields(node: Node) -> Iterator[tuple[str, object]]:
    """Yield `(field_name, value)` for every non-span field of `node`."""
    for f in dataclasses.fields(node):
        if f.name == "span":
            continue
        yield f.name, getattr(node, f.name)


@dataclass
class NodePath:
    """Location of a node: its parent path, field key and list index."""

    node: Node
    parent: NodePath | None = None
    key: str | None = None
    index: int | None = None

    @property
    def parent_node(self) -> Node | None:
        return None if self.parent is None else self.parent.node

    def ancestors(self) -> Iterator[NodePath]:
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def find_ancestor(self, predicate: Callable[[NodePath], bool]) -> NodePath | None:
        for ancestor in self.ancestors():
            if predicate(ancestor):
                return ancestor
        return None


def iter_paths(root: Node, parent: NodePath | None = None) -> Iterator[NodePath]:
    """Pre-order walk yielding a path for every node under `root`."""
    stack: list[NodePath] = [NodePath(root, parent)]
    while stack:
        path = stack.pop()
        yield path
        children: list[NodePath] = []
        for name, value in child_fields(path.node):
            if isinstance(value, list):
                for index, item in enumerate(value):
                    if isinstance(item, Node):
                        children.append(NodePath(item, path, name, index))
            elif isinstance(value, Node):
                children.append(NodePath(value, path, name))
        stack.extend(reversed(children))


def walk(root: Node) -> Iterator[Node]:
    for path in iter_paths(root):
        yield path.node


class Transformer:
    """Post-order rewriting walk producing a new tree.

    Subclasses define `visit_<NodeType>(node, path)`. `node` already carries
    the rewritten children; `path` describes the node's place in the input
    tree. A visitor returns a replacement node, a list of nodes to splice into
    the parent's list field (an empty list removes the node), or None to keep
    the node. Untouched subtrees are shared with the input.
    """

    def transform(self, root: Node) -> Node:
        result = self._visit(root, NodePath(root))
        if isinstance(result, list):
            raise TypeError("The root node cannot be replaced by a list.")
        return result

    def _visit(self, node: Node, path: NodePath) -> Node | list[Node]:
        changes: dict[str, object] = {}
        for name, value in child_fields(node):
            if isinstance(value, list):
                items: list[object] = []
                changed = False
                for index, item in enumerate(value):
                    if not isinstance(item, Node):
                        items.append(item)
                        continue
                    result = self._visit(item, NodePath(item, path, name, index))
                    if isinstance(result, list):
                        items.extend(result)
                        changed = True
                    else:
                        items.append(result)
                        changed = changed or result is not item
                if changed:
                    changes[name] = items
            elif isinstance(value, Node):
                result = self._visit(value, NodePath(value, path, name))
                if isinstance(result, list):
                    raise TypeError(f"Cannot splice nodes into {node.type}.{name}.")
                if result is not value:
                    changes[name] = result

        if changes:
            node = dataclasses.replace(node, **changes)

        visitor = getattr(self, f"visit_{node.type}", None)
        if visitor is None:
            return node
        result = visitor(node, path)
        return node if result is None else result
