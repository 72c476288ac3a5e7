"""Collision-free identifier generation for one source unit."""

from __future__ import annotations

from typing import Iterable

from jsxtv.ast import Identifier, JSXIdentifier, Node
from jsxtv.traverse import walk


def collect_names(root: Node) -> set[str]:
    """Every identifier and JSX identifier name under `root`."""
    names: set[str] = set()
    for node in walk(root):
        if isinstance(node, (Identifier, JSXIdentifier)):
            names.add(node.name)
    return names


class UidGenerator:
    """Mints `_uid`, `_uid2`, `_uid3`, ... avoiding every known name."""

    def __init__(self, used: Iterable[str] = ()) -> None:
        self._used: set[str] = set(used)

    @classmethod
    def for_tree(cls, root: Node) -> UidGenerator:
        return cls(collect_names(root))

    def reserve(self, name: str) -> None:
        self._used.add(name)

    def is_used(self, name: str) -> bool:
        return name in self._used

    def generate(self, hint: str = "uid") -> str:
        base = "_" + hint.lstrip("_")
        name = base
        counter = 1
        while name in self._used:
            counter += 1
            name = f"{base}{counter}"
        self._used.add(name)
        return name
