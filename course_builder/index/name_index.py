"""
Name index for module search.

An unbalanced binary search tree keyed by lower-cased module name. The tree is
rebuilt wholesale whenever the module list changes structurally, so insertion
order degrading it towards a list is tolerated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from course_builder.content.models import Module


@dataclass
class _Node:
    module: Module
    left: Optional[_Node] = None
    right: Optional[_Node] = None

    @property
    def key(self) -> str:
        return self.module.name.lower()


class NameIndex:
    """Substring search over module names."""

    def __init__(self, modules: Iterable[Module] = ()):
        self.root: _Node | None = None
        self._size = 0
        for module in modules:
            self.insert(module)

    def __len__(self) -> int:
        return self._size

    def insert(self, module: Module) -> None:
        """Insert a module; names sorting strictly lower go left, the rest right."""
        new_node = _Node(module)
        self._size += 1

        if self.root is None:
            self.root = new_node
            return

        node = self.root
        while True:
            if new_node.key < node.key:
                if node.left is None:
                    node.left = new_node
                    return
                node = node.left
            else:
                if node.right is None:
                    node.right = new_node
                    return
                node = node.right

    def search(self, term: str) -> list[Module]:
        """
        Find modules whose name contains `term` (case-insensitive).

        The left subtree is only visited when `term` sorts before the node's
        name; the right subtree is always visited. A match stored on the left of
        a node whose name sorts before `term` is therefore not reported.
        """
        term = term.lower()
        results: list[Module] = []
        stack: list[_Node] = [self.root] if self.root is not None else []

        # Pre-order: node, then its left subtree, then its right subtree
        while stack:
            node = stack.pop()
            if term in node.key:
                results.append(node.module)
            if node.right is not None:
                stack.append(node.right)
            if term < node.key and node.left is not None:
                stack.append(node.left)

        return results
