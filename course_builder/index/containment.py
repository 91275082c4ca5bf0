"""
Containment index: items grouped by their owning container.

Derived from the canonical item collection; never the source of truth.
"""

from __future__ import annotations

from typing import Iterable, Optional

from course_builder.content.models import Item


class ContainmentIndex:
    """Map from container id (module id, or None for root) to its ordered items."""

    def __init__(self, items: Iterable[Item] = ()):
        self._map: dict[Optional[str], list[Item]] = {}
        for item in items:
            self.add_item(item.module_id, item)

    def get(self, container_id: Optional[str]) -> list[Item]:
        """Items in a container; a missing container is an empty list."""
        return list(self._map.get(container_id, []))

    def set(self, container_id: Optional[str], items: Iterable[Item]) -> None:
        self._map[container_id] = list(items)

    def add_item(self, container_id: Optional[str], item: Item) -> None:
        self._map.setdefault(container_id, []).append(item)

    def remove_item(self, container_id: Optional[str], item_id: str) -> None:
        if container_id not in self._map:
            return
        self._map[container_id] = [i for i in self._map[container_id] if i.id != item_id]

    def count(self, container_id: Optional[str]) -> int:
        return len(self._map.get(container_id, []))
