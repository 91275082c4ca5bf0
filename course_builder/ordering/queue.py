"""
Stable priority queue.

Lower priority numbers come out first. Equal priorities keep insertion order,
since a new element is only placed ahead of strictly greater priorities.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class _Entry(Generic[T]):
    payload: T
    priority: float


class OrderingQueue(Generic[T]):
    """Priority-ordered queue over arbitrary payloads."""

    def __init__(self):
        self._queue: list[_Entry[T]] = []

    def __len__(self) -> int:
        return len(self._queue)

    def enqueue(self, payload: T, priority: float = 0) -> None:
        entry = _Entry(payload, priority)
        for i, existing in enumerate(self._queue):
            if entry.priority < existing.priority:
                self._queue.insert(i, entry)
                return
        self._queue.append(entry)

    def dequeue(self) -> Optional[T]:
        if self.is_empty():
            return None
        return self._queue.pop(0).payload

    def peek(self) -> Optional[T]:
        if self.is_empty():
            return None
        return self._queue[0].payload

    def is_empty(self) -> bool:
        return not self._queue

    def size(self) -> int:
        return len(self._queue)

    def drain(self) -> list[T]:
        """Dequeue everything, front first."""
        out = []
        while not self.is_empty():
            out.append(self.dequeue())
        return out
