"""
Bounded, linear undo/redo history.

The log only records what happened. Each record carries the course snapshots
before and after its mutation; restoring them is the job of the authoring
service.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

from course_builder.content.constants import OperationType
from course_builder.content.models import CourseState, now_ms

R = TypeVar("R")


@dataclass
class HistoryRecord:
    """One committed mutation."""

    type: OperationType
    data: dict[str, Any]
    before: CourseState
    after: CourseState
    timestamp: int = field(default_factory=now_ms)


class HistoryLog(Generic[R]):
    """
    Sliding-window undo stack.

    Pushing after an undo discards the redo branch. Once `max_size` is
    exceeded the oldest record is dropped for good.
    """

    def __init__(self, max_size: int = 50):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.records: list[R] = []
        self.current_index = -1

    def __len__(self) -> int:
        return len(self.records)

    def size(self) -> int:
        return len(self.records)

    def push(self, record: R) -> None:
        del self.records[self.current_index + 1:]
        self.records.append(record)
        self.current_index += 1

        if len(self.records) > self.max_size:
            self.records.pop(0)
            self.current_index -= 1

    def undo(self) -> Optional[R]:
        """Step back; returns the record being undone, or None."""
        if self.current_index >= 0:
            self.current_index -= 1
            return self.records[self.current_index + 1]
        return None

    def redo(self) -> Optional[R]:
        """Step forward; returns the record being redone, or None."""
        if self.current_index < len(self.records) - 1:
            self.current_index += 1
            return self.records[self.current_index]
        return None

    def can_undo(self) -> bool:
        return self.current_index >= 0

    def can_redo(self) -> bool:
        return self.current_index < len(self.records) - 1
