"""Data models for course content."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import ClassVar, Optional, Union

from course_builder.content.constants import ItemType


def now_ms() -> int:
    """Current wall-clock time as a millisecond epoch."""
    return int(time.time() * 1000)


def new_id() -> str:
    """Generate a short opaque identifier."""
    return uuid.uuid4().hex[:12]


def normalize_name(name: str) -> str:
    """Comparison key for name uniqueness (trimmed, case-insensitive)."""
    return name.strip().lower()


@dataclass(frozen=True)
class Module:
    """A top-level module grouping items."""

    id: str
    name: str
    created_at: int = field(default_factory=now_ms)


@dataclass(frozen=True)
class LinkItem:
    """An item pointing at an external URL."""

    id: str
    module_id: Optional[str]  # None = root level
    name: str
    url: str
    created_at: int = field(default_factory=now_ms)

    type: ClassVar[ItemType] = ItemType.LINK


@dataclass(frozen=True)
class FileItem:
    """An uploaded file, described by its blob metadata only."""

    id: str
    module_id: Optional[str]
    name: str
    file_name: str
    file_size: int
    file_type: str
    file_url: str
    created_at: int = field(default_factory=now_ms)

    type: ClassVar[ItemType] = ItemType.FILE


Item = Union[LinkItem, FileItem]


@dataclass(frozen=True)
class FileBlob:
    """Metadata produced by the blob collaborator for a selected file."""

    file_name: str
    file_size: int
    file_type: str
    file_url: str


@dataclass(frozen=True)
class CourseState:
    """Snapshot of the canonical module sequence and item collection."""

    modules: tuple[Module, ...] = ()
    items: tuple[Item, ...] = ()

    def find_module(self, module_id: str) -> Module | None:
        return next((m for m in self.modules if m.id == module_id), None)

    def find_item(self, item_id: str) -> Item | None:
        return next((i for i in self.items if i.id == item_id), None)

    def container_items(self, container_id: Optional[str]) -> list[Item]:
        """Items of one container in canonical order."""
        return [i for i in self.items if i.module_id == container_id]
