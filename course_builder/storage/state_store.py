"""
JSON state persistence for the course builder.

The persisted envelope mirrors the browser's local-storage payload:

    {"modules": [{"id", "name", "createdAt"}],
     "items": [{"id", "moduleId", "type", "name", "url" | "fileName", ...}]}

Reading is forgiving (a missing or corrupt file loads as absent); writing
raises StorageError, which callers log and survive.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Literal, Optional, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from course_builder.content.errors import StorageError
from course_builder.content.models import CourseState, FileItem, Item, LinkItem, Module


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ModuleRecord(_Record):
    id: str
    name: str
    created_at: int = Field(default=0, alias="createdAt")

    def to_model(self) -> Module:
        return Module(id=self.id, name=self.name, created_at=self.created_at)


class LinkItemRecord(_Record):
    type: Literal["link"] = "link"
    id: str
    module_id: Optional[str] = Field(default=None, alias="moduleId")
    name: str
    url: str
    created_at: int = Field(default=0, alias="createdAt")

    def to_model(self) -> LinkItem:
        return LinkItem(
            id=self.id,
            module_id=self.module_id or None,
            name=self.name,
            url=self.url,
            created_at=self.created_at,
        )


class FileItemRecord(_Record):
    type: Literal["file"] = "file"
    id: str
    module_id: Optional[str] = Field(default=None, alias="moduleId")
    name: str
    file_name: str = Field(alias="fileName")
    file_size: int = Field(default=0, alias="fileSize")
    file_type: str = Field(default="", alias="fileType")
    file_url: str = Field(alias="fileUrl")
    created_at: int = Field(default=0, alias="createdAt")

    def to_model(self) -> FileItem:
        return FileItem(
            id=self.id,
            module_id=self.module_id or None,
            name=self.name,
            file_name=self.file_name,
            file_size=self.file_size,
            file_type=self.file_type,
            file_url=self.file_url,
            created_at=self.created_at,
        )


ItemRecord = Annotated[Union[LinkItemRecord, FileItemRecord], Field(discriminator="type")]


class CourseSnapshot(_Record):
    """Wire format of the persisted course."""

    modules: list[ModuleRecord] = Field(default_factory=list)
    items: list[ItemRecord] = Field(default_factory=list)

    @classmethod
    def from_state(cls, state: CourseState) -> CourseSnapshot:
        return cls(
            modules=[
                ModuleRecord(id=m.id, name=m.name, created_at=m.created_at)
                for m in state.modules
            ],
            items=[_item_record(i) for i in state.items],
        )

    def to_state(self) -> CourseState:
        return CourseState(
            modules=tuple(m.to_model() for m in self.modules),
            items=tuple(i.to_model() for i in self.items),
        )


def _item_record(item: Item) -> Union[LinkItemRecord, FileItemRecord]:
    if isinstance(item, LinkItem):
        return LinkItemRecord(
            id=item.id, module_id=item.module_id, name=item.name,
            url=item.url, created_at=item.created_at,
        )
    return FileItemRecord(
        id=item.id, module_id=item.module_id, name=item.name,
        file_name=item.file_name, file_size=item.file_size,
        file_type=item.file_type, file_url=item.file_url,
        created_at=item.created_at,
    )


class StateStore:
    """
    File-backed persistence collaborator.

    One JSON document per store; writes go through a temporary file so a failed
    write never truncates the previous snapshot.
    """

    def __init__(self, path: Path, storage_key: str = "courseBuilderState:v1"):
        self.path = Path(path)
        self.storage_key = storage_key

    def load(self) -> CourseState | None:
        """Load the persisted course, or None when absent or unreadable."""
        if not self.path.exists():
            return None

        try:
            raw = self.path.read_text(encoding="utf-8")
            snapshot = CourseSnapshot.model_validate_json(raw)
        except (OSError, UnicodeDecodeError, PydanticValidationError) as e:
            logger.warning(f"Failed to load persisted state from {self.path}: {e}")
            return None

        return snapshot.to_state()

    def save(self, state: CourseState) -> Path:
        """
        Persist a course snapshot.

        Raises:
            StorageError: If the file cannot be written
        """
        payload = CourseSnapshot.from_state(state).model_dump(mode="json", by_alias=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            tmp_path.replace(self.path)
        except OSError as e:
            raise StorageError(f"Failed to persist state to {self.path}: {e}") from e

        logger.debug(
            f"State persisted ({self.storage_key}): "
            f"{len(state.modules)} modules, {len(state.items)} items"
        )
        return self.path
