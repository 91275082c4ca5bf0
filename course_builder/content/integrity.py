"""
Integrity rules consumed before every mutation.

Everything here is pure: functions inspect the collections they are given and
report violations, they never modify anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterable, Optional

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from course_builder.content.constants import SUPPORTED_FILE_EXTENSIONS
from course_builder.content.errors import Violation
from course_builder.content.models import FileItem, Item, LinkItem, Module, normalize_name

_url_adapter = TypeAdapter(AnyUrl)


@dataclass
class ValidationLimits:
    """Length, size and file type limits applied on top of the structural checks."""

    module_name_max_length: int = 100
    item_name_max_length: int = 200
    url_max_length: int = 2048
    file_size_max_bytes: int = 100 * 1024 * 1024
    supported_file_extensions: tuple[str, ...] = SUPPORTED_FILE_EXTENSIONS

    @classmethod
    def from_settings(cls, settings) -> ValidationLimits:
        return cls(**settings.get_validation_limits())


def is_valid_url(url: str) -> bool:
    """Absolute URL with a scheme, as accepted by pydantic's AnyUrl."""
    try:
        _url_adapter.validate_python(url)
    except PydanticValidationError:
        return False
    return True


def file_extension(file_name: str) -> str:
    return PurePath(file_name).suffix.lstrip(".").lower()


def _is_identifier(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _is_blank(value: object) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_module(module: Module, limits: ValidationLimits | None = None) -> list[Violation]:
    """Return every violation of a module (empty list when valid)."""
    violations = []

    if not _is_identifier(module.id):
        violations.append(Violation.MISSING_ID)

    if _is_blank(module.name):
        violations.append(Violation.EMPTY_NAME)
    elif limits and len(module.name.strip()) > limits.module_name_max_length:
        violations.append(Violation.NAME_TOO_LONG)

    return violations


def validate_item(item: Item, limits: ValidationLimits | None = None) -> list[Violation]:
    """
    Return every violation of an item (empty list when valid).

    The common fields are checked first, then the fields of the item's variant.
    """
    violations = []

    if not _is_identifier(item.id):
        violations.append(Violation.MISSING_ID)

    if item.module_id is not None and not _is_identifier(item.module_id):
        violations.append(Violation.INVALID_CONTAINER)

    if _is_blank(item.name):
        violations.append(Violation.EMPTY_NAME)
    elif limits and len(item.name.strip()) > limits.item_name_max_length:
        violations.append(Violation.NAME_TOO_LONG)

    if isinstance(item, LinkItem):
        if _is_blank(item.url):
            violations.append(Violation.MISSING_URL)
        elif not is_valid_url(item.url.strip()):
            violations.append(Violation.INVALID_URL)
        elif limits and len(item.url) > limits.url_max_length:
            violations.append(Violation.URL_TOO_LONG)
    elif isinstance(item, FileItem):
        if _is_blank(item.file_name) or _is_blank(item.file_url):
            violations.append(Violation.MISSING_FILE)
        elif limits and item.file_size > limits.file_size_max_bytes:
            violations.append(Violation.FILE_TOO_LARGE)
        if limits and not _is_blank(item.file_name):
            if file_extension(item.file_name) not in limits.supported_file_extensions:
                violations.append(Violation.UNSUPPORTED_FILE_TYPE)
    else:
        raise TypeError(f"Unknown item variant: {type(item).__name__}")

    return violations


def is_duplicate_in_container(
    items: Iterable[Item],
    container_id: Optional[str],
    candidate_name: str,
    exclude_id: str | None = None,
) -> bool:
    """
    Check whether a container already holds an item named `candidate_name`.

    Args:
        items: The canonical item collection
        container_id: Module id, or None for the root container
        candidate_name: Name to test (trimmed, case-insensitive)
        exclude_id: Item to ignore, used when renaming in place

    Returns:
        True if another item in the container has the same normalized name
    """
    target = normalize_name(candidate_name)
    for item in items:
        if item.module_id != container_id:
            continue
        if exclude_id is not None and item.id == exclude_id:
            continue
        if normalize_name(item.name) == target:
            return True
    return False


def can_move_item(items: Iterable[Item], item_id: str, target_container_id: Optional[str]) -> bool:
    """Check whether an item may move into a container without a name clash."""
    items = list(items)
    item = next((i for i in items if i.id == item_id), None)
    if item is None:
        return False

    # Same container is always allowed
    if item.module_id == target_container_id:
        return True

    return not is_duplicate_in_container(items, target_container_id, item.name, exclude_id=item_id)


def is_duplicate_module_name(
    modules: Iterable[Module],
    candidate_name: str,
    exclude_id: str | None = None,
) -> bool:
    """Module names are unique across the whole course."""
    target = normalize_name(candidate_name)
    return any(
        m.id != exclude_id and normalize_name(m.name) == target
        for m in modules
    )
