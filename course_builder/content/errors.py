"""
Error taxonomy for course content mutations.

All checks run before a mutation is applied, so raising any of these means the
canonical collections, the indexes and the history log are untouched.
"""

from __future__ import annotations

from enum import Enum


class Violation(str, Enum):
    """A single integrity rule violation."""

    MISSING_ID = "MissingId"
    EMPTY_NAME = "EmptyName"
    INVALID_CONTAINER = "InvalidContainer"
    MISSING_URL = "MissingUrl"
    NAME_TOO_LONG = "NameTooLong"
    URL_TOO_LONG = "UrlTooLong"
    MISSING_FILE = "MissingFile"
    FILE_TOO_LARGE = "FileTooLarge"
    INVALID_URL = "InvalidUrl"
    UNSUPPORTED_FILE_TYPE = "UnsupportedFileType"


VIOLATION_MESSAGES = {
    Violation.MISSING_ID: "Must have a valid string ID",
    Violation.EMPTY_NAME: "Name is required",
    Violation.INVALID_CONTAINER: "Item must have a valid module ID or none for root-level items",
    Violation.MISSING_URL: "URL is required for link items",
    Violation.NAME_TOO_LONG: "Name is too long",
    Violation.URL_TOO_LONG: "URL is too long",
    Violation.MISSING_FILE: "File metadata is required for file items",
    Violation.FILE_TOO_LARGE: "File size exceeds the upload limit",
    Violation.INVALID_URL: "Please enter a valid URL",
    Violation.UNSUPPORTED_FILE_TYPE: "File type is not supported",
}


class CourseBuilderError(Exception):
    """Base class for rejected course mutations."""

    @property
    def reasons(self) -> list[str]:
        return [str(self)]


class ValidationError(CourseBuilderError):
    """A required field is missing or malformed."""

    def __init__(self, violations: list[Violation], subject: str = "Item"):
        self.violations = list(violations)
        self.subject = subject
        super().__init__(", ".join(self.reasons))

    @property
    def reasons(self) -> list[str]:
        return [f"{self.subject}: {VIOLATION_MESSAGES[v]}" for v in self.violations]


class DuplicateNameError(CourseBuilderError):
    """A name collides with another module, or another item in the same container."""

    def __init__(self, name: str, container_id: str | None = None, is_module: bool = False):
        self.name = name
        self.container_id = container_id
        self.is_module = is_module
        if is_module:
            message = "A module with this name already exists. Please choose a different name."
        else:
            where = "at the root level" if container_id is None else f"in module {container_id}"
            message = f"An item named '{name.strip()}' already exists {where}."
        super().__init__(message)


class ReferentialError(CourseBuilderError):
    """A module or item id does not reference anything that currently exists."""


class CapacityError(CourseBuilderError):
    """A configured module or item limit would be exceeded."""


class EndpointError(CourseBuilderError):
    """A drag identifier has none of the accepted shapes."""


class StorageError(CourseBuilderError):
    """Persistence failed; in-memory state stays authoritative."""
