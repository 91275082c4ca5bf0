"""
Course content: models, integrity rules and the error taxonomy.
"""

from .constants import ROOT_CONTAINER, ItemType, OperationType
from .errors import (
    CapacityError,
    CourseBuilderError,
    DuplicateNameError,
    EndpointError,
    ReferentialError,
    StorageError,
    ValidationError,
    Violation,
)
from .models import CourseState, FileBlob, FileItem, Item, LinkItem, Module

__all__ = [
    "ROOT_CONTAINER",
    "ItemType",
    "OperationType",
    "CourseBuilderError",
    "ValidationError",
    "DuplicateNameError",
    "ReferentialError",
    "CapacityError",
    "EndpointError",
    "StorageError",
    "Violation",
    "CourseState",
    "Module",
    "LinkItem",
    "FileItem",
    "FileBlob",
    "Item",
]
