"""
Course builder constants.

Identifiers shared between the drag-and-drop boundary, the history log and the
persistence layer.
"""

from __future__ import annotations

from enum import Enum

# Container key of root-level items
ROOT_CONTAINER = None

# Drag endpoint tokens
MODULE_PREFIX = "module-"
ITEM_PREFIX = "item-"
ROOT_DROP_ZONE = "root-drop-zone"

# Upload extensions accepted by default
SUPPORTED_FILE_EXTENSIONS = (
    "pdf", "doc", "docx", "txt",
    "jpg", "jpeg", "png", "gif",
    "mp4", "mov", "avi",
    "mp3", "wav",
)


class ItemType(str, Enum):
    """Kinds of content an item can hold."""

    LINK = "link"
    FILE = "file"


class OperationType(str, Enum):
    """Operation types recorded in the undo/redo history."""

    SAVE_MODULE = "SAVE_MODULE"
    DELETE_MODULE = "DELETE_MODULE"
    ADD_LINK = "ADD_LINK"
    ADD_FILE = "ADD_FILE"
    DELETE_ITEM = "DELETE_ITEM"
    EDIT_ITEM = "EDIT_ITEM"
    REORDER_MODULES = "REORDER_MODULES"
    REORDER_ITEMS = "REORDER_ITEMS"


SUCCESS_MESSAGES = {
    "MODULE_CREATED": "Module created successfully",
    "MODULE_UPDATED": "Module updated successfully",
    "MODULE_DELETED": "Module deleted successfully",
    "ITEM_ADDED": "Item added successfully",
    "ITEM_UPDATED": "Item updated successfully",
    "ITEM_DELETED": "Item deleted successfully",
    "ITEM_MOVED": "Item moved successfully",
    "MODULES_REORDERED": "Modules reordered successfully",
}
