"""
Course Builder: in-memory content index and mutation engine for course authoring.

Components:
- content: models, integrity rules, error taxonomy
- index: NameIndex (module search), ContainmentIndex (items per container)
- history: bounded undo/redo log
- ordering: stable priority queue
- dnd: drag endpoints and the reorder resolver
- authoring: CourseBuilder command surface
- storage: JSON persistence and file blob collaborators
"""

__version__ = "1.0.0"

from course_builder.authoring import CommandResult, CourseBuilder
from course_builder.content import (
    CourseState,
    FileBlob,
    FileItem,
    Item,
    LinkItem,
    Module,
)
from course_builder.dnd import DragEndpoint, parse_endpoint

__all__ = [
    "CommandResult",
    "CourseBuilder",
    "CourseState",
    "Module",
    "LinkItem",
    "FileItem",
    "FileBlob",
    "Item",
    "DragEndpoint",
    "parse_endpoint",
    "__version__",
]
