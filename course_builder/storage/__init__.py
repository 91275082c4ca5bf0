"""
External collaborators: persistence and file blobs.
"""

from .blobs import describe_file
from .state_store import CourseSnapshot, StateStore

__all__ = ["CourseSnapshot", "StateStore", "describe_file"]
