"""
Authoring command surface.
"""

from .builder import CommandResult, CourseBuilder

__all__ = ["CommandResult", "CourseBuilder"]
