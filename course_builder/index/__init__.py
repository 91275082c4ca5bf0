"""
Derived indexes over the canonical course collections.
"""

from .containment import ContainmentIndex
from .name_index import NameIndex

__all__ = ["ContainmentIndex", "NameIndex"]
