"""
Priority ordering of candidates.
"""

from .queue import OrderingQueue

__all__ = ["OrderingQueue"]
