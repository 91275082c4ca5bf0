"""
Undo/redo history of course mutations.
"""

from .log import HistoryLog, HistoryRecord

__all__ = ["HistoryLog", "HistoryRecord"]
