"""
Drag-and-drop resolution.
"""

from .endpoints import DragEndpoint, EndpointKind, parse_endpoint
from .resolver import ReorderOutcome, ReorderResolver, array_move

__all__ = [
    "DragEndpoint",
    "EndpointKind",
    "parse_endpoint",
    "ReorderOutcome",
    "ReorderResolver",
    "array_move",
]
