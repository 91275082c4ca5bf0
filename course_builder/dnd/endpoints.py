"""
Drag endpoints.

The UI identifies drag sources and drop targets with prefixed strings
("module-<id>", "item-<id>", or the root drop zone token). They are parsed once,
here, into tagged endpoints before reaching the resolver.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from course_builder.content.constants import ITEM_PREFIX, MODULE_PREFIX, ROOT_DROP_ZONE
from course_builder.content.errors import EndpointError


class EndpointKind(str, Enum):
    MODULE = "module"
    ITEM = "item"
    ROOT_ZONE = "root_zone"


@dataclass(frozen=True)
class DragEndpoint:
    """A tagged drag source or drop target."""

    kind: EndpointKind
    id: Optional[str] = None

    @classmethod
    def module(cls, module_id: str) -> DragEndpoint:
        return cls(EndpointKind.MODULE, module_id)

    @classmethod
    def item(cls, item_id: str) -> DragEndpoint:
        return cls(EndpointKind.ITEM, item_id)

    @classmethod
    def root_zone(cls) -> DragEndpoint:
        return cls(EndpointKind.ROOT_ZONE)

    @property
    def token(self) -> str:
        if self.kind is EndpointKind.MODULE:
            return f"{MODULE_PREFIX}{self.id}"
        if self.kind is EndpointKind.ITEM:
            return f"{ITEM_PREFIX}{self.id}"
        return ROOT_DROP_ZONE


def parse_endpoint(token: str) -> DragEndpoint:
    """
    Parse a UI drag identifier.

    Raises:
        EndpointError: If the token is not one of the three accepted shapes
    """
    if token == ROOT_DROP_ZONE:
        return DragEndpoint.root_zone()
    if token.startswith(MODULE_PREFIX) and len(token) > len(MODULE_PREFIX):
        return DragEndpoint.module(token[len(MODULE_PREFIX):])
    if token.startswith(ITEM_PREFIX) and len(token) > len(ITEM_PREFIX):
        return DragEndpoint.item(token[len(ITEM_PREFIX):])
    raise EndpointError(f"Unrecognized drag identifier: {token!r}")
