"""
Reorder resolution for completed drag gestures.

Given a drag source and a drop target, computes the new canonical module
sequence and item collection:

- module onto module: reposition the module in the sequence
- item onto item: move into that item's container, at that item's position
- item onto module: append to the module's container
- item onto the root drop zone: append to the root container

Anything else is a no-op. A move that would duplicate a name inside the
destination container is rejected as a whole and the input state is returned
unchanged (the very same objects).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional, Sequence, TypeVar

from course_builder.content.constants import ROOT_CONTAINER, OperationType
from course_builder.content.errors import CourseBuilderError, DuplicateNameError, ReferentialError
from course_builder.content.integrity import can_move_item
from course_builder.content.models import CourseState, Item
from course_builder.dnd.endpoints import DragEndpoint, EndpointKind

T = TypeVar("T")


def array_move(seq: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """Remove the element at `from_index`, then insert it at `to_index`."""
    moved = list(seq)
    element = moved.pop(from_index)
    moved.insert(to_index, element)
    return moved


@dataclass
class ReorderOutcome:
    """Result of resolving one drag gesture."""

    state: CourseState
    changed: bool = False
    operation: OperationType | None = None
    data: dict[str, Any] = field(default_factory=dict)
    error: CourseBuilderError | None = None

    @property
    def rejected(self) -> bool:
        return self.error is not None


class ReorderResolver:
    """Pure drag-completion algorithm over a course snapshot."""

    def resolve(self, source: DragEndpoint, target: DragEndpoint, state: CourseState) -> ReorderOutcome:
        if source == target:
            return ReorderOutcome(state)

        if source.kind is EndpointKind.MODULE:
            if target.kind is not EndpointKind.MODULE:
                return ReorderOutcome(state)
            return self._reorder_modules(source, target, state)

        if source.kind is EndpointKind.ITEM:
            return self._move_item(source, target, state)

        return ReorderOutcome(state)

    def _reorder_modules(self, source: DragEndpoint, target: DragEndpoint, state: CourseState) -> ReorderOutcome:
        ids = [m.id for m in state.modules]
        if source.id not in ids or target.id not in ids:
            return ReorderOutcome(state)

        from_index = ids.index(source.id)
        to_index = ids.index(target.id)
        if from_index == to_index:
            return ReorderOutcome(state)

        modules = tuple(array_move(state.modules, from_index, to_index))
        return ReorderOutcome(
            CourseState(modules, state.items),
            changed=True,
            operation=OperationType.REORDER_MODULES,
            data={"module_id": source.id, "from_index": from_index, "to_index": to_index},
        )

    def _resolve_destination(self, target: DragEndpoint, state: CourseState) -> tuple[Optional[str], int] | None:
        """Target container and position, or None when the target is not a drop site."""
        if target.kind is EndpointKind.ITEM:
            over = state.find_item(target.id)
            if over is None:
                return None
            container_id = over.module_id
            siblings = state.container_items(container_id)
            return container_id, next(i for i, s in enumerate(siblings) if s.id == over.id)

        if target.kind is EndpointKind.MODULE:
            return target.id, len(state.container_items(target.id))

        if target.kind is EndpointKind.ROOT_ZONE:
            return ROOT_CONTAINER, len(state.container_items(ROOT_CONTAINER))

        return None

    def _move_item(self, source: DragEndpoint, target: DragEndpoint, state: CourseState) -> ReorderOutcome:
        item = state.find_item(source.id)
        if item is None:
            return ReorderOutcome(state)

        if target.kind is EndpointKind.MODULE and state.find_module(target.id) is None:
            return ReorderOutcome(state, error=ReferentialError(f"Module {target.id} does not exist"))

        destination = self._resolve_destination(target, state)
        if destination is None:
            return ReorderOutcome(state)
        container_id, target_index = destination

        if not can_move_item(state.items, item.id, container_id):
            return ReorderOutcome(state, error=DuplicateNameError(item.name, container_id))

        moved: Item = item if item.module_id == container_id else replace(item, module_id=container_id)
        updated = [moved if i.id == item.id else i for i in state.items]

        # Reorder only the destination container, keeping its slots in the collection
        slots = [pos for pos, i in enumerate(updated) if i.module_id == container_id]
        siblings = [updated[pos] for pos in slots]
        current_index = next(i for i, s in enumerate(siblings) if s.id == item.id)
        if current_index != target_index:
            siblings = array_move(siblings, current_index, target_index)
        for pos, sibling in zip(slots, siblings):
            updated[pos] = sibling

        if all(a is b for a, b in zip(updated, state.items)):
            return ReorderOutcome(state)

        return ReorderOutcome(
            CourseState(state.modules, tuple(updated)),
            changed=True,
            operation=OperationType.REORDER_ITEMS,
            data={
                "item_id": item.id,
                "from_container": item.module_id,
                "to_container": container_id,
                "to_index": next(i for i, s in enumerate(siblings) if s.id == item.id),
            },
        )
