"""
Course Builder: command surface over the canonical course collections.

Architecture:
- Canonical state -> CourseState snapshot (modules + items), replaced on commit
- Search -> NameIndex (modules by name)
- Per-container lookups -> ContainmentIndex
- Undo/redo -> HistoryLog of before/after snapshots
- Drag gestures -> ReorderResolver
- Persistence -> StateStore (optional, failures are non-fatal)

Every command validates first and commits second. A rejected command returns a
failed CommandResult and leaves state, indexes and history exactly as they were.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Union

from loguru import logger

from config import Settings, get_settings
from course_builder.content.constants import ROOT_CONTAINER, SUCCESS_MESSAGES, OperationType
from course_builder.content.errors import (
    CapacityError,
    CourseBuilderError,
    DuplicateNameError,
    ReferentialError,
    StorageError,
    ValidationError,
)
from course_builder.content.integrity import (
    ValidationLimits,
    is_duplicate_in_container,
    is_duplicate_module_name,
    validate_item,
    validate_module,
)
from course_builder.content.models import (
    CourseState,
    FileBlob,
    FileItem,
    Item,
    LinkItem,
    Module,
    new_id,
    now_ms,
)
from course_builder.dnd.endpoints import DragEndpoint, parse_endpoint
from course_builder.dnd.resolver import ReorderResolver
from course_builder.history.log import HistoryLog, HistoryRecord
from course_builder.index.containment import ContainmentIndex
from course_builder.index.name_index import NameIndex
from course_builder.ordering.queue import OrderingQueue
from course_builder.storage.state_store import StateStore

Endpoint = Union[DragEndpoint, str]


@dataclass
class CommandResult:
    """Outcome of one command."""

    ok: bool
    message: str = ""
    reasons: list[str] = field(default_factory=list)
    changed: bool = False
    record: HistoryRecord | None = None
    error: CourseBuilderError | None = None

    @classmethod
    def success(cls, message: str, record: HistoryRecord | None = None) -> CommandResult:
        return cls(ok=True, message=message, changed=record is not None, record=record)

    @classmethod
    def unchanged(cls, message: str = "No change") -> CommandResult:
        return cls(ok=True, message=message)

    @classmethod
    def failure(cls, error: CourseBuilderError) -> CommandResult:
        return cls(ok=False, message=str(error), reasons=error.reasons, error=error)


class CourseBuilder:
    """
    Owns the canonical course state and every derived structure.

    Indexes are only touched from `_commit` and `_restore`, in the same call
    that replaces the canonical state.
    """

    def __init__(
        self,
        state: CourseState | None = None,
        store: StateStore | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.limits = ValidationLimits.from_settings(self.settings)
        self.store = store
        self.history: HistoryLog[HistoryRecord] = HistoryLog(self.settings.history_max_size)
        self.resolver = ReorderResolver()

        self._state = state or CourseState()
        self.name_index = NameIndex()
        self.containment = ContainmentIndex()
        self._rebuild_indexes()

    @classmethod
    def from_store(cls, store: StateStore, settings: Settings | None = None) -> CourseBuilder:
        """Create a builder seeded from persisted state (empty when absent)."""
        state = store.load()
        if state is not None:
            logger.info(f"Loaded {len(state.modules)} modules and {len(state.items)} items")
        return cls(state=state, store=store, settings=settings)

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def state(self) -> CourseState:
        return self._state

    @property
    def modules(self) -> tuple[Module, ...]:
        return self._state.modules

    @property
    def items(self) -> tuple[Item, ...]:
        return self._state.items

    def search(self, term: str) -> list[Module]:
        """Modules whose name contains `term`, via the name index."""
        return self.name_index.search(term)

    def filter_modules(self, term: str) -> list[Module]:
        """
        Modules matching a search box term, in canonical order.

        A module matches on its own name, or when one of its items matches by
        name or URL. A blank term matches everything.
        """
        if not term.strip():
            return list(self.modules)

        needle = term.lower()
        filtered = []
        for module in self.modules:
            if needle in module.name.lower():
                filtered.append(module)
                continue
            for item in self.containment.get(module.id):
                url = item.url if isinstance(item, LinkItem) else ""
                if needle in item.name.lower() or needle in url.lower():
                    filtered.append(module)
                    break
        return filtered

    def module_items(self, container_id: Optional[str]) -> list[Item]:
        return self.containment.get(container_id)

    def item_count(self, container_id: Optional[str]) -> int:
        return self.containment.count(container_id)

    def ordered_content(self) -> list[Union[Module, Item]]:
        """Export order: modules as arranged, then root-level items."""
        queue: OrderingQueue[Union[Module, Item]] = OrderingQueue()
        for module in self.modules:
            queue.enqueue(module, 0)
        for item in self.containment.get(ROOT_CONTAINER):
            queue.enqueue(item, 1)
        return queue.drain()

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    # =========================================================================
    # Module commands
    # =========================================================================

    def create_module(self, name: str) -> CommandResult:
        try:
            module = Module(id=new_id(), name=name.strip(), created_at=now_ms())
            self._check_module(module)
            if len(self.modules) >= self.settings.max_modules:
                raise CapacityError(f"A course holds at most {self.settings.max_modules} modules")
        except CourseBuilderError as e:
            return self._rejected("create module", e)

        new_state = CourseState(self.modules + (module,), self.items)
        record = self._commit(
            new_state,
            OperationType.SAVE_MODULE,
            {"module": module, "is_edit": False},
            patch=lambda: self.name_index.insert(module),
        )
        return CommandResult.success(SUCCESS_MESSAGES["MODULE_CREATED"], record)

    def edit_module(self, module_id: str, name: str) -> CommandResult:
        try:
            existing = self._require_module(module_id)
            module = replace(existing, name=name.strip())
            self._check_module(module)
        except CourseBuilderError as e:
            return self._rejected("edit module", e)

        if module == existing:
            return CommandResult.unchanged()

        modules = tuple(module if m.id == module_id else m for m in self.modules)
        record = self._commit(
            CourseState(modules, self.items),
            OperationType.SAVE_MODULE,
            {"module": module, "previous": existing, "is_edit": True},
        )
        return CommandResult.success(SUCCESS_MESSAGES["MODULE_UPDATED"], record)

    def delete_module(self, module_id: str) -> CommandResult:
        """Delete a module together with every item it contains."""
        try:
            module = self._require_module(module_id)
        except CourseBuilderError as e:
            return self._rejected("delete module", e)

        removed_items = self._state.container_items(module_id)
        new_state = CourseState(
            tuple(m for m in self.modules if m.id != module_id),
            tuple(i for i in self.items if i.module_id != module_id),
        )

        def patch() -> None:
            self.name_index = NameIndex(new_state.modules)
            self.containment.set(module_id, [])

        record = self._commit(
            new_state,
            OperationType.DELETE_MODULE,
            {"module_id": module_id, "module": module, "items": removed_items},
            patch=patch,
        )
        return CommandResult.success(SUCCESS_MESSAGES["MODULE_DELETED"], record)

    # =========================================================================
    # Item commands
    # =========================================================================

    def add_link(self, name: str, url: str, module_id: Optional[str] = ROOT_CONTAINER) -> CommandResult:
        item = LinkItem(
            id=new_id(),
            module_id=module_id,
            name=name.strip(),
            url=url.strip(),
            created_at=now_ms(),
        )
        return self._add_item(item, OperationType.ADD_LINK)

    def add_file(self, name: str, blob: FileBlob, module_id: Optional[str] = ROOT_CONTAINER) -> CommandResult:
        item = FileItem(
            id=new_id(),
            module_id=module_id,
            name=name.strip(),
            file_name=blob.file_name,
            file_size=blob.file_size,
            file_type=blob.file_type,
            file_url=blob.file_url,
            created_at=now_ms(),
        )
        return self._add_item(item, OperationType.ADD_FILE)

    def edit_item(
        self,
        item_id: str,
        name: str | None = None,
        url: str | None = None,
        blob: FileBlob | None = None,
    ) -> CommandResult:
        """Rename an item and/or replace its link target or file blob in place."""
        try:
            existing = self._require_item(item_id)
            changes: dict[str, Any] = {}
            if name is not None:
                changes["name"] = name.strip()
            if url is not None:
                if not isinstance(existing, LinkItem):
                    raise CourseBuilderError("Only link items have a URL")
                changes["url"] = url.strip()
            if blob is not None:
                if not isinstance(existing, FileItem):
                    raise CourseBuilderError("Only file items carry a file")
                changes.update(
                    file_name=blob.file_name,
                    file_size=blob.file_size,
                    file_type=blob.file_type,
                    file_url=blob.file_url,
                )
            item = replace(existing, **changes)
            self._check_item(item, exclude_id=item_id)
        except CourseBuilderError as e:
            return self._rejected("edit item", e)

        if item == existing:
            return CommandResult.unchanged()

        items = tuple(item if i.id == item_id else i for i in self.items)
        record = self._commit(
            CourseState(self.modules, items),
            OperationType.EDIT_ITEM,
            {"item_id": item_id, "updated_item": item, "previous": existing},
        )
        return CommandResult.success(SUCCESS_MESSAGES["ITEM_UPDATED"], record)

    def delete_item(self, item_id: str) -> CommandResult:
        try:
            item = self._require_item(item_id)
        except CourseBuilderError as e:
            return self._rejected("delete item", e)

        record = self._commit(
            CourseState(self.modules, tuple(i for i in self.items if i.id != item_id)),
            OperationType.DELETE_ITEM,
            {"item_id": item_id, "item": item},
            patch=lambda: self.containment.remove_item(item.module_id, item_id),
        )
        return CommandResult.success(SUCCESS_MESSAGES["ITEM_DELETED"], record)

    # =========================================================================
    # Drag and drop
    # =========================================================================

    def move(self, source: Endpoint, target: Endpoint) -> CommandResult:
        """
        Apply a completed drag gesture.

        Endpoints may be given as tagged DragEndpoints or as the UI's
        "module-<id>" / "item-<id>" / root drop zone tokens.
        """
        try:
            source = parse_endpoint(source) if isinstance(source, str) else source
            target = parse_endpoint(target) if isinstance(target, str) else target

            outcome = self.resolver.resolve(source, target, self._state)
            if outcome.rejected:
                raise outcome.error
            if not outcome.changed:
                return CommandResult.unchanged()

            destination = outcome.data.get("to_container")
            if (
                outcome.operation is OperationType.REORDER_ITEMS
                and outcome.data["from_container"] != destination
                and self.item_count(destination) >= self.settings.max_items_per_module
            ):
                raise CapacityError(
                    f"A container holds at most {self.settings.max_items_per_module} items"
                )
        except CourseBuilderError as e:
            return self._rejected("move", e)

        data = {"source": source.token, "target": target.token, **outcome.data}
        record = self._commit(outcome.state, outcome.operation, data)
        if outcome.operation is OperationType.REORDER_MODULES:
            return CommandResult.success(SUCCESS_MESSAGES["MODULES_REORDERED"], record)
        return CommandResult.success(SUCCESS_MESSAGES["ITEM_MOVED"], record)

    # =========================================================================
    # History
    # =========================================================================

    def undo(self) -> CommandResult:
        record = self.history.undo()
        if record is None:
            return CommandResult.unchanged("Nothing to undo")
        logger.info(f"Undoing operation: {record.type.value}")
        self._restore(record.before)
        return CommandResult(ok=True, message=f"Undid {record.type.value}", changed=True, record=record)

    def redo(self) -> CommandResult:
        record = self.history.redo()
        if record is None:
            return CommandResult.unchanged("Nothing to redo")
        logger.info(f"Redoing operation: {record.type.value}")
        self._restore(record.after)
        return CommandResult(ok=True, message=f"Redid {record.type.value}", changed=True, record=record)

    # =========================================================================
    # Internals
    # =========================================================================

    def _require_module(self, module_id: str) -> Module:
        module = self._state.find_module(module_id)
        if module is None:
            raise ReferentialError(f"Module {module_id} does not exist")
        return module

    def _require_item(self, item_id: str) -> Item:
        item = self._state.find_item(item_id)
        if item is None:
            raise ReferentialError(f"Item {item_id} does not exist")
        return item

    def _check_module(self, module: Module) -> None:
        violations = validate_module(module, self.limits)
        if violations:
            raise ValidationError(violations, subject="Module")
        if is_duplicate_module_name(self.modules, module.name, exclude_id=module.id):
            raise DuplicateNameError(module.name, is_module=True)

    def _check_item(self, item: Item, exclude_id: str | None = None) -> None:
        violations = validate_item(item, self.limits)
        if violations:
            raise ValidationError(violations, subject="Item")
        if item.module_id is not None:
            self._require_module(item.module_id)
        if is_duplicate_in_container(self.items, item.module_id, item.name, exclude_id=exclude_id):
            raise DuplicateNameError(item.name, item.module_id)

    def _add_item(self, item: Item, operation: OperationType) -> CommandResult:
        try:
            self._check_item(item)
            if self.item_count(item.module_id) >= self.settings.max_items_per_module:
                raise CapacityError(
                    f"A container holds at most {self.settings.max_items_per_module} items"
                )
        except CourseBuilderError as e:
            return self._rejected(f"add {item.type.value}", e)

        record = self._commit(
            CourseState(self.modules, self.items + (item,)),
            operation,
            {"item": item},
            patch=lambda: self.containment.add_item(item.module_id, item),
        )
        return CommandResult.success(SUCCESS_MESSAGES["ITEM_ADDED"], record)

    def _rejected(self, action: str, error: CourseBuilderError) -> CommandResult:
        logger.warning(f"Cannot {action}: {error}")
        return CommandResult.failure(error)

    def _commit(
        self,
        new_state: CourseState,
        operation: OperationType,
        data: dict[str, Any],
        patch: Callable[[], None] | None = None,
    ) -> HistoryRecord:
        """Replace canonical state, update indexes, record history, persist."""
        record = HistoryRecord(type=operation, data=data, before=self._state, after=new_state)
        self._state = new_state
        if patch is not None:
            patch()
        else:
            self._rebuild_indexes()
        self.history.push(record)
        logger.debug(f"Committed {operation.value}")
        self._persist()
        return record

    def _restore(self, state: CourseState) -> None:
        self._state = state
        self._rebuild_indexes()
        self._persist()

    def _rebuild_indexes(self) -> None:
        self.name_index = NameIndex(self._state.modules)
        self.containment = ContainmentIndex(self._state.items)

    def _persist(self) -> None:
        if self.store is None or not self.settings.auto_save:
            return
        try:
            self.store.save(self._state)
        except StorageError as e:
            logger.warning(f"{e}; continuing with in-memory state")
