"""
Unit tests for the CourseBuilder command surface.

Each command is checked for its effect on canonical state, the derived
indexes, history and persistence, and for leaving all of them untouched
when it is rejected.
"""

import pytest
from loguru import logger

from course_builder.authoring.builder import CourseBuilder
from course_builder.content.constants import OperationType, SUCCESS_MESSAGES
from course_builder.content.errors import (
    CapacityError,
    DuplicateNameError,
    EndpointError,
    ReferentialError,
    StorageError,
    ValidationError,
)
from course_builder.content.models import CourseState, FileBlob, FileItem, LinkItem
from course_builder.dnd.endpoints import DragEndpoint
from course_builder.storage.state_store import StateStore


@pytest.fixture
def builder(settings):
    return CourseBuilder(settings=settings)


@pytest.fixture
def seeded(settings, algebra_course):
    return CourseBuilder(state=algebra_course, settings=settings)


@pytest.fixture
def blob():
    return FileBlob(
        file_name="notes.pdf",
        file_size=1024,
        file_type="application/pdf",
        file_url="file:///tmp/notes.pdf",
    )


class FailingStore(StateStore):
    def __init__(self):
        self.attempts = 0

    def load(self):
        return None

    def save(self, state):
        self.attempts += 1
        raise StorageError("disk full")


class TestModuleCommands:

    def test_create_module(self, builder):
        result = builder.create_module("  Algebra ")

        assert result.ok is True
        assert result.changed is True
        assert result.message == SUCCESS_MESSAGES["MODULE_CREATED"]
        module = builder.modules[0]
        assert module.name == "Algebra"
        assert builder.search("alg") == [module]
        assert builder.module_items(module.id) == []
        assert result.record.type is OperationType.SAVE_MODULE

    def test_create_module_empty_name(self, builder):
        result = builder.create_module("   ")

        assert result.ok is False
        assert isinstance(result.error, ValidationError)
        assert result.reasons == ["Module: Name is required"]
        assert builder.modules == ()
        assert builder.can_undo() is False

    def test_create_module_duplicate_name(self, seeded):
        before = seeded.state

        result = seeded.create_module("ALGEBRA")

        assert result.ok is False
        assert isinstance(result.error, DuplicateNameError)
        assert seeded.state is before
        assert len(seeded.history) == 0

    def test_create_module_name_too_long(self, builder, settings):
        result = builder.create_module("x" * (settings.module_name_max_length + 1))

        assert result.ok is False
        assert isinstance(result.error, ValidationError)

    def test_create_module_capacity(self, tmp_path):
        from config import Settings

        small = CourseBuilder(settings=Settings(state_file=tmp_path / "s.json", max_modules=1))
        small.create_module("One")

        result = small.create_module("Two")

        assert isinstance(result.error, CapacityError)
        assert len(small.modules) == 1

    def test_edit_module(self, seeded):
        result = seeded.edit_module("1", "Linear Algebra")

        assert result.ok is True
        assert seeded.state.find_module("1").name == "Linear Algebra"
        assert [m.name for m in seeded.search("linear")] == ["Linear Algebra"]
        assert seeded.search("algebra") == [seeded.state.find_module("1")]

    def test_edit_module_keeps_position(self, seeded):
        seeded.edit_module("1", "Zeta")

        assert [m.id for m in seeded.modules] == ["1", "2"]

    def test_edit_module_same_name_is_unchanged(self, seeded):
        result = seeded.edit_module("1", "Algebra")

        assert result.ok is True
        assert result.changed is False
        assert len(seeded.history) == 0

    def test_edit_module_case_change_allowed(self, seeded):
        result = seeded.edit_module("1", "ALGEBRA")

        assert result.ok is True
        assert seeded.state.find_module("1").name == "ALGEBRA"

    def test_edit_module_clashing_name(self, seeded):
        result = seeded.edit_module("1", "calculus")

        assert isinstance(result.error, DuplicateNameError)
        assert seeded.state.find_module("1").name == "Algebra"

    def test_edit_missing_module(self, seeded):
        result = seeded.edit_module("404", "Anything")

        assert isinstance(result.error, ReferentialError)

    def test_delete_module_cascades(self, seeded):
        seeded.add_link("Root link", "https://root")

        result = seeded.delete_module("1")

        assert result.ok is True
        assert [m.id for m in seeded.modules] == ["2"]
        assert seeded.state.find_item("a") is None
        assert seeded.module_items("1") == []
        assert seeded.item_count(None) == 1
        assert seeded.search("alg") == []
        assert [i.id for i in result.record.data["items"]] == ["a"]

    def test_delete_missing_module(self, seeded):
        before = seeded.state

        result = seeded.delete_module("404")

        assert isinstance(result.error, ReferentialError)
        assert seeded.state is before


class TestItemCommands:

    def test_add_link_to_module(self, seeded):
        result = seeded.add_link("Reading", "https://read", "2")

        assert result.ok is True
        item = result.record.data["item"]
        assert isinstance(item, LinkItem)
        assert item.module_id == "2"
        assert seeded.module_items("2") == [item]
        assert result.record.type is OperationType.ADD_LINK

    def test_add_link_to_root(self, builder):
        result = builder.add_link("Welcome", "https://welcome")

        assert result.ok is True
        assert builder.item_count(None) == 1

    def test_add_link_missing_url(self, builder):
        result = builder.add_link("Welcome", "  ")

        assert isinstance(result.error, ValidationError)
        assert result.reasons == ["Item: URL is required for link items"]
        assert builder.items == ()

    def test_add_link_malformed_url(self, builder):
        result = builder.add_link("Docs", "not a url at all")

        assert result.ok is False
        assert result.reasons == ["Item: Please enter a valid URL"]
        assert builder.items == ()
        assert len(builder.history) == 0

    def test_edit_item_malformed_url(self, seeded):
        result = seeded.edit_item("a", url="nope")

        assert isinstance(result.error, ValidationError)
        assert seeded.state.find_item("a").url == "https://x"

    def test_add_link_unknown_module(self, seeded):
        result = seeded.add_link("Reading", "https://read", "404")

        assert isinstance(result.error, ReferentialError)

    def test_add_link_duplicate_in_same_module(self, seeded):
        result = seeded.add_link(" syllabus ", "https://other", "1")

        assert isinstance(result.error, DuplicateNameError)
        assert seeded.item_count("1") == 1

    def test_same_name_allowed_in_other_container(self, seeded):
        assert seeded.add_link("Syllabus", "https://other", "2").ok is True
        assert seeded.add_link("Syllabus", "https://root").ok is True

    def test_add_file(self, seeded, blob):
        result = seeded.add_file("Notes", blob, "1")

        item = result.record.data["item"]
        assert isinstance(item, FileItem)
        assert item.file_name == "notes.pdf"
        assert item.file_size == 1024
        assert result.record.type is OperationType.ADD_FILE
        assert [i.id for i in seeded.module_items("1")] == ["a", item.id]

    def test_add_file_unsupported_type(self, builder):
        archive = FileBlob("bundle.zip", 10, "application/zip", "file:///tmp/bundle.zip")

        result = builder.add_file("Bundle", archive)

        assert result.reasons == ["Item: File type is not supported"]
        assert builder.items == ()

    def test_supported_types_come_from_settings(self, tmp_path):
        from config import Settings

        b = CourseBuilder(settings=Settings(state_file=tmp_path / "s.json", supported_file_extensions=["ZIP"]))

        result = b.add_file("Bundle", FileBlob("bundle.zip", 10, "application/zip", "file:///tmp/bundle.zip"))

        assert result.ok is True

    def test_add_file_too_large(self, builder, settings):
        huge = FileBlob("big.mp4", settings.file_size_max_mb * 1024 * 1024 + 1, "", "file:///big.mp4")

        result = builder.add_file("Big", huge)

        assert isinstance(result.error, ValidationError)

    def test_add_item_capacity(self, tmp_path):
        from config import Settings

        small = CourseBuilder(settings=Settings(state_file=tmp_path / "s.json", max_items_per_module=1))
        small.add_link("One", "https://1")

        result = small.add_link("Two", "https://2")

        assert isinstance(result.error, CapacityError)

    def test_edit_item_rename(self, seeded):
        result = seeded.edit_item("a", name="Course Syllabus")

        assert result.ok is True
        assert seeded.state.find_item("a").name == "Course Syllabus"
        assert seeded.module_items("1")[0].name == "Course Syllabus"

    def test_edit_item_url(self, seeded):
        seeded.edit_item("a", url="https://new")

        assert seeded.state.find_item("a").url == "https://new"

    def test_edit_item_replace_blob(self, settings, sample_file_item, blob):
        b = CourseBuilder(state=CourseState(items=(sample_file_item,)), settings=settings)

        result = b.edit_item("f1", blob=blob)

        assert result.ok is True
        updated = b.state.find_item("f1")
        assert updated.file_name == "notes.pdf"
        assert updated.name == "Lecture Slides"

    def test_edit_item_url_on_file_rejected(self, settings, sample_file_item):
        b = CourseBuilder(state=CourseState(items=(sample_file_item,)), settings=settings)

        result = b.edit_item("f1", url="https://x")

        assert result.ok is False

    def test_edit_item_rename_to_own_name_case(self, seeded):
        result = seeded.edit_item("a", name="SYLLABUS")

        assert result.ok is True

    def test_edit_item_clash(self, seeded):
        seeded.add_link("Reading", "https://read", "1")

        result = seeded.edit_item("a", name="reading")

        assert isinstance(result.error, DuplicateNameError)
        assert seeded.state.find_item("a").name == "Syllabus"

    def test_edit_item_no_change(self, seeded):
        result = seeded.edit_item("a", name="Syllabus")

        assert result.changed is False
        assert len(seeded.history) == 0

    def test_delete_item(self, seeded):
        result = seeded.delete_item("a")

        assert result.ok is True
        assert seeded.items == ()
        assert seeded.module_items("1") == []

    def test_delete_missing_item(self, seeded):
        assert isinstance(seeded.delete_item("zzz").error, ReferentialError)


class TestMove:

    def test_move_into_empty_module(self, seeded):
        result = seeded.move("item-a", "module-2")

        assert result.ok is True
        assert result.message == SUCCESS_MESSAGES["ITEM_MOVED"]
        assert seeded.state.find_item("a").module_id == "2"
        assert [i.id for i in seeded.module_items("2")] == ["a"]
        assert seeded.module_items("1") == []
        assert result.record.data["source"] == "item-a"

    def test_move_accepts_endpoints(self, seeded):
        result = seeded.move(DragEndpoint.item("a"), DragEndpoint.root_zone())

        assert result.ok is True
        assert seeded.state.find_item("a").module_id is None

    def test_reorder_modules(self, seeded):
        result = seeded.move("module-2", "module-1")

        assert result.message == SUCCESS_MESSAGES["MODULES_REORDERED"]
        assert [m.id for m in seeded.modules] == ["2", "1"]

    def test_move_duplicate_is_rejected(self, seeded):
        seeded.add_link("Syllabus", "https://other", "2")
        before = seeded.state
        history = len(seeded.history)

        result = seeded.move("item-a", "module-2")

        assert isinstance(result.error, DuplicateNameError)
        assert seeded.state is before
        assert len(seeded.history) == history

    def test_rejected_move_is_logged_once(self, seeded):
        seeded.add_link("Syllabus", "https://other", "2")
        warnings = []
        sink = logger.add(warnings.append, level="WARNING")
        try:
            seeded.move("item-a", "module-2")
        finally:
            logger.remove(sink)

        assert len(warnings) == 1
        assert "Cannot move" in warnings[0]

    def test_move_onto_itself_is_noop(self, seeded):
        result = seeded.move("item-a", "item-a")

        assert result.ok is True
        assert result.changed is False
        assert len(seeded.history) == 0

    def test_move_bad_token(self, seeded):
        result = seeded.move("item-", "module-2")

        assert isinstance(result.error, EndpointError)

    def test_move_capacity(self, tmp_path, algebra_course):
        from config import Settings

        small = CourseBuilder(
            state=algebra_course,
            settings=Settings(state_file=tmp_path / "s.json", max_items_per_module=1),
        )
        small.add_link("Other", "https://o", "2")

        result = small.move("item-a", "module-2")

        assert isinstance(result.error, CapacityError)
        assert small.state.find_item("a").module_id == "1"


class TestUndoRedo:

    def test_nothing_to_undo(self, builder):
        result = builder.undo()

        assert result.ok is True
        assert result.changed is False
        assert builder.redo().changed is False

    def test_undo_redo_create(self, builder):
        builder.create_module("Algebra")
        after = builder.state

        builder.undo()
        assert builder.modules == ()
        assert builder.search("alg") == []
        assert builder.can_redo() is True

        builder.redo()
        assert builder.state is after
        assert [m.name for m in builder.search("alg")] == ["Algebra"]

    def test_undo_delete_module_restores_items(self, seeded):
        seeded.delete_module("1")

        seeded.undo()

        assert seeded.state.find_item("a").module_id == "1"
        assert [i.id for i in seeded.module_items("1")] == ["a"]

    def test_undo_move(self, seeded):
        seeded.move("item-a", "module-2")

        seeded.undo()

        assert seeded.state.find_item("a").module_id == "1"

    def test_new_command_drops_redo(self, builder):
        builder.create_module("One")
        builder.create_module("Two")
        builder.undo()

        builder.create_module("Three")

        assert builder.can_redo() is False
        assert [m.name for m in builder.modules] == ["One", "Three"]

    def test_history_bounded(self, tmp_path):
        from config import Settings

        b = CourseBuilder(settings=Settings(state_file=tmp_path / "s.json", history_max_size=2))
        for name in ("One", "Two", "Three"):
            b.create_module(name)

        assert len(b.history) == 2
        b.undo()
        b.undo()
        assert b.can_undo() is False
        assert [m.name for m in b.modules] == ["One"]


class TestQueries:

    def test_filter_modules_blank_term(self, seeded):
        assert seeded.filter_modules("  ") == list(seeded.modules)

    def test_filter_modules_by_item_name_or_url(self, seeded):
        assert [m.id for m in seeded.filter_modules("sylla")] == ["1"]
        assert [m.id for m in seeded.filter_modules("https://x")] == ["1"]
        assert [m.id for m in seeded.filter_modules("calc")] == ["2"]
        assert seeded.filter_modules("nothing") == []

    def test_ordered_content(self, seeded):
        seeded.add_link("Welcome", "https://w")
        seeded.add_link("Schedule", "https://s")

        content = seeded.ordered_content()

        assert [getattr(c, "name") for c in content] == ["Algebra", "Calculus", "Welcome", "Schedule"]

    def test_search_at_module_capacity(self, builder, settings):
        for i in range(settings.max_modules):
            assert builder.create_module(f"Module {i:04d}").ok

        assert [m.name for m in builder.search("0999")] == ["Module 0999"]
        assert len(builder.search("module")) == settings.max_modules

    def test_indexes_rebuilt_from_initial_state(self, seeded):
        assert [m.name for m in seeded.search("a")] == ["Algebra", "Calculus"]
        assert seeded.item_count("1") == 1


class TestPersistence:

    def test_commands_persist_state(self, settings):
        store = StateStore(settings.state_file)
        b = CourseBuilder(store=store, settings=settings)
        b.create_module("Algebra")

        reloaded = CourseBuilder.from_store(store, settings)

        assert [m.name for m in reloaded.modules] == ["Algebra"]
        assert reloaded.search("alg")[0].name == "Algebra"

    def test_undo_persists(self, settings):
        store = StateStore(settings.state_file)
        b = CourseBuilder(store=store, settings=settings)
        b.create_module("Algebra")
        b.undo()

        assert store.load().modules == ()

    def test_auto_save_disabled(self, tmp_path):
        from config import Settings

        s = Settings(state_file=tmp_path / "s.json", auto_save=False)
        b = CourseBuilder(store=StateStore(s.state_file), settings=s)
        b.create_module("Algebra")

        assert not s.state_file.exists()

    def test_storage_failure_is_not_fatal(self, settings):
        store = FailingStore()
        b = CourseBuilder(store=store, settings=settings)

        result = b.create_module("Algebra")

        assert result.ok is True
        assert store.attempts == 1
        assert [m.name for m in b.modules] == ["Algebra"]
