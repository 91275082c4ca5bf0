"""
Integration test: an authoring session end to end.

Builds a course through CourseBuilder backed by a real StateStore, reorders it
with drag gestures, walks history back and forth, and reloads from disk.
"""

from course_builder.authoring.builder import CourseBuilder
from course_builder.content.errors import DuplicateNameError
from course_builder.content.models import FileBlob
from course_builder.storage.state_store import StateStore


def test_authoring_session(settings):
    store = StateStore(settings.state_file, settings.storage_key)
    builder = CourseBuilder.from_store(store, settings)

    algebra = builder.create_module("Algebra").record.data["module"]
    calculus = builder.create_module("Calculus").record.data["module"]
    syllabus = builder.add_link("Syllabus", "https://example.com/syllabus", algebra.id).record.data["item"]
    slides = builder.add_file(
        "Slides",
        FileBlob("slides.pdf", 2048, "application/pdf", "file:///tmp/slides.pdf"),
        algebra.id,
    ).record.data["item"]
    welcome = builder.add_link("Welcome", "https://example.com").record.data["item"]

    # Reorder within a module, then move across containers
    assert builder.move(f"item-{slides.id}", f"item-{syllabus.id}").ok
    assert [i.id for i in builder.module_items(algebra.id)] == [slides.id, syllabus.id]

    assert builder.move(f"item-{welcome.id}", f"module-{calculus.id}").ok
    assert builder.item_count(None) == 0

    assert builder.move(f"module-{calculus.id}", f"module-{algebra.id}").ok
    assert [m.name for m in builder.modules] == ["Calculus", "Algebra"]

    # A clashing name blocks the move without touching state
    builder.add_link("Syllabus", "https://other", calculus.id)
    before = builder.state
    rejected = builder.move(f"item-{syllabus.id}", f"module-{calculus.id}")
    assert isinstance(rejected.error, DuplicateNameError)
    assert builder.state is before

    # Walk back the last add and the module reorder, then redo one
    builder.undo()
    builder.undo()
    assert [m.name for m in builder.modules] == ["Algebra", "Calculus"]
    builder.redo()
    assert [m.name for m in builder.modules] == ["Calculus", "Algebra"]

    reloaded = CourseBuilder.from_store(StateStore(settings.state_file), settings)
    assert reloaded.state == builder.state
    assert [c.name for c in reloaded.ordered_content()] == ["Calculus", "Algebra"]
    assert [m.name for m in reloaded.search("calc")] == ["Calculus"]
    assert reloaded.can_undo() is False
