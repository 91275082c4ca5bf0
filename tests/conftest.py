"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import Settings
from course_builder.content.models import CourseState, FileItem, LinkItem, Module


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (real state file)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def settings(tmp_path):
    """Settings isolated to a temporary state file."""
    return Settings(state_file=tmp_path / "state.json", history_max_size=50)


@pytest.fixture
def algebra_course():
    """Two modules, one link inside the first."""
    return CourseState(
        modules=(
            Module(id="1", name="Algebra", created_at=1),
            Module(id="2", name="Calculus", created_at=2),
        ),
        items=(
            LinkItem(id="a", module_id="1", name="Syllabus", url="https://x", created_at=3),
        ),
    )


@pytest.fixture
def sample_file_item():
    """A root-level uploaded file."""
    return FileItem(
        id="f1",
        module_id=None,
        name="Lecture Slides",
        file_name="slides.pdf",
        file_size=2048,
        file_type="application/pdf",
        file_url="file:///tmp/slides.pdf",
        created_at=4,
    )
