"""
Setup script for course-builder.

Course Builder is the authoring core behind a course content editor:
nested modules holding links and uploaded files, reordered by drag and drop.
It provides:

1. Content Index - name search over modules, items grouped by container
2. Mutation Engine - validated create/edit/delete with bounded undo/redo
3. Reorder Resolver - drag gestures between modules and the root level

The 'course-builder' command is the terminal front end.
"""

from setuptools import find_packages, setup

setup(
    name="course-builder",
    version="1.0.0",
    description="Content index and mutation engine for course authoring",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["course_builder", "course_builder.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "course-builder=course_builder.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
    ],
    keywords="course authoring content drag-and-drop undo education",
)
