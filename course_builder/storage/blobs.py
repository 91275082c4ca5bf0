"""
Blob collaborator: describes a user-selected file without reading it.
"""

from __future__ import annotations

import mimetypes
from pathlib import Path

from course_builder.content.models import FileBlob

DEFAULT_FILE_TYPE = "application/octet-stream"


def describe_file(path: Path) -> FileBlob:
    """
    Build blob metadata for a local file.

    Raises:
        FileNotFoundError: If the path does not point at a regular file
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Not a file: {path}")

    file_type, _ = mimetypes.guess_type(path.name)
    return FileBlob(
        file_name=path.name,
        file_size=path.stat().st_size,
        file_type=file_type or DEFAULT_FILE_TYPE,
        file_url=path.resolve().as_uri(),
    )
