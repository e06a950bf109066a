"""Reading and writing the project version in versioned files."""

from __future__ import annotations

from devflow.project.versioned_files import (
    get_project_version,
    get_version_from_file,
    set_project_version,
    update_version_file,
)

__all__ = [
    "get_project_version",
    "get_version_from_file",
    "set_project_version",
    "update_version_file",
]
