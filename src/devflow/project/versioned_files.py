"""Version manipulation in pyproject.toml, Cargo.toml and package.json.

Versions are located and replaced with targeted regular expressions
rather than a full parse-and-rewrite, so formatting and comments survive.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from devflow.core.version import Version
from devflow.exceptions import ProjectError, VersionNotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

_VERSION_LINE = r'^(version\s*=\s*)["\']([^"\']+)["\']'

# TOML tables that may hold the version, per file name, in lookup order.
_TOML_SECTIONS: dict[str, tuple[str, ...]] = {
    "pyproject.toml": (r"\[project\]", r"\[tool\.poetry\]"),
    "Cargo.toml": (r"\[package\]",),
}
_JSON_VERSION = r'("version"\s*:\s*)"([^"]+)"'


def _section_pattern(header: str) -> str:
    # The whole table up to the next header or EOF.
    return rf"^{header}[ \t]*$.*?(?=^\[|\Z)"


def _check_supported(file_path: Path) -> None:
    if file_path.name not in _TOML_SECTIONS and file_path.name != "package.json":
        raise ProjectError(
            f"Unsupported versioned file: {file_path.name}. "
            "Supported files are pyproject.toml, Cargo.toml and package.json."
        )
    if not file_path.is_file():
        raise ProjectError(f"Versioned file not found: {file_path}")


def get_version_from_file(file_path: Path) -> str:
    """Read the version string from a versioned file.

    Args:
        file_path: Path to pyproject.toml, Cargo.toml or package.json

    Returns:
        Version string

    Raises:
        VersionNotFoundError: If no version can be found
        ProjectError: If the file is missing or unsupported
    """
    _check_supported(file_path)
    content = file_path.read_text()

    if file_path.name == "package.json":
        match = re.search(_JSON_VERSION, content, re.MULTILINE)
        if match:
            return match.group(2)
    else:
        for header in _TOML_SECTIONS[file_path.name]:
            section = re.search(_section_pattern(header), content, re.MULTILINE | re.DOTALL)
            if section is None:
                continue
            match = re.search(_VERSION_LINE, section.group(0), re.MULTILINE)
            if match:
                return match.group(2)

    raise VersionNotFoundError(f"Could not find version in {file_path}")


def update_version_file(file_path: Path, new_version: str) -> None:
    """Replace the version in a versioned file, preserving formatting.

    Raises:
        VersionNotFoundError: If no version can be found
        ProjectError: If the file is missing or unsupported
    """
    _check_supported(file_path)
    content = file_path.read_text()

    if file_path.name == "package.json":
        new_content, count = re.subn(
            _JSON_VERSION, rf'\g<1>"{new_version}"', content, count=1, flags=re.MULTILINE
        )
        if count:
            file_path.write_text(new_content)
            return
        raise VersionNotFoundError(f"Could not find version to update in {file_path}")

    def replace_in_section(match: re.Match[str]) -> str:
        return re.sub(_VERSION_LINE, rf'\g<1>"{new_version}"', match.group(0), count=1, flags=re.MULTILINE)

    for header in _TOML_SECTIONS[file_path.name]:
        section = re.search(_section_pattern(header), content, re.MULTILINE | re.DOTALL)
        if section is None or not re.search(_VERSION_LINE, section.group(0), re.MULTILINE):
            continue
        new_content = re.sub(
            _section_pattern(header), replace_in_section, content, count=1, flags=re.MULTILINE | re.DOTALL
        )
        file_path.write_text(new_content)
        return

    raise VersionNotFoundError(f"Could not find version to update in {file_path}")


def get_project_version(root: Path, versioned_files: Sequence[Path]) -> Version:
    """The project version, which every versioned file must agree on.

    Raises:
        ProjectError: If no files are declared or the files disagree
        InvalidVersionError: If the version is not semantic versioning
    """
    if not versioned_files:
        raise ProjectError("No versioned files are configured")

    found = {path: get_version_from_file(root / path) for path in versioned_files}
    distinct = set(found.values())
    if len(distinct) > 1:
        listing = ", ".join(f"{path} has {version}" for path, version in found.items())
        raise ProjectError(f"Versioned files disagree: {listing}")
    return Version.parse(distinct.pop())


def set_project_version(root: Path, versioned_files: Sequence[Path], version: Version) -> list[Path]:
    """Write *version* into every versioned file and return the paths written."""
    written = []
    for path in versioned_files:
        update_version_file(root / path, str(version))
        written.append(path)
    return written
