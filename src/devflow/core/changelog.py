"""Changelog entry rendering.

Classified commits are grouped into sections and rendered as a markdown
entry in the `Keep a Changelog <https://keepachangelog.com/>`_ style::

    ## 1.3.0 (2024-01-01)

    ### Breaking Changes

    - [api] remove v1 endpoints (abc1234)
      - clients must migrate to /v2

    ### Features

    - add user export (def5678)

Rendering is pure: the same commits, version and date always produce the
same text.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from enum import Enum

from devflow.core.commits import ClassifiedCommit, CommitType, ConventionalCommit, Unconventional
from devflow.core.version import Version


class ChangelogSection(Enum):
    """Changelog sections, declared in rendering order."""

    BREAKING = "Breaking Changes"
    FEATURES = "Features"
    FIXES = "Fixes"
    OTHER = "Other"

    @property
    def title(self) -> str:
        return self.value


@dataclass(frozen=True)
class ChangelogEntry:
    """One rendered release entry."""

    version: Version
    release_date: date
    sections: dict[ChangelogSection, tuple[str, ...]] = field(default_factory=dict)
    text: str = ""

    @property
    def is_empty(self) -> bool:
        return not any(self.sections.values())

    @property
    def body(self) -> str:
        """The entry without its version heading (for release notes)."""
        _, _, rest = self.text.partition("\n")
        return rest.strip("\n")


def section_for(commit: ClassifiedCommit, *, include_other: bool = False) -> ChangelogSection | None:
    """The section a commit is listed under, or None if it is left out."""
    if isinstance(commit, Unconventional):
        return None
    if commit.is_breaking:
        return ChangelogSection.BREAKING
    if commit.commit_type is CommitType.FEAT:
        return ChangelogSection.FEATURES
    if commit.commit_type in (CommitType.FIX, CommitType.PERF):
        return ChangelogSection.FIXES
    return ChangelogSection.OTHER if include_other else None


def format_commit_for_changelog(commit: ConventionalCommit) -> str:
    """Format a commit as a markdown list item.

    Args:
        commit: The classified commit

    Returns:
        ``- [scope] description (sha)``, with the breaking description as an
        indented continuation when it adds information.
    """
    line = "- "
    if commit.scope:
        line += f"[{commit.scope}] "
    line += commit.description
    if commit.sha:
        line += f" ({commit.sha[:7]})"
    if commit.is_breaking and commit.breaking_description and commit.breaking_description != commit.description:
        line += f"\n  - {commit.breaking_description}"
    return line


def render_changelog(
    commits: Iterable[ClassifiedCommit],
    version: Version,
    *,
    release_date: date | None = None,
    include_other: bool = False,
) -> ChangelogEntry:
    """Render a changelog entry for *version*.

    Args:
        commits: Classified commits, oldest first
        version: The version being released
        release_date: Date stamp for the heading (defaults to today, UTC)
        include_other: Also list recognized commits that do not affect the version

    Returns:
        The structured entry, including its markdown text
    """
    if release_date is None:
        release_date = datetime.now(UTC).date()

    grouped: dict[ChangelogSection, list[str]] = {}
    for commit in commits:
        section = section_for(commit, include_other=include_other)
        if section is None or not isinstance(commit, ConventionalCommit):
            continue
        grouped.setdefault(section, []).append(format_commit_for_changelog(commit))

    sections = {section: tuple(grouped[section]) for section in ChangelogSection if section in grouped}

    lines = [f"## {version} ({release_date.isoformat()})"]
    for section, entries in sections.items():
        lines.append("")
        lines.append(f"### {section.title}")
        lines.append("")
        lines.extend(entries)

    return ChangelogEntry(
        version=version,
        release_date=release_date,
        sections=sections,
        text="\n".join(lines) + "\n",
    )


def prepend_to_changelog(existing: str, entry_text: str) -> str:
    """Insert a new entry above the newest entry of a changelog document.

    Any preamble before the first ``## `` heading is kept in place.
    """
    if not existing.strip():
        return f"# Changelog\n\n{entry_text}"

    lines = existing.splitlines(keepends=True)
    for index, line in enumerate(lines):
        if line.startswith("## "):
            return "".join(lines[:index]) + entry_text + "\n" + "".join(lines[index:])

    return existing.rstrip("\n") + "\n\n" + entry_text
