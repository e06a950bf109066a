"""Core business logic for devflow.

This module contains the release building blocks:
- Version parsing, precedence and increments (SemVer 2.0)
- Conventional commit classification and bump resolution
- Changelog entry rendering
- Release computation over a read-only history

Nothing in here performs I/O beyond reading the supplied history.
"""

from __future__ import annotations

from devflow.core.changelog import (
    ChangelogEntry,
    ChangelogSection,
    format_commit_for_changelog,
    prepend_to_changelog,
    render_changelog,
)
from devflow.core.commits import (
    ClassifiedCommit,
    Commit,
    CommitType,
    ConventionalCommit,
    Unconventional,
    classify,
    classify_commits,
    resolve_bump,
)
from devflow.core.release import GitHistory, NoReleaseNeeded, ReleaseResult, compute_release
from devflow.core.version import BumpType, PreRelease, Version, next_prerelease, parse_version

__all__ = [
    # Version
    "BumpType",
    # Changelog
    "ChangelogEntry",
    "ChangelogSection",
    # Commits
    "ClassifiedCommit",
    "Commit",
    "CommitType",
    "ConventionalCommit",
    # Release
    "GitHistory",
    "NoReleaseNeeded",
    "PreRelease",
    "ReleaseResult",
    "Unconventional",
    "Version",
    "classify",
    "classify_commits",
    "compute_release",
    "format_commit_for_changelog",
    "next_prerelease",
    "parse_version",
    "prepend_to_changelog",
    "render_changelog",
    "resolve_bump",
]
