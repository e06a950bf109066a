"""Release computation: classify history, resolve the bump, render the changelog."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Protocol, runtime_checkable

from devflow.core.changelog import ChangelogEntry, render_changelog
from devflow.core.commits import Commit, ConventionalCommit, Unconventional, classify_commits, resolve_bump
from devflow.core.version import BumpType, Version, next_prerelease


@runtime_checkable
class GitHistory(Protocol):
    """Read-only view of the repository history a release is computed from."""

    def commits_since_last_release(self) -> Sequence[Commit]:
        """Commits after the last stable version tag, oldest first."""
        ...

    def known_versions(self) -> Sequence[Version]:
        """Every version that has been tagged so far."""
        ...


@dataclass(frozen=True)
class ReleaseResult:
    """The outcome of a release computation that calls for a new version."""

    previous_version: Version
    next_version: Version
    bump: BumpType
    changelog_entry: ChangelogEntry
    commits_consumed: tuple[ConventionalCommit, ...]
    unconventional: tuple[Unconventional, ...] = ()


@dataclass(frozen=True)
class NoReleaseNeeded:
    """No commit since the last release warrants a new version.

    This is an expected outcome, not an error.
    """

    current_version: Version
    commits_examined: int
    unconventional: int = 0


def compute_release(
    history: GitHistory,
    current_version: Version | str,
    prerelease_label: str | None = None,
    *,
    release_date: date | None = None,
) -> ReleaseResult | NoReleaseNeeded:
    """Compute the next release from the commits since the last release.

    Args:
        history: Source of commits and previously released versions
        current_version: The project's current version
        prerelease_label: When set, produce ``<next>-<label>.<n>`` instead of a
            stable version. A label also forces a release when no commit
            calls for one.
        release_date: Date stamp for the changelog heading

    Returns:
        The :class:`ReleaseResult`, or :class:`NoReleaseNeeded`.

    Raises:
        InvalidVersionError: If *current_version* is not a semantic version.
        PrereleaseConflictError: If the pre-release counter cannot move forward.
    """
    if isinstance(current_version, str):
        current_version = Version.parse(current_version)

    commits = list(history.commits_since_last_release())
    classified = classify_commits(commits)
    conventional = tuple(c for c in classified if isinstance(c, ConventionalCommit))
    unconventional = tuple(c for c in classified if isinstance(c, Unconventional))

    bump = resolve_bump(classified, current_version)
    if bump is BumpType.NONE and not prerelease_label:
        return NoReleaseNeeded(
            current_version=current_version,
            commits_examined=len(classified),
            unconventional=len(unconventional),
        )

    next_version = current_version.bump(bump if bump is not BumpType.NONE else BumpType.PATCH)
    if prerelease_label:
        # The current version may be an untagged pre-release of the same base.
        known = [*history.known_versions(), current_version]
        next_version = next_prerelease(next_version, prerelease_label, known)

    entry = render_changelog(classified, next_version, release_date=release_date)
    return ReleaseResult(
        previous_version=current_version,
        next_version=next_version,
        bump=bump,
        changelog_entry=entry,
        commits_consumed=conventional,
        unconventional=unconventional,
    )
