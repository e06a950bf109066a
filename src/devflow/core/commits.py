"""Conventional commit classification and bump resolution.

This module parses commit messages following the
`Conventional Commits <https://www.conventionalcommits.org/>`_ format::

    <type>[(scope)][!]: <description>

    [body]

    [BREAKING CHANGE: <description>]

Classification never fails: messages that do not follow the format are
returned as :class:`Unconventional` so messy history can still be walked.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from devflow.core.version import BumpType, Version

_HEADER_RE = re.compile(
    r"^(?P<type>[a-z]+)(?:\((?P<scope>[^()\r\n]*)\))?(?P<breaking>!)?: (?P<description>.*)$"
)
_BREAKING_FOOTER_RE = re.compile(r"^(?:BREAKING CHANGE|BREAKING-CHANGE): (?P<text>\S.*)$")
# Any git trailer style footer ("Token: value" or "Token #value").
_FOOTER_RE = re.compile(r"^(?:BREAKING CHANGE|[A-Za-z][\w-]*)(?:: | #)")


class CommitType(Enum):
    """The closed set of commit types, plus UNKNOWN for anything else."""

    FEAT = "feat"
    FIX = "fix"
    CHORE = "chore"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    PERF = "perf"
    TEST = "test"
    BUILD = "build"
    CI = "ci"
    REVERT = "revert"
    UNKNOWN = "unknown"

    @classmethod
    def from_token(cls, token: str) -> CommitType | None:
        """Look up a header type token. Matching is case-sensitive."""
        try:
            commit_type = cls(token)
        except ValueError:
            return None
        return None if commit_type is cls.UNKNOWN else commit_type


@dataclass(frozen=True)
class Commit:
    """A raw commit as read from history."""

    sha: str
    message: str


@dataclass(frozen=True)
class ConventionalCommit:
    """A commit whose message follows the conventional commit format."""

    commit_type: CommitType
    description: str
    scope: str | None = None
    body: tuple[str, ...] = ()
    is_breaking: bool = False
    breaking_description: str | None = None
    sha: str = ""


@dataclass(frozen=True)
class Unconventional:
    """A commit whose message could not be classified."""

    raw_message: str
    sha: str = ""

    @property
    def commit_type(self) -> CommitType:
        return CommitType.UNKNOWN

    @property
    def is_breaking(self) -> bool:
        return False


ClassifiedCommit = ConventionalCommit | Unconventional


def classify(raw_message: str, sha: str = "") -> ClassifiedCommit:
    """Classify a raw commit message.

    Args:
        raw_message: Full commit message (header, optional body and footers)
        sha: Commit identifier, kept for traceability

    Returns:
        A :class:`ConventionalCommit`, or :class:`Unconventional` if the
        header does not match the grammar or uses an unknown type.
    """
    lines = raw_message.strip().splitlines()
    if not lines:
        return Unconventional(raw_message, sha)

    match = _HEADER_RE.match(lines[0].rstrip())
    if match is None:
        return Unconventional(raw_message, sha)

    commit_type = CommitType.from_token(match.group("type"))
    description = match.group("description").strip()
    if commit_type is None or not description:
        return Unconventional(raw_message, sha)

    scope = (match.group("scope") or "").strip() or None
    body_lines = lines[1:]
    footer = _breaking_footer(body_lines)
    is_breaking = match.group("breaking") is not None or footer is not None

    return ConventionalCommit(
        commit_type=commit_type,
        description=description,
        scope=scope,
        body=_paragraphs(body_lines),
        is_breaking=is_breaking,
        breaking_description=(footer or description) if is_breaking else None,
        sha=sha,
    )


def classify_commits(commits: Iterable[Commit]) -> list[ClassifiedCommit]:
    """Classify commits, preserving their order."""
    return [classify(commit.message, commit.sha) for commit in commits]


def _paragraphs(lines: list[str]) -> tuple[str, ...]:
    paragraphs: list[str] = []
    current: list[str] = []
    for line in lines:
        if line.strip():
            current.append(line.rstrip())
        elif current:
            paragraphs.append("\n".join(current))
            current = []
    if current:
        paragraphs.append("\n".join(current))
    return tuple(paragraphs)


def _breaking_footer(lines: list[str]) -> str | None:
    """Text of the first breaking-change footer, including continuation lines."""
    for index, line in enumerate(lines):
        match = _BREAKING_FOOTER_RE.match(line.rstrip())
        if match is None:
            continue
        parts = [match.group("text").strip()]
        for continuation in lines[index + 1 :]:
            if not continuation.strip() or _FOOTER_RE.match(continuation):
                break
            parts.append(continuation.strip())
        return " ".join(parts)
    return None


def bump_for_commit(commit: ClassifiedCommit, current_version: Version) -> BumpType:
    """The version bump a single commit calls for.

    Breaking changes bump MINOR instead of MAJOR while the major version is 0.
    """
    if commit.is_breaking:
        return BumpType.MAJOR if current_version.major >= 1 else BumpType.MINOR

    match commit.commit_type:
        case CommitType.FEAT:
            return BumpType.MINOR
        case CommitType.FIX | CommitType.PERF:
            return BumpType.PATCH
        case (
            CommitType.CHORE
            | CommitType.DOCS
            | CommitType.STYLE
            | CommitType.REFACTOR
            | CommitType.TEST
            | CommitType.BUILD
            | CommitType.CI
            | CommitType.REVERT
            | CommitType.UNKNOWN
        ):
            return BumpType.NONE


def resolve_bump(commits: Iterable[ClassifiedCommit], current_version: Version) -> BumpType:
    """Return the largest bump called for by any commit (NONE if there are none)."""
    return max((bump_for_commit(commit, current_version) for commit in commits), default=BumpType.NONE)
