"""Semantic version parsing, precedence and increments.

Versions follow `SemVer 2.0 <https://semver.org>`_: ``major.minor.patch``
with an optional pre-release (``-rc.1``) and optional build metadata
(``+build.5``). Build metadata is carried along but ignored for
precedence and equality.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum
from functools import total_ordering

from devflow.exceptions import InvalidVersionError, PrereleaseConflictError

_IDENT = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_VERSION_RE = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    rf"(?:-(?P<prerelease>{_IDENT}(?:\.{_IDENT})*))?"
    r"(?:\+(?P<build>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)
_LABEL_RE = re.compile(r"^[0-9a-zA-Z-]*[a-zA-Z-][0-9a-zA-Z-]*$")


class BumpType(IntEnum):
    """Magnitude of a version increment, ordered ``NONE < PATCH < MINOR < MAJOR``."""

    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class PreRelease:
    """Dot-separated pre-release identifiers, e.g. ``rc.2`` -> ``("rc", 2)``."""

    identifiers: tuple[str | int, ...]

    @classmethod
    def parse(cls, text: str) -> PreRelease:
        parts: list[str | int] = []
        for part in text.split("."):
            parts.append(int(part) if part.isdigit() else part)
        return cls(tuple(parts))

    @property
    def label(self) -> str | None:
        """Leading alphanumeric identifier (``rc`` in ``rc.2``)."""
        first = self.identifiers[0]
        return first if isinstance(first, str) else None

    @property
    def counter(self) -> int | None:
        """Numeric counter of a ``<label>.<n>`` pre-release, else None."""
        if len(self.identifiers) == 2 and isinstance(self.identifiers[1], int):
            return self.identifiers[1]
        return None

    def sort_key(self) -> tuple[tuple[int, int, str], ...]:
        # Numeric identifiers sort below alphanumeric ones.
        return tuple((0, ident, "") if isinstance(ident, int) else (1, 0, ident) for ident in self.identifiers)

    def __str__(self) -> str:
        return ".".join(str(ident) for ident in self.identifiers)


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """An immutable semantic version."""

    major: int
    minor: int
    patch: int
    prerelease: PreRelease | None = None
    build: str | None = None

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a version string, accepting an optional leading ``v``.

        Raises:
            InvalidVersionError: If *text* is not a semantic version.
        """
        match = _VERSION_RE.match(text.strip())
        if match is None:
            raise InvalidVersionError(text)
        prerelease = match.group("prerelease")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=PreRelease.parse(prerelease) if prerelease else None,
            build=match.group("build"),
        )

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None

    @property
    def stable(self) -> Version:
        """The release version this version belongs to (no pre-release, no build)."""
        return Version(self.major, self.minor, self.patch)

    def bump(self, bump: BumpType) -> Version:
        """Apply a semantic version increment.

        A pre-release is promoted to its own release when the bump does not
        reach past it, so ``1.3.0-rc.1`` bumped by MINOR becomes ``1.3.0``.
        """
        if bump is BumpType.NONE:
            return self
        pre = self.is_prerelease
        if bump is BumpType.MAJOR:
            if pre and self.minor == 0 and self.patch == 0:
                return Version(self.major, 0, 0)
            return Version(self.major + 1, 0, 0)
        if bump is BumpType.MINOR:
            if pre and self.patch == 0:
                return Version(self.major, self.minor, 0)
            return Version(self.major, self.minor + 1, 0)
        if pre:
            return Version(self.major, self.minor, self.patch)
        return Version(self.major, self.minor, self.patch + 1)

    def with_prerelease(self, label: str, counter: int) -> Version:
        return Version(self.major, self.minor, self.patch, PreRelease((label, counter)))

    def _key(self) -> tuple:
        if self.prerelease is None:
            return (self.major, self.minor, self.patch, 1, ())
        return (self.major, self.minor, self.patch, 0, self.prerelease.sort_key())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease is not None:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text


def parse_version(text: str) -> Version:
    """Parse a version string. See :meth:`Version.parse`."""
    return Version.parse(text)


def next_prerelease(base: Version, label: str, known_versions: Iterable[Version]) -> Version:
    """Return the next ``<base>-<label>.<n>`` pre-release.

    The counter is one more than the highest counter already used for
    *label* on the same base version, starting at 1.

    Args:
        base: The stable version the pre-release leads up to.
        label: Pre-release label such as ``rc`` or ``beta``.
        known_versions: Every version released so far (typically from tags).

    Raises:
        InvalidVersionError: If *label* is not a valid pre-release identifier.
        PrereleaseConflictError: If the result would not sort above every
            known version sharing the same base.
    """
    base = base.stable
    if not _LABEL_RE.match(label):
        raise InvalidVersionError(f"{base}-{label}.1")

    same_base = [v for v in known_versions if v.stable == base]
    released = [v for v in same_base if not v.is_prerelease]
    if released:
        raise PrereleaseConflictError(f"Cannot create a {label} pre-release of {base}: {base} is already released")

    counters = [
        v.prerelease.counter
        for v in same_base
        if v.prerelease is not None and v.prerelease.label == label and v.prerelease.counter is not None
    ]
    candidate = base.with_prerelease(label, max(counters, default=0) + 1)

    if same_base:
        highest = max(same_base)
        if candidate <= highest:
            raise PrereleaseConflictError(
                f"Pre-release {candidate} would not be newer than the existing {highest}; "
                f"use a label that sorts after {highest.prerelease}"
            )
    return candidate
