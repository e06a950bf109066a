"""Git access through the ``git`` command line.

:class:`GitRepository` wraps the handful of git operations workflow steps
need and doubles as the :class:`~devflow.core.release.GitHistory` used to
compute releases.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from devflow.core.commits import Commit
from devflow.core.version import Version
from devflow.exceptions import GitError, InvalidVersionError

logger = logging.getLogger(__name__)

# Field and record separators for `git log` output.
_FS = "\x1f"
_RS = "\x1e"


class GitRepository:
    """A git working tree."""

    def __init__(self, path: Path | None = None, tag_prefix: str = "v") -> None:
        self.path = (path or Path.cwd()).resolve()
        self.tag_prefix = tag_prefix

    def _run(self, *args: str, timeout: int = 60) -> str:
        """Run a git command and return stdout. Raises GitError on failure."""
        logger.debug("git %s", " ".join(args))
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.path,
                capture_output=True,
                text=True,
                timeout=timeout,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as e:
            raise GitError("git is not installed or not on PATH") from e
        except subprocess.TimeoutExpired as e:
            raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}") from e

        if result.returncode != 0:
            stderr = result.stderr.strip()
            raise GitError(f"git {args[0]} failed: {stderr or 'exit code ' + str(result.returncode)}", stderr=stderr)
        return result.stdout

    # -- branches -------------------------------------------------------------

    def current_branch(self) -> str:
        name = self._run("rev-parse", "--abbrev-ref", "HEAD").strip()
        if name == "HEAD":
            raise GitError("Not on the tip of a branch (detached HEAD)")
        return name

    def is_dirty(self) -> bool:
        return bool(self._run("status", "--porcelain", "--untracked-files=no").strip())

    def list_branches(self) -> list[str]:
        output = self._run("for-each-ref", "--format=%(refname:short)", "refs/heads/")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def branch_exists(self, name: str) -> bool:
        return name in self.list_branches()

    def create_branch(self, name: str, base: str) -> None:
        self._run("branch", name, base)

    def switch_branch(self, name: str) -> None:
        if self.is_dirty():
            raise GitError("Uncommitted changes; commit or stash them before switching branches")
        self._run("checkout", name)

    def rebase_onto_head(self, branch: str) -> None:
        """Rebase *branch* onto the current HEAD and check *branch* out."""
        head = self._run("rev-parse", "HEAD").strip()
        self._run("rebase", head, branch)

    # -- tags -----------------------------------------------------------------

    def get_tags(self) -> list[str]:
        output = self._run("tag", "--list")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def version_tags(self) -> dict[str, Version]:
        """Tags named ``<tag_prefix><semver>``, mapped to their version."""
        versions: dict[str, Version] = {}
        for tag in self.get_tags():
            if not tag.startswith(self.tag_prefix):
                continue
            try:
                versions[tag] = Version.parse(tag[len(self.tag_prefix) :])
            except InvalidVersionError:
                logger.debug("Ignoring non-version tag %s", tag)
        return versions

    def get_latest_tag(self, *, stable_only: bool = True) -> str | None:
        """The tag of the highest version, optionally ignoring pre-releases."""
        candidates = {
            tag: version for tag, version in self.version_tags().items() if not (stable_only and version.is_prerelease)
        }
        if not candidates:
            return None
        return max(candidates, key=candidates.__getitem__)

    def tag_name(self, version: Version) -> str:
        return f"{self.tag_prefix}{version}"

    def create_tag(self, name: str, message: str) -> None:
        self._run("tag", "-a", name, "-m", message)

    # -- history --------------------------------------------------------------

    def get_commits_since_tag(self, tag: str | None) -> list[Commit]:
        """Commits reachable from HEAD but not from *tag*, oldest first."""
        revision = f"{tag}..HEAD" if tag else "HEAD"
        output = self._run("log", "--reverse", f"--format=%H{_FS}%B{_RS}", revision)
        commits = []
        for record in output.split(_RS):
            record = record.strip("\n")
            if not record:
                continue
            sha, _, message = record.partition(_FS)
            commits.append(Commit(sha=sha.strip(), message=message.strip()))
        return commits

    def commits_since_last_release(self) -> list[Commit]:
        tag = self.get_latest_tag(stable_only=True)
        if tag is None:
            logger.warning("No stable version tag found, processing all commits.")
        else:
            logger.debug("Processing all commits since tag %s", tag)
        return self.get_commits_since_tag(tag)

    def known_versions(self) -> list[Version]:
        return sorted(self.version_tags().values())

    # -- working tree ---------------------------------------------------------

    def add_files(self, paths: list[Path]) -> None:
        if paths:
            self._run("add", "--", *(str(p) for p in paths))

    def get_first_remote(self) -> str | None:
        remotes = self._run("remote").split()
        if not remotes:
            return None
        return self._run("remote", "get-url", remotes[0]).strip()
