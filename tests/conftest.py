"""Shared test fixtures: sample commits and temporary git repositories."""

from __future__ import annotations

import subprocess
import textwrap
from pathlib import Path

import pytest

from devflow.core.commits import Commit


def git(repo: Path, *args: str) -> str:
    result = subprocess.run(["git", *args], cwd=repo, capture_output=True, text=True, check=True)
    return result.stdout


def commit(repo: Path, message: str, filename: str = "file.txt") -> str:
    """Append to a file and commit it, returning the new SHA."""
    path = repo / filename
    with path.open("a") as f:
        f.write(message.splitlines()[0] + "\n")
    git(repo, "add", filename)
    git(repo, "commit", "-q", "-m", message)
    return git(repo, "rev-parse", "HEAD").strip()


@pytest.fixture
def feat_commit() -> Commit:
    return Commit(sha="feat1234567", message="feat: add user authentication")


@pytest.fixture
def fix_commit() -> Commit:
    return Commit(sha="fix1234567", message="fix(core): handle empty config")


@pytest.fixture
def breaking_commit() -> Commit:
    return Commit(
        sha="break123456",
        message="feat(api)!: drop v1 endpoints\n\nBREAKING CHANGE: v1 clients must migrate to v2",
    )


@pytest.fixture
def sample_commits(feat_commit: Commit, fix_commit: Commit, breaking_commit: Commit) -> list[Commit]:
    """A realistic history, oldest first."""
    return [
        feat_commit,
        Commit(sha="docs1234567", message="docs: update readme"),
        fix_commit,
        Commit(sha="chore123456", message="chore: bump dependencies"),
        breaking_commit,
        Commit(sha="wip12345678", message="WIP stuff"),
    ]


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """An initialised git repository with one commit on main."""
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q", "-b", "main")
    git(repo, "config", "user.email", "dev@example.com")
    git(repo, "config", "user.name", "Dev")
    git(repo, "config", "commit.gpgsign", "false")
    git(repo, "config", "tag.gpgsign", "false")
    commit(repo, "chore: initial commit")
    return repo


@pytest.fixture
def project_repo(git_repo: Path) -> Path:
    """A git repository with pyproject.toml at 1.2.3, tagged v1.2.3, and a devflow.toml."""
    (git_repo / "pyproject.toml").write_text(
        textwrap.dedent(
            """\
            [project]
            name = "demo"
            version = "1.2.3"  # keep in sync

            [project.urls]
            homepage = "https://example.com"
            """
        )
    )
    (git_repo / "devflow.toml").write_text(
        textwrap.dedent(
            """\
            [package]
            versioned_files = ["pyproject.toml"]
            changelog = "CHANGELOG.md"

            [[workflows]]
            name = "release"

            [[workflows.steps]]
            type = "PrepareRelease"

            [[workflows.steps]]
            type = "Release"

            [[workflows]]
            name = "echo"

            [[workflows.steps]]
            type = "Command"
            command = "echo version is VERSION"
            variables = { "VERSION" = "Version" }
            """
        )
    )
    git(git_repo, "add", "pyproject.toml", "devflow.toml")
    git(git_repo, "commit", "-q", "-m", "chore: add project files")
    git(git_repo, "tag", "-a", "v1.2.3", "-m", "Release 1.2.3")
    return git_repo
