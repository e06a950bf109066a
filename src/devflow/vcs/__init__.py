"""Version control access."""

from __future__ import annotations

from devflow.vcs.git import GitRepository

__all__ = ["GitRepository"]
