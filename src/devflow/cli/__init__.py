"""Command line interface for devflow."""

from __future__ import annotations

from devflow.cli.app import app

__all__ = ["app"]
