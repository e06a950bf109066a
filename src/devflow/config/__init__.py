"""Configuration management for devflow."""

from __future__ import annotations

from devflow.config.loader import load_config
from devflow.config.models import (
    BumpVersion,
    Command,
    DevflowConfig,
    GitHubConfig,
    JiraConfig,
    PackageConfig,
    PrepareRelease,
    RebaseBranch,
    Release,
    SelectGitHubIssue,
    SelectIssueFromBranch,
    SelectJiraIssue,
    Step,
    SwitchBranches,
    TransitionJiraIssue,
    Workflow,
)

__all__ = [
    "BumpVersion",
    "Command",
    "DevflowConfig",
    "GitHubConfig",
    "JiraConfig",
    "PackageConfig",
    "PrepareRelease",
    "RebaseBranch",
    "Release",
    "SelectGitHubIssue",
    "SelectIssueFromBranch",
    "SelectJiraIssue",
    "Step",
    "SwitchBranches",
    "TransitionJiraIssue",
    "Workflow",
    "load_config",
]
