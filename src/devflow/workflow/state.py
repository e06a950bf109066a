"""Workflow state and the context steps run in."""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from devflow.config.models import DevflowConfig
from devflow.core.release import ReleaseResult
from devflow.exceptions import NotConfiguredError
from devflow.issues import GitHubClient, Issue, JiraClient
from devflow.vcs import GitRepository
from devflow.workflow.prompt import ask_value, select_option


@dataclass(frozen=True)
class WorkflowState:
    """Values carried from one step to the next.

    Steps never mutate a state; they return a new one.
    """

    issue: Issue | None = None
    release: ReleaseResult | None = None
    nothing_to_release: bool = False


@dataclass
class StepContext:
    """Everything a step needs besides the state."""

    config: DevflowConfig
    project_path: Path
    git: GitRepository
    console: Console = field(default_factory=Console)
    dry_run: bool = False
    prerelease_label: str | None = None
    select: Callable[[Sequence[str], str], str] = select_option
    ask: Callable[[str, bool], str] = ask_value
    env: Mapping[str, str] = field(default_factory=lambda: os.environ)
    jira: JiraClient | None = None
    github: GitHubClient | None = None

    def _credential(self, env_var: str, prompt: str) -> str:
        return self.env.get(env_var) or self.ask(prompt, True)

    def get_jira(self) -> JiraClient:
        """The Jira client, created on first use from [jira] and credentials."""
        if self.jira is None:
            if self.config.jira is None:
                raise NotConfiguredError("Jira is not configured; add a [jira] section")
            self.jira = JiraClient(
                self.config.jira.url,
                self.config.jira.project,
                email=self.env.get("DEVFLOW_JIRA_EMAIL") or self.ask("Jira email", False),
                token=self._credential("DEVFLOW_JIRA_TOKEN", "Jira API token"),
            )
        return self.jira

    def get_github(self) -> GitHubClient:
        """The GitHub client, created on first use from [github] and GITHUB_TOKEN."""
        if self.github is None:
            if self.config.github is None:
                raise NotConfiguredError("GitHub is not configured; add a [github] section")
            self.github = GitHubClient(
                self.config.github.owner,
                self.config.github.repo,
                token=self._credential("GITHUB_TOKEN", "GitHub token"),
                api_url=self.config.github.api_url,
            )
        return self.github

    def report(self, message: str) -> None:
        self.console.print(message)
