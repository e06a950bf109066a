"""Pydantic models for devflow.toml.

Each workflow step is a model tagged by its ``type`` key; together they
form the :data:`Step` discriminated union.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _Model(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


# =============================================================================
# Steps
# =============================================================================


class SelectJiraIssue(_Model):
    """List Jira issues with a status and let the user pick one."""

    type: Literal["SelectJiraIssue"] = "SelectJiraIssue"
    status: str


class TransitionJiraIssue(_Model):
    """Move the selected Jira issue to a new status."""

    type: Literal["TransitionJiraIssue"] = "TransitionJiraIssue"
    status: str


class SelectGitHubIssue(_Model):
    """List open GitHub issues (optionally by label) and let the user pick one."""

    type: Literal["SelectGitHubIssue"] = "SelectGitHubIssue"
    labels: list[str] | None = None


class SelectIssueFromBranch(_Model):
    """Derive the selected issue from the current branch name."""

    type: Literal["SelectIssueFromBranch"] = "SelectIssueFromBranch"


class SwitchBranches(_Model):
    """Check out (or create) the branch for the selected issue."""

    type: Literal["SwitchBranches"] = "SwitchBranches"


class RebaseBranch(_Model):
    """Rebase the current branch onto ``to``."""

    type: Literal["RebaseBranch"] = "RebaseBranch"
    to: str


class BumpVersion(_Model):
    """Bump the project version by an explicit rule."""

    type: Literal["BumpVersion"] = "BumpVersion"
    rule: Literal["major", "minor", "patch", "pre"]
    label: str | None = None

    @model_validator(mode="after")
    def _label_for_pre(self) -> BumpVersion:
        if self.rule == "pre" and not self.label:
            raise ValueError("BumpVersion with rule 'pre' requires a label")
        return self


class Command(_Model):
    """Run a shell command, substituting workflow variables first."""

    type: Literal["Command"] = "Command"
    command: str
    variables: dict[str, Literal["Version", "IssueBranch"]] | None = None


class PrepareRelease(_Model):
    """Bump the version and write a changelog entry from conventional commits."""

    type: Literal["PrepareRelease"] = "PrepareRelease"
    changelog_path: Path | None = None
    prerelease_label: str | None = None


class Release(_Model):
    """Publish the prepared release as a GitHub release or a git tag."""

    type: Literal["Release"] = "Release"


Step = Annotated[
    SelectJiraIssue
    | TransitionJiraIssue
    | SelectGitHubIssue
    | SelectIssueFromBranch
    | SwitchBranches
    | RebaseBranch
    | BumpVersion
    | Command
    | PrepareRelease
    | Release,
    Field(discriminator="type"),
]

JIRA_STEPS = (SelectJiraIssue, TransitionJiraIssue)
VERSION_STEPS = (BumpVersion, PrepareRelease)


# =============================================================================
# Sections
# =============================================================================


class Workflow(_Model):
    """A named, ordered sequence of steps."""

    name: str
    steps: list[Step] = Field(min_length=1)


class PackageConfig(_Model):
    """Files that carry the project version, and the changelog location."""

    versioned_files: list[Path] = Field(default_factory=list)
    changelog: Path = Path("CHANGELOG.md")
    tag_prefix: str = "v"


class JiraConfig(_Model):
    """Jira Cloud instance and project key."""

    url: str
    project: str


class GitHubConfig(_Model):
    """GitHub repository (GitHub Enterprise via ``api_url``)."""

    owner: str
    repo: str
    api_url: str = "https://api.github.com"


class DevflowConfig(_Model):
    """Root of devflow.toml."""

    package: PackageConfig | None = None
    workflows: list[Workflow] = Field(min_length=1)
    jira: JiraConfig | None = None
    github: GitHubConfig | None = None

    @model_validator(mode="after")
    def _check_structure(self) -> DevflowConfig:
        problems = self.structural_problems()
        if problems:
            raise ValueError("; ".join(problems))
        return self

    def structural_problems(self) -> list[str]:
        """Cross-section checks that a single model cannot express."""
        problems: list[str] = []
        seen: set[str] = set()
        for workflow in self.workflows:
            if workflow.name in seen:
                problems.append(f"workflow {workflow.name!r} is defined more than once")
            seen.add(workflow.name)
            for step in workflow.steps:
                if isinstance(step, JIRA_STEPS) and self.jira is None:
                    problems.append(f"workflow {workflow.name!r}: {step.type} requires a [jira] section")
                if isinstance(step, SelectGitHubIssue) and self.github is None:
                    problems.append(f"workflow {workflow.name!r}: {step.type} requires a [github] section")
                if isinstance(step, VERSION_STEPS) and (self.package is None or not self.package.versioned_files):
                    problems.append(
                        f"workflow {workflow.name!r}: {step.type} requires [package] with versioned_files"
                    )
        return problems

    @property
    def workflow_names(self) -> list[str]:
        return [workflow.name for workflow in self.workflows]

    def get_workflow(self, name: str) -> Workflow | None:
        for workflow in self.workflows:
            if workflow.name == name:
                return workflow
        return None

    @property
    def effective_changelog_path(self) -> Path:
        return self.package.changelog if self.package else Path("CHANGELOG.md")

    @property
    def effective_tag_prefix(self) -> str:
        return self.package.tag_prefix if self.package else "v"
