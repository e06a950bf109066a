"""Exception hierarchy for devflow.

All errors raised by devflow derive from :class:`DevflowError` so the CLI
can render them uniformly.
"""

from __future__ import annotations


class DevflowError(Exception):
    """Base class for all devflow errors."""


# Configuration


class ConfigError(DevflowError):
    """Configuration could not be loaded."""


class ConfigNotFoundError(ConfigError):
    """No devflow.toml was found."""


class ConfigValidationError(ConfigError):
    """devflow.toml is malformed or fails validation."""

    def __init__(self, message: str, problems: list[str] | None = None) -> None:
        self.problems = problems or []
        if self.problems:
            message = message + "\n" + "\n".join(f"  - {p}" for p in self.problems)
        super().__init__(message)


# Versions


class VersionError(DevflowError):
    """Base class for version computation errors."""


class InvalidVersionError(VersionError):
    """A version string is not valid semantic versioning."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Invalid semantic version: {text!r}")


class PrereleaseConflictError(VersionError):
    """A pre-release cannot be placed after the versions already released."""


# Project files


class ProjectError(DevflowError):
    """A versioned file could not be read or written."""


class VersionNotFoundError(ProjectError):
    """No version was found in a versioned file."""


class ChangelogError(DevflowError):
    """The changelog could not be updated."""


# External collaborators


class GitError(DevflowError):
    """git is unavailable or returned an error."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        self.stderr = stderr
        super().__init__(message)


class IssueTrackerError(DevflowError):
    """Communication with Jira or GitHub failed."""


# Workflow steps


class StepError(DevflowError):
    """A workflow step failed."""

    def __init__(self, message: str, step: str | None = None) -> None:
        self.step = step
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        return f"{self.step}: {message}" if self.step else message


class NoIssueSelectedError(StepError):
    """A step needs an issue but none was selected earlier in the workflow."""

    def __init__(self, step: str | None = None) -> None:
        super().__init__(
            "No issue selected. Run SelectJiraIssue, SelectGitHubIssue or "
            "SelectIssueFromBranch before this step.",
            step=step,
        )


class ReleaseNotPreparedError(StepError):
    """Release ran without a prepared release or readable project version."""


class NotConfiguredError(StepError):
    """A step needs a config section that is missing."""


class CommandError(StepError):
    """A Command step exited with a non-zero status."""

    def __init__(self, command: str, returncode: int, step: str | None = None) -> None:
        self.command = command
        self.returncode = returncode
        super().__init__(f"Command {command!r} exited with status {returncode}", step=step)
