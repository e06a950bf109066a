"""Issue tracker integration (Jira and GitHub)."""

from __future__ import annotations

from devflow.issues.github import GitHubClient
from devflow.issues.jira import JiraClient
from devflow.issues.models import Issue, branch_name_from_issue, issue_from_branch_name

__all__ = [
    "GitHubClient",
    "Issue",
    "JiraClient",
    "branch_name_from_issue",
    "issue_from_branch_name",
]
