"""Issue value type and branch-name conventions."""

from __future__ import annotations

import re
from dataclasses import dataclass

from devflow.exceptions import StepError


@dataclass(frozen=True)
class Issue:
    """An issue selected from Jira or GitHub."""

    key: str
    summary: str


# Characters and sequences git refuses in branch names.
_INVALID_REF_PARTS = re.compile(r"[\s~^:?*\[\\]+|\.{2,}|@\{")


def branch_name_from_issue(issue: Issue) -> str:
    """``FLOW-5`` + ``A test issue`` -> ``FLOW-5-a-test-issue``.

    Characters git rejects in ref names are replaced by dashes.
    """
    name = _INVALID_REF_PARTS.sub("-", f"{issue.key}-{issue.summary.lower()}")
    name = re.sub(r"-{2,}", "-", name).rstrip("-.")
    return name.removesuffix(".lock")


def issue_from_branch_name(name: str) -> Issue:
    """Recover the issue from a branch created by :func:`branch_name_from_issue`.

    Accepts GitHub style (``42-some-summary``) and Jira style
    (``PROJ-123-some-summary``) names.

    Raises:
        StepError: If the name follows neither convention
    """
    parts = name.split("-")
    if parts[0].isdigit():
        return Issue(key=parts[0], summary="-".join(parts[1:]))
    if len(parts) >= 2 and parts[1].isdigit():
        return Issue(key="-".join(parts[:2]), summary="-".join(parts[2:]))
    raise StepError(f"Branch name {name!r} does not start with an issue key")
