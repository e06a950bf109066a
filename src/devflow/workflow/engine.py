"""Sequential workflow execution."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from devflow.config.models import (
    BumpVersion,
    Command,
    PrepareRelease,
    RebaseBranch,
    Release,
    SelectGitHubIssue,
    SelectIssueFromBranch,
    SelectJiraIssue,
    SwitchBranches,
    TransitionJiraIssue,
)
from devflow.exceptions import DevflowError, StepError
from devflow.workflow import steps
from devflow.workflow.state import WorkflowState

if TYPE_CHECKING:
    from devflow.config.models import Step, Workflow
    from devflow.workflow.state import StepContext

logger = logging.getLogger(__name__)


def run_step(step: Step, state: WorkflowState, ctx: StepContext) -> WorkflowState:
    """Dispatch a single step to its implementation."""
    match step:
        case SelectJiraIssue():
            return steps.select_jira_issue(step, state, ctx)
        case TransitionJiraIssue():
            return steps.transition_jira_issue(step, state, ctx)
        case SelectGitHubIssue():
            return steps.select_github_issue(step, state, ctx)
        case SelectIssueFromBranch():
            return steps.select_issue_from_branch(state, ctx)
        case SwitchBranches():
            return steps.switch_branches(state, ctx)
        case RebaseBranch():
            return steps.rebase_branch(step, state, ctx)
        case BumpVersion():
            return steps.bump_version(step, state, ctx)
        case Command():
            return steps.run_command(step, state, ctx)
        case PrepareRelease():
            return steps.prepare_release(step, state, ctx)
        case Release():
            return steps.release(state, ctx)
    raise AssertionError(f"unexpected step: {step!r}")


def run_workflow(workflow: Workflow, ctx: StepContext, state: WorkflowState | None = None) -> WorkflowState:
    """Run every step of *workflow* in order, stopping at the first failure.

    Raises:
        StepError: Naming the step that failed
    """
    state = state or WorkflowState()
    total = len(workflow.steps)
    for index, step in enumerate(workflow.steps, start=1):
        logger.info("[%d/%d] %s", index, total, step.type)
        try:
            state = run_step(step, state, ctx)
        except StepError as e:
            if e.step is None:
                e.step = step.type
            raise
        except DevflowError as e:
            raise StepError(str(e), step=step.type) from e
    return state
