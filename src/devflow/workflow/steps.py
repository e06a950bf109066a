"""Implementations of the workflow step vocabulary.

Every step function takes the step's config, the current
:class:`WorkflowState` and the :class:`StepContext`, and returns the next
state. In dry-run mode a step reports what it would do instead of doing it.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import replace
from typing import TYPE_CHECKING

from devflow.core.changelog import prepend_to_changelog
from devflow.core.release import NoReleaseNeeded, compute_release
from devflow.core.version import BumpType, Version, next_prerelease
from devflow.exceptions import (
    ChangelogError,
    CommandError,
    NoIssueSelectedError,
    NotConfiguredError,
    ReleaseNotPreparedError,
)
from devflow.issues import Issue, branch_name_from_issue, issue_from_branch_name
from devflow.project import get_project_version, set_project_version

if TYPE_CHECKING:
    from pathlib import Path

    from devflow.config.models import (
        BumpVersion,
        Command,
        PackageConfig,
        PrepareRelease,
        RebaseBranch,
        SelectGitHubIssue,
        SelectJiraIssue,
        TransitionJiraIssue,
    )
    from devflow.core.release import ReleaseResult
    from devflow.workflow.state import StepContext, WorkflowState

logger = logging.getLogger(__name__)

_DRY_RUN_ISSUE = Issue(key="123", summary="Fake Issue")


def _require_issue(state: WorkflowState) -> Issue:
    if state.issue is None:
        raise NoIssueSelectedError()
    return state.issue


def _require_package(ctx: StepContext) -> PackageConfig:
    package = ctx.config.package
    if package is None or not package.versioned_files:
        raise NotConfiguredError("No versioned files configured; add [package] versioned_files")
    return package


# =============================================================================
# Issues
# =============================================================================


def select_jira_issue(step: SelectJiraIssue, state: WorkflowState, ctx: StepContext) -> WorkflowState:
    if ctx.dry_run:
        ctx.report(f"Would query Jira for issues with status {step.status!r} and prompt for a selection")
        return replace(state, issue=_DRY_RUN_ISSUE)

    issues = ctx.get_jira().search(step.status)
    return replace(state, issue=_pick_issue(issues, ctx))


def transition_jira_issue(step: TransitionJiraIssue, state: WorkflowState, ctx: StepContext) -> WorkflowState:
    issue = _require_issue(state)
    if ctx.dry_run:
        ctx.report(f"Would transition {issue.key} to {step.status!r}")
        return state

    ctx.get_jira().transition(issue.key, step.status)
    ctx.report(f"[green]✓[/] Transitioned {issue.key} to {step.status}")
    return state


def select_github_issue(step: SelectGitHubIssue, state: WorkflowState, ctx: StepContext) -> WorkflowState:
    if ctx.dry_run:
        labels = f" labelled {', '.join(step.labels)}" if step.labels else ""
        ctx.report(f"Would query GitHub for open issues{labels} and prompt for a selection")
        return replace(state, issue=_DRY_RUN_ISSUE)

    issues = ctx.get_github().list_issues(step.labels)
    return replace(state, issue=_pick_issue(issues, ctx))


def _pick_issue(issues: list[Issue], ctx: StepContext) -> Issue:
    if not issues:
        raise NoIssueSelectedError()
    options = [f"{issue.key}: {issue.summary}" for issue in issues]
    choice = ctx.select(options, "Select an issue")
    return issues[options.index(choice)]


def select_issue_from_branch(state: WorkflowState, ctx: StepContext) -> WorkflowState:
    branch = ctx.git.current_branch()
    issue = issue_from_branch_name(branch)
    ctx.report(f"Selected issue {issue.key} from branch {branch}")
    return replace(state, issue=issue)


# =============================================================================
# Branches
# =============================================================================


def switch_branches(state: WorkflowState, ctx: StepContext) -> WorkflowState:
    issue = _require_issue(state)
    name = branch_name_from_issue(issue)
    if ctx.dry_run:
        ctx.report(f"Would switch to or create a branch named {name}")
        return state

    if ctx.git.branch_exists(name):
        ctx.report(f"Found existing branch named {name}, switching to it.")
    else:
        ctx.report(f"Creating a new branch called {name}")
        base = ctx.select(ctx.git.list_branches(), "Which branch do you want to base off of?")
        ctx.git.create_branch(name, base)
    ctx.git.switch_branch(name)
    return state


def rebase_branch(step: RebaseBranch, state: WorkflowState, ctx: StepContext) -> WorkflowState:
    if ctx.dry_run:
        ctx.report(f"Would rebase current branch onto {step.to}")
        return state

    ctx.git.rebase_onto_head(step.to)
    ctx.report(f"Rebased current branch onto {step.to}")
    ctx.report(f"Switched to branch {step.to}, don't forget to push!")
    return state


# =============================================================================
# Versions and releases
# =============================================================================


def bump_version(step: BumpVersion, state: WorkflowState, ctx: StepContext) -> WorkflowState:
    package = _require_package(ctx)
    current = get_project_version(ctx.project_path, package.versioned_files)

    if step.rule == "pre":
        base = current.stable if current.is_prerelease else current.bump(BumpType.PATCH)
        known = [*ctx.git.known_versions(), current]
        new_version = next_prerelease(base, step.label or "", known)
    else:
        new_version = current.bump(BumpType[step.rule.upper()])

    if ctx.dry_run:
        ctx.report(f"Would bump version from {current} to {new_version}")
        return state

    set_project_version(ctx.project_path, package.versioned_files, new_version)
    ctx.report(f"[green]✓[/] Bumped version from {current} to {new_version}")
    return state


def prepare_release(step: PrepareRelease, state: WorkflowState, ctx: StepContext) -> WorkflowState:
    package = _require_package(ctx)
    current = get_project_version(ctx.project_path, package.versioned_files)
    label = ctx.prerelease_label or step.prerelease_label

    outcome = compute_release(ctx.git, current, label)
    if isinstance(outcome, NoReleaseNeeded):
        ctx.report(
            f"[yellow]No release needed:[/] none of the {outcome.commits_examined} commits since "
            f"the last release call for a new version (current version {outcome.current_version})."
        )
        return replace(state, nothing_to_release=True)

    if outcome.unconventional:
        logger.info("%d commits are not conventional commits and were ignored", len(outcome.unconventional))

    changelog_path = step.changelog_path or package.changelog
    if ctx.dry_run:
        ctx.report(f"Would bump version from {outcome.previous_version} to {outcome.next_version} ({outcome.bump})")
        ctx.report(f"Would add the following to {changelog_path}:")
        ctx.console.print(outcome.changelog_entry.text, markup=False, highlight=False)
        return replace(state, release=outcome)

    written = set_project_version(ctx.project_path, package.versioned_files, outcome.next_version)
    _write_changelog(ctx.project_path / changelog_path, outcome)
    ctx.git.add_files([*written, changelog_path])
    ctx.report(f"[green]✓[/] Prepared release {outcome.next_version}")
    return replace(state, release=outcome)


def _write_changelog(path: Path, release: ReleaseResult) -> None:
    try:
        existing = path.read_text() if path.exists() else ""
        path.write_text(prepend_to_changelog(existing, release.changelog_entry.text))
    except OSError as e:
        raise ChangelogError(f"Could not update {path}: {e}") from e


def release(state: WorkflowState, ctx: StepContext) -> WorkflowState:
    prepared = state.release
    if prepared is None:
        if state.nothing_to_release:
            ctx.report("Nothing to release, skipping.")
            return state
        raise ReleaseNotPreparedError("PrepareRelease needs to run before Release")

    version = prepared.next_version
    tag = ctx.git.tag_name(version)
    if ctx.config.github is not None:
        if ctx.dry_run:
            ctx.report(f"Would create GitHub release {tag}")
            return state
        url = ctx.get_github().create_release(
            tag, name=tag, body=prepared.changelog_entry.body, prerelease=version.is_prerelease
        )
        ctx.report(f"[green]✓[/] Created GitHub release {tag} {url}".rstrip())
        return state

    if ctx.dry_run:
        ctx.report(f"Would create git tag {tag}")
        return state
    ctx.git.create_tag(tag, f"Release {version}")
    ctx.report(f"[green]✓[/] Created tag {tag}, don't forget to push it!")
    return state


# =============================================================================
# Commands
# =============================================================================


def run_command(step: Command, state: WorkflowState, ctx: StepContext) -> WorkflowState:
    command = step.command
    for placeholder, variable in (step.variables or {}).items():
        command = command.replace(placeholder, _variable_value(variable, state, ctx))

    if ctx.dry_run:
        ctx.report(f"Would run {command}")
        return state

    logger.debug("Running command: %s", command)
    result = subprocess.run(command, shell=True, cwd=ctx.project_path, check=False)
    if result.returncode != 0:
        raise CommandError(command, result.returncode)
    return state


def _variable_value(variable: str, state: WorkflowState, ctx: StepContext) -> str:
    if variable == "IssueBranch":
        return branch_name_from_issue(_require_issue(state))
    return str(_current_version(state, ctx))


def _current_version(state: WorkflowState, ctx: StepContext) -> Version:
    if state.release is not None:
        return state.release.next_version
    package = _require_package(ctx)
    return get_project_version(ctx.project_path, package.versioned_files)
