"""Implementation of the workflow command.

Loads the configuration, resolves the workflow to run and executes it,
translating devflow errors into a diagnostic and exit code 1.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer
from rich.panel import Panel

from devflow.config import load_config
from devflow.exceptions import ConfigError, DevflowError
from devflow.vcs import GitRepository
from devflow.workflow import StepContext, run_workflow
from devflow.workflow.prompt import select_option

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console

    from devflow.config.models import DevflowConfig, Workflow


def run_workflow_command(
    project_path: Path,
    workflow_name: str | None,
    config_path: Path | None,
    dry_run: bool,
    validate: bool,
    prerelease_label: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the workflow command.

    Args:
        project_path: Project root (where devflow.toml lives)
        workflow_name: Workflow to run; prompt for one when None
        config_path: Explicit config file
        dry_run: Report instead of applying changes
        validate: Only validate the configuration
        prerelease_label: Pre-release label overriding PrepareRelease config
        console: Console for standard output
        err_console: Console for error output
    """
    try:
        config = load_config(project_path, config_path)
    except ConfigError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise typer.Exit(1) from e

    if validate:
        console.print(f"[green]✓[/] Configuration is valid ({len(config.workflows)} workflows)")
        return

    workflow = _resolve_workflow(config, workflow_name, console, err_console)

    mode_str = "[yellow]DRY-RUN[/]" if dry_run else "[green]RUNNING[/]"
    console.print(f"\n{mode_str} - workflow [cyan]{workflow.name}[/]\n")

    ctx = StepContext(
        config=config,
        project_path=project_path,
        git=GitRepository(project_path, tag_prefix=config.effective_tag_prefix),
        console=console,
        dry_run=dry_run,
        prerelease_label=prerelease_label,
        select=lambda options, prompt: select_option(options, prompt, console),
    )

    try:
        state = run_workflow(workflow, ctx)
    except DevflowError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1) from e

    if state.release is not None and not dry_run:
        console.print(
            Panel(
                f"[green]Prepared version {state.release.next_version}[/]",
                title="[green]Workflow Complete[/]",
                border_style="green",
            )
        )


def _resolve_workflow(
    config: DevflowConfig,
    name: str | None,
    console: Console,
    err_console: Console,
) -> Workflow:
    if name is None:
        name = select_option(config.workflow_names, "Select a workflow", console)

    workflow = config.get_workflow(name)
    if workflow is None:
        available = ", ".join(config.workflow_names)
        err_console.print(f"[red]Error:[/] No workflow named {name!r}. Available: {available}")
        raise typer.Exit(1)
    return workflow
