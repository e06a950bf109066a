"""Typer application."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from devflow import __version__

app = typer.Typer(
    name="devflow",
    help="Run the development workflows declared in devflow.toml.",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"devflow {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.command()
def main(
    workflow: Optional[str] = typer.Argument(None, help="Name of the workflow to run"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would happen without changing anything"),
    validate: bool = typer.Option(False, "--validate", help="Validate devflow.toml and exit"),
    prerelease_label: Optional[str] = typer.Option(
        None,
        "--prerelease-label",
        envvar="DEVFLOW_PRERELEASE_LABEL",
        help="Prepare a pre-release with this label (e.g. rc)",
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to devflow.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit"
    ),
) -> None:
    """Run a workflow, or pick one interactively when no name is given."""
    from devflow.cli.commands.run import run_workflow_command

    _configure_logging(verbose)
    run_workflow_command(
        project_path=Path.cwd(),
        workflow_name=workflow,
        config_path=config,
        dry_run=dry_run,
        validate=validate,
        prerelease_label=prerelease_label,
        console=console,
        err_console=err_console,
    )
