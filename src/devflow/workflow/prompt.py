"""Interactive prompts used by workflow steps."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.prompt import IntPrompt, Prompt

from devflow.exceptions import StepError

if TYPE_CHECKING:
    from collections.abc import Sequence


def select_option(options: Sequence[str], prompt: str, console: Console | None = None) -> str:
    """Show a numbered list and return the option the user picks."""
    if not options:
        raise StepError("There is nothing to select from")
    console = console or Console()
    for index, option in enumerate(options, start=1):
        console.print(f"  [cyan]{index}[/] {option}")
    choice = IntPrompt.ask(
        prompt,
        console=console,
        choices=[str(i) for i in range(1, len(options) + 1)],
        show_choices=False,
    )
    return options[choice - 1]


def ask_value(prompt: str, secret: bool = False) -> str:
    """Ask for a single value, hiding input for secrets."""
    return Prompt.ask(prompt, password=secret)
