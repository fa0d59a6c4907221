"""Rich formatting helpers for the Tether CLI.

Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:
    from tether.conversation.models import ToolStep

SEPARATOR = "------------"
GREETING = 'Hi! How can I help you today? (write "quit" to exit)'
FAREWELL = "Thanks for using me! I am quitting now."


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def format_separator(console: Console) -> None:
    console.print(SEPARATOR, highlight=False)


def format_answer(text: str, console: Console) -> None:
    """Display the model's answer followed by a separator."""
    console.print(escape(text), highlight=False)
    format_separator(console)


def format_tool_step(step: ToolStep, console: Console) -> None:
    """Display a one-line summary of a tool round-trip."""
    status = "[green]ok[/green]" if step.outcome.success else "[red]error[/red]"
    console.print(
        f"[dim]tool #{step.round}: {escape(step.tool_call.name)} -> {status}[/dim]",
        highlight=False,
    )


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
