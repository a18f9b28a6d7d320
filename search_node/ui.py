"""Colorized console output for search-node commands.

Thin wrapper around :mod:`rich` that degrades gracefully when stdout
is not a TTY (e.g. piped, supervised by an init system).  All user-facing
status messages should flow through this module; ``logger.*`` calls are
kept for the node's operational log.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

# Shared console; force_terminal=None lets Rich decide.
console = Console(stderr=False, force_terminal=None)

_PASS = "[bold green]✓[/]"
_FAIL = "[bold red]✗[/]"
_WARN = "[bold yellow]⚠[/]"
_ARROW = "[bold cyan]›[/]"


def phase(title: str) -> None:
    """Print a bold phase header (e.g. ``SETTINGS``, ``START``)."""
    console.print()
    console.print(f"[bold blue]── {title} ──[/]")


def ok(msg: str) -> None:
    console.print(f"  {_PASS} {escape(msg)}")


def fail(msg: str) -> None:
    console.print(f"  {_FAIL} [red]{escape(msg)}[/]")


def warn(msg: str) -> None:
    console.print(f"  {_WARN} [yellow]{escape(msg)}[/]")


def step(msg: str) -> None:
    """Cyan arrow + action message (in-progress)."""
    console.print(f"  {_ARROW} {escape(msg)}")


def detail(key: str, value: object) -> None:
    """Key-value pair, indented."""
    console.print(f"    [bold]{key}[/]: {escape(str(value))}", highlight=False)


def error_msg(msg: str) -> None:
    """Bold red error message (not indented)."""
    console.print(f"[bold red]ERROR:[/] {escape(msg)}")
