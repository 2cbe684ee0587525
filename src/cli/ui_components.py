"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Tables and the spinner are reused by several commands.
"""

from __future__ import annotations

from typing import Awaitable, TypeVar

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from core.domain.models import UserBlock

T = TypeVar("T")


def build_user_blocks_table(blocks: list[UserBlock]) -> Table:
    table = Table(title="User blocks")
    table.add_column("Identifier", style="cyan", no_wrap=True)
    table.add_column("IP", style="white")
    table.add_column("Connection", style="magenta")
    for block in blocks:
        table.add_row(block.identifier or "", block.ip or "", block.connection or "")
    return table


def print_user_blocks(console: Console, blocks: list[UserBlock]) -> None:
    if not blocks:
        console.print("[dim]No user blocks for user.[/dim]")
        return
    console.print(build_user_blocks_table(blocks))


async def run_with_spinner(console: Console, message: str, awaitable: Awaitable[T]) -> T:
    """Await `awaitable` behind a spinner.

    The result or exception of `awaitable` is passed through untouched. No
    spinner is drawn when the console is not a terminal.
    """

    if not console.is_terminal:
        return await awaitable
    with console.status(message, spinner="dots"):
        return await awaitable


def error_exit(console: Console, exc: BaseException) -> typer.Exit:
    """Print `exc` as an error line and return the exit-code-1 signal to raise."""

    console.print(f"[red]Error:[/red] {escape(str(exc))}", soft_wrap=True)
    return typer.Exit(code=1)
