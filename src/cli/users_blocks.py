"""`users blocks` commands: list and clear brute-force protection blocks."""

from __future__ import annotations

import asyncio
import signal
from typing import Awaitable, Callable, TypeVar

import typer
from rich.console import Console

from adapters.json_exporter import dump_user_blocks_json
from adapters.management_api import ManagementAPIClient
from cli.ui_components import error_exit, print_user_blocks, run_with_spinner
from core.config import AppSettings, load_settings
from core.context import CancelContext
from core.domain.errors import BlockAdminError
from core.domain.models import UserBlock
from core.services.block_admin import list_user_blocks, unblock_users

T = TypeVar("T")

users_app = typer.Typer(no_args_is_help=True, help="Manage users.")
blocks_app = typer.Typer(
    no_args_is_help=True,
    help="Manage brute-force protection user blocks.",
)
users_app.add_typer(blocks_app, name="blocks")

_console = Console()
_err_console = Console(stderr=True)

_IDENTIFIER_PROMPT = "User ID, username, email or phone number"


def build_blocks_api(settings: AppSettings, context: CancelContext) -> ManagementAPIClient:
    return ManagementAPIClient(settings, context=context)


def _non_empty(value: str) -> str:
    value = value.strip()
    if not value:
        raise typer.BadParameter("identifier must not be empty")
    return value


def _ask_identifier() -> str:
    return typer.prompt(_IDENTIFIER_PROMPT, value_proc=_non_empty)


def _run(main: Callable[[CancelContext], Awaitable[T]]) -> T:
    """Run `main` in a fresh event loop with Ctrl+C wired to cancellation."""

    async def _runner() -> T:
        context = CancelContext()
        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, context.cancel, "interrupted")
            installed = True
        except (NotImplementedError, RuntimeError, ValueError):
            # Windows event loops and non-main threads.
            installed = False
        try:
            return await main(context)
        finally:
            if installed:
                loop.remove_signal_handler(signal.SIGINT)

    return asyncio.run(_runner())


def _fail(exc: BaseException) -> typer.Exit:
    return error_exit(_err_console, exc)


def _load_settings() -> AppSettings:
    try:
        return load_settings()
    except BlockAdminError as exc:
        raise _fail(exc) from exc


@blocks_app.command("list")
def list_blocks(
    identifier: str | None = typer.Argument(
        None,
        help="User ID, username, email or phone number.",
        show_default=False,
    ),
    json_output: bool = typer.Option(False, "--json", help="Output in json format."),
) -> None:
    """List brute-force protection blocks for a given user.

    Examples:

      blockctl users blocks list "auth0|61b5b6e90783fa19f7c57dad"

      blockctl users blocks list "frederik@travel0.com" --json
    """

    if not identifier:
        identifier = _ask_identifier()
    settings = _load_settings()

    async def _list(context: CancelContext) -> list[UserBlock]:
        async with build_blocks_api(settings, context) as api:
            return await run_with_spinner(_err_console, "Loading user blocks...", list_user_blocks(api, identifier))

    try:
        blocks = _run(_list)
    except BlockAdminError as exc:
        raise _fail(exc) from exc

    if json_output:
        typer.echo(dump_user_blocks_json(blocks))
        return
    print_user_blocks(_console, blocks)


@blocks_app.command("unblock")
def unblock(
    identifiers: list[str] | None = typer.Argument(
        None,
        help="User IDs, usernames, emails or phone numbers.",
        show_default=False,
    ),
) -> None:
    """Remove brute-force protection blocks for users.

    Examples:

      blockctl users blocks unblock "auth0|61b5b6e90783fa19f7c57dad"

      blockctl users blocks unblock "frederik@travel0.com" "poovam@travel0.com"
    """

    targets = list(identifiers or [])
    if not any(targets):
        targets = [_ask_identifier()]
    settings = _load_settings()

    async def _unblock(context: CancelContext) -> None:
        async with build_blocks_api(settings, context) as api:
            result = await run_with_spinner(_err_console, "Unblocking user(s)...", unblock_users(api, targets))
        result.raise_for_failures()

    try:
        _run(_unblock)
    except BlockAdminError as exc:
        raise _fail(exc) from exc

    attempted = [t for t in targets if t]
    _console.print(f"[green]Unblocked {len(attempted)} user(s).[/green]")
