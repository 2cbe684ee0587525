"""Doctor commands: environment diagnostics and configuration setup."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.http_client import build_async_client
from cli.ui_components import error_exit
from core.config import AppSettings, load_settings, write_user_env_vars
from core.domain.errors import ConfigurationError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()
_err_console = Console(stderr=True)


async def _check_http(settings: AppSettings, url: str) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
    except Exception as exc:
        return False, str(exc)
    return response.is_success, f"HTTP {response.status_code}"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        raise error_exit(_err_console, exc) from exc

    table = Table(title="blockctl doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    base_url = settings.management_base_url()
    if base_url:
        table.add_row("Domain", "OK", base_url)
    else:
        table.add_row("Domain", "FAIL", "Set BLOCKCTL_DOMAIN or run `blockctl doctor setup`")

    if settings.api_token:
        table.add_row("API token", "OK", "Token configured")
    else:
        table.add_row("API token", "FAIL", "Set BLOCKCTL_API_TOKEN or run `blockctl doctor setup`")

    ok_http = False
    if base_url:
        tenant_root = base_url.removesuffix("api/v2/")
        ok_http, detail_http = asyncio.run(_check_http(settings, f"{tenant_root}.well-known/openid-configuration"))
        table.add_row("Tenant connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not (base_url and settings.api_token and ok_http):
        raise typer.Exit(code=1)


@app.command()
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    current_domain = ""
    try:
        current_domain = load_settings().domain or ""
    except ConfigurationError as exc:
        _err_console.print(f"[yellow]Note:[/yellow] {escape(str(exc))}", soft_wrap=True)

    domain = typer.prompt("Tenant domain", default=current_domain, show_default=bool(current_domain)).strip()
    api_token = typer.prompt("Management API token", hide_input=True).strip()

    if not domain or not api_token:
        raise typer.BadParameter("domain and token are required")

    env_path = write_user_env_vars(
        {
            "BLOCKCTL_DOMAIN": domain,
            "BLOCKCTL_API_TOKEN": api_token,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
