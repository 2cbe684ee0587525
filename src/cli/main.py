"""Root Typer application.

Why a thin root:
- Each command group lives in its own module (`users`, `doctor`).
- Logging is configured once here, before any subcommand runs.
"""

from __future__ import annotations

import typer

from cli.doctor import app as doctor_app
from cli.users_blocks import users_app
from core.config import load_settings
from core.domain.errors import ConfigurationError
from core.logging_config import configure_logging

app = typer.Typer(
    no_args_is_help=True,
    help="Administer brute-force protection blocks on user accounts.",
)
app.add_typer(users_app, name="users")
app.add_typer(doctor_app, name="doctor")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging on stderr."),
) -> None:
    # Invalid settings are reported by the subcommand; `doctor setup` must still run.
    try:
        level = load_settings().log_level
    except ConfigurationError:
        level = "WARNING"
    configure_logging("DEBUG" if verbose else level)


def run() -> None:
    app()
