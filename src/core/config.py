"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking into the CLI.
- Lets adapters (HTTP/Management API) read the same settings consistently.

Sources, highest priority first: init kwargs, `BLOCKCTL_*` environment
variables, `./.env`, then the per-user `.env` written by `blockctl doctor setup`.
The per-user path is resolved on every load, not at import.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import dotenv_values
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    DotEnvSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from core.domain.errors import ConfigurationError

ENV_PREFIX = "BLOCKCTL_"

_APP_DIR = "blockctl"


def get_user_config_dir() -> Path:
    """Per-user configuration directory: %APPDATA%, Application Support or XDG."""

    home = Path.home()
    if sys.platform.startswith("win"):
        return Path(os.environ.get("APPDATA") or home) / _APP_DIR
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / _APP_DIR
    return Path(os.environ.get("XDG_CONFIG_HOME") or home / ".config") / _APP_DIR


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def write_user_env_vars(values: dict[str, str | None]) -> Path:
    """Merge `values` into the per-user .env file; `None` values are ignored."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    merged: dict[str, str] = {}
    if env_path.exists():
        merged = {k: v for k, v in dotenv_values(env_path).items() if v is not None}
    merged.update({k: v for k, v in values.items() if v is not None})

    body = "".join(f"{key}={merged[key]}\n" for key in sorted(merged))
    env_path.write_text("# blockctl user config (.env)\n" + body, encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Application settings.

    Why pydantic-settings:
    - Typed and validated at the edge (env vars) without polluting the core.
    - A single configuration contract for the CLI and the adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        user_dotenv = DotEnvSettingsSource(settings_cls, env_file=get_user_env_file())
        return init_settings, env_settings, dotenv_settings, user_dotenv, file_secret_settings

    domain: str | None = Field(
        default=None,
        description="Tenant domain, e.g. 'travel0.us.auth0.com' (scheme optional).",
    )
    api_token: str | None = Field(
        default=None,
        repr=False,
        description="Management API access token (Bearer).",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="blockctl/0.1",
        min_length=1,
        description="User-Agent sent to the Management API.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level for the CLI (DEBUG, INFO, WARNING, ERROR).",
    )

    @field_validator("domain", "api_token")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.strip().upper() or "WARNING"

    def management_base_url(self) -> str | None:
        """Base URL of the Management API v2, or None when no domain is set."""

        if not self.domain:
            return None
        domain = self.domain.rstrip("/")
        if not domain.startswith(("http://", "https://")):
            domain = f"https://{domain}"
        return f"{domain}/api/v2/"


def load_settings(**overrides: object) -> AppSettings:
    """Build `AppSettings`, reporting invalid values as `ConfigurationError`."""

    try:
        return AppSettings(**overrides)
    except ValidationError as exc:
        problems = []
        for error in exc.errors():
            field = str(error["loc"][0]) if error.get("loc") else "settings"
            problems.append(f"{ENV_PREFIX}{field.upper()}: {error['msg']}")
        raise ConfigurationError("invalid configuration: " + "; ".join(problems)) from exc
