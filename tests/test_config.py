from __future__ import annotations

import pytest

from core.config import AppSettings, get_user_env_file, load_settings, write_user_env_vars
from core.domain.errors import ConfigurationError


@pytest.fixture
def user_config(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    return tmp_path / "blockctl" / ".env"


def test_write_user_env_vars_merges_existing_values(user_config):
    write_user_env_vars({"BLOCKCTL_DOMAIN": "old.auth0.com", "BLOCKCTL_LOG_LEVEL": "INFO"})
    path = write_user_env_vars({"BLOCKCTL_DOMAIN": "travel0.us.auth0.com", "BLOCKCTL_API_TOKEN": "tok"})

    assert path == user_config == get_user_env_file()
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("#")
    assert lines[1:] == [
        "BLOCKCTL_API_TOKEN=tok",
        "BLOCKCTL_DOMAIN=travel0.us.auth0.com",
        "BLOCKCTL_LOG_LEVEL=INFO",
    ]


@pytest.mark.parametrize(
    "domain,expected",
    [
        ("travel0.us.auth0.com", "https://travel0.us.auth0.com/api/v2/"),
        ("https://travel0.us.auth0.com/", "https://travel0.us.auth0.com/api/v2/"),
        ("http://localhost:8080", "http://localhost:8080/api/v2/"),
        ("  ", None),
        (None, None),
    ],
)
def test_management_base_url(domain, expected):
    settings = AppSettings(_env_file=None, domain=domain)

    assert settings.management_base_url() == expected


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("BLOCKCTL_DOMAIN", "env.auth0.com")
    monkeypatch.setenv("BLOCKCTL_API_TOKEN", "secret")
    monkeypatch.setenv("BLOCKCTL_LOG_LEVEL", "debug")

    settings = AppSettings(_env_file=None)

    assert settings.domain == "env.auth0.com"
    assert settings.api_token == "secret"
    assert settings.log_level == "DEBUG"
    assert "secret" not in repr(settings)


def test_load_settings_turns_validation_errors_into_configuration_error(monkeypatch):
    monkeypatch.setenv("BLOCKCTL_HTTP_TIMEOUT_SECONDS", "0")

    with pytest.raises(ConfigurationError) as info:
        load_settings(_env_file=None)

    assert "BLOCKCTL_HTTP_TIMEOUT_SECONDS" in str(info.value)


def test_user_env_file_is_resolved_when_settings_load(monkeypatch, tmp_path, user_config):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("BLOCKCTL_DOMAIN", raising=False)
    write_user_env_vars({"BLOCKCTL_DOMAIN": "late.auth0.com"})

    assert load_settings().domain == "late.auth0.com"


def test_environment_overrides_user_env_file(monkeypatch, tmp_path, user_config):
    monkeypatch.chdir(tmp_path)
    write_user_env_vars({"BLOCKCTL_DOMAIN": "file.auth0.com"})
    monkeypatch.setenv("BLOCKCTL_DOMAIN", "env.auth0.com")

    assert load_settings().domain == "env.auth0.com"
