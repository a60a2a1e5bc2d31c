"""Tests for settings validation and database URL handling."""
import pytest
from pydantic import ValidationError

from revenue_bot.core.config import Settings, normalise_database_url


def _settings(**overrides) -> Settings:
    values = {
        "DISCORD_BOT_TOKEN": "token",
        "DISCORD_CLIENT_ID": "123",
        "STRIPE_SECRET_KEY": "sk_test_123",
        "DATABASE_URL": "postgres://u:p@db.example.com:5432/bot",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_complete_settings_have_nothing_missing():
    assert _settings().missing_required() == []


def test_blank_values_are_reported_missing():
    settings = _settings(DISCORD_CLIENT_ID=None, STRIPE_SECRET_KEY="   ")
    assert settings.missing_required() == ["DISCORD_CLIENT_ID", "STRIPE_SECRET_KEY"]


@pytest.mark.parametrize("offset", [-13, 15])
def test_timezone_offset_is_bounded(offset):
    with pytest.raises(ValidationError):
        _settings(TIMEZONE_OFFSET_HOURS=offset)


def test_optional_discord_ids_parse_as_ints():
    settings = _settings(DISCORD_GUILD_ID="42", DISCORD_REQUIRED_ROLE_ID="1446621063088701471")
    assert settings.DISCORD_GUILD_ID == 42
    assert settings.DISCORD_REQUIRED_ROLE_ID == 1446621063088701471


def test_client_id_parses_as_int():
    assert _settings().DISCORD_CLIENT_ID == 123


def test_blank_env_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "token")
    monkeypatch.setenv("DISCORD_CLIENT_ID", "123")
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db.example.com:5432/bot")
    monkeypatch.setenv("DISCORD_GUILD_ID", "")
    monkeypatch.setenv("DISCORD_REQUIRED_ROLE_ID", "")
    monkeypatch.setenv("TIMEZONE_OFFSET_HOURS", "")

    settings = Settings(_env_file=None)

    assert settings.DISCORD_GUILD_ID is None
    assert settings.DISCORD_REQUIRED_ROLE_ID is None
    assert settings.TIMEZONE_OFFSET_HOURS == 0
    assert settings.missing_required() == []


@pytest.mark.parametrize("url, expected", [
    ("postgres://u:p@host:5432/db", "postgresql+asyncpg://u:p@host:5432/db"),
    ("postgresql://u:p@host/db", "postgresql+asyncpg://u:p@host/db"),
    ("postgresql+asyncpg://u:p@host/db", "postgresql+asyncpg://u:p@host/db"),
    ("postgres://u:p@host/db?sslmode=require", "postgresql+asyncpg://u:p@host/db"),
    ("postgres://u:p@host/db?sslmode=require&application_name=bot", "postgresql+asyncpg://u:p@host/db?application_name=bot"),
    ("", ""),
])
def test_normalise_database_url(url, expected):
    assert normalise_database_url(url) == expected


def test_async_database_url_property():
    assert _settings().async_database_url == "postgresql+asyncpg://u:p@db.example.com:5432/bot"
