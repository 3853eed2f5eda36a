"""Tests for configuration loading."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from goldsignal.config import AppConfig, LoggingConfig, expand_env, load_config

ENV_VARS = [
    "BOT_TOKEN", "CHANNEL_ID", "TELEGRAM_API_ID", "TELEGRAM_API_HASH",
    "TELEGRAM_SESSION_PATH", "GOLD_API_KEY", "PORT", "LOG_LEVEL", "LOG_FORMAT",
    "GOLDSIGNAL_CONFIG",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the host environment and any .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_expand_env(monkeypatch):
    """Test placeholder substitution; values stay strings for pydantic to coerce."""
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("CHANNEL_ID", "-1003010980066")

    assert expand_env("${PORT}") == "8080"
    assert expand_env("${CHANNEL_ID}") == "-1003010980066"
    assert expand_env("${LOG_LEVEL:-DEBUG}") == "DEBUG"
    assert expand_env("${GOLD_API_KEY:-}") == ""
    assert expand_env("plain") == "plain"
    assert expand_env(30) == 30


def test_expand_env_nested(monkeypatch):
    """Test dicts and lists are expanded recursively."""
    monkeypatch.setenv("BOT_TOKEN", "123:abc")

    assert expand_env({"telegram": {"bot_token": "${BOT_TOKEN}"}, "ids": ["${PORT:-1}", 2]}) == {
        "telegram": {"bot_token": "123:abc"},
        "ids": ["1", 2],
    }


def test_expand_env_empty_value_uses_default(monkeypatch):
    """A variable set to an empty string falls back to the default, as in the shell."""
    monkeypatch.setenv("LOG_LEVEL", "")

    assert expand_env("${LOG_LEVEL:-INFO}") == "INFO"


def test_expand_env_empty_value_without_default(monkeypatch):
    """A set but empty variable without default expands to an empty string."""
    monkeypatch.setenv("BOT_TOKEN", "")

    assert expand_env("${BOT_TOKEN}") == ""


def test_expand_env_missing_var():
    """Test that a variable without default must be set."""
    with pytest.raises(ValueError):
        expand_env("${BOT_TOKEN}")


def test_empty_env_values_fall_back_to_defaults(monkeypatch):
    """Blank entries in .env do not break loading."""
    for name in ("PORT", "LOG_LEVEL", "LOG_FORMAT", "TELEGRAM_API_ID"):
        monkeypatch.setenv(name, "")

    config = load_config("missing.yaml")

    assert config.health.port == 3000
    assert config.logging.level == "INFO"
    assert config.logging.format == "json"
    assert config.telegram.api_id == 0


def test_defaults_when_file_missing(tmp_path, monkeypatch):
    """Without a config file the environment drives the defaults."""
    monkeypatch.setenv("BOT_TOKEN", "123:abc")
    monkeypatch.setenv("CHANNEL_ID", "-1003010980066")
    monkeypatch.setenv("TELEGRAM_API_ID", "12345")
    monkeypatch.setenv("TELEGRAM_API_HASH", "hash")

    config = load_config(str(tmp_path / "missing.yaml"))

    assert config.telegram.bot_token == "123:abc"
    assert config.telegram.channel_id == "-1003010980066"
    assert config.telegram.api_id == 12345
    assert config.telegram.session_path is None
    assert config.quote.api_key is None
    assert config.quote.fallback_price == Decimal("3375.0")
    assert config.health.port == 3000
    assert config.watcher.check_interval_seconds == 30
    assert config.pending_replies.ttl_seconds is None
    assert config.missing_required() == []


def test_missing_required():
    """Test required settings are reported by environment name."""
    config = load_config("missing.yaml")

    assert config.missing_required() == [
        "BOT_TOKEN", "CHANNEL_ID", "TELEGRAM_API_ID", "TELEGRAM_API_HASH"
    ]


def test_load_yaml_file(tmp_path, monkeypatch):
    """Test loading a YAML file with interpolation."""
    monkeypatch.setenv("GOLD_API_KEY", "goldapi-key")
    path = tmp_path / "config.yaml"
    path.write_text(
        "telegram:\n"
        "  bot_token: '123:abc'\n"
        "  channel_id: '@goldsignals'\n"
        "quote:\n"
        "  api_key: '${GOLD_API_KEY}'\n"
        "  timeout_seconds: 5\n"
        "watcher:\n"
        "  check_interval_seconds: 10\n"
        "pending_replies:\n"
        "  ttl_seconds: 600\n"
        "logging:\n"
        "  level: debug\n",
        encoding="utf-8",
    )

    config = load_config(str(path))

    assert config.telegram.channel_id == "@goldsignals"
    assert config.quote.api_key == "goldapi-key"
    assert config.quote.timeout_seconds == 5
    assert config.watcher.check_interval_seconds == 10
    assert config.pending_replies.ttl_seconds == 600
    assert config.logging.level == "DEBUG"


def test_config_path_from_environment(tmp_path, monkeypatch):
    """Test GOLDSIGNAL_CONFIG selects the file."""
    path = tmp_path / "custom.yaml"
    path.write_text("pair: 'XAUUSD'\n", encoding="utf-8")
    monkeypatch.setenv("GOLDSIGNAL_CONFIG", str(path))

    assert load_config().pair == "XAUUSD"


def test_invalid_yaml(tmp_path):
    """Test malformed YAML is reported as ValueError."""
    path = tmp_path / "bad.yaml"
    path.write_text("telegram: [unclosed\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(str(path))


def test_numeric_channel_id_kept_as_text():
    """Test numeric channel ids from YAML validate as strings."""
    config = AppConfig(telegram={"channel_id": -1003010980066})
    assert config.telegram.channel_id == "-1003010980066"


def test_invalid_log_level():
    """Test log level validation."""
    with pytest.raises(ValidationError):
        LoggingConfig(level="LOUD")
    with pytest.raises(ValidationError):
        LoggingConfig(format="xml")
