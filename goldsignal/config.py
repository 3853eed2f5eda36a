"""Configuration models and loading.

This module contains Pydantic models for configuration validation and
the YAML loader with environment variable interpolation.
"""

import os
import re
from decimal import Decimal
from typing import Any, Dict, List, Optional

import structlog
import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_PATH = "config/config.yaml"

ENV_PLACEHOLDER = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>[^}]*))?\}")

# Used when no config file exists, same layout as config/config.yaml
DEFAULT_CONFIG: Dict[str, Any] = {
    "pair": "XAUUSD (Gold)",
    "telegram": {
        "bot_token": "${BOT_TOKEN:-}",
        "channel_id": "${CHANNEL_ID:-}",
        "api_id": "${TELEGRAM_API_ID:-0}",
        "api_hash": "${TELEGRAM_API_HASH:-}",
        "session_path": "${TELEGRAM_SESSION_PATH:-}",
    },
    "quote": {
        "api_key": "${GOLD_API_KEY:-}",
    },
    "health": {
        "port": "${PORT:-3000}",
    },
    "logging": {
        "level": "${LOG_LEVEL:-INFO}",
        "format": "${LOG_FORMAT:-json}",
    },
}


class TelegramConfig(BaseModel):
    """Telegram bot configuration."""
    bot_token: str = ""
    channel_id: str = ""
    api_id: int = 0
    api_hash: str = ""
    session_path: Optional[str] = None

    @field_validator("bot_token", "channel_id", "api_hash", mode="before")
    @classmethod
    def validate_text(cls, v: Any) -> str:
        """Accept numeric values from YAML or the environment."""
        return "" if v is None else str(v).strip()

    @field_validator("api_id", mode="before")
    @classmethod
    def validate_api_id(cls, v: Any) -> int:
        """Treat an empty API id as unset."""
        if v in (None, ""):
            return 0
        return v

    @field_validator("session_path")
    @classmethod
    def validate_session_path(cls, v: Optional[str]) -> Optional[str]:
        """Use an in-memory session when no path is given."""
        return v or None


class QuoteConfig(BaseModel):
    """Quote provider configuration."""
    api_key: Optional[str] = None
    url: str = "https://www.goldapi.io/api/XAU/USD"
    timeout_seconds: float = Field(default=8.0, gt=0)
    fallback_price: Decimal = Field(default=Decimal("3375.0"), gt=0)

    @field_validator("api_key", mode="before")
    @classmethod
    def validate_api_key(cls, v: Any) -> Optional[str]:
        """Treat an empty key as missing."""
        return str(v) if v not in (None, "") else None


class WatcherConfig(BaseModel):
    """Milestone watcher configuration."""
    check_interval_seconds: float = Field(default=30.0, gt=0)


class PendingRepliesConfig(BaseModel):
    """Prompt reply tracking configuration."""
    ttl_seconds: Optional[float] = Field(default=None, gt=0)


class HealthConfig(BaseModel):
    """Liveness endpoint configuration."""
    host: str = "0.0.0.0"
    port: int = Field(default=3000, gt=0, lt=65536)


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    format: str = "json"

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate logging format."""
        valid_formats = ["text", "json"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Invalid format. Must be one of: {', '.join(valid_formats)}")
        return v.lower()


class AppConfig(BaseModel):
    """Main application configuration."""
    pair: str = "XAUUSD (Gold)"
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    quote: QuoteConfig = Field(default_factory=QuoteConfig)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)
    pending_replies: PendingRepliesConfig = Field(default_factory=PendingRepliesConfig)
    health: HealthConfig = Field(default_factory=HealthConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def missing_required(self) -> List[str]:
        """Names of required settings that are not set.

        The bot cannot start without its credentials and target channel.
        """
        missing = []
        if not self.telegram.bot_token:
            missing.append("BOT_TOKEN")
        if not self.telegram.channel_id:
            missing.append("CHANNEL_ID")
        if not self.telegram.api_id:
            missing.append("TELEGRAM_API_ID")
        if not self.telegram.api_hash:
            missing.append("TELEGRAM_API_HASH")
        return missing


def expand_env(value: Any) -> Any:
    """Replace ``${VAR}`` / ``${VAR:-default}`` placeholders with environment values.

    Dicts and lists are expanded recursively; other values pass through.
    Only whole-value placeholders are recognised. Values stay strings and
    the pydantic models coerce them to their field types, so channel ids
    such as -1003010980066 are never turned into numbers here.

    Like the shell, ``:-`` falls back to the default when the variable is
    unset or empty.

    Raises:
        ValueError: If a variable without default is not set
    """
    if isinstance(value, dict):
        return {key: expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env(item) for item in value]
    if not isinstance(value, str):
        return value

    match = ENV_PLACEHOLDER.fullmatch(value.strip())
    if not match:
        return value

    name, default = match.group("name", "default")
    env_value = os.getenv(name)
    if default is not None:
        return env_value or default
    if env_value is None:
        raise ValueError(f"Environment variable {name} not set")
    return env_value


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load and validate configuration.

    Reads the YAML file at ``config_path`` (or $GOLDSIGNAL_CONFIG, or
    config/config.yaml). Falls back to DEFAULT_CONFIG when the file does
    not exist.

    Returns:
        AppConfig: Validated configuration

    Raises:
        ValueError: If the file is invalid or a required variable is unset
        pydantic.ValidationError: If values fail validation
    """
    load_dotenv()

    path = config_path or os.getenv("GOLDSIGNAL_CONFIG", DEFAULT_CONFIG_PATH)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f) or {}
        logger.debug("config_file_read", path=path)
    except FileNotFoundError:
        logger.info("config_file_not_found_using_defaults", path=path)
        raw_config = DEFAULT_CONFIG
    except yaml.YAMLError as e:
        logger.error("invalid_config_file", path=path, error=str(e))
        raise ValueError(f"Invalid configuration file: {e}") from e

    config = AppConfig(**expand_env(raw_config))
    logger.info("config_loaded", path=path)
    return config
