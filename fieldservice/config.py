# fieldservice/config.py
"""
Application configuration with environment variable overrides.

Values are read once at import time (a local .env file is honoured) and
exposed through the ``settings`` singleton.
"""

import logging
import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid integer for {env_var}: {raw!r}") from None


def _safe_decimal(env_var: str, default: str) -> Decimal:
    raw = os.getenv(env_var, default)
    try:
        return Decimal(raw)
    except (InvalidOperation, TypeError):
        raise ValueError(f"Invalid decimal for {env_var}: {raw!r}") from None


def _safe_bool(env_var: str, default: str) -> bool:
    return os.getenv(env_var, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration for the API, the database and the lifecycle rules."""

    database_url: str = os.getenv("DATABASE_URL", "sqlite:///db.sqlite")
    db_busy_timeout: int = _safe_int("DB_BUSY_TIMEOUT", "30")
    db_echo: bool = _safe_bool("DB_ECHO", "false")
    default_tax_rate: Decimal = _safe_decimal("DEFAULT_TAX_RATE", "0.08")
    strict_status_transitions: bool = _safe_bool("STRICT_STATUS_TRANSITIONS", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    api_title: str = os.getenv("API_TITLE", "Field Service API")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if not config.database_url:
        raise ValueError("DATABASE_URL must not be empty")
    if config.db_busy_timeout < 0:
        raise ValueError(f"DB_BUSY_TIMEOUT must be >= 0, got {config.db_busy_timeout}")
    if not Decimal("0") <= config.default_tax_rate <= Decimal("1"):
        raise ValueError(
            f"DEFAULT_TAX_RATE must be between 0 and 1, got {config.default_tax_rate}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.info("Configuration loaded (database: %s)", config.database_url)
    return config


settings = load_config()
