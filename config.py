"""Application configuration module.

Reads settings from environment variables with sane defaults for a single
booth kiosk backed by a local SQLite ledger.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


load_dotenv()


def _get_bool(name: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def _get_int(name: str, default: int) -> int:
    """Get integer from environment variable with fallback."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    """Get float from environment variable with fallback."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_str(name: str, default: str = "") -> str:
    """Get string from environment variable."""
    return os.getenv(name, default)


@dataclass(frozen=True)
class Config:
    environment: str
    debug: bool
    web_host: str
    web_port: int
    secret_key: str
    database_path: str
    db_pool_size: int
    db_busy_timeout: int
    log_folder: str
    rewards_file: Optional[str]
    spin_duration_seconds: float
    spin_min_full_rotations: int
    spin_max_full_rotations: int
    session_ttl_seconds: int
    max_active_sessions: int
    rewards_cache_ttl: int


def load_config() -> Config:
    """Load application configuration from environment variables.

    Returns:
        Config: Application configuration with validated values
    """
    min_rotations = _get_int("SPIN_MIN_FULL_ROTATIONS", 5)
    max_rotations = _get_int("SPIN_MAX_FULL_ROTATIONS", 7)

    config = Config(
        environment=_get_str("ENVIRONMENT", "development"),
        debug=_get_bool("DEBUG", False),
        web_host=_get_str("WEB_HOST", "0.0.0.0"),
        web_port=_get_int("WEB_PORT", 5000),
        secret_key=_get_str(
            "SECRET_KEY",
            "booth_secret_key_must_be_changed_in_production_environment"
        ),
        database_path=_get_str("DATABASE_PATH", "data/spin_booth.sqlite"),
        db_pool_size=_get_int("DB_POOL_SIZE", 5),
        db_busy_timeout=_get_int("DB_BUSY_TIMEOUT", 5000),
        log_folder=_get_str("LOG_FOLDER", "logs"),
        rewards_file=_get_str("REWARDS_FILE") or None,
        spin_duration_seconds=_get_float("SPIN_DURATION_SECONDS", 4.5),
        spin_min_full_rotations=min(min_rotations, max_rotations),
        spin_max_full_rotations=max(min_rotations, max_rotations),
        session_ttl_seconds=_get_int("SESSION_TTL_SECONDS", 1800),
        max_active_sessions=_get_int("MAX_ACTIVE_SESSIONS", 5000),
        rewards_cache_ttl=_get_int("REWARDS_CACHE_TTL", 300),
    )

    return config
