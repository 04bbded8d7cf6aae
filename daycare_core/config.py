# =============================================================================
# daycare_core/config.py
# Process-level configuration read from the environment
# =============================================================================
"""
Runtime configuration for the daycare app.

Business settings (daycare name, relay credentials, cloud URL/key) live in
the Settings entity inside the local store. Only process-level knobs that
must be known before the store opens are read from the environment here.
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from daycare_core.errors.exceptions import ConfigurationError


DEFAULT_DB_PATH = Path("local_data") / "daycare.db"
DEFAULT_CLOUD_TIMEOUT = 10.0
DEFAULT_REALTIME_CHECK_INTERVAL = 15.0

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"{name} must be a boolean, got {raw!r}",
        config_key=name,
        expected_type="bool",
    )


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be a number, got {raw!r}",
            config_key=name,
            expected_type="float",
        )
    if value <= 0:
        raise ConfigurationError(
            f"{name} must be positive, got {raw!r}",
            config_key=name,
            expected_type="float",
        )
    return value


def _env_log_level(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        raise ConfigurationError(
            f"{name} is not a logging level: {raw!r}",
            config_key=name,
            expected_type="DEBUG|INFO|WARNING|ERROR|CRITICAL",
        )
    return level


@dataclass
class AppConfig:
    """Environment-derived configuration shared by the store and the UI."""
    db_path: Path = DEFAULT_DB_PATH
    log_level: int = logging.INFO
    log_to_file: bool = False
    cloud_timeout: float = DEFAULT_CLOUD_TIMEOUT
    realtime_check_interval: float = DEFAULT_REALTIME_CHECK_INTERVAL
    background_writes: bool = True
    openai_api_key: Optional[str] = None

    @classmethod
    def from_env(cls) -> AppConfig:
        """
        Build configuration from environment variables.

        Recognised variables:
            DAYCARE_DB_PATH                  SQLite file (default local_data/daycare.db)
            DAYCARE_LOG_LEVEL                DEBUG/INFO/WARNING/ERROR
            DAYCARE_LOG_TO_FILE              also write logs/daycare_<date>.log
            DAYCARE_CLOUD_TIMEOUT            seconds per cloud call (default 10)
            DAYCARE_REALTIME_CHECK_INTERVAL  watchdog period in seconds (default 15)
            DAYCARE_BACKGROUND_WRITES        mirror writes on a worker thread
            OPENAI_API_KEY                   enables AI report summaries

        Raises:
            ConfigurationError: if a variable is present but malformed
        """
        db_path = os.getenv("DAYCARE_DB_PATH", "").strip()
        return cls(
            db_path=Path(db_path) if db_path else DEFAULT_DB_PATH,
            log_level=_env_log_level("DAYCARE_LOG_LEVEL", logging.INFO),
            log_to_file=_env_bool("DAYCARE_LOG_TO_FILE", False),
            cloud_timeout=_env_float("DAYCARE_CLOUD_TIMEOUT", DEFAULT_CLOUD_TIMEOUT),
            realtime_check_interval=_env_float(
                "DAYCARE_REALTIME_CHECK_INTERVAL", DEFAULT_REALTIME_CHECK_INTERVAL
            ),
            background_writes=_env_bool("DAYCARE_BACKGROUND_WRITES", True),
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        )
