"""Application settings loaded from the environment and an optional .env file."""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from threading import Lock

DEFAULT_DATABASE_URL = "sqlite:///data/event_reg.db"

_ENV_KEYS = {"EVENT_REG_DATABASE_URL", "EVENT_REG_TIMEZONE", "EVENT_REG_LOG_LEVEL"}

_ENV_LOADED = False
_ENV_LOCK = Lock()
_LOGGING_CONFIGURED = False


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the registration app."""

    database_url: str = DEFAULT_DATABASE_URL
    timezone: str = "UTC"
    log_level: str = "INFO"


def _load_env(env_path: Path = Path(".env")) -> None:
    """Load EVENT_REG_* variables from .env file if present."""
    global _ENV_LOADED

    if _ENV_LOADED:
        return

    with _ENV_LOCK:
        if _ENV_LOADED:
            return

        if env_path.exists():
            for raw_line in env_path.read_text(encoding="utf-8").splitlines():
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"\'')

                if key in _ENV_KEYS and key not in os.environ:
                    os.environ[key] = value

        _ENV_LOADED = True


def get_settings() -> Settings:
    """
    Build settings from the environment.

    Returns:
        Settings with defaults for any unset variable

    Behavior:
        - Loads .env once per process; real environment variables win
        - Empty values fall back to the defaults
    """
    _load_env()

    return Settings(
        database_url=os.getenv("EVENT_REG_DATABASE_URL") or DEFAULT_DATABASE_URL,
        timezone=os.getenv("EVENT_REG_TIMEZONE") or "UTC",
        log_level=(os.getenv("EVENT_REG_LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; Streamlit reruns call this repeatedly."""
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        return

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    _LOGGING_CONFIGURED = True
