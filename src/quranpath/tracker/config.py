"""Configuration management for the tracker.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class Config:
    """Application configuration."""

    # Database
    db_path: Path

    # Chapter catalog
    catalog_url: str
    language: str
    cache_ttl: int  # seconds
    request_timeout: int  # seconds

    # Plans
    default_duration: int  # days
    restart_resets_start_date: bool
    enforce_day_lock: bool

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path_str = os.environ.get(
            "QURANPATH_DB_PATH",
            str(Path.home() / ".quranpath" / "tracker.db"),
        )

        return cls(
            db_path=Path(db_path_str).expanduser(),
            catalog_url=os.environ.get(
                "QURANPATH_CATALOG_URL", "https://api.quran.com/api/v4"
            ),
            language=os.environ.get("QURANPATH_LANGUAGE", "en"),
            cache_ttl=int(os.environ.get("QURANPATH_CACHE_TTL", "3600")),
            request_timeout=int(os.environ.get("QURANPATH_REQUEST_TIMEOUT", "10")),
            default_duration=int(os.environ.get("QURANPATH_DEFAULT_DURATION", "30")),
            restart_resets_start_date=_env_flag(
                "QURANPATH_RESTART_RESETS_START_DATE", True
            ),
            enforce_day_lock=_env_flag("QURANPATH_ENFORCE_DAY_LOCK", True),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if not self.db_path.parent.exists():
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except PermissionError:
                errors.append(f"Cannot create database directory: {self.db_path.parent}")

        if self.default_duration <= 0:
            errors.append("QURANPATH_DEFAULT_DURATION must be a positive number of days")
        if self.cache_ttl < 0:
            errors.append("QURANPATH_CACHE_TTL cannot be negative")
        if self.request_timeout <= 0:
            errors.append("QURANPATH_REQUEST_TIMEOUT must be positive")

        return errors


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
