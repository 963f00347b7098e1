"""Configuration management for repstreak.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


@dataclass
class Config:
    """Application configuration."""

    # Database
    db_path: Path

    # Acting user (token identifier) for the CLI
    user_token: Optional[str]

    # IANA timezone used to derive "today"; None means UTC
    timezone: Optional[str]

    # Progress buffer idle delay
    flush_delay: float  # seconds

    # Logging
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path_str = os.environ.get(
            "REPSTREAK_DB_PATH",
            str(Path.home() / ".repstreak" / "repstreak.db"),
        )
        db_path = Path(db_path_str).expanduser()

        return cls(
            db_path=db_path,
            user_token=os.environ.get("REPSTREAK_USER") or None,
            timezone=os.environ.get("REPSTREAK_TIMEZONE") or None,
            flush_delay=float(os.environ.get("REPSTREAK_FLUSH_DELAY", "1.0")),
            log_level=os.environ.get("REPSTREAK_LOG_LEVEL", "WARNING").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if str(self.db_path) != ":memory:" and not self.db_path.parent.exists():
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except PermissionError:
                errors.append(f"Cannot create database directory: {self.db_path.parent}")

        if self.timezone:
            try:
                ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError):
                errors.append(f"Unknown timezone: {self.timezone}")

        if self.flush_delay < 0:
            errors.append("Flush delay cannot be negative")

        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Unknown log level: {self.log_level}")

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
