"""Configuration management for booksy.

Loads configuration from environment variables and provides defaults.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

LOG_FORMATS = ("text", "json")


@dataclass
class Config:
    """Application configuration."""

    # Database
    db_path: Path

    # Reader
    default_user: str
    words_per_page: int

    # Logging
    log_level: str
    log_format: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path_str = os.environ.get(
            "BOOKSY_DB_PATH",
            str(Path.home() / ".booksy" / "booksy.db"),
        )
        db_path = Path(db_path_str).expanduser()

        return cls(
            db_path=db_path,
            default_user=os.environ.get("BOOKSY_USER", "local"),
            words_per_page=int(os.environ.get("BOOKSY_WORDS_PER_PAGE", "250")),
            log_level=os.environ.get("BOOKSY_LOG_LEVEL", "WARNING").upper(),
            log_format=os.environ.get("BOOKSY_LOG_FORMAT", "text").lower(),
        )

    @property
    def is_memory_db(self) -> bool:
        return str(self.db_path) == ":memory:"

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.words_per_page < 1:
            errors.append(f"Words per page must be positive: {self.words_per_page}")

        if not isinstance(logging.getLevelName(self.log_level), int):
            errors.append(f"Unknown log level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            errors.append(f"Unknown log format: {self.log_format}")

        # Check database directory is writable
        if not self.is_memory_db and not self.db_path.parent.exists():
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except PermissionError:
                errors.append(f"Cannot create database directory: {self.db_path.parent}")

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
