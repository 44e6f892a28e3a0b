"""
Core Module - Configuration.

============================================================
RESPONSIBILITY
============================================================
Loads indexer configuration from the environment.

- DATABASE_URL: SQLAlchemy URL of the entity store
- TOKEN_DECIMALS: base-unit exponent used for display values
- SQL_ECHO: log SQL statements
- LOG_LEVEL: logging level for scripts
- RECORD_EVENT_RECEIPTS: skip redelivered events already applied

A .env file in the working directory is honoured.

============================================================
"""

import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv

from .constants import DEFAULT_TOKEN_DECIMALS, MAX_TOKEN_DECIMALS
from .exceptions import InvalidConfigError

load_dotenv()


DEFAULT_DATABASE_URL = "sqlite:///governance_indexer.db"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidConfigError(name, raw, "must be an integer")


@dataclass
class IndexerConfig:
    """Indexer configuration."""

    database_url: str = DEFAULT_DATABASE_URL
    """SQLAlchemy database URL."""

    token_decimals: int = DEFAULT_TOKEN_DECIMALS
    """Base-unit exponent for the Decimal Normalizer."""

    sql_echo: bool = False
    """Log SQL statements."""

    log_level: str = "INFO"
    """Logging level."""

    record_event_receipts: bool = True
    """Record (tx_hash, log_index) receipts to skip redeliveries."""

    @classmethod
    def from_env(cls) -> "IndexerConfig":
        """
        Load configuration from environment variables.

        Raises:
            InvalidConfigError: If a numeric setting does not parse
        """
        return cls(
            database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            token_decimals=_env_int("TOKEN_DECIMALS", DEFAULT_TOKEN_DECIMALS),
            sql_echo=_env_flag("SQL_ECHO", "false"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            record_event_receipts=_env_flag("RECORD_EVENT_RECEIPTS", "true"),
        )

    def validate(self) -> List[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if not self.database_url:
            errors.append("database_url must not be empty")

        if not 0 <= self.token_decimals <= MAX_TOKEN_DECIMALS:
            errors.append(
                f"token_decimals must be between 0 and {MAX_TOKEN_DECIMALS}"
            )

        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"log_level {self.log_level!r} is not a logging level")

        return errors
