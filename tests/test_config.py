"""
Tests for configuration loading and engine creation.
"""

import pytest

from core.config import DEFAULT_DATABASE_URL, IndexerConfig
from core.exceptions import ConfigurationError, InvalidConfigError, Severity
from storage.database import (
    create_all_tables,
    create_database_engine,
    verify_database_connection,
)


class TestIndexerConfig:
    """Tests for IndexerConfig."""

    def test_defaults(self, clean_env):
        config = IndexerConfig.from_env()

        assert config.database_url == DEFAULT_DATABASE_URL
        assert config.token_decimals == 18
        assert config.sql_echo is False
        assert config.log_level == "INFO"
        assert config.record_event_receipts is True
        assert config.validate() == []

    def test_from_env(self, clean_env):
        clean_env.setenv("DATABASE_URL", "postgresql://indexer@localhost/governance")
        clean_env.setenv("TOKEN_DECIMALS", "6")
        clean_env.setenv("SQL_ECHO", "yes")
        clean_env.setenv("LOG_LEVEL", "debug")
        clean_env.setenv("RECORD_EVENT_RECEIPTS", "false")

        config = IndexerConfig.from_env()

        assert config.database_url == "postgresql://indexer@localhost/governance"
        assert config.token_decimals == 6
        assert config.sql_echo is True
        assert config.log_level == "DEBUG"
        assert config.record_event_receipts is False

    def test_non_integer_decimals_rejected(self, clean_env):
        clean_env.setenv("TOKEN_DECIMALS", "eighteen")

        with pytest.raises(InvalidConfigError) as exc_info:
            IndexerConfig.from_env()

        assert exc_info.value.context["config_key"] == "TOKEN_DECIMALS"
        assert exc_info.value.severity == Severity.HIGH

    def test_validate_reports_every_problem(self):
        errors = IndexerConfig(database_url="", token_decimals=90, log_level="LOUD").validate()

        assert len(errors) == 3


class TestEngineCreation:
    """Tests for create_database_engine."""

    def test_invalid_config_refused(self):
        with pytest.raises(ConfigurationError):
            create_database_engine(IndexerConfig(database_url="sqlite://", token_decimals=-1))

    def test_in_memory_sqlite(self):
        engine = create_database_engine(IndexerConfig(database_url="sqlite://"))
        try:
            assert verify_database_connection(engine) is True
            create_all_tables(engine)
        finally:
            engine.dispose()
