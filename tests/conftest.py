"""
Shared fixtures for the governance indexer tests.

Every test gets fresh state: either an InMemoryEntityStore or a
private in-memory SQLite database.
"""

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from core.config import IndexerConfig  # noqa: E402
from indexer.handlers import HandlerContext  # noqa: E402
from storage.database import (  # noqa: E402
    create_all_tables,
    create_database_engine,
    get_session_factory,
)
from storage.repositories.entity_store import InMemoryEntityStore  # noqa: E402


# ============================================================
# STORES
# ============================================================

@pytest.fixture
def store():
    """Fresh in-memory entity store."""
    return InMemoryEntityStore()


@pytest.fixture
def ctx(store):
    """Handler context over the in-memory store, 18 decimals."""
    return HandlerContext.for_store(store)


@pytest.fixture
def sqlite_engine():
    """Private in-memory SQLite database with all entity tables."""
    engine = create_database_engine(IndexerConfig(database_url="sqlite://"))
    create_all_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine):
    return get_session_factory(sqlite_engine)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.rollback()
    session.close()


# ============================================================
# ENVIRONMENT
# ============================================================

@pytest.fixture
def clean_env(monkeypatch):
    """Remove indexer settings from the environment."""
    for key in (
        "DATABASE_URL",
        "TOKEN_DECIMALS",
        "SQL_ECHO",
        "LOG_LEVEL",
        "RECORD_EVENT_RECEIPTS",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch
