"""
Storage - Database.

============================================================
RESPONSIBILITY
============================================================
Manages the SQLAlchemy engine and sessions backing the
entity store.

- Creates the engine from IndexerConfig
- Provides session factory and transaction boundaries
- Creates entity tables

One event is applied inside one transaction_scope(): the
handlers either commit every entity they touched or nothing.

============================================================
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.config import IndexerConfig
from core.exceptions import ConfigurationError
from storage.models.base import Base

logger = logging.getLogger(__name__)


# =============================================================
# CUSTOM EXCEPTIONS
# =============================================================


class DatabasePersistenceError(Exception):
    """Raised when database persistence fails."""
    pass


class DatabaseConnectionError(DatabasePersistenceError):
    """Raised when database connection fails."""
    pass


class DatabaseInitializationError(DatabasePersistenceError):
    """Raised when database initialization fails."""
    pass


# =============================================================
# DATABASE ENGINE
# =============================================================

_engine: Optional[Engine] = None
_SessionFactory: Optional[sessionmaker] = None


def _redact(url: str) -> str:
    return url.split("@")[-1]


def create_database_engine(
    config: IndexerConfig,
    pool_size: int = 5,
    max_overflow: int = 10,
    pool_timeout: int = 30,
    pool_recycle: int = 1800,
) -> Engine:
    """
    Create SQLAlchemy engine for the entity store.

    Args:
        config: Indexer configuration (database_url, sql_echo)
        pool_size: Number of connections to keep in pool
        max_overflow: Max connections beyond pool_size
        pool_timeout: Seconds to wait for available connection
        pool_recycle: Recycle connections after N seconds

    Returns:
        SQLAlchemy Engine

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    errors = config.validate()
    if errors:
        raise ConfigurationError(
            f"Invalid indexer configuration: {'; '.join(errors)}",
            context={"errors": errors},
        )

    url = config.database_url
    logger.info(f"Creating database engine for: {_redact(url)}")

    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=config.sql_echo, **kwargs)
    else:
        engine = create_engine(
            url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
            pool_recycle=pool_recycle,
            echo=config.sql_echo,
        )

    @event.listens_for(engine, "connect")
    def on_connect(dbapi_conn, connection_record):
        logger.debug("Database connection established")

    return engine


def get_engine() -> Engine:
    """Get the process-wide engine, creating it from the environment."""
    global _engine
    if _engine is None:
        _engine = create_database_engine(IndexerConfig.from_env())
    return _engine


def get_session_factory(engine: Optional[Engine] = None) -> sessionmaker:
    """
    Get a session factory.

    With an explicit engine a fresh factory is returned; otherwise
    the process-wide factory bound to get_engine() is used.
    """
    global _SessionFactory

    if engine is not None:
        return sessionmaker(
            bind=engine,
            autoflush=False,
            expire_on_commit=False,
        )

    if _SessionFactory is None:
        _SessionFactory = sessionmaker(
            bind=get_engine(),
            autoflush=False,
            expire_on_commit=False,
        )

    return _SessionFactory


# =============================================================
# SESSION MANAGEMENT
# =============================================================


@contextmanager
def transaction_scope(
    session_factory: Optional[sessionmaker] = None,
) -> Generator[Session, None, None]:
    """
    Context manager for explicit transaction boundaries.

    Commits only if no exception occurs.
    Rolls back on ANY exception.

    Usage:
        with transaction_scope(factory) as session:
            dispatcher.dispatch(event, SqlAlchemyEntityStore(session))
            # Commits automatically at end
    """
    factory = session_factory or get_session_factory()
    session = factory()
    try:
        yield session
        session.commit()
        logger.debug("Database transaction committed successfully")
    except SQLAlchemyError as e:
        logger.error(f"Database transaction failed, rolling back: {e}")
        session.rollback()
        raise DatabasePersistenceError(f"Transaction failed: {e}") from e
    except Exception as e:
        logger.error(f"Transaction failed with unexpected error: {e}")
        session.rollback()
        raise
    finally:
        session.close()


# =============================================================
# DATABASE INITIALIZATION
# =============================================================


def verify_database_connection(engine: Engine) -> bool:
    """
    Verify database connection is working.

    Raises:
        DatabaseConnectionError if connection fails
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection verified successfully")
            return True
    except OperationalError as e:
        logger.error(f"Database connection failed: {e}")
        raise DatabaseConnectionError(f"Cannot connect to database: {e}") from e


def create_all_tables(engine: Engine) -> None:
    """
    Create all entity tables.

    Raises:
        DatabaseInitializationError if table creation fails
    """
    # Registers the entity tables on Base.metadata
    from storage.models import governance  # noqa: F401

    try:
        logger.info("Creating entity tables...")
        Base.metadata.create_all(bind=engine)
        logger.info("Entity tables created successfully")
    except SQLAlchemyError as e:
        logger.error(f"Failed to create entity tables: {e}")
        raise DatabaseInitializationError(f"Table creation failed: {e}") from e


def initialize_database(engine: Engine) -> None:
    """Verify the connection and create tables if they do not exist."""
    verify_database_connection(engine)
    create_all_tables(engine)
