"""
Storage Package.

This package manages persistence of the materialized entities.

Modules:
- database: Engine, sessions and transaction boundaries
- models/: Entity ORM models
- repositories/: Entity store adapter and read-side queries
"""

from storage.database import (
    DatabasePersistenceError,
    create_all_tables,
    create_database_engine,
    get_session_factory,
    initialize_database,
    transaction_scope,
)

__all__ = [
    "DatabasePersistenceError",
    "create_all_tables",
    "create_database_engine",
    "get_session_factory",
    "initialize_database",
    "transaction_scope",
]
