"""
Repository Layer Package.

The only gateway to persistent storage.

- EntityStore / SqlAlchemyEntityStore / InMemoryEntityStore:
  the store adapter the indexer writes through
- GovernanceQueryRepository: read-side lookups for consumers
- exceptions: wrapped SQLAlchemy failures
"""

from storage.repositories.entity_store import (
    EntityStore,
    InMemoryEntityStore,
    SqlAlchemyEntityStore,
)
from storage.repositories.exceptions import (
    StoreConnectionError,
    IntegrityError,
    QueryError,
    RecordNotFoundError,
    RepositoryException,
)
from storage.repositories.governance_queries import GovernanceQueryRepository

__all__ = [
    "EntityStore",
    "InMemoryEntityStore",
    "SqlAlchemyEntityStore",
    "GovernanceQueryRepository",
    "StoreConnectionError",
    "IntegrityError",
    "QueryError",
    "RecordNotFoundError",
    "RepositoryException",
]
