"""
Repository Layer Exceptions.

============================================================
PURPOSE
============================================================
SQLAlchemy failures raised while reading or saving entities
are caught in BaseRepository and re-raised as one of these.

They are fatal faults for the indexer: they propagate out of
the dispatcher, the event's transaction rolls back, and the
host redelivers the event. Data anomalies never end up here.

============================================================
HIERARCHY
============================================================
EntityStoreError (core.exceptions)
└── RepositoryException
    ├── RecordNotFoundError   (read side only)
    ├── IntegrityError        (duplicate id, broken reference)
    ├── StoreConnectionError  (database unreachable)
    └── QueryError            (anything else)

============================================================
"""

from typing import Optional

from core.exceptions import EntityStoreError


class RepositoryException(EntityStoreError):
    """An entity store operation failed."""

    def __init__(
        self,
        message: str,
        repository_name: str,
        operation: str,
        entity_kind: Optional[str] = None,
        entity_id: Optional[str] = None,
        **kwargs,
    ) -> None:
        self.repository_name = repository_name
        self.operation = operation

        context = kwargs.pop("context", {})
        context["repository"] = repository_name
        context["operation"] = operation

        super().__init__(
            f"[{repository_name}] {operation}: {message}",
            entity_kind=entity_kind,
            entity_id=entity_id,
            context=context,
            **kwargs,
        )


class RecordNotFoundError(RepositoryException):
    """A read-side lookup asked for an entity that was never materialized."""

    def __init__(self, repository_name: str, entity_kind: str, entity_id: str) -> None:
        super().__init__(
            f"{entity_kind} {entity_id} not found",
            repository_name=repository_name,
            operation="get",
            entity_kind=entity_kind,
            entity_id=entity_id,
        )


class IntegrityError(RepositoryException):
    """A flush violated a primary key or reference constraint."""


class StoreConnectionError(RepositoryException):
    """The database could not be reached."""


class QueryError(RepositoryException):
    """A query or flush failed for any other reason."""
