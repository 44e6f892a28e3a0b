"""
Base Repository Class.

============================================================
PURPOSE
============================================================
Session-bound helpers shared by the entity store and the
read-side repository:

- lookup by (kind, id), listing, counting, select execution
- add + flush, so later reads in the same transaction see it
- translation of SQLAlchemy errors into repository exceptions

The session is injected; committing and rolling back belong to
the caller (storage.database.transaction_scope).

============================================================
"""

import logging
from typing import Any, List, NoReturn, Optional, Type

from sqlalchemy import func, select
from sqlalchemy.exc import (
    IntegrityError as SQLAlchemyIntegrityError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.orm import Session

from storage.models.base import Base
from storage.repositories.exceptions import (
    IntegrityError,
    QueryError,
    RecordNotFoundError,
    StoreConnectionError,
)


class BaseRepository:
    """Common entity access over one SQLAlchemy session."""

    def __init__(self, session: Session, repository_name: str) -> None:
        self._session = session
        self._repository_name = repository_name
        self._logger = logging.getLogger(f"repository.{repository_name}")

    @property
    def session(self) -> Session:
        return self._session

    @property
    def repository_name(self) -> str:
        return self._repository_name

    # =========================================================
    # ERROR TRANSLATION
    # =========================================================

    def _raise_store_error(
        self,
        error: SQLAlchemyError,
        operation: str,
        kind: Optional[Type[Base]] = None,
        entity_id: Optional[str] = None,
    ) -> NoReturn:
        """Log a database failure and re-raise it as a repository exception."""
        kind_name = kind.__name__ if kind is not None else None
        self._logger.error(
            f"{operation} failed for {kind_name or 'query'} {entity_id or ''}: {error}",
            extra={"context": {
                "operation": operation,
                "entity_kind": kind_name,
                "entity_id": entity_id,
            }},
            exc_info=True,
        )

        if isinstance(error, OperationalError):
            exc_class = StoreConnectionError
        elif isinstance(error, SQLAlchemyIntegrityError):
            exc_class = IntegrityError
        else:
            exc_class = QueryError

        raise exc_class(
            str(error.orig) if getattr(error, "orig", None) is not None else str(error),
            repository_name=self._repository_name,
            operation=operation,
            entity_kind=kind_name,
            entity_id=entity_id,
            cause=error,
        ) from error

    # =========================================================
    # ENTITY ACCESS
    # =========================================================

    def _add(self, entity: Base) -> Base:
        """Stage an entity and flush it."""
        try:
            self._session.add(entity)
            self._session.flush()
        except SQLAlchemyError as e:
            self._raise_store_error(e, "save", type(entity), entity.id)
        self._logger.debug(f"Saved {entity!r}")
        return entity

    def _get_by_id(self, kind: Type[Base], entity_id: str) -> Optional[Base]:
        try:
            return self._session.get(kind, entity_id)
        except SQLAlchemyError as e:
            self._raise_store_error(e, "get", kind, entity_id)

    def _get_by_id_or_raise(self, kind: Type[Base], entity_id: str) -> Base:
        """
        Lookup by primary key for the read side.

        Raises:
            RecordNotFoundError: If the entity was never materialized
        """
        entity = self._get_by_id(kind, entity_id)
        if entity is None:
            raise RecordNotFoundError(self._repository_name, kind.__name__, entity_id)
        return entity

    def _list_all(self, kind: Type[Base]) -> List[Base]:
        """Every entity of a kind, ordered by id."""
        return self._execute_query(select(kind).order_by(kind.id), kind)

    def _count(self, kind: Type[Base]) -> int:
        try:
            return self._session.execute(select(func.count()).select_from(kind)).scalar() or 0
        except SQLAlchemyError as e:
            self._raise_store_error(e, "count", kind)

    def _execute_query(self, stmt: Any, kind: Optional[Type[Base]] = None) -> List[Any]:
        try:
            return list(self._session.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            self._raise_store_error(e, "query", kind)
