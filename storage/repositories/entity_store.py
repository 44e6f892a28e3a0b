"""
Entity Store Adapter.

============================================================
PURPOSE
============================================================
The only gateway the indexer uses to read and write entities.
Handlers see three operations:

    get(kind, id)  -> entity or None
    save(entity)   -> None
    list(kind)     -> all entities of a kind (read side / audit)

The store never deletes. Transactions are owned by the caller:
one event is applied per transaction_scope().

============================================================
IMPLEMENTATIONS
============================================================
- SqlAlchemyEntityStore: session-backed, production store
- InMemoryEntityStore: map keyed by (kind, id), for dry-run
  replays and tests

============================================================
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple, Type, TypeVar

from sqlalchemy.orm import Session

from storage.models.base import Base
from storage.repositories.base import BaseRepository

E = TypeVar("E", bound=Base)

logger = logging.getLogger(__name__)


class EntityStore(ABC):
    """Persistent store of materialized entities."""

    @abstractmethod
    def get(self, kind: Type[E], entity_id: str) -> Optional[E]:
        """Return the entity of `kind` with `entity_id`, or None."""

    @abstractmethod
    def save(self, entity: Base) -> None:
        """Insert or update an entity."""

    @abstractmethod
    def list(self, kind: Type[E]) -> List[E]:
        """Return every entity of `kind`."""


class SqlAlchemyEntityStore(BaseRepository, EntityStore):
    """
    Entity store over an injected SQLAlchemy session.

    save() flushes immediately so later reads in the same event
    see the row; nothing is committed here.
    """

    def __init__(self, session: Session) -> None:
        super().__init__(session, "EntityStore")

    def get(self, kind: Type[E], entity_id: str) -> Optional[E]:
        return self._get_by_id(kind, entity_id)

    def save(self, entity: Base) -> None:
        self._add(entity)

    def list(self, kind: Type[E]) -> List[E]:
        return self._list_all(kind)


class InMemoryEntityStore(EntityStore):
    """
    Map-backed entity arena keyed by (kind, id).

    Entities are kept by reference, like an identity map.
    """

    def __init__(self) -> None:
        self._entities: Dict[Tuple[type, str], Base] = {}

    def get(self, kind: Type[E], entity_id: str) -> Optional[E]:
        return self._entities.get((kind, entity_id))

    def save(self, entity: Base) -> None:
        self._entities[(type(entity), entity.id)] = entity
        logger.debug(f"Saved entity: {entity!r}")

    def list(self, kind: Type[E]) -> List[E]:
        found = [e for (k, _), e in self._entities.items() if k is kind]
        return sorted(found, key=lambda e: e.id)

    def __len__(self) -> int:
        return len(self._entities)
