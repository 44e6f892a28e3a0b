"""
Indexer - Runner.

============================================================
PURPOSE
============================================================
Feeds an ordered stream of events through the dispatcher,
one database transaction per event.

- An event either commits every entity it touched or nothing
- A store fault propagates after rollback; the feed redelivers
- Progress is reported as IndexingStats

============================================================
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.orm import sessionmaker

from core.config import IndexerConfig
from storage.database import transaction_scope
from storage.repositories.entity_store import SqlAlchemyEntityStore

from .dispatcher import EventDispatcher
from .events import GovernanceEvent

logger = logging.getLogger(__name__)


@dataclass
class IndexingStats:
    """Counters for one indexing run."""

    applied: int = 0
    skipped: int = 0
    by_event: Dict[str, int] = field(default_factory=dict)
    last_block: Optional[int] = None

    def record(self, event: GovernanceEvent, applied: bool) -> None:
        if applied:
            self.applied += 1
            self.by_event[event.name] = self.by_event.get(event.name, 0) + 1
        else:
            self.skipped += 1
        self.last_block = event.metadata.block_number

    def to_dict(self) -> Dict[str, Any]:
        return {
            "applied": self.applied,
            "skipped": self.skipped,
            "by_event": dict(self.by_event),
            "last_block": self.last_block,
        }


class GovernanceIndexer:
    """Applies events to the SQL entity store, one transaction each."""

    def __init__(
        self,
        session_factory: sessionmaker,
        dispatcher: Optional[EventDispatcher] = None,
    ) -> None:
        self._session_factory = session_factory
        self._dispatcher = dispatcher or EventDispatcher()

    @classmethod
    def from_config(cls, session_factory: sessionmaker, config: IndexerConfig) -> "GovernanceIndexer":
        return cls(
            session_factory,
            EventDispatcher(
                token_decimals=config.token_decimals,
                record_receipts=config.record_event_receipts,
            ),
        )

    def process(self, event: GovernanceEvent) -> bool:
        """Apply one event in its own transaction."""
        with transaction_scope(self._session_factory) as session:
            return self._dispatcher.dispatch(event, SqlAlchemyEntityStore(session))

    def process_all(self, events: Iterable[GovernanceEvent]) -> IndexingStats:
        """Apply events in delivery order."""
        stats = IndexingStats()
        for event in events:
            stats.record(event, self.process(event))

        logger.info(
            f"Indexed {stats.applied} events ({stats.skipped} skipped), "
            f"last block {stats.last_block}"
        )
        return stats
