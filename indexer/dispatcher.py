"""
Indexer - Event Dispatcher.

============================================================
PURPOSE
============================================================
Routes one event at a time to its handler, in the order the
feed delivers them. No reordering, no batching.

When the event metadata identifies the log (transaction hash
and log index), an EventReceipt is saved alongside the event's
mutations. A later delivery of the same log finds the receipt
and is skipped, so a committed event is never applied twice.
No receipt is written for an event its handler ignored (an
abstain ballot), so such an event leaves the store untouched.

The dispatcher does not manage transactions: the caller wraps
each dispatch() in one transaction (see indexer.runner).

============================================================
"""

import logging

from core.constants import DEFAULT_TOKEN_DECIMALS
from storage.models.governance import EventReceipt
from storage.repositories.entity_store import EntityStore

from .events import GovernanceEvent
from .handlers import HANDLERS, HandlerContext

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Applies single events to an entity store."""

    def __init__(
        self,
        token_decimals: int = DEFAULT_TOKEN_DECIMALS,
        record_receipts: bool = True,
    ) -> None:
        self._token_decimals = token_decimals
        self._record_receipts = record_receipts

    def dispatch(self, event: GovernanceEvent, store: EntityStore) -> bool:
        """
        Apply `event` to `store`.

        Returns:
            True if a handler ran, False if the event was skipped
            (unknown kind, already applied, or ignored by its handler)
        """
        handler = HANDLERS.get(type(event))
        if handler is None:
            logger.warning(
                f"No handler for event {type(event).__name__}; skipping",
                extra={"context": {"block_number": event.metadata.block_number}},
            )
            return False

        receipt_id = event.metadata.receipt_id if self._record_receipts else None
        if receipt_id is not None and store.get(EventReceipt, receipt_id) is not None:
            logger.warning(
                f"{event.name} {receipt_id} already applied; skipping redelivery"
            )
            return False

        if handler(HandlerContext.for_store(store, self._token_decimals), event) is False:
            logger.debug(f"{event.name} at block {event.metadata.block_number} ignored by its handler")
            return False

        if receipt_id is not None:
            store.save(EventReceipt(
                id=receipt_id,
                event_name=event.name,
                block_number=event.metadata.block_number,
            ))

        logger.debug(f"Applied {event.name} at block {event.metadata.block_number}")
        return True
