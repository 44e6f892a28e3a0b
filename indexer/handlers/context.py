"""
Indexer - Handler Context.

What every event handler receives besides the event itself.
"""

from dataclasses import dataclass
from decimal import Decimal

from core.constants import DEFAULT_TOKEN_DECIMALS
from storage.repositories.entity_store import EntityStore

from ..decimals import to_decimal
from ..factories import EntityFactory


@dataclass
class HandlerContext:
    """Store access and settings for one event."""

    store: EntityStore
    entities: EntityFactory
    token_decimals: int = DEFAULT_TOKEN_DECIMALS

    @classmethod
    def for_store(
        cls, store: EntityStore, token_decimals: int = DEFAULT_TOKEN_DECIMALS
    ) -> "HandlerContext":
        return cls(store=store, entities=EntityFactory(store), token_decimals=token_decimals)

    def normalize(self, raw: int) -> Decimal:
        """Display value of a raw amount."""
        return to_decimal(raw, self.token_decimals)
