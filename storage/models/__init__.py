"""
ORM Models Package.

Entity models materialized by the indexer. Importing this
package registers every table on Base.metadata.
"""

from storage.models.base import Base, DecimalAmount, RawAmount, TimestampMixin
from storage.models.governance import (
    Delegate,
    EventReceipt,
    Governance,
    Proposal,
    ProposalStatus,
    TokenHolder,
    Vote,
)

__all__ = [
    "Base",
    "DecimalAmount",
    "RawAmount",
    "TimestampMixin",
    "Delegate",
    "EventReceipt",
    "Governance",
    "Proposal",
    "ProposalStatus",
    "TokenHolder",
    "Vote",
]
