"""
Indexer Package - Governance event materialization.

Maps each token / governor event to mutations of the derived
entities (holders, delegates, proposals, votes, governance
statistics).

Quick Start:
    from core.config import IndexerConfig
    from storage import create_database_engine, create_all_tables, get_session_factory
    from indexer import GovernanceIndexer, decode_event

    config = IndexerConfig.from_env()
    engine = create_database_engine(config)
    create_all_tables(engine)

    indexer = GovernanceIndexer.from_config(get_session_factory(engine), config)
    stats = indexer.process_all(decode_event(log) for log in decoded_logs)

Dry run without a database:
    from storage.repositories.entity_store import InMemoryEntityStore

    store = InMemoryEntityStore()
    dispatcher = EventDispatcher()
    for event in events:
        dispatcher.dispatch(event, store)
"""

from .audit import AuditReport, GovernanceAuditor, MismatchType
from .decimals import to_decimal
from .dispatcher import EventDispatcher
from .events import (
    DelegateChanged,
    DelegateVotesChanged,
    EventMetadata,
    GovernanceEvent,
    ProposalCanceled,
    ProposalCreated,
    ProposalExecuted,
    ProposalQueued,
    Transfer,
    VoteCast,
    decode_event,
)
from .factories import EntityFactory
from .runner import GovernanceIndexer, IndexingStats

__all__ = [
    "AuditReport",
    "DelegateChanged",
    "DelegateVotesChanged",
    "EntityFactory",
    "EventDispatcher",
    "EventMetadata",
    "GovernanceAuditor",
    "GovernanceEvent",
    "GovernanceIndexer",
    "IndexingStats",
    "MismatchType",
    "ProposalCanceled",
    "ProposalCreated",
    "ProposalExecuted",
    "ProposalQueued",
    "Transfer",
    "VoteCast",
    "decode_event",
    "to_decimal",
]
