"""
Indexer - Entity Factories.

============================================================
PURPOSE
============================================================
The sole creation path for every entity kind. Each
get_or_create_* returns the stored record when it exists;
otherwise it builds one with zero / neutral defaults, saves it
immediately and returns it.

============================================================
LOOKUP MODES
============================================================
- get_or_create_<kind>(id): always returns an entity
- get_or_create_<kind>(id, create_if_missing=False): returns
  None when the record does not exist, without creating it

Handlers that must detect an entity referenced before it was
established call the strict mode first, log the anomaly, then
call the creating mode (see EntityFactory.resolve_delegate).

============================================================
"""

import logging
from decimal import Decimal
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from core.constants import GOVERNANCE_ENTITY_ID
from storage.models.base import Base
from storage.models.governance import (
    Delegate,
    Governance,
    Proposal,
    ProposalStatus,
    TokenHolder,
    Vote,
)
from storage.repositories.entity_store import EntityStore

E = TypeVar("E", bound=Base)

logger = logging.getLogger(__name__)

ZERO = Decimal(0)


def _token_holder_defaults() -> Dict[str, Any]:
    return {
        "token_balance_raw": 0,
        "token_balance": ZERO,
        "total_tokens_held_raw": 0,
        "total_tokens_held": ZERO,
        "delegate_id": None,
    }


def _delegate_defaults() -> Dict[str, Any]:
    return {
        "delegated_votes_raw": 0,
        "delegated_votes": ZERO,
        "token_holders_represented_amount": 0,
    }


def _proposal_defaults() -> Dict[str, Any]:
    return {
        "proposer_id": None,
        "targets": [],
        "values": [],
        "signatures": [],
        "calldatas": [],
        "start_block": 0,
        "end_block": 0,
        "description": "",
        "status": ProposalStatus.PENDING.value,
        "execution_eta": None,
    }


def _vote_defaults() -> Dict[str, Any]:
    return {
        "proposal_id": None,
        "voter_id": None,
        "votes_raw": 0,
        "votes": ZERO,
        "support": False,
        "reason": None,
    }


def _governance_defaults() -> Dict[str, Any]:
    return {
        "current_token_holders": 0,
        "current_delegates": 0,
        "delegated_votes_raw": 0,
        "delegated_votes": ZERO,
    }


DEFAULTS: Dict[type, Callable[[], Dict[str, Any]]] = {
    TokenHolder: _token_holder_defaults,
    Delegate: _delegate_defaults,
    Proposal: _proposal_defaults,
    Vote: _vote_defaults,
    Governance: _governance_defaults,
}


class EntityFactory:
    """Get-or-create access to every entity kind over one store."""

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    @property
    def store(self) -> EntityStore:
        return self._store

    def _get_or_create(
        self,
        kind: Type[E],
        entity_id: str,
        create_if_missing: bool,
    ) -> Optional[E]:
        entity = self._store.get(kind, entity_id)
        if entity is not None or not create_if_missing:
            return entity

        entity = kind(id=entity_id, **DEFAULTS[kind]())
        self._store.save(entity)
        logger.debug(f"Created {kind.__name__} {entity_id}")
        return entity

    def get_or_create_token_holder(
        self, address: str, create_if_missing: bool = True
    ) -> Optional[TokenHolder]:
        return self._get_or_create(TokenHolder, address, create_if_missing)

    def get_or_create_delegate(
        self, address: str, create_if_missing: bool = True
    ) -> Optional[Delegate]:
        return self._get_or_create(Delegate, address, create_if_missing)

    def get_or_create_proposal(
        self, proposal_id: str, create_if_missing: bool = True
    ) -> Optional[Proposal]:
        return self._get_or_create(Proposal, proposal_id, create_if_missing)

    def get_or_create_vote(
        self, vote_id: str, create_if_missing: bool = True
    ) -> Optional[Vote]:
        return self._get_or_create(Vote, vote_id, create_if_missing)

    def get_governance(self) -> Governance:
        """The governance statistics singleton, created on first access."""
        return self._get_or_create(Governance, GOVERNANCE_ENTITY_ID, True)

    # =========================================================
    # TRUST-THE-EVENT RESOLUTION
    # =========================================================

    def resolve_delegate(self, address: str, event_name: str, tx_hash: str) -> Delegate:
        """
        Resolve an address that the event requires to be a known delegate.

        A missing delegate is a precondition anomaly: it is logged
        and the delegate is created anyway so the event still
        takes effect.
        """
        delegate = self.get_or_create_delegate(address, create_if_missing=False)
        if delegate is None:
            logger.error(
                f"Delegate {address} not found on {event_name}. tx_hash: {tx_hash}",
                extra={"context": {
                    "anomaly": "unknown_delegate",
                    "delegate": address,
                    "event": event_name,
                    "tx_hash": tx_hash,
                }},
            )
            delegate = self.get_or_create_delegate(address)
        return delegate

    def resolve_proposal(self, proposal_id: str, event_name: str, tx_hash: str) -> Proposal:
        """Resolve a proposal that the event requires to exist already."""
        proposal = self.get_or_create_proposal(proposal_id, create_if_missing=False)
        if proposal is None:
            logger.error(
                f"Proposal {proposal_id} not found on {event_name}. tx_hash: {tx_hash}",
                extra={"context": {
                    "anomaly": "unknown_proposal",
                    "proposal_id": proposal_id,
                    "event": event_name,
                    "tx_hash": tx_hash,
                }},
            )
            proposal = self.get_or_create_proposal(proposal_id)
        return proposal
