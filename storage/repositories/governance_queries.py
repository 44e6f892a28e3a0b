"""
Governance Read-Side Repository.

============================================================
PURPOSE
============================================================
Queries consumers run against the materialized entities.
Read-only: nothing here mutates or commits.

Amount columns are strings on non-PostgreSQL dialects, so
ordering by amount is done in Python after loading.

============================================================
"""

from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from core.constants import GOVERNANCE_ENTITY_ID
from storage.models.governance import (
    Delegate,
    Governance,
    Proposal,
    TokenHolder,
    Vote,
)
from storage.repositories.base import BaseRepository


class GovernanceQueryRepository(BaseRepository):
    """Lookups over proposals, votes, delegates and holders."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, "GovernanceQueryRepository")

    # =========================================================
    # PROPOSALS
    # =========================================================

    def get_proposal(self, proposal_id: str) -> Proposal:
        """
        Get a proposal by id.

        Raises:
            RecordNotFoundError: If the proposal was never seen
        """
        return self._get_by_id_or_raise(Proposal, proposal_id)

    def list_proposals(self, status: Optional[str] = None, limit: int = 100) -> List[Proposal]:
        """Most recent proposals first, optionally filtered by status."""
        stmt = select(Proposal)
        if status is not None:
            stmt = stmt.where(Proposal.status == status)
        stmt = stmt.order_by(desc(Proposal.start_block), Proposal.id).limit(limit)
        return self._execute_query(stmt)

    def list_proposals_by_proposer(self, proposer_id: str) -> List[Proposal]:
        stmt = (
            select(Proposal)
            .where(Proposal.proposer_id == proposer_id)
            .order_by(desc(Proposal.start_block))
        )
        return self._execute_query(stmt)

    # =========================================================
    # VOTES
    # =========================================================

    def list_votes_for_proposal(self, proposal_id: str) -> List[Vote]:
        stmt = select(Vote).where(Vote.proposal_id == proposal_id).order_by(Vote.id)
        return self._execute_query(stmt)

    def list_votes_by_voter(self, voter_id: str) -> List[Vote]:
        stmt = select(Vote).where(Vote.voter_id == voter_id).order_by(Vote.id)
        return self._execute_query(stmt)

    # =========================================================
    # DELEGATES AND HOLDERS
    # =========================================================

    def get_delegate(self, delegate_id: str) -> Optional[Delegate]:
        return self._get_by_id(Delegate, delegate_id)

    def get_token_holder(self, address: str) -> Optional[TokenHolder]:
        return self._get_by_id(TokenHolder, address)

    def list_holders_for_delegate(self, delegate_id: str) -> List[TokenHolder]:
        """Holders whose current delegate is `delegate_id`."""
        stmt = (
            select(TokenHolder)
            .where(TokenHolder.delegate_id == delegate_id)
            .order_by(TokenHolder.id)
        )
        return self._execute_query(stmt)

    def top_delegates(self, limit: int = 10) -> List[Delegate]:
        """Delegates with the most delegated voting power."""
        delegates = self._execute_query(select(Delegate))
        delegates.sort(key=lambda d: (-d.delegated_votes_raw, d.id))
        return delegates[:limit]

    def count_delegates(self) -> int:
        return self._count(Delegate)

    def count_token_holders(self) -> int:
        return self._count(TokenHolder)

    # =========================================================
    # GOVERNANCE
    # =========================================================

    def get_governance(self) -> Optional[Governance]:
        """The statistics singleton, or None before the first event."""
        return self._get_by_id(Governance, GOVERNANCE_ENTITY_ID)
