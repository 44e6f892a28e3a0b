"""
Pydantic Read Models for Materialized Entities.

What dashboards and APIs receive. Raw base-unit integers are
serialized as strings (uint256 does not fit a JSON number);
display decimals likewise.
"""

from decimal import Decimal
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, field_serializer


class EntityView(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class TokenHolderView(EntityView):
    id: str
    token_balance_raw: int
    token_balance: Decimal
    total_tokens_held_raw: int
    total_tokens_held: Decimal
    delegate_id: Optional[str] = None

    @field_serializer("token_balance_raw", "total_tokens_held_raw")
    def serialize_raw(self, value: int) -> str:
        return str(value)

    @field_serializer("token_balance", "total_tokens_held")
    def serialize_decimal(self, value: Decimal) -> str:
        return str(value)


class DelegateView(EntityView):
    id: str
    delegated_votes_raw: int
    delegated_votes: Decimal
    token_holders_represented_amount: int

    @field_serializer("delegated_votes_raw")
    def serialize_raw(self, value: int) -> str:
        return str(value)

    @field_serializer("delegated_votes")
    def serialize_decimal(self, value: Decimal) -> str:
        return str(value)


class ProposalView(EntityView):
    id: str
    proposer_id: Optional[str] = None
    targets: List[str]
    values: List[str]
    signatures: List[str]
    calldatas: List[str]
    start_block: int
    end_block: int
    description: str
    status: str
    execution_eta: Optional[int] = None


class VoteView(EntityView):
    id: str
    proposal_id: Optional[str] = None
    voter_id: Optional[str] = None
    votes_raw: int
    votes: Decimal
    support: bool
    reason: Optional[str] = None

    @field_serializer("votes_raw")
    def serialize_raw(self, value: int) -> str:
        return str(value)

    @field_serializer("votes")
    def serialize_decimal(self, value: Decimal) -> str:
        return str(value)


class GovernanceView(EntityView):
    current_token_holders: int
    current_delegates: int
    delegated_votes_raw: int
    delegated_votes: Decimal

    @field_serializer("delegated_votes_raw")
    def serialize_raw(self, value: int) -> str:
        return str(value)

    @field_serializer("delegated_votes")
    def serialize_decimal(self, value: Decimal) -> str:
        return str(value)


class VoteTally(BaseModel):
    """Counted for/against weight on one proposal."""

    proposal_id: str
    for_votes_raw: int = 0
    against_votes_raw: int = 0
    for_voters: int = 0
    against_voters: int = 0

    @field_serializer("for_votes_raw", "against_votes_raw")
    def serialize_raw(self, value: int) -> str:
        return str(value)

    @classmethod
    def from_votes(cls, proposal_id: str, votes: Iterable[Any]) -> "VoteTally":
        """Sum the recorded ballots of one proposal."""
        tally = cls(proposal_id=proposal_id)
        for vote in votes:
            if vote.support:
                tally.for_votes_raw += vote.votes_raw
                tally.for_voters += 1
            else:
                tally.against_votes_raw += vote.votes_raw
                tally.against_voters += 1
        return tally
