"""
Governance Domain ORM Models.

============================================================
PURPOSE
============================================================
Derived entities materialized from token and governor
contract events: token holders, delegates, proposals, votes,
and the governance statistics singleton.

============================================================
DATA LIFECYCLE ROLE
============================================================
- Stage: MATERIALIZED (derived from the event log)
- Mutability: MUTABLE, keyed by identity, never deleted
- Source: indexer event handlers only
- Consumers: dashboards, APIs

Every amount is stored twice: the raw base-unit integer
(authoritative) and its decimal display form (a cache that
handlers recompute on every mutation of the raw field).

References between entities are plain id columns resolved
through the entity store at read time.

============================================================
MODELS
============================================================
- TokenHolder: balance and delegation state of an address
- Delegate: voting power delegated to an address
- Proposal: governor proposal and its lifecycle status
- Vote: one ballot per (voter, proposal)
- Governance: global counters (singleton)
- EventReceipt: applied (tx_hash, log_index) pairs

============================================================
"""

from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from storage.models.base import Base, DecimalAmount, RawAmount, TimestampMixin


class ProposalStatus(str, Enum):
    """Lifecycle status of a proposal."""
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    QUEUED = "QUEUED"
    CANCELLED = "CANCELLED"
    EXECUTED = "EXECUTED"


class TokenHolder(Base, TimestampMixin):
    """
    Balance and delegation state of one address.

    Created on the first Transfer or DelegateChanged that
    references the address. The balance is persisted as-is even
    when negative; a negative value is an upstream data signal.
    """

    __tablename__ = "token_holders"

    id: Mapped[str] = mapped_column(
        String(42),
        primary_key=True,
        comment="Holder address (lowercase hex)"
    )

    token_balance_raw: Mapped[int] = mapped_column(
        RawAmount,
        nullable=False,
        comment="Current balance in base units"
    )

    token_balance: Mapped[Decimal] = mapped_column(
        DecimalAmount,
        nullable=False,
        comment="Current balance in display units"
    )

    total_tokens_held_raw: Mapped[int] = mapped_column(
        RawAmount,
        nullable=False,
        comment="Cumulative inbound transfer volume in base units"
    )

    total_tokens_held: Mapped[Decimal] = mapped_column(
        DecimalAmount,
        nullable=False,
        comment="Cumulative inbound transfer volume in display units"
    )

    delegate_id: Mapped[Optional[str]] = mapped_column(
        String(42),
        ForeignKey("delegates.id"),
        nullable=True,
        comment="Delegate this holder currently delegates to"
    )

    __table_args__ = (
        Index("ix_token_holders_delegate_id", "delegate_id"),
    )

    def __repr__(self) -> str:
        return f"<TokenHolder {self.id} balance_raw={self.token_balance_raw}>"


class Delegate(Base, TimestampMixin):
    """
    Voting power assigned to one address.

    token_holders_represented_amount is not floored: it can go
    negative when the delegation log is inconsistent.
    """

    __tablename__ = "delegates"

    id: Mapped[str] = mapped_column(
        String(42),
        primary_key=True,
        comment="Delegate address (lowercase hex)"
    )

    delegated_votes_raw: Mapped[int] = mapped_column(
        RawAmount,
        nullable=False,
        comment="Voting power currently delegated, base units"
    )

    delegated_votes: Mapped[Decimal] = mapped_column(
        DecimalAmount,
        nullable=False,
        comment="Voting power currently delegated, display units"
    )

    token_holders_represented_amount: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Number of holders delegating to this address"
    )

    def __repr__(self) -> str:
        return f"<Delegate {self.id} votes_raw={self.delegated_votes_raw}>"


class Proposal(Base, TimestampMixin):
    """
    A governor proposal.

    targets, values, signatures and calldatas are parallel lists
    describing the proposed calls. values are uint256 and kept as
    decimal strings; calldatas are 0x-prefixed hex.
    """

    __tablename__ = "proposals"

    id: Mapped[str] = mapped_column(
        String(80),
        primary_key=True,
        comment="Proposal id (decimal string)"
    )

    proposer_id: Mapped[Optional[str]] = mapped_column(
        String(42),
        ForeignKey("delegates.id"),
        nullable=True,
        comment="Proposing delegate"
    )

    targets: Mapped[List[str]] = mapped_column(JSON, nullable=False)
    values: Mapped[List[str]] = mapped_column("call_values", JSON, nullable=False)
    signatures: Mapped[List[str]] = mapped_column(JSON, nullable=False)
    calldatas: Mapped[List[str]] = mapped_column(JSON, nullable=False)

    start_block: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment="First block of the voting window"
    )

    end_block: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment="Last block of the voting window"
    )

    description: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="PENDING, ACTIVE, QUEUED, CANCELLED, EXECUTED"
    )

    execution_eta: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        nullable=True,
        comment="Timelock ETA (unix seconds) while queued"
    )

    __table_args__ = (
        Index("ix_proposals_status", "status"),
        Index("ix_proposals_proposer_id", "proposer_id"),
    )

    def __repr__(self) -> str:
        return f"<Proposal {self.id} status={self.status}>"


class Vote(Base, TimestampMixin):
    """
    One ballot, keyed "<voter>-<proposal id>".

    A repeat cast by the same voter on the same proposal
    overwrites this record.
    """

    __tablename__ = "votes"

    id: Mapped[str] = mapped_column(
        String(128),
        primary_key=True,
        comment="<voter address>-<proposal id>"
    )

    proposal_id: Mapped[Optional[str]] = mapped_column(
        String(80),
        ForeignKey("proposals.id"),
        nullable=True,
    )

    voter_id: Mapped[Optional[str]] = mapped_column(
        String(42),
        ForeignKey("delegates.id"),
        nullable=True,
    )

    votes_raw: Mapped[int] = mapped_column(
        RawAmount,
        nullable=False,
        comment="Voting weight at cast time, base units"
    )

    votes: Mapped[Decimal] = mapped_column(
        DecimalAmount,
        nullable=False,
        comment="Voting weight at cast time, display units"
    )

    support: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        comment="True = for, False = against"
    )

    reason: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Free-text reason supplied with the vote"
    )

    __table_args__ = (
        Index("ix_votes_proposal_id", "proposal_id"),
        Index("ix_votes_voter_id", "voter_id"),
    )

    def __repr__(self) -> str:
        return f"<Vote {self.id} support={self.support} votes_raw={self.votes_raw}>"


class Governance(Base, TimestampMixin):
    """
    Global governance statistics (single row).

    Counters are maintained incrementally on zero-crossings,
    never recomputed by the handlers.
    """

    __tablename__ = "governance"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)

    current_token_holders: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment="Holders with a strictly positive balance"
    )

    current_delegates: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment="Delegates with strictly positive delegated votes"
    )

    delegated_votes_raw: Mapped[int] = mapped_column(
        RawAmount,
        nullable=False,
        comment="Sum of delegated voting power, base units"
    )

    delegated_votes: Mapped[Decimal] = mapped_column(
        DecimalAmount,
        nullable=False,
        comment="Sum of delegated voting power, display units"
    )

    def __repr__(self) -> str:
        return (
            f"<Governance holders={self.current_token_holders} "
            f"delegates={self.current_delegates}>"
        )


class EventReceipt(Base, TimestampMixin):
    """
    Marker for an event already applied, keyed "<tx_hash>-<log_index>".

    Written in the same transaction as the event's mutations, so a
    rolled-back event leaves no receipt behind.
    """

    __tablename__ = "event_receipts"

    id: Mapped[str] = mapped_column(String(96), primary_key=True)

    event_name: Mapped[str] = mapped_column(String(32), nullable=False)

    block_number: Mapped[int] = mapped_column(BigInteger, nullable=False)

    def __repr__(self) -> str:
        return f"<EventReceipt {self.id} {self.event_name}@{self.block_number}>"
