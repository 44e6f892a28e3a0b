"""
Indexer - Event Types.

============================================================
PURPOSE
============================================================
Typed, immutable records for every on-chain event the indexer
materializes, plus the decoder that builds them from web3-style
decoded logs.

============================================================
EVENTS
============================================================
Governor contract:
- ProposalCreated(proposalId, proposer, targets, values,
  signatures, calldatas, startBlock, endBlock, description)
- ProposalCanceled(proposalId)
- ProposalQueued(proposalId, eta)
- ProposalExecuted(proposalId)
- VoteCast(voter, proposalId, support, weight, reason)

Token contract:
- DelegateChanged(delegator, fromDelegate, toDelegate)
- DelegateVotesChanged(delegate, previousBalance, newBalance)
- Transfer(from, to, amount)

Every event carries EventMetadata (block number, transaction
hash, log index). Addresses are lowercased on construction and
proposal ids are kept as decimal strings.

============================================================
"""

from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Tuple

from core.constants import (
    EVENT_DELEGATE_CHANGED,
    EVENT_DELEGATE_VOTES_CHANGED,
    EVENT_PROPOSAL_CANCELED,
    EVENT_PROPOSAL_CREATED,
    EVENT_PROPOSAL_EXECUTED,
    EVENT_PROPOSAL_QUEUED,
    EVENT_TRANSFER,
    EVENT_VOTE_CAST,
)
from core.exceptions import EventDecodeError


def normalize_address(address: Any) -> str:
    """Lowercase 0x-prefixed hex form of an address."""
    if isinstance(address, (bytes, bytearray)):
        return "0x" + bytes(address).hex()
    return str(address).lower()


def _to_hex(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return str(value)


# ============================================================
# METADATA
# ============================================================

@dataclass(frozen=True)
class EventMetadata:
    """Where an event was observed on chain."""

    block_number: int
    transaction_hash: str = ""
    log_index: Optional[int] = None

    @property
    def receipt_id(self) -> Optional[str]:
        """Identity of the log, when the feed supplies enough to form one."""
        if not self.transaction_hash or self.log_index is None:
            return None
        return f"{self.transaction_hash.lower()}-{self.log_index}"


# ============================================================
# EVENT TYPES
# ============================================================

@dataclass(frozen=True)
class GovernanceEvent:
    """Base class for all indexed events."""

    name: ClassVar[str] = ""

    metadata: EventMetadata

    def _set(self, attr: str, value: Any) -> None:
        object.__setattr__(self, attr, value)


@dataclass(frozen=True)
class ProposalCreated(GovernanceEvent):
    name: ClassVar[str] = EVENT_PROPOSAL_CREATED

    proposal_id: str
    proposer: str
    targets: Tuple[str, ...] = ()
    values: Tuple[int, ...] = ()
    signatures: Tuple[str, ...] = ()
    calldatas: Tuple[str, ...] = ()
    start_block: int = 0
    end_block: int = 0
    description: str = ""

    def __post_init__(self) -> None:
        self._set("proposal_id", str(self.proposal_id))
        self._set("proposer", normalize_address(self.proposer))
        self._set("targets", tuple(normalize_address(t) for t in self.targets))
        self._set("values", tuple(int(v) for v in self.values))
        self._set("signatures", tuple(self.signatures))
        self._set("calldatas", tuple(_to_hex(c) for c in self.calldatas))


@dataclass(frozen=True)
class ProposalCanceled(GovernanceEvent):
    name: ClassVar[str] = EVENT_PROPOSAL_CANCELED

    proposal_id: str

    def __post_init__(self) -> None:
        self._set("proposal_id", str(self.proposal_id))


@dataclass(frozen=True)
class ProposalQueued(GovernanceEvent):
    name: ClassVar[str] = EVENT_PROPOSAL_QUEUED

    proposal_id: str
    eta: int

    def __post_init__(self) -> None:
        self._set("proposal_id", str(self.proposal_id))


@dataclass(frozen=True)
class ProposalExecuted(GovernanceEvent):
    name: ClassVar[str] = EVENT_PROPOSAL_EXECUTED

    proposal_id: str

    def __post_init__(self) -> None:
        self._set("proposal_id", str(self.proposal_id))


@dataclass(frozen=True)
class VoteCast(GovernanceEvent):
    name: ClassVar[str] = EVENT_VOTE_CAST

    voter: str
    proposal_id: str
    support: int
    weight: int
    reason: Optional[str] = None

    def __post_init__(self) -> None:
        self._set("voter", normalize_address(self.voter))
        self._set("proposal_id", str(self.proposal_id))


@dataclass(frozen=True)
class DelegateChanged(GovernanceEvent):
    name: ClassVar[str] = EVENT_DELEGATE_CHANGED

    delegator: str
    from_delegate: str
    to_delegate: str

    def __post_init__(self) -> None:
        self._set("delegator", normalize_address(self.delegator))
        self._set("from_delegate", normalize_address(self.from_delegate))
        self._set("to_delegate", normalize_address(self.to_delegate))


@dataclass(frozen=True)
class DelegateVotesChanged(GovernanceEvent):
    name: ClassVar[str] = EVENT_DELEGATE_VOTES_CHANGED

    delegate: str
    previous_balance: int
    new_balance: int

    def __post_init__(self) -> None:
        self._set("delegate", normalize_address(self.delegate))


@dataclass(frozen=True)
class Transfer(GovernanceEvent):
    name: ClassVar[str] = EVENT_TRANSFER

    from_address: str
    to_address: str
    amount: int

    def __post_init__(self) -> None:
        self._set("from_address", normalize_address(self.from_address))
        self._set("to_address", normalize_address(self.to_address))


# ============================================================
# DECODING
# ============================================================

def _arg(args: Mapping[str, Any], event_name: str, *names: str) -> Any:
    """First present argument among `names` (ABIs differ between governors)."""
    for name in names:
        if name in args:
            return args[name]
    raise EventDecodeError(
        f"{event_name} log is missing argument {names[0]!r}",
        event_name=event_name,
        field=names[0],
    )


def _decode_proposal_created(args: Mapping[str, Any], meta: EventMetadata) -> ProposalCreated:
    n = EVENT_PROPOSAL_CREATED
    return ProposalCreated(
        metadata=meta,
        proposal_id=_arg(args, n, "proposalId", "id"),
        proposer=_arg(args, n, "proposer"),
        targets=tuple(_arg(args, n, "targets")),
        values=tuple(_arg(args, n, "values")),
        signatures=tuple(_arg(args, n, "signatures")),
        calldatas=tuple(_arg(args, n, "calldatas")),
        start_block=int(_arg(args, n, "startBlock", "voteStart")),
        end_block=int(_arg(args, n, "endBlock", "voteEnd")),
        description=str(_arg(args, n, "description")),
    )


def _decode_proposal_canceled(args: Mapping[str, Any], meta: EventMetadata) -> ProposalCanceled:
    return ProposalCanceled(
        metadata=meta,
        proposal_id=_arg(args, EVENT_PROPOSAL_CANCELED, "proposalId", "id"),
    )


def _decode_proposal_queued(args: Mapping[str, Any], meta: EventMetadata) -> ProposalQueued:
    n = EVENT_PROPOSAL_QUEUED
    return ProposalQueued(
        metadata=meta,
        proposal_id=_arg(args, n, "proposalId", "id"),
        eta=int(_arg(args, n, "eta", "etaSeconds")),
    )


def _decode_proposal_executed(args: Mapping[str, Any], meta: EventMetadata) -> ProposalExecuted:
    return ProposalExecuted(
        metadata=meta,
        proposal_id=_arg(args, EVENT_PROPOSAL_EXECUTED, "proposalId", "id"),
    )


def _decode_vote_cast(args: Mapping[str, Any], meta: EventMetadata) -> VoteCast:
    n = EVENT_VOTE_CAST
    return VoteCast(
        metadata=meta,
        voter=_arg(args, n, "voter"),
        proposal_id=_arg(args, n, "proposalId"),
        support=int(_arg(args, n, "support")),
        weight=int(_arg(args, n, "weight", "votes")),
        reason=args.get("reason") or None,
    )


def _decode_delegate_changed(args: Mapping[str, Any], meta: EventMetadata) -> DelegateChanged:
    n = EVENT_DELEGATE_CHANGED
    return DelegateChanged(
        metadata=meta,
        delegator=_arg(args, n, "delegator"),
        from_delegate=_arg(args, n, "fromDelegate"),
        to_delegate=_arg(args, n, "toDelegate"),
    )


def _decode_delegate_votes_changed(
    args: Mapping[str, Any], meta: EventMetadata
) -> DelegateVotesChanged:
    n = EVENT_DELEGATE_VOTES_CHANGED
    return DelegateVotesChanged(
        metadata=meta,
        delegate=_arg(args, n, "delegate"),
        previous_balance=int(_arg(args, n, "previousBalance", "previousVotes")),
        new_balance=int(_arg(args, n, "newBalance", "newVotes")),
    )


def _decode_transfer(args: Mapping[str, Any], meta: EventMetadata) -> Transfer:
    n = EVENT_TRANSFER
    return Transfer(
        metadata=meta,
        from_address=_arg(args, n, "from"),
        to_address=_arg(args, n, "to"),
        amount=int(_arg(args, n, "amount", "value")),
    )


DECODERS: Dict[str, Callable[[Mapping[str, Any], EventMetadata], GovernanceEvent]] = {
    EVENT_PROPOSAL_CREATED: _decode_proposal_created,
    EVENT_PROPOSAL_CANCELED: _decode_proposal_canceled,
    EVENT_PROPOSAL_QUEUED: _decode_proposal_queued,
    EVENT_PROPOSAL_EXECUTED: _decode_proposal_executed,
    EVENT_VOTE_CAST: _decode_vote_cast,
    EVENT_DELEGATE_CHANGED: _decode_delegate_changed,
    EVENT_DELEGATE_VOTES_CHANGED: _decode_delegate_votes_changed,
    EVENT_TRANSFER: _decode_transfer,
}


def decode_event(log: Mapping[str, Any]) -> GovernanceEvent:
    """
    Build a typed event from a decoded log.

    Accepts the shape web3.py returns from
    `contract.events.<Name>().process_receipt()` / `get_logs()`:

        {
            "event": "Transfer",
            "args": {"from": "0x..", "to": "0x..", "value": 10},
            "blockNumber": 123,
            "transactionHash": HexBytes("0x.."),
            "logIndex": 4,
        }

    Raises:
        EventDecodeError: unknown event name or missing field
    """
    event_name = log.get("event")
    decoder = DECODERS.get(event_name)
    if decoder is None:
        raise EventDecodeError(f"Unsupported event {event_name!r}", event_name=event_name)

    if "blockNumber" not in log:
        raise EventDecodeError(
            f"{event_name} log has no blockNumber",
            event_name=event_name,
            field="blockNumber",
        )

    log_index = log.get("logIndex")
    metadata = EventMetadata(
        block_number=int(log["blockNumber"]),
        transaction_hash=_to_hex(log.get("transactionHash") or "").lower(),
        log_index=int(log_index) if log_index is not None else None,
    )

    args = log.get("args") or {}
    try:
        return decoder(args, metadata)
    except (TypeError, ValueError) as e:
        raise EventDecodeError(
            f"{event_name} log has a malformed argument: {e}",
            event_name=event_name,
            cause=e,
        ) from e
