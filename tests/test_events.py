"""
Tests for event types, decoding and decimal normalization.

============================================================
PURPOSE
============================================================
- Raw amounts convert to exact display decimals
- web3-shaped logs decode into typed, normalized events
- Malformed logs raise EventDecodeError with context

============================================================
"""

from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from core.exceptions import EventDecodeError, IndexerException, Severity
from indexer.decimals import to_decimal
from indexer.events import (
    DelegateVotesChanged,
    EventMetadata,
    ProposalCreated,
    ProposalQueued,
    Transfer,
    VoteCast,
    decode_event,
)
from indexer.handlers import HandlerContext


# ============================================================
# DECIMAL NORMALIZER
# ============================================================

class TestToDecimal:
    """Tests for to_decimal."""

    def test_one_and_a_half_tokens(self):
        assert to_decimal(1_500_000_000_000_000_000) == Decimal("1.5")

    def test_zero(self):
        assert to_decimal(0) == 0

    def test_smallest_unit(self):
        assert to_decimal(1) == Decimal("0.000000000000000001")

    def test_negative_amount(self):
        assert to_decimal(-2 * 10 ** 18) == Decimal("-2")

    def test_custom_decimals(self):
        assert to_decimal(123456, decimals=6) == Decimal("0.123456")
        assert to_decimal(42, decimals=0) == Decimal("42")

    def test_max_uint256_is_exact(self):
        raw = 2 ** 256 - 1
        digits = str(raw)
        expected = digits[:-18] + "." + digits[-18:]

        assert str(to_decimal(raw)) == expected

    def test_handler_context_normalizes_with_its_decimals(self, store):
        ctx = HandlerContext.for_store(store, token_decimals=6)

        value = ctx.normalize(2_500_000)

        assert isinstance(value, Decimal)
        assert value == Decimal("2.5")


# ============================================================
# EVENT CONSTRUCTION
# ============================================================

class TestEventNormalization:
    """Events normalize addresses and ids on construction."""

    def test_addresses_lowercased(self):
        event = Transfer(
            metadata=EventMetadata(block_number=1),
            from_address="0xABCDEF0000000000000000000000000000000001",
            to_address="0xABCDEF0000000000000000000000000000000002",
            amount=5,
        )

        assert event.from_address == "0xabcdef0000000000000000000000000000000001"
        assert event.to_address == "0xabcdef0000000000000000000000000000000002"

    def test_proposal_id_becomes_decimal_string(self):
        event = ProposalQueued(
            metadata=EventMetadata(block_number=1),
            proposal_id=10 ** 30,
            eta=0,
        )

        assert event.proposal_id == "1" + "0" * 30

    def test_calldatas_bytes_become_hex(self):
        event = ProposalCreated(
            metadata=EventMetadata(block_number=1),
            proposal_id=7,
            proposer="0x" + "A" * 40,
            calldatas=(b"\xde\xad", "0xbeef"),
        )

        assert event.calldatas == ("0xdead", "0xbeef")
        assert event.proposer == "0x" + "a" * 40

    def test_events_are_immutable(self):
        event = VoteCast(
            metadata=EventMetadata(block_number=1),
            voter="0x" + "b" * 40,
            proposal_id="1",
            support=1,
            weight=1,
        )

        with pytest.raises(FrozenInstanceError):
            event.weight = 2

    def test_receipt_id(self):
        assert EventMetadata(5, "0xABC", 3).receipt_id == "0xabc-3"
        assert EventMetadata(5, "0xabc", None).receipt_id is None
        assert EventMetadata(5, "", 3).receipt_id is None


# ============================================================
# DECODING
# ============================================================

class TestDecodeEvent:
    """Tests for decode_event on web3-shaped logs."""

    def test_decode_transfer_with_value_argument(self):
        event = decode_event({
            "event": "Transfer",
            "args": {
                "from": "0x0000000000000000000000000000000000000000",
                "to": "0xAbC0000000000000000000000000000000000001",
                "value": 10 ** 18,
            },
            "blockNumber": 12,
            "transactionHash": b"\xab" * 32,
            "logIndex": 4,
        })

        assert isinstance(event, Transfer)
        assert event.to_address == "0xabc0000000000000000000000000000000000001"
        assert event.amount == 10 ** 18
        assert event.metadata.block_number == 12
        assert event.metadata.transaction_hash == "0x" + "ab" * 32
        assert event.metadata.receipt_id == "0x" + "ab" * 32 + "-4"

    def test_decode_proposal_created(self):
        event = decode_event({
            "event": "ProposalCreated",
            "args": {
                "proposalId": 99,
                "proposer": "0x" + "1" * 40,
                "targets": ["0x" + "2" * 40],
                "values": [0],
                "signatures": [""],
                "calldatas": [b"\x00"],
                "startBlock": 110,
                "endBlock": 210,
                "description": "# Title",
            },
            "blockNumber": 100,
        })

        assert isinstance(event, ProposalCreated)
        assert event.proposal_id == "99"
        assert event.start_block == 110
        assert event.calldatas == ("0x00",)
        assert event.metadata.receipt_id is None

    def test_decode_accepts_openzeppelin_argument_names(self):
        event = decode_event({
            "event": "DelegateVotesChanged",
            "args": {"delegate": "0x" + "3" * 40, "previousVotes": 1, "newVotes": 2},
            "blockNumber": 1,
        })

        assert isinstance(event, DelegateVotesChanged)
        assert (event.previous_balance, event.new_balance) == (1, 2)

    def test_empty_reason_decodes_to_none(self):
        event = decode_event({
            "event": "VoteCast",
            "args": {
                "voter": "0x" + "4" * 40,
                "proposalId": 1,
                "support": 1,
                "weight": 10,
                "reason": "",
            },
            "blockNumber": 1,
        })

        assert event.reason is None

    def test_unknown_event_raises(self):
        with pytest.raises(EventDecodeError) as exc_info:
            decode_event({"event": "Approval", "args": {}, "blockNumber": 1})

        assert exc_info.value.context["event_name"] == "Approval"
        assert isinstance(exc_info.value, IndexerException)
        assert exc_info.value.severity == Severity.MEDIUM

    def test_missing_argument_raises_with_field(self):
        with pytest.raises(EventDecodeError) as exc_info:
            decode_event({
                "event": "Transfer",
                "args": {"from": "0x" + "0" * 40, "to": "0x" + "1" * 40},
                "blockNumber": 1,
            })

        assert exc_info.value.context["field"] == "amount"

    def test_missing_block_number_raises(self):
        with pytest.raises(EventDecodeError) as exc_info:
            decode_event({"event": "ProposalExecuted", "args": {"proposalId": 1}})

        assert exc_info.value.context["field"] == "blockNumber"

    def test_malformed_argument_raises(self):
        with pytest.raises(EventDecodeError) as exc_info:
            decode_event({
                "event": "ProposalQueued",
                "args": {"proposalId": 1, "eta": "soon"},
                "blockNumber": 1,
            })

        assert exc_info.value.context["cause_type"] == "ValueError"
