"""
Tests for governor contract handlers.

============================================================
PURPOSE
============================================================
Tests proposal lifecycle and vote recording:
- Creation status depends on the creation block vs startBlock
- Cancel / queue / execute move the status along the lifecycle
- Terminal statuses are never left
- One Vote per (voter, proposal); abstain is ignored

============================================================
"""

import logging
from decimal import Decimal

import pytest

from builders import (
    ALICE,
    BOB,
    CAROL,
    ONE_TOKEN,
    proposal_canceled,
    proposal_created,
    proposal_executed,
    proposal_queued,
    vote_cast,
)
from indexer import proposal_lifecycle
from indexer.handlers import (
    handle_proposal_canceled,
    handle_proposal_created,
    handle_proposal_executed,
    handle_proposal_queued,
    handle_vote_cast,
    vote_id_for,
)
from storage.models import Delegate, Proposal, ProposalStatus, Vote


# ============================================================
# HELPERS
# ============================================================

def _status(store, proposal_id="1") -> str:
    return store.get(Proposal, proposal_id).status


# ============================================================
# PROPOSAL CREATED
# ============================================================

class TestProposalCreated:
    """Tests for handle_proposal_created."""

    def test_created_at_start_block_is_active(self, ctx, store):
        handle_proposal_created(ctx, proposal_created(block=100, start_block=100))

        assert _status(store) == ProposalStatus.ACTIVE.value

    def test_created_before_start_block_is_pending(self, ctx, store):
        handle_proposal_created(ctx, proposal_created(block=50, start_block=100))

        assert _status(store) == ProposalStatus.PENDING.value

    def test_fields_copied(self, ctx, store):
        handle_proposal_created(ctx, proposal_created(proposer=ALICE, end_block=250))
        proposal = store.get(Proposal, "1")

        assert proposal.proposer_id == ALICE
        assert proposal.targets == [BOB]
        assert proposal.values == ["0"]
        assert proposal.signatures == ["transfer(address,uint256)"]
        assert proposal.calldatas == ["0x0102"]
        assert proposal.start_block == 100
        assert proposal.end_block == 250
        assert proposal.description == "Fund the grants program"

    def test_unknown_proposer_logged_and_created(self, ctx, store, caplog):
        with caplog.at_level(logging.ERROR):
            handle_proposal_created(ctx, proposal_created(proposer=CAROL))

        assert store.get(Delegate, CAROL) is not None
        assert f"Delegate {CAROL} not found on ProposalCreated" in caplog.text

    def test_known_proposer_not_logged(self, ctx, store, caplog):
        ctx.entities.get_or_create_delegate(ALICE)

        with caplog.at_level(logging.ERROR):
            handle_proposal_created(ctx, proposal_created(proposer=ALICE))

        assert "not found" not in caplog.text


# ============================================================
# LIFECYCLE EVENTS
# ============================================================

class TestProposalLifecycle:
    """Tests for cancel, queue and execute."""

    def test_cancel_pending(self, ctx, store):
        handle_proposal_created(ctx, proposal_created(block=50, start_block=100))
        handle_proposal_canceled(ctx, proposal_canceled())

        assert _status(store) == ProposalStatus.CANCELLED.value

    def test_queue_sets_eta(self, ctx, store):
        handle_proposal_created(ctx, proposal_created())
        handle_proposal_queued(ctx, proposal_queued(eta=1_800_000_000))

        proposal = store.get(Proposal, "1")
        assert proposal.status == ProposalStatus.QUEUED.value
        assert proposal.execution_eta == 1_800_000_000

    def test_execute_clears_eta(self, ctx, store):
        handle_proposal_created(ctx, proposal_created())
        handle_proposal_queued(ctx, proposal_queued())
        handle_proposal_executed(ctx, proposal_executed())

        proposal = store.get(Proposal, "1")
        assert proposal.status == ProposalStatus.EXECUTED.value
        assert proposal.execution_eta is None

    def test_execute_without_queue(self, ctx, store):
        handle_proposal_created(ctx, proposal_created())
        handle_proposal_executed(ctx, proposal_executed())

        assert _status(store) == ProposalStatus.EXECUTED.value

    def test_executed_is_terminal(self, ctx, store, caplog):
        handle_proposal_created(ctx, proposal_created())
        handle_proposal_executed(ctx, proposal_executed())

        with caplog.at_level(logging.ERROR):
            handle_proposal_canceled(ctx, proposal_canceled(block=400))

        assert _status(store) == ProposalStatus.EXECUTED.value
        assert "is EXECUTED; ignoring ProposalCanceled" in caplog.text

    def test_cancelled_is_terminal(self, ctx, store):
        handle_proposal_created(ctx, proposal_created())
        handle_proposal_canceled(ctx, proposal_canceled())
        handle_proposal_queued(ctx, proposal_queued(eta=5))
        handle_proposal_executed(ctx, proposal_executed())

        proposal = store.get(Proposal, "1")
        assert proposal.status == ProposalStatus.CANCELLED.value
        assert proposal.execution_eta is None

    def test_repeated_cancel_is_noop(self, ctx, store, caplog):
        handle_proposal_created(ctx, proposal_created())
        handle_proposal_canceled(ctx, proposal_canceled())
        caplog.clear()

        with caplog.at_level(logging.ERROR):
            handle_proposal_canceled(ctx, proposal_canceled())

        assert _status(store) == ProposalStatus.CANCELLED.value
        assert caplog.text == ""

    def test_cancel_unknown_proposal_synthesizes_it(self, ctx, store, caplog):
        with caplog.at_level(logging.ERROR):
            handle_proposal_canceled(ctx, proposal_canceled(proposal_id="77"))

        assert _status(store, "77") == ProposalStatus.CANCELLED.value
        assert "Proposal 77 not found on ProposalCanceled" in caplog.text


class TestTransitionGuard:
    """Tests for proposal_lifecycle.transition directly."""

    def test_same_status_is_not_a_change(self):
        proposal = Proposal(id="1", status=ProposalStatus.ACTIVE.value)

        assert proposal_lifecycle.transition(proposal, ProposalStatus.ACTIVE, "test") is False

    def test_out_of_lifecycle_move_applied_with_warning(self, caplog):
        proposal = Proposal(id="1", status=ProposalStatus.PENDING.value)

        with caplog.at_level(logging.WARNING):
            changed = proposal_lifecycle.transition(proposal, ProposalStatus.EXECUTED, "ProposalExecuted")

        assert changed is True
        assert proposal.status == ProposalStatus.EXECUTED.value
        assert "outside the usual lifecycle" in caplog.text

    @pytest.mark.parametrize("current,target", [
        (ProposalStatus.ACTIVE, ProposalStatus.PENDING),
        (ProposalStatus.QUEUED, ProposalStatus.ACTIVE),
        (ProposalStatus.QUEUED, ProposalStatus.PENDING),
    ])
    def test_backward_move_refused(self, current, target, caplog):
        proposal = Proposal(id="1", status=current.value)

        with caplog.at_level(logging.WARNING):
            changed = proposal_lifecycle.transition(proposal, target, "ProposalCreated")

        assert changed is False
        assert proposal.status == current.value
        assert "refusing backward" in caplog.text

    def test_replayed_creation_keeps_queued_proposal(self, ctx, store):
        created = proposal_created("1", block=100, start_block=100)
        handle_proposal_created(ctx, created)
        handle_proposal_queued(ctx, proposal_queued("1", eta=123, block=110))

        handle_proposal_created(ctx, created)

        proposal = store.get(Proposal, "1")
        assert proposal.status == ProposalStatus.QUEUED.value
        assert proposal.execution_eta == 123

    def test_late_creation_keeps_proposal_opened_by_vote(self, ctx, store):
        handle_vote_cast(ctx, vote_cast(BOB, "1", support=1, block=40))
        assert _status(store) == ProposalStatus.ACTIVE.value

        handle_proposal_created(ctx, proposal_created("1", block=50, start_block=100))

        assert _status(store) == ProposalStatus.ACTIVE.value
        assert store.get(Proposal, "1").start_block == 100

    @pytest.mark.parametrize("status", [ProposalStatus.CANCELLED, ProposalStatus.EXECUTED])
    def test_terminal_statuses(self, status):
        assert proposal_lifecycle.is_terminal(Proposal(id="1", status=status.value))


# ============================================================
# VOTE CAST
# ============================================================

class TestVoteCast:
    """Tests for handle_vote_cast."""

    def test_vote_for(self, ctx, store):
        handle_proposal_created(ctx, proposal_created())
        handle_vote_cast(ctx, vote_cast(voter=BOB, support=1, weight=3 * ONE_TOKEN))

        vote = store.get(Vote, vote_id_for(BOB, "1"))
        assert vote.id == f"{BOB}-1"
        assert vote.support is True
        assert vote.votes_raw == 3 * ONE_TOKEN
        assert vote.votes == Decimal("3")
        assert vote.proposal_id == "1"
        assert vote.voter_id == BOB

    def test_vote_against_with_reason(self, ctx, store):
        handle_proposal_created(ctx, proposal_created())
        handle_vote_cast(ctx, vote_cast(support=0, reason="too expensive"))

        vote = store.get(Vote, vote_id_for(BOB, "1"))
        assert vote.support is False
        assert vote.reason == "too expensive"

    def test_abstain_touches_nothing(self, ctx, store):
        handle_vote_cast(ctx, vote_cast(support=2))

        assert len(store) == 0

    def test_recast_overwrites(self, ctx, store):
        handle_proposal_created(ctx, proposal_created())
        handle_vote_cast(ctx, vote_cast(support=1, weight=ONE_TOKEN))
        handle_vote_cast(ctx, vote_cast(support=0, weight=2 * ONE_TOKEN))

        votes = store.list(Vote)
        assert len(votes) == 1
        assert votes[0].support is False
        assert votes[0].votes_raw == 2 * ONE_TOKEN

    def test_first_vote_opens_pending_proposal(self, ctx, store):
        handle_proposal_created(ctx, proposal_created(block=50, start_block=100))
        handle_vote_cast(ctx, vote_cast())

        assert _status(store) == ProposalStatus.ACTIVE.value

    def test_vote_does_not_reopen_cancelled_proposal(self, ctx, store):
        handle_proposal_created(ctx, proposal_created())
        handle_proposal_canceled(ctx, proposal_canceled())
        handle_vote_cast(ctx, vote_cast())

        assert _status(store) == ProposalStatus.CANCELLED.value
        assert store.get(Vote, vote_id_for(BOB, "1")) is not None

    def test_unknown_voter_logged_and_created(self, ctx, store, caplog):
        handle_proposal_created(ctx, proposal_created())

        with caplog.at_level(logging.ERROR):
            handle_vote_cast(ctx, vote_cast(voter=CAROL))

        assert store.get(Delegate, CAROL) is not None
        assert f"Delegate {CAROL} not found on VoteCast" in caplog.text
