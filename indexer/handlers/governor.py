"""
Governor Contract Handlers.

============================================================
EVENTS
============================================================
- ProposalCreated: populate the proposal, ACTIVE if the
  creation block already reached startBlock, else PENDING
- ProposalCanceled: CANCELLED
- ProposalQueued: QUEUED with the timelock ETA
- ProposalExecuted: EXECUTED, ETA cleared
- VoteCast: one Vote per (voter, proposal); the first vote on
  a PENDING proposal opens it

Proposers and voters are expected to be known delegates. When
they are not, the anomaly is logged and the delegate is
created so the event is still applied.

============================================================
"""

import logging

from core.constants import SUPPORT_FOR, SUPPORTED_VOTE_VALUES, VOTE_ID_SEPARATOR
from storage.models.governance import ProposalStatus

from .. import proposal_lifecycle
from ..events import (
    ProposalCanceled,
    ProposalCreated,
    ProposalExecuted,
    ProposalQueued,
    VoteCast,
)
from .context import HandlerContext

logger = logging.getLogger(__name__)


def vote_id_for(voter: str, proposal_id: str) -> str:
    return f"{voter}{VOTE_ID_SEPARATOR}{proposal_id}"


def handle_proposal_created(ctx: HandlerContext, event: ProposalCreated) -> None:
    tx_hash = event.metadata.transaction_hash
    proposal = ctx.entities.get_or_create_proposal(event.proposal_id)
    proposer = ctx.entities.resolve_delegate(event.proposer, event.name, tx_hash)

    proposal.proposer_id = proposer.id
    proposal.targets = list(event.targets)
    proposal.values = [str(value) for value in event.values]
    proposal.signatures = list(event.signatures)
    proposal.calldatas = list(event.calldatas)
    proposal.start_block = event.start_block
    proposal.end_block = event.end_block
    proposal.description = event.description

    if event.metadata.block_number >= event.start_block:
        initial = ProposalStatus.ACTIVE
    else:
        initial = ProposalStatus.PENDING
    proposal_lifecycle.transition(proposal, initial, event.name, tx_hash)

    ctx.store.save(proposal)
    logger.info(f"Proposal {proposal.id} created by {proposer.id} ({proposal.status})")


def handle_proposal_canceled(ctx: HandlerContext, event: ProposalCanceled) -> None:
    tx_hash = event.metadata.transaction_hash
    proposal = ctx.entities.resolve_proposal(event.proposal_id, event.name, tx_hash)

    proposal_lifecycle.transition(proposal, ProposalStatus.CANCELLED, event.name, tx_hash)
    ctx.store.save(proposal)


def handle_proposal_queued(ctx: HandlerContext, event: ProposalQueued) -> None:
    tx_hash = event.metadata.transaction_hash
    proposal = ctx.entities.resolve_proposal(event.proposal_id, event.name, tx_hash)

    if proposal_lifecycle.transition(proposal, ProposalStatus.QUEUED, event.name, tx_hash):
        proposal.execution_eta = event.eta
    ctx.store.save(proposal)


def handle_proposal_executed(ctx: HandlerContext, event: ProposalExecuted) -> None:
    tx_hash = event.metadata.transaction_hash
    proposal = ctx.entities.resolve_proposal(event.proposal_id, event.name, tx_hash)

    if proposal_lifecycle.transition(proposal, ProposalStatus.EXECUTED, event.name, tx_hash):
        proposal.execution_eta = None
    ctx.store.save(proposal)


def handle_vote_cast(ctx: HandlerContext, event: VoteCast) -> bool:
    """
    Record a for/against ballot.

    Abstain and any other support value is filtered out before
    any entity is read or written.

    Returns:
        False if the ballot was ignored
    """
    if event.support not in SUPPORTED_VOTE_VALUES:
        return False

    tx_hash = event.metadata.transaction_hash
    proposal = ctx.entities.resolve_proposal(event.proposal_id, event.name, tx_hash)
    vote = ctx.entities.get_or_create_vote(vote_id_for(event.voter, event.proposal_id))
    voter = ctx.entities.resolve_delegate(event.voter, event.name, tx_hash)

    vote.proposal_id = proposal.id
    vote.voter_id = voter.id
    vote.votes_raw = event.weight
    vote.votes = ctx.normalize(event.weight)
    vote.support = event.support == SUPPORT_FOR
    vote.reason = event.reason
    ctx.store.save(vote)

    if proposal.status == ProposalStatus.PENDING.value:
        proposal_lifecycle.transition(proposal, ProposalStatus.ACTIVE, event.name, tx_hash)
        ctx.store.save(proposal)
    return True
