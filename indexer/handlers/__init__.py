"""
Event Handlers Package.

One handler per event kind. Each handler reads the entities it
needs through the HandlerContext, applies the event, and saves
what it touched. Handlers never raise for data anomalies.
"""

from typing import Callable, Dict, Optional, Type

from ..events import (
    DelegateChanged,
    DelegateVotesChanged,
    GovernanceEvent,
    ProposalCanceled,
    ProposalCreated,
    ProposalExecuted,
    ProposalQueued,
    Transfer,
    VoteCast,
)
from .context import HandlerContext
from .delegation import handle_delegate_changed, handle_delegate_votes_changed
from .governor import (
    handle_proposal_canceled,
    handle_proposal_created,
    handle_proposal_executed,
    handle_proposal_queued,
    handle_vote_cast,
    vote_id_for,
)
from .transfer import handle_transfer

# A handler returns False when it ignored the event outright.
Handler = Callable[[HandlerContext, GovernanceEvent], Optional[bool]]

HANDLERS: Dict[Type[GovernanceEvent], Handler] = {
    ProposalCreated: handle_proposal_created,
    ProposalCanceled: handle_proposal_canceled,
    ProposalQueued: handle_proposal_queued,
    ProposalExecuted: handle_proposal_executed,
    VoteCast: handle_vote_cast,
    DelegateChanged: handle_delegate_changed,
    DelegateVotesChanged: handle_delegate_votes_changed,
    Transfer: handle_transfer,
}

__all__ = [
    "HANDLERS",
    "Handler",
    "HandlerContext",
    "handle_delegate_changed",
    "handle_delegate_votes_changed",
    "handle_proposal_canceled",
    "handle_proposal_created",
    "handle_proposal_executed",
    "handle_proposal_queued",
    "handle_transfer",
    "handle_vote_cast",
    "vote_id_for",
]
