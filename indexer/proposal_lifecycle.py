"""
Indexer - Proposal Status State Machine.

============================================================
PURPOSE
============================================================
Guards every proposal status change.

STATE MACHINE:

    PENDING ──► ACTIVE ──► QUEUED ──► EXECUTED
                  │                    ▲
                  └────────────────────┘

    PENDING | ACTIVE | QUEUED ──► CANCELLED

    ACTIVE may also be entered directly at creation.

INVARIANTS:
- CANCELLED and EXECUTED are terminal
- Status only moves forward: PENDING < ACTIVE < QUEUED < terminal
- A refused transition is logged, never raised

============================================================
"""

import logging
from typing import Dict, Set

from storage.models.governance import Proposal, ProposalStatus

logger = logging.getLogger(__name__)


VALID_TRANSITIONS: Dict[ProposalStatus, Set[ProposalStatus]] = {
    ProposalStatus.PENDING: {
        ProposalStatus.ACTIVE,
        ProposalStatus.CANCELLED,
    },
    ProposalStatus.ACTIVE: {
        ProposalStatus.QUEUED,
        ProposalStatus.CANCELLED,
        ProposalStatus.EXECUTED,
    },
    ProposalStatus.QUEUED: {
        ProposalStatus.CANCELLED,
        ProposalStatus.EXECUTED,
    },
    # Terminal states - no transitions out
    ProposalStatus.CANCELLED: set(),
    ProposalStatus.EXECUTED: set(),
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in VALID_TRANSITIONS.items() if not targets
)

STATUS_RANK: Dict[ProposalStatus, int] = {
    ProposalStatus.PENDING: 0,
    ProposalStatus.ACTIVE: 1,
    ProposalStatus.QUEUED: 2,
    ProposalStatus.CANCELLED: 3,
    ProposalStatus.EXECUTED: 3,
}


def is_terminal(proposal: Proposal) -> bool:
    return ProposalStatus(proposal.status) in TERMINAL_STATUSES


def transition(
    proposal: Proposal,
    target: ProposalStatus,
    event_name: str,
    tx_hash: str = "",
) -> bool:
    """
    Move a proposal to `target` if the state machine allows it.

    Re-entering the current status is a silent no-op. Leaving a
    terminal status is logged as an anomaly and refused, and so
    is a move back to an earlier status (a replayed creation).
    Forward moves that skip a step (e.g. EXECUTED straight from
    PENDING) are applied: the governor emitted them.

    Returns:
        True if the status changed
    """
    current = ProposalStatus(proposal.status)

    if current == target:
        return False

    if current in TERMINAL_STATUSES:
        logger.error(
            f"Proposal {proposal.id} is {current.value}; ignoring {event_name} "
            f"transition to {target.value}. tx_hash: {tx_hash}",
            extra={"context": {
                "anomaly": "terminal_proposal_transition",
                "proposal_id": proposal.id,
                "from_status": current.value,
                "to_status": target.value,
                "event": event_name,
                "tx_hash": tx_hash,
            }},
        )
        return False

    if STATUS_RANK[target] < STATUS_RANK[current]:
        logger.warning(
            f"Proposal {proposal.id} is {current.value}; refusing backward "
            f"{event_name} transition to {target.value}. tx_hash: {tx_hash}",
            extra={"context": {
                "anomaly": "backward_proposal_transition",
                "proposal_id": proposal.id,
                "from_status": current.value,
                "to_status": target.value,
                "event": event_name,
                "tx_hash": tx_hash,
            }},
        )
        return False

    if target not in VALID_TRANSITIONS[current]:
        logger.warning(
            f"Proposal {proposal.id} moved {current.value} -> {target.value} "
            f"outside the usual lifecycle on {event_name}. tx_hash: {tx_hash}"
        )

    proposal.status = target.value
    return True
