"""
Core Module - Constants.

============================================================
RESPONSIBILITY
============================================================
Chain, entity and event constants shared by the decoder, the
handlers and the audit. Event names match the contract ABIs.

============================================================
"""

from typing import FrozenSet

# ============================================================
# SYSTEM CONSTANTS
# ============================================================

SYSTEM_NAME = "governance-indexer"
SYSTEM_VERSION = "0.1.0"

# ============================================================
# CHAIN CONSTANTS
# ============================================================

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
"""Mint source / burn sink. Never counted as a token holder."""

DEFAULT_TOKEN_DECIMALS = 18
"""Base-unit exponent of the governance token."""

MAX_TOKEN_DECIMALS = 77
"""uint256 has 78 decimal digits; anything beyond is malformed config."""

# ============================================================
# ENTITY CONSTANTS
# ============================================================

GOVERNANCE_ENTITY_ID = "GOVERNANCE"
"""Well-known key of the governance statistics singleton."""

VOTE_ID_SEPARATOR = "-"

# ============================================================
# VOTE SUPPORT VALUES
# ============================================================

SUPPORT_AGAINST = 0
SUPPORT_FOR = 1

SUPPORTED_VOTE_VALUES: FrozenSet[int] = frozenset({SUPPORT_AGAINST, SUPPORT_FOR})
"""Abstain (2) and anything else is filtered out before touching entities."""

# ============================================================
# EVENT NAMES
# ============================================================

EVENT_PROPOSAL_CREATED = "ProposalCreated"
EVENT_PROPOSAL_CANCELED = "ProposalCanceled"
EVENT_PROPOSAL_QUEUED = "ProposalQueued"
EVENT_PROPOSAL_EXECUTED = "ProposalExecuted"
EVENT_VOTE_CAST = "VoteCast"
EVENT_DELEGATE_CHANGED = "DelegateChanged"
EVENT_DELEGATE_VOTES_CHANGED = "DelegateVotesChanged"
EVENT_TRANSFER = "Transfer"
