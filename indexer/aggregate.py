"""
Indexer - Governance Aggregate Maintainer.

============================================================
PURPOSE
============================================================
Keeps the Governance singleton consistent with holder and
delegate population changes. Counters move only on
zero-crossings; they are never recomputed from the tables.

INVARIANTS (on consistent upstream data):
- current_token_holders == #holders with balance > 0,
  the zero address excluded
- current_delegates == #delegates with delegated votes > 0
- delegated_votes_raw == sum of delegated votes

============================================================
"""

from core.constants import ZERO_ADDRESS
from storage.models.governance import Governance

from .decimals import to_decimal


def apply_holder_balance_change(
    governance: Governance,
    address: str,
    previous_raw: int,
    new_raw: int,
) -> bool:
    """
    Adjust current_token_holders for one holder's balance change.

    At most one of the two crossings fires. The zero address is a
    mint source / burn sink and never counts as a holder.

    Returns:
        True if the governance record changed and must be saved
    """
    if address == ZERO_ADDRESS:
        return False

    if new_raw == 0 and previous_raw > 0:
        governance.current_token_holders -= 1
        return True
    elif new_raw > 0 and previous_raw == 0:
        governance.current_token_holders += 1
        return True

    return False


def apply_delegate_votes_change(
    governance: Governance,
    previous_raw: int,
    new_raw: int,
    decimals: int,
) -> None:
    """
    Adjust current_delegates and the delegated-votes total.

    0 -> positive adds a delegate, positive -> 0 removes one,
    0 -> 0 leaves the counter alone.
    """
    if previous_raw == 0 and new_raw > 0:
        governance.current_delegates += 1
    if new_raw == 0 and previous_raw != 0:
        governance.current_delegates -= 1

    governance.delegated_votes_raw += new_raw - previous_raw
    governance.delegated_votes = to_decimal(governance.delegated_votes_raw, decimals)
