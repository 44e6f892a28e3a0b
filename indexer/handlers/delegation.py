"""
Delegation Handlers (token contract).

- DelegateChanged: move one represented holder from the old
  delegate to the new one and point the holder at the new one
- DelegateVotesChanged: set the delegate's voting power and
  update the governance counters and total
"""

import logging

from core.constants import ZERO_ADDRESS

from ..aggregate import apply_delegate_votes_change
from ..events import DelegateChanged, DelegateVotesChanged
from .context import HandlerContext

logger = logging.getLogger(__name__)


def handle_delegate_changed(ctx: HandlerContext, event: DelegateChanged) -> None:
    holder = ctx.entities.get_or_create_token_holder(event.delegator)

    if event.from_delegate != ZERO_ADDRESS:
        previous = ctx.entities.get_or_create_delegate(event.from_delegate)
        previous.token_holders_represented_amount -= 1

        # Not floored: a negative count flags an inconsistent delegation log
        if previous.token_holders_represented_amount < 0:
            logger.error(
                f"Negative represented holders on delegate {previous.id} "
                f"({previous.token_holders_represented_amount}). "
                f"tx_hash: {event.metadata.transaction_hash}",
                extra={"context": {
                    "anomaly": "negative_represented_amount",
                    "delegate": previous.id,
                    "amount": previous.token_holders_represented_amount,
                    "tx_hash": event.metadata.transaction_hash,
                }},
            )
        ctx.store.save(previous)

    new_delegate = ctx.entities.get_or_create_delegate(event.to_delegate)
    new_delegate.token_holders_represented_amount += 1
    ctx.store.save(new_delegate)

    holder.delegate_id = new_delegate.id
    ctx.store.save(holder)


def handle_delegate_votes_changed(ctx: HandlerContext, event: DelegateVotesChanged) -> None:
    governance = ctx.entities.get_governance()
    delegate = ctx.entities.get_or_create_delegate(event.delegate)

    if delegate.delegated_votes_raw != event.previous_balance:
        logger.warning(
            f"Delegate {delegate.id} stored votes {delegate.delegated_votes_raw} "
            f"!= event previousBalance {event.previous_balance}. "
            f"tx_hash: {event.metadata.transaction_hash}",
            extra={"context": {
                "anomaly": "previous_balance_mismatch",
                "delegate": delegate.id,
                "stored": str(delegate.delegated_votes_raw),
                "previous_balance": str(event.previous_balance),
                "tx_hash": event.metadata.transaction_hash,
            }},
        )

    delegate.delegated_votes_raw = event.new_balance
    delegate.delegated_votes = ctx.normalize(event.new_balance)
    ctx.store.save(delegate)

    apply_delegate_votes_change(
        governance, event.previous_balance, event.new_balance, ctx.token_decimals
    )
    ctx.store.save(governance)
