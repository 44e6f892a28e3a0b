"""
Transfer Handler (token contract).

The sender branch runs for every sender except the zero address
(mints). The receiver branch always runs, the zero address
included, so burned supply accumulates on the zero-address
holder the same way minted supply leaves it.

Each branch saves its own holder, and saves the governance
record only when that branch changed it.
"""

import logging

from core.constants import ZERO_ADDRESS

from ..aggregate import apply_holder_balance_change
from ..events import Transfer
from .context import HandlerContext

logger = logging.getLogger(__name__)


def handle_transfer(ctx: HandlerContext, event: Transfer) -> None:
    governance = ctx.entities.get_governance()
    tx_hash = event.metadata.transaction_hash

    if event.from_address != ZERO_ADDRESS:
        sender = ctx.entities.get_or_create_token_holder(event.from_address)
        previous_balance = sender.token_balance_raw
        sender.token_balance_raw = previous_balance - event.amount
        sender.token_balance = ctx.normalize(sender.token_balance_raw)

        # Persisted as-is: clamping would hide the upstream inconsistency
        if sender.token_balance_raw < 0:
            logger.error(
                f"Negative balance on holder {sender.id} with balance "
                f"{sender.token_balance_raw}. tx_hash: {tx_hash}",
                extra={"context": {
                    "anomaly": "negative_balance",
                    "holder": sender.id,
                    "balance_raw": str(sender.token_balance_raw),
                    "tx_hash": tx_hash,
                    "block_number": event.metadata.block_number,
                }},
            )

        if apply_holder_balance_change(
            governance, sender.id, previous_balance, sender.token_balance_raw
        ):
            ctx.store.save(governance)
        ctx.store.save(sender)

    receiver = ctx.entities.get_or_create_token_holder(event.to_address)
    previous_balance = receiver.token_balance_raw
    receiver.token_balance_raw = previous_balance + event.amount
    receiver.token_balance = ctx.normalize(receiver.token_balance_raw)
    receiver.total_tokens_held_raw += event.amount
    receiver.total_tokens_held = ctx.normalize(receiver.total_tokens_held_raw)

    if apply_holder_balance_change(
        governance, receiver.id, previous_balance, receiver.token_balance_raw
    ):
        ctx.store.save(governance)
    ctx.store.save(receiver)
