"""
Indexer - Invariant Audit.

============================================================
PURPOSE
============================================================
Re-derives the governance aggregates from the stored entity
records and compares them with the incrementally maintained
Governance singleton.

The handlers never recompute aggregates; this audit is how an
operator checks that they still agree. It reports, it never
repairs.

CHECKS:
- current_token_holders vs #holders with balance > 0
  (zero address excluded)
- current_delegates vs #delegates with votes > 0
- delegated_votes_raw vs sum of delegate votes
- supply: sum of holder balances (zero address excluded)
  vs minted - burned, when the caller knows both
- no holder balance and no represented-holder count < 0

============================================================
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from core.constants import GOVERNANCE_ENTITY_ID, ZERO_ADDRESS
from storage.models.governance import Delegate, Governance, TokenHolder
from storage.repositories.entity_store import EntityStore

from .factories import DEFAULTS

logger = logging.getLogger(__name__)


class MismatchType(Enum):
    """Types of audit mismatches."""

    TOKEN_HOLDER_COUNT = "TOKEN_HOLDER_COUNT"
    DELEGATE_COUNT = "DELEGATE_COUNT"
    DELEGATED_VOTES_TOTAL = "DELEGATED_VOTES_TOTAL"
    SUPPLY = "SUPPLY"
    NEGATIVE_BALANCE = "NEGATIVE_BALANCE"
    NEGATIVE_REPRESENTED_AMOUNT = "NEGATIVE_REPRESENTED_AMOUNT"


@dataclass
class AuditMismatch:
    """A detected disagreement between stored and derived state."""

    mismatch_type: MismatchType
    expected_value: str
    actual_value: str
    entity_id: Optional[str] = None
    message: str = ""


@dataclass
class AuditReport:
    """Result of one audit run."""

    started_at: datetime
    token_holders_checked: int = 0
    delegates_checked: int = 0
    mismatches: List[AuditMismatch] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not self.mismatches

    def of_type(self, mismatch_type: MismatchType) -> List[AuditMismatch]:
        return [m for m in self.mismatches if m.mismatch_type == mismatch_type]


class GovernanceAuditor:
    """Compares the Governance singleton with the entity tables."""

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    def run(
        self,
        minted_raw: Optional[int] = None,
        burned_raw: Optional[int] = None,
    ) -> AuditReport:
        report = AuditReport(started_at=datetime.now(timezone.utc))
        governance = self._store.get(Governance, GOVERNANCE_ENTITY_ID)
        if governance is None:
            governance = Governance(id=GOVERNANCE_ENTITY_ID, **DEFAULTS[Governance]())

        holders = [h for h in self._store.list(TokenHolder) if h.id != ZERO_ADDRESS]
        delegates = self._store.list(Delegate)
        report.token_holders_checked = len(holders)
        report.delegates_checked = len(delegates)

        positive_holders = sum(1 for h in holders if h.token_balance_raw > 0)
        self._compare(
            report, MismatchType.TOKEN_HOLDER_COUNT,
            positive_holders, governance.current_token_holders,
        )

        positive_delegates = sum(1 for d in delegates if d.delegated_votes_raw > 0)
        self._compare(
            report, MismatchType.DELEGATE_COUNT,
            positive_delegates, governance.current_delegates,
        )

        votes_total = sum(d.delegated_votes_raw for d in delegates)
        self._compare(
            report, MismatchType.DELEGATED_VOTES_TOTAL,
            votes_total, governance.delegated_votes_raw,
        )

        if minted_raw is not None and burned_raw is not None:
            self._compare(
                report, MismatchType.SUPPLY,
                minted_raw - burned_raw, sum(h.token_balance_raw for h in holders),
            )

        for holder in holders:
            if holder.token_balance_raw < 0:
                report.mismatches.append(AuditMismatch(
                    mismatch_type=MismatchType.NEGATIVE_BALANCE,
                    expected_value=">= 0",
                    actual_value=str(holder.token_balance_raw),
                    entity_id=holder.id,
                ))

        for delegate in delegates:
            if delegate.token_holders_represented_amount < 0:
                report.mismatches.append(AuditMismatch(
                    mismatch_type=MismatchType.NEGATIVE_REPRESENTED_AMOUNT,
                    expected_value=">= 0",
                    actual_value=str(delegate.token_holders_represented_amount),
                    entity_id=delegate.id,
                ))

        if report.is_consistent:
            logger.info(
                f"Audit clean: {report.token_holders_checked} holders, "
                f"{report.delegates_checked} delegates"
            )
        else:
            logger.error(
                f"Audit found {len(report.mismatches)} mismatches",
                extra={"context": {
                    "mismatches": [m.mismatch_type.value for m in report.mismatches],
                }},
            )
        return report

    @staticmethod
    def _compare(
        report: AuditReport,
        mismatch_type: MismatchType,
        expected: int,
        actual: int,
    ) -> None:
        if expected != actual:
            report.mismatches.append(AuditMismatch(
                mismatch_type=mismatch_type,
                expected_value=str(expected),
                actual_value=str(actual),
                message=f"{mismatch_type.value}: derived {expected}, stored {actual}",
            ))
