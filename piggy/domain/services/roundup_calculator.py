"""
ROUND-UP CALCULATOR (ENGINE-1)
Convert debit transactions → spare-change credits

RESPONSIBILITIES:
- Compute the round-up for a single amount under a RoundupRule
- Turn a batch of transactions into round-up entries

RULES (LOCKED):
❌ No round-ups from credits
❌ No partial collection outside [min, max]
✅ Already-rounded amounts collect nothing
✅ Output order follows input order
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from piggy.domain.models import LedgerEntry, RoundupEntry, RoundupRule, Transaction
from piggy.utils.decimal_utils import coerce_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class RoundupCalculator:
    """
    Round-up Calculator
    Pure function of its rule and inputs
    """

    def __init__(self, rule: RoundupRule):
        self.rule = rule

    def calculate_roundup(self, amount) -> Decimal:
        """
        Spare change needed to reach the next multiple of ``round_to_nearest``.

        Returns 0 when the amount is already a multiple, or when the
        candidate falls outside ``[min_roundup, max_roundup]``. Negative and
        non-finite amounts are treated as 0.
        """
        value = coerce_decimal(amount)

        if not value.is_finite() or value < ZERO:
            logger.warning("ROUNDUP_INVALID_AMOUNT | amount=%s", amount)
            return ZERO

        nearest = self.rule.round_to_nearest
        remainder = value % nearest
        if remainder == ZERO:
            return ZERO

        candidate = nearest - remainder
        if candidate < self.rule.min_roundup or candidate > self.rule.max_roundup:
            return ZERO

        return candidate

    def process_transactions(
        self,
        transactions: Iterable[Transaction],
        timestamp: Optional[datetime] = None,
    ) -> List[RoundupEntry]:
        """
        Build round-up entries for every debit with a nonzero round-up.

        Args:
            transactions: Observed transactions, in arrival order
            timestamp: Collection time stamped on each entry (default: now)

        Returns:
            One RoundupEntry per qualifying debit, keyed by transaction id
        """
        collected_at = timestamp or datetime.now()
        entries = []

        for txn in transactions:
            if not txn.is_debit:
                continue

            roundup = self.calculate_roundup(txn.amount)
            if roundup == ZERO:
                continue

            entries.append(RoundupEntry(
                amount=roundup,
                reference=txn.id,
                timestamp=collected_at,
            ))

        logger.debug("ROUNDUPS_COLLECTED | count=%d", len(entries))
        return entries

    def process_to_ledger(
        self,
        transactions: Iterable[Transaction],
        user_id: str,
        timestamp: Optional[datetime] = None,
    ) -> List[LedgerEntry]:
        """Same as process_transactions, as roundup_credit ledger entries."""
        return [
            entry.to_ledger_entry(user_id)
            for entry in self.process_transactions(transactions, timestamp)
        ]
