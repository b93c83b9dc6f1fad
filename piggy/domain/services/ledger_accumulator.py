"""
LEDGER ACCUMULATOR (ENGINE-2)
Fold the append-only piggy ledger → investable balance

RULES:
❌ No stored balance, always re-derived from the full entry sequence
❌ Unknown entry types never abort the fold
✅ roundup_credit and manual_topup add, investment_debit subtracts
✅ Deterministic replay
"""

import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional
from uuid import uuid4

from piggy.domain.models import LedgerEntry, LedgerEntryType, WeeklyProgress
from piggy.utils.decimal_utils import coerce_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

_SIGNS = {
    LedgerEntryType.ROUNDUP_CREDIT.value: 1,
    LedgerEntryType.MANUAL_TOPUP.value: 1,
    LedgerEntryType.INVESTMENT_DEBIT.value: -1,
}


def calculate_balance(entries: Iterable[LedgerEntry]) -> Decimal:
    """
    Net investable balance of a ledger.

    Unknown entry types contribute nothing and are reported at WARNING.
    """
    balance = ZERO

    for entry in entries:
        sign = _SIGNS.get(entry.type)
        if sign is None:
            logger.warning(
                "LEDGER_UNKNOWN_ENTRY_TYPE | id=%s type=%s amount=%s",
                entry.id,
                entry.type,
                entry.amount,
            )
            continue
        balance += sign * entry.amount

    return balance


def week_start_for(day: date) -> date:
    """Sunday that opens the week containing ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def calculate_weekly_progress(
    entries: Iterable[LedgerEntry],
    as_of: date,
    target=Decimal("200"),
) -> WeeklyProgress:
    """
    Round-ups collected since the start of the current Sunday-based week.
    """
    target = coerce_decimal(target)
    start = week_start_for(as_of)

    amount = sum(
        (
            e.amount
            for e in entries
            if e.type == LedgerEntryType.ROUNDUP_CREDIT.value
            and start <= e.timestamp.date() <= as_of
        ),
        ZERO,
    )
    percentage = (amount / target * Decimal("100")) if target > ZERO else ZERO

    return WeeklyProgress(
        week_start=start,
        amount=amount,
        target=target,
        percentage=percentage,
    )


def build_investment_debit(
    user_id: str,
    amount,
    reference: Optional[str] = None,
    timestamp: Optional[datetime] = None,
) -> LedgerEntry:
    return LedgerEntry(
        id=f"invest_{uuid4().hex[:12]}",
        user_id=user_id,
        amount=coerce_decimal(amount),
        type=LedgerEntryType.INVESTMENT_DEBIT.value,
        timestamp=timestamp or datetime.now(),
        reference=reference,
    )


def build_manual_topup(
    user_id: str,
    amount,
    timestamp: Optional[datetime] = None,
) -> LedgerEntry:
    value = coerce_decimal(amount)
    if value <= ZERO:
        raise ValueError("Top-up amount must be positive")

    return LedgerEntry(
        id=f"topup_{uuid4().hex[:12]}",
        user_id=user_id,
        amount=value,
        type=LedgerEntryType.MANUAL_TOPUP.value,
        timestamp=timestamp or datetime.now(),
    )
