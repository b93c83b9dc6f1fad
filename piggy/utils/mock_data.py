"""
Demo transaction generator.

Produces realistic-looking UPI debits for demo mode and for exercising the
round-up pipeline end to end.
"""

import random
import string
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional

from piggy.domain.models import Transaction, TransactionDirection
from piggy.utils.time import now_ist_naive

MERCHANTS = (
    "Zomato",
    "Swiggy",
    "Uber",
    "Amazon",
    "Flipkart",
    "BigBasket",
    "Metro Card",
    "Starbucks",
)

CATEGORIES = (
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Grocery",
    "Entertainment",
)

MIN_AMOUNT = 50
MAX_AMOUNT = 2049
LOOKBACK_DAYS = 7

_UPI_REF_ALPHABET = string.ascii_uppercase + string.digits


def _upi_ref(rng: random.Random) -> str:
    return "UPI" + "".join(rng.choice(_UPI_REF_ALPHABET) for _ in range(9))


def generate_mock_transactions(
    count: int = 10,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> List[Transaction]:
    """
    Generate ``count`` whole-rupee debits spread over the last 7 days.

    Ids are ``txn_1`` … ``txn_<count>``.
    """
    if count < 0:
        raise ValueError("count cannot be negative")

    rng = rng or random.Random()
    now = now or now_ist_naive()
    window_seconds = LOOKBACK_DAYS * 24 * 60 * 60

    return [
        Transaction(
            id=f"txn_{i + 1}",
            amount=Decimal(rng.randint(MIN_AMOUNT, MAX_AMOUNT)),
            direction=TransactionDirection.DEBIT,
            timestamp=now - timedelta(seconds=rng.uniform(0, window_seconds)),
            merchant=rng.choice(MERCHANTS),
            category=rng.choice(CATEGORIES),
            upi_ref=_upi_ref(rng),
        )
        for i in range(count)
    ]
