"""
INVESTMENT SWEEPER (ENGINE-3)
Convert piggy balance → whole-unit ETF orders

RESPONSIBILITIES:
- Gate a sweep on balance floor and sweep day
- Split the balance across allocation weights
- Floor() to whole units at current prices

RULES (LOCKED):
❌ No fractional units
❌ No redistribution of an allocation's leftover to other symbols
❌ No price guessing (missing price → skip that symbol)
✅ Use floor() ALWAYS
✅ Leftover stays in the balance for the next sweep
✅ Output order follows allocation order
"""

import logging
import math
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping

from piggy.domain.models import Allocation, Order, PortfolioPreset
from piggy.utils.decimal_utils import coerce_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class InvestmentSweeper:
    """
    Investment Sweeper
    Immutable allocation set + sweep floor, stateless between calls
    """

    def __init__(
        self,
        allocations: Iterable[Allocation],
        min_sweep_amount=Decimal("100"),
    ):
        """
        Initialize sweeper

        Args:
            allocations: Target weights, in the order orders should be emitted
            min_sweep_amount: Balance floor below which no sweep runs
        """
        self.allocations = tuple(allocations)
        self.min_sweep_amount = coerce_decimal(min_sweep_amount)

    @classmethod
    def from_preset(cls, preset: PortfolioPreset) -> "InvestmentSweeper":
        return cls(preset.allocations, preset.min_sweep_amount)

    def should_sweep(self, balance, is_sweep_day: bool) -> bool:
        """True iff the balance reaches the floor AND today is a sweep day."""
        return coerce_decimal(balance) >= self.min_sweep_amount and bool(is_sweep_day)

    def create_orders(self, balance, prices: Mapping[str, object]) -> List[Order]:
        """
        Convert a balance into whole-unit purchase orders.

        Args:
            balance: Investable balance
            prices: Current price per symbol (symbol -> price)

        Returns:
            Orders for every allocation that can afford at least one unit
        """
        balance = coerce_decimal(balance)
        orders = []

        for allocation in self.allocations:
            allocated = balance * allocation.weight_pct / HUNDRED

            raw_price = prices.get(allocation.symbol)
            price = coerce_decimal(raw_price) if raw_price is not None else None

            # Price not available
            if price is None or not price.is_finite() or price <= ZERO:
                logger.info(
                    "SWEEP_SKIP_NO_PRICE | symbol=%s allocated=%s",
                    allocation.symbol,
                    allocated,
                )
                continue

            quantity = self._calculate_floor_units(allocated, price)

            # Not enough for even 1 unit
            if quantity < 1:
                logger.info(
                    "SWEEP_SKIP_BELOW_ONE_UNIT | symbol=%s allocated=%s price=%s",
                    allocation.symbol,
                    allocated,
                    price,
                )
                continue

            orders.append(Order(
                symbol=allocation.symbol,
                quantity=quantity,
                price=price,
                amount=price * quantity,
            ))

        return orders

    @staticmethod
    def _calculate_floor_units(amount: Decimal, price: Decimal) -> int:
        """
        Whole units affordable with ``amount``.
        NEVER use ceiling, NEVER round, ALWAYS floor.
        """
        if amount <= ZERO:
            return 0
        return max(0, math.floor(amount / price))

    @staticmethod
    def summarize_orders(orders: Iterable[Order], balance) -> Dict[str, Decimal]:
        """Total spent by a set of orders and what stays in the piggy."""
        balance = coerce_decimal(balance)
        invested = sum((o.amount for o in orders), ZERO)
        return {
            "balance": balance,
            "invested": invested,
            "leftover": balance - invested,
        }
