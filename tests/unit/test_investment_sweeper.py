"""
Unit Tests for InvestmentSweeper

Covers the sweep gate, floor() unit conversion and the per-symbol skip rules.
"""

from decimal import Decimal

import pytest

from piggy.domain.models import Allocation, OrderSide, OrderStatus
from piggy.domain.services.investment_sweeper import InvestmentSweeper
from piggy.domain.strategy.presets import PORTFOLIO_PRESETS


class TestShouldSweep:
    """Both balance floor and sweep day are required"""

    def test_sweeps_when_both_conditions_met(self, sweeper):
        assert sweeper.should_sweep(150, True) is True

    def test_balance_below_minimum(self, sweeper):
        assert sweeper.should_sweep(50, True) is False

    def test_not_sweep_day(self, sweeper):
        assert sweeper.should_sweep(150, False) is False

    def test_exactly_at_minimum(self, sweeper):
        assert sweeper.should_sweep(100, True) is True

    def test_from_preset_uses_preset_floor(self):
        safe = InvestmentSweeper.from_preset(PORTFOLIO_PRESETS["safe"])
        assert safe.min_sweep_amount == 50
        assert safe.should_sweep(60, True) is True


class TestCreateOrders:
    """Tests for create_orders"""

    def test_orders_follow_allocation_weights(self, sweeper):
        prices = {"NIFTYBEES": 285.50, "GOLDBEES": 65.25}

        orders = sweeper.create_orders(1000, prices)

        assert [o.symbol for o in orders] == ["NIFTYBEES", "GOLDBEES"]

        nifty, gold = orders
        assert nifty.quantity == 2
        assert nifty.amount == Decimal("571.00")
        assert gold.quantity == 4
        assert gold.amount == Decimal("261.00")

    def test_orders_are_pending_buys(self, sweeper):
        orders = sweeper.create_orders(1000, {"NIFTYBEES": 285.50, "GOLDBEES": 65.25})
        for order in orders:
            assert order.side == OrderSide.BUY
            assert order.status == OrderStatus.PENDING
            assert isinstance(order.quantity, int)

    def test_insufficient_balance_yields_no_orders(self, sweeper):
        orders = sweeper.create_orders(100, {"NIFTYBEES": 1000, "GOLDBEES": 65.25})
        assert orders == []

    def test_floor_not_round(self):
        """699.99 / 350 = 1.99… must buy 1 unit"""
        sweeper = InvestmentSweeper([Allocation("NIFTYBEES", 100)])
        orders = sweeper.create_orders(Decimal("699.99"), {"NIFTYBEES": 350})
        assert orders[0].quantity == 1
        assert orders[0].amount == 350

    def test_missing_price_skips_only_that_symbol(self, sweeper):
        orders = sweeper.create_orders(1000, {"GOLDBEES": 65.25})
        assert [o.symbol for o in orders] == ["GOLDBEES"]

    @pytest.mark.parametrize("bad_price", [0, -10, None])
    def test_non_positive_price_is_skipped(self, sweeper, bad_price):
        orders = sweeper.create_orders(1000, {"NIFTYBEES": bad_price, "GOLDBEES": 65.25})
        assert [o.symbol for o in orders] == ["GOLDBEES"]

    def test_no_order_exceeds_its_allocation(self):
        sweeper = InvestmentSweeper(PORTFOLIO_PRESETS["growth"].allocations)
        balance = Decimal("1234.56")
        prices = {"NIFTYBEES": Decimal("287.10"), "GOLDBEES": Decimal("64.90")}

        for order in sweeper.create_orders(balance, prices):
            weight = next(a.weight_pct for a in sweeper.allocations if a.symbol == order.symbol)
            assert order.amount <= balance * weight / 100

    def test_allocation_order_is_preserved(self):
        sweeper = InvestmentSweeper([
            Allocation("GOLDBEES", 50),
            Allocation("NIFTYBEES", 50),
        ])
        orders = sweeper.create_orders(2000, {"NIFTYBEES": 285.50, "GOLDBEES": 65.25})
        assert [o.symbol for o in orders] == ["GOLDBEES", "NIFTYBEES"]

    def test_zero_or_negative_balance(self, sweeper):
        prices = {"NIFTYBEES": 285.50, "GOLDBEES": 65.25}
        assert sweeper.create_orders(0, prices) == []
        assert sweeper.create_orders(-500, prices) == []


class TestLeftover:
    """Unallocated remainder stays in the balance"""

    def test_summarize_orders(self, sweeper):
        orders = sweeper.create_orders(1000, {"NIFTYBEES": 285.50, "GOLDBEES": 65.25})
        summary = InvestmentSweeper.summarize_orders(orders, 1000)

        assert summary["invested"] == Decimal("832.00")
        assert summary["leftover"] == Decimal("168.00")

    def test_small_balance_stagnates_below_unit_price(self, sweeper):
        """A balance that can't buy one unit of anything stays untouched every week"""
        prices = {"NIFTYBEES": 285.50, "GOLDBEES": 65.25}
        balance = Decimal("150")

        for _ in range(3):
            orders = sweeper.create_orders(balance, prices)
            balance -= InvestmentSweeper.summarize_orders(orders, balance)["invested"]

        assert balance == Decimal("150")
