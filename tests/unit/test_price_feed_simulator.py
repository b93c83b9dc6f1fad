import random
from decimal import Decimal

import pytest

from piggy.infrastructure.market_data.price_feed_simulator import (
    BASE_PRICES,
    PriceFeedSimulator,
)


class EdgeRng:
    """Random stand-in that always returns one end of the band"""

    def __init__(self, value):
        self.value = value

    def uniform(self, a, b):
        return self.value


def _within_band(price, base, pct=Decimal("0.02")):
    # one paisa of slack for rounding
    return base * (1 - pct) - Decimal("0.01") <= price <= base * (1 + pct) + Decimal("0.01")


def test_prices_stay_within_two_percent():
    feed = PriceFeedSimulator(rng=random.Random(42), variation_pct=2)

    for _ in range(200):
        price = feed.get_current_price("NIFTYBEES")
        assert price > 0
        assert _within_band(price, BASE_PRICES["NIFTYBEES"])


def test_unknown_symbol_uses_default_base():
    feed = PriceFeedSimulator(rng=random.Random(1), default_price=100, variation_pct=2)

    for _ in range(50):
        assert _within_band(feed.get_current_price("UNKNOWN"), Decimal("100"))


@pytest.mark.parametrize("edge,expected", [(-1.0, Decimal("279.79")), (1.0, Decimal("291.21"))])
def test_band_edges(edge, expected):
    feed = PriceFeedSimulator(rng=EdgeRng(edge), variation_pct=2)
    assert feed.get_current_price("NIFTYBEES") == expected


def test_zero_variation_returns_base():
    feed = PriceFeedSimulator(variation_pct=0)
    assert feed.get_current_price("GOLDBEES") == Decimal("65.25")


def test_get_all_prices_covers_base_table():
    feed = PriceFeedSimulator(rng=random.Random(7))
    prices = feed.get_all_prices()

    assert set(prices) == {"NIFTYBEES", "GOLDBEES", "LIQUIDBEES"}
    for symbol, price in prices.items():
        assert _within_band(price, BASE_PRICES[symbol])


def test_prices_are_rounded_to_paise():
    feed = PriceFeedSimulator(rng=random.Random(3))
    price = feed.get_current_price("LIQUIDBEES")
    assert price == price.quantize(Decimal("0.01"))


def test_invalid_configuration():
    with pytest.raises(ValueError):
        PriceFeedSimulator(base_prices={"X": 0})
    with pytest.raises(ValueError):
        PriceFeedSimulator(variation_pct=150)
