"""
Simulated price feed.

Stands in for a broker / NSE feed: every quote is the base price jittered
uniformly within ±PRICE_VARIATION_PCT, rounded to paise.
"""

from __future__ import annotations

import logging
import random
from decimal import Decimal
from typing import Dict, Mapping, Optional

from piggy.config import settings
from piggy.utils.decimal_utils import PAISE, coerce_decimal, to_paise

logger = logging.getLogger(__name__)

BASE_PRICES: Dict[str, Decimal] = {
    "NIFTYBEES": Decimal("285.50"),
    "GOLDBEES": Decimal("65.25"),
    "LIQUIDBEES": Decimal("100.05"),
}


class PriceFeedSimulator:
    def __init__(
        self,
        base_prices: Optional[Mapping[str, object]] = None,
        default_price=None,
        variation_pct=None,
        rng: Optional[random.Random] = None,
    ):
        table = BASE_PRICES if base_prices is None else base_prices
        self._base_prices = {s: coerce_decimal(p) for s, p in table.items()}
        self._default_price = coerce_decimal(
            settings.DEFAULT_BASE_PRICE if default_price is None else default_price
        )
        pct = settings.PRICE_VARIATION_PCT if variation_pct is None else variation_pct
        self._variation = coerce_decimal(pct) / Decimal("100")
        self._rng = rng or random.Random()

        if self._default_price <= 0 or any(p <= 0 for p in self._base_prices.values()):
            raise ValueError("Base prices must be positive")
        if not Decimal("0") <= self._variation < Decimal("1"):
            raise ValueError("Price variation must be in [0, 100) percent")

    @property
    def symbols(self):
        return list(self._base_prices)

    def base_price(self, symbol: str) -> Decimal:
        base = self._base_prices.get(symbol)
        if base is None:
            logger.debug("PRICE_DEFAULT_BASE | symbol=%s", symbol)
            return self._default_price
        return base

    def get_current_price(self, symbol: str) -> Decimal:
        """Base price × (1 + jitter), jitter uniform in [-variation, +variation]."""
        base = self.base_price(symbol)
        jitter = coerce_decimal(self._rng.uniform(-1.0, 1.0)) * self._variation
        price = to_paise(base * (Decimal("1") + jitter))
        return max(price, PAISE)

    def get_all_prices(self) -> Dict[str, Decimal]:
        return {symbol: self.get_current_price(symbol) for symbol in self._base_prices}
