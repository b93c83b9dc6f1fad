"""
Price provider protocol for type hints.
"""

from __future__ import annotations

from typing import Dict, Protocol
from decimal import Decimal


class PriceProvider(Protocol):
    def get_current_price(self, symbol: str) -> Decimal:
        ...

    def get_all_prices(self) -> Dict[str, Decimal]:
        ...
