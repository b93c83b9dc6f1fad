"""
PORTFOLIO VALUATOR (ENGINE-4)
Maintain weighted-average holdings and aggregate returns

No database access. No market data fetching.
"""

from decimal import Decimal
from typing import Iterable, List, Mapping, Optional

from piggy.domain.exceptions import InvalidUnitsError
from piggy.domain.models import Holding, Returns
from piggy.utils.decimal_utils import coerce_decimal

ZERO = Decimal("0")


def update_holding(
    existing: Optional[Holding],
    units,
    price,
    symbol: Optional[str] = None,
) -> Holding:
    """
    Apply a buy fill to a holding.

    The average cost is recomputed from the closed form
    ``(old_units * old_avg + units * price) / total_units`` on every call.

    Raises:
        InvalidUnitsError: If ``units`` is zero or negative
    """
    units = coerce_decimal(units)
    price = coerce_decimal(price)

    if units <= ZERO:
        raise InvalidUnitsError(f"Units must be positive, got {units}")

    if existing is None:
        return Holding(
            symbol=symbol or "",
            units=units,
            avg_cost=price,
            current_price=price,
        )

    total_units = existing.units + units
    total_cost = existing.units * existing.avg_cost + units * price

    return Holding(
        symbol=existing.symbol or symbol or "",
        units=total_units,
        avg_cost=total_cost / total_units,
        current_price=price,
    )


def calculate_holding_value(holding: Holding) -> Decimal:
    return holding.units * holding.current_price


def calculate_portfolio_value(holdings: Iterable[Holding]) -> Decimal:
    return sum((calculate_holding_value(h) for h in holdings), ZERO)


def calculate_returns(holdings: Iterable[Holding]) -> Returns:
    """Invested vs current value across holdings; all zeros when empty."""
    holdings = list(holdings)

    invested = sum((h.units * h.avg_cost for h in holdings), ZERO)
    current = sum((h.current_value for h in holdings), ZERO)
    gains = current - invested
    gains_percent = (gains / invested * Decimal("100")) if invested != ZERO else ZERO

    return Returns(
        invested=invested,
        current=current,
        gains=gains,
        gains_percent=gains_percent,
    )


def revalue_holdings(
    holdings: Iterable[Holding],
    prices: Mapping[str, object],
) -> List[Holding]:
    """
    Mark holdings to the given prices.
    Symbols without a finite positive price keep their last known price.
    """
    revalued = []
    for holding in holdings:
        price = prices.get(holding.symbol)
        if price is None:
            revalued.append(holding)
            continue

        price = coerce_decimal(price)
        if not price.is_finite() or price <= ZERO:
            revalued.append(holding)
            continue
        revalued.append(holding.revalue(price))
    return revalued
