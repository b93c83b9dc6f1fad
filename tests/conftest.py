from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from piggy.domain.models import LedgerEntry, RoundupRule
from piggy.domain.services.config_engine import ConfigEngine
from piggy.domain.services.investment_sweeper import InvestmentSweeper
from piggy.domain.services.roundup_calculator import RoundupCalculator
from piggy.domain.strategy.presets import PORTFOLIO_PRESETS
from piggy.infrastructure.execution.simulated_broker import SimulatedBroker
from piggy.infrastructure.repositories.holding_repository import InMemoryHoldingRepository
from piggy.infrastructure.repositories.ledger_repository import InMemoryLedgerRepository
from piggy.services.sweep_calendar_service import SweepCalendar
from piggy.services.sweep_service import SweepService


SUNDAY = date(2023, 7, 2)
MONDAY = date(2023, 7, 3)

MARKET_PRICES = {
    "NIFTYBEES": Decimal("285.50"),
    "GOLDBEES": Decimal("65.25"),
}


class FixedPriceProvider:
    """Price provider returning a fixed table (None for unknown symbols)"""

    def __init__(self, prices):
        self.prices = dict(prices)

    def get_current_price(self, symbol):
        return self.prices.get(symbol)

    def get_all_prices(self):
        return dict(self.prices)


def make_entry(entry_id, amount, entry_type, user_id="user1", ts=None):
    return LedgerEntry(
        id=entry_id,
        user_id=user_id,
        amount=Decimal(str(amount)),
        type=entry_type,
        timestamp=ts or datetime(2023, 7, 1, 12, 0),
    )


@pytest.fixture
def default_rule():
    return RoundupRule(
        round_to_nearest=Decimal("10"),
        min_roundup=Decimal("1"),
        max_roundup=Decimal("50"),
    )


@pytest.fixture
def calculator(default_rule):
    return RoundupCalculator(default_rule)


@pytest.fixture
def balanced_preset():
    return PORTFOLIO_PRESETS["balanced"]


@pytest.fixture
def sweeper(balanced_preset):
    return InvestmentSweeper(balanced_preset.allocations, Decimal("100"))


@pytest.fixture
def config_dir():
    return Path(__file__).resolve().parents[1] / "piggy" / "config"


@pytest.fixture
def config_engine(config_dir):
    engine = ConfigEngine(config_dir)
    engine.load_all()
    return engine


@pytest.fixture
def price_provider():
    return FixedPriceProvider(MARKET_PRICES)


@pytest.fixture
def broker():
    return SimulatedBroker()


@pytest.fixture
def sweep_service(broker, price_provider):
    return SweepService(
        ledger_repo=InMemoryLedgerRepository(),
        holding_repo=InMemoryHoldingRepository(),
        executor=broker,
        price_provider=price_provider,
        calendar=SweepCalendar("sun"),
    )
