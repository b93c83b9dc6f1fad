"""
Scheduler entry point
Runs the weekly sweep against simulated prices and an in-memory ledger
"""

import logging
import time

from piggy.config import settings
from piggy.core.logging import setup_logging
from piggy.domain.models import RoundupRule
from piggy.domain.services.config_engine import ConfigEngine
from piggy.domain.services.roundup_calculator import RoundupCalculator
from piggy.infrastructure.execution.simulated_broker import SimulatedBroker
from piggy.infrastructure.market_data.price_feed_simulator import PriceFeedSimulator
from piggy.infrastructure.repositories.holding_repository import InMemoryHoldingRepository
from piggy.infrastructure.repositories.ledger_repository import InMemoryLedgerRepository
from piggy.scheduler.scheduler import SweepScheduler
from piggy.services.sweep_calendar_service import SweepCalendar
from piggy.services.sweep_service import SweepService
from piggy.utils.mock_data import generate_mock_transactions

logger = logging.getLogger(__name__)

DEMO_USER = "demo_user"


def build_demo_scheduler() -> SweepScheduler:
    """Wire config, simulated collaborators and one demo subscriber."""
    config_engine = ConfigEngine(settings.CONFIG_DIR)
    config_engine.load_all()

    service = SweepService(
        ledger_repo=InMemoryLedgerRepository(),
        holding_repo=InMemoryHoldingRepository(),
        executor=SimulatedBroker(),
        price_provider=PriceFeedSimulator(),
        calendar=SweepCalendar(settings.SWEEP_DAY_OF_WEEK),
    )

    rule = RoundupRule(
        round_to_nearest=settings.ROUNDUP_NEAREST,
        min_roundup=settings.ROUNDUP_MIN,
        max_roundup=settings.ROUNDUP_MAX,
    )
    service.ingest_transactions(
        DEMO_USER,
        RoundupCalculator(rule),
        generate_mock_transactions(15),
    )

    scheduler = SweepScheduler(service, config_engine.get_preset)
    scheduler.subscribe(DEMO_USER, settings.DEFAULT_PRESET)
    return scheduler


def main():
    """Main entry point"""
    setup_logging(settings.LOG_LEVEL)

    if not settings.SCHEDULER_ENABLED:
        logger.info("Scheduler disabled (SCHEDULER_ENABLED=false)")
        return

    scheduler = build_demo_scheduler()
    scheduler.start()

    try:
        while True:
            time.sleep(1)
    except (KeyboardInterrupt, SystemExit):
        scheduler.stop()


if __name__ == "__main__":
    main()
