"""
Integration Tests for the weekly sweep job and scheduler wiring
"""

from datetime import date
from decimal import Decimal

import pytest

from piggy.domain.exceptions import InvalidPresetError
from piggy.domain.strategy.presets import get_preset
from piggy.infrastructure.repositories.holding_repository import InMemoryHoldingRepository
from piggy.infrastructure.repositories.ledger_repository import InMemoryLedgerRepository
from piggy.scheduler.jobs import run_weekly_sweep_job
from piggy.scheduler.scheduler import WEEKLY_SWEEP_JOB_ID, SweepScheduler
from piggy.services.sweep_calendar_service import SweepCalendar
from piggy.services.sweep_service import SKIP_BELOW_MINIMUM, SweepService
from tests.conftest import MONDAY, SUNDAY


FRIDAY = date(2023, 7, 7)


class TestWeeklySweepJob:

    def test_sweeps_each_subscriber(self, sweep_service):
        sweep_service.add_manual_topup("alice", 1000)
        sweep_service.add_manual_topup("bob", 40)

        results = run_weekly_sweep_job(
            sweep_service,
            {"alice": "balanced", "bob": "safe"},
            get_preset,
            run_date=SUNDAY,
        )

        assert results["alice"].swept is True
        assert results["alice"].invested_amount == Decimal("832.00")
        assert results["bob"].swept is False
        assert results["bob"].reason == SKIP_BELOW_MINIMUM

    def test_bad_preset_isolated_to_one_user(self, sweep_service):
        sweep_service.add_manual_topup("alice", 1000)
        sweep_service.add_manual_topup("carol", 1000)

        results = run_weekly_sweep_job(
            sweep_service,
            {"carol": "moonshot", "alice": "balanced"},
            get_preset,
            run_date=SUNDAY,
        )

        assert "carol" not in results
        assert results["alice"].swept is True
        assert sweep_service.get_balance("carol") == 1000

    def test_off_day_run_does_nothing(self, sweep_service):
        sweep_service.add_manual_topup("alice", 1000)

        results = run_weekly_sweep_job(
            sweep_service, {"alice": "growth"}, get_preset, run_date=MONDAY
        )

        assert results["alice"].swept is False
        assert sweep_service.get_balance("alice") == 1000


class TestSweepScheduler:

    def test_trigger_uses_configured_day(self, sweep_service):
        scheduler = SweepScheduler(sweep_service, get_preset, hour=10, minute=0)

        trigger = str(scheduler.trigger)
        assert "day_of_week='sun'" in trigger
        assert "hour='10'" in trigger
        assert scheduler.timezone.zone == "Asia/Kolkata"

    def test_trigger_follows_service_calendar(self, price_provider, broker):
        """Job fires on the same weekday the service accepts as a sweep day"""
        service = SweepService(
            ledger_repo=InMemoryLedgerRepository(),
            holding_repo=InMemoryHoldingRepository(),
            executor=broker,
            price_provider=price_provider,
            calendar=SweepCalendar("friday"),
        )
        service.add_manual_topup("alice", 1000)

        scheduler = SweepScheduler(service, get_preset)
        scheduler.subscribe("alice", "balanced")

        assert "day_of_week='fri'" in str(scheduler.trigger)
        results = run_weekly_sweep_job(
            service, scheduler.subscriptions, get_preset, run_date=FRIDAY
        )
        assert results["alice"].swept is True

    def test_subscribe_validates_preset(self, sweep_service):
        scheduler = SweepScheduler(sweep_service, get_preset)

        scheduler.subscribe("alice", "safe")
        with pytest.raises(InvalidPresetError):
            scheduler.subscribe("bob", "moonshot")

        assert scheduler.subscriptions == {"alice": "safe"}
        scheduler.unsubscribe("alice")
        assert scheduler.subscriptions == {}

    def test_start_registers_weekly_job(self, sweep_service):
        scheduler = SweepScheduler(sweep_service, get_preset)
        scheduler.start()
        try:
            job = scheduler.scheduler.get_job(WEEKLY_SWEEP_JOB_ID)
            assert job is not None
            assert job.name == "Weekly Piggy Sweep"
        finally:
            scheduler.stop()

        assert scheduler.scheduler.running is False

    def test_stop_before_start_is_noop(self, sweep_service):
        SweepScheduler(sweep_service, get_preset).stop()
