"""
SCHEDULER BOOTSTRAP

Wraps an APScheduler instance for the weekly piggy sweep.
Scheduler is orchestration-only and contains no business logic.
"""

import logging
from typing import Callable, Dict, Optional

import pytz
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from piggy.config import settings
from piggy.domain.models import PortfolioPreset
from piggy.scheduler.jobs import run_weekly_sweep_job
from piggy.services.sweep_service import SweepService

_logger = logging.getLogger(__name__)

WEEKLY_SWEEP_JOB_ID = "weekly_sweep_job"


class SweepScheduler:
    """
    Weekly sweep scheduler.
    Constructed explicitly and owned by the caller; start() / stop() bracket its life.

    The cron weekday is taken from the service's SweepCalendar so the job
    only fires on days the service will actually sweep.
    """

    def __init__(
        self,
        service: SweepService,
        resolve_preset: Callable[[str], PortfolioPreset],
        hour: Optional[int] = None,
        minute: Optional[int] = None,
        timezone: Optional[str] = None,
    ):
        self.service = service
        self.resolve_preset = resolve_preset
        self.subscriptions: Dict[str, str] = {}

        self.timezone = pytz.timezone(timezone or settings.TIMEZONE)
        self.trigger = CronTrigger(
            day_of_week=service.calendar.sweep_day,
            hour=settings.SWEEP_HOUR if hour is None else hour,
            minute=settings.SWEEP_MINUTE if minute is None else minute,
            timezone=self.timezone,
        )
        self.scheduler = BackgroundScheduler(timezone=self.timezone)

    def subscribe(self, user_id: str, preset_name: str) -> None:
        """Enable auto-invest for a user (validates the preset name)."""
        self.resolve_preset(preset_name)
        self.subscriptions[user_id] = preset_name

    def unsubscribe(self, user_id: str) -> None:
        self.subscriptions.pop(user_id, None)

    def run_now(self):
        return run_weekly_sweep_job(
            self.service,
            dict(self.subscriptions),
            self.resolve_preset,
        )

    def start(self) -> None:
        """Register the weekly job and start the scheduler"""
        self.scheduler.add_job(
            self.run_now,
            trigger=self.trigger,
            id=WEEKLY_SWEEP_JOB_ID,
            name="Weekly Piggy Sweep",
            replace_existing=True,
        )
        self.scheduler.start()

        _logger.info("✅ Sweep scheduler started")
        for job in self.scheduler.get_jobs():
            _logger.info("  • %s - Next run: %s", job.name, job.next_run_time)

    def stop(self) -> None:
        """Shutdown the scheduler safely."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            _logger.info("🛑 Sweep scheduler shut down")
