import logging
from datetime import date
from typing import Iterable, Optional

from piggy.utils.time import today_ist

_logger = logging.getLogger(__name__)

# Python weekday() numbering: Monday=0 … Sunday=6
WEEKDAY_NAMES = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")
SUNDAY = WEEKDAY_NAMES.index("sun")

_FULL_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

# "sun" and "sunday" both accepted; anything else (ranges, typos) is rejected
_DAY_LOOKUP = {
    **{name: i for i, name in enumerate(WEEKDAY_NAMES)},
    **{name: i for i, name in enumerate(_FULL_NAMES)},
}


def is_auto_sweep_day(d: Optional[date] = None) -> bool:
    """Weekly auto-sweep runs on Sundays. Defaults to today in IST."""
    d = d or today_ist()
    return d.weekday() == SUNDAY


class SweepCalendar:
    """
    Pluggable sweep-day policy.

    The default instance reproduces ``is_auto_sweep_day``; deployments can
    move the sweep weekday or block specific dates.
    """

    def __init__(self, sweep_day: str = "sun", holidays: Iterable[date] = ()):
        weekday = _DAY_LOOKUP.get(str(sweep_day).strip().lower())
        if weekday is None:
            raise ValueError(f"Unknown sweep day: {sweep_day!r}")
        self.sweep_weekday = weekday
        # Cron-style abbreviation, shared with the scheduler trigger
        self.sweep_day = WEEKDAY_NAMES[weekday]
        self.holidays = frozenset(holidays)

    def is_sweep_day(self, d: Optional[date] = None) -> bool:
        d = d or today_ist()
        if d in self.holidays:
            _logger.info("SWEEP_DAY_HOLIDAY | date=%s", d)
            return False
        return d.weekday() == self.sweep_weekday
