"""Clock helpers. Sweep days and ledger timestamps follow Indian Standard Time."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

IST = ZoneInfo("Asia/Kolkata")


def now_ist_naive() -> datetime:
    """Wall-clock IST with tzinfo stripped; ledger timestamps are stored naive."""
    return datetime.now(IST).replace(tzinfo=None)


def today_ist() -> date:
    # A UTC host would still be on Saturday evening when IST turns Sunday
    return datetime.now(IST).date()
