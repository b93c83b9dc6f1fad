"""
SCHEDULER JOB DEFINITIONS

Jobs are thin wrappers that:
- Log execution
- Resolve each subscriber's preset
- Call the sweep service
- Isolate failures per user

NO business logic is allowed here.
"""

import logging
from datetime import date
from typing import Callable, Dict, List, Mapping, Optional

from piggy.domain.models import PortfolioPreset, SweepResult
from piggy.services.sweep_service import SweepService
from piggy.utils.formatting import format_currency
from piggy.utils.time import today_ist

_logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# WEEKLY SWEEP JOB
# -------------------------------------------------------------------

def run_weekly_sweep_job(
    service: SweepService,
    subscriptions: Mapping[str, str],
    resolve_preset: Callable[[str], PortfolioPreset],
    run_date: Optional[date] = None,
) -> Dict[str, SweepResult]:
    """
    Sweep every auto-invest subscriber.

    Args:
        service: Sweep service
        subscriptions: user_id -> preset name
        resolve_preset: Preset lookup (ConfigEngine.get_preset or built-ins)
        run_date: Sweep date (default: today IST)
    """
    run_date = run_date or today_ist()
    _logger.info("📅 Running weekly sweep job | date=%s users=%d", run_date, len(subscriptions))

    results: Dict[str, SweepResult] = {}
    failures: List[str] = []

    for user_id, preset_name in subscriptions.items():
        try:
            preset = resolve_preset(preset_name)
            result = service.run_sweep(user_id, preset, run_date=run_date)
        except Exception as exc:
            _logger.error("Weekly sweep failed for %s: %s", user_id, exc)
            failures.append(user_id)
            continue

        results[user_id] = result
        if result.swept:
            _logger.info(
                "💰 Swept %s for %s into %d order(s)",
                format_currency(result.invested_amount),
                user_id,
                len(result.filled),
            )

    _logger.info(
        "✅ Weekly sweep job finished | swept=%d skipped=%d failed=%d",
        sum(1 for r in results.values() if r.swept),
        sum(1 for r in results.values() if not r.swept),
        len(failures),
    )
    return results
