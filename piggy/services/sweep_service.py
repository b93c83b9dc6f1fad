"""
SERVICE: PIGGY SWEEP ORCHESTRATION

• Collects round-ups into the append-only ledger
• Runs the weekly sweep for one user at a time
• Records investment debits only for confirmed fills
• Applies fills to weighted-average holdings
"""

import logging
import threading
from collections import defaultdict
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Iterator, List, Optional

from piggy.config import settings
from piggy.domain.models import (
    LedgerEntryType,
    Order,
    OrderStatus,
    PortfolioPreset,
    SweepResult,
    Transaction,
)
from piggy.domain.services.investment_sweeper import InvestmentSweeper
from piggy.domain.services.ledger_accumulator import (
    build_investment_debit,
    build_manual_topup,
    calculate_balance,
    calculate_weekly_progress,
)
from piggy.domain.services.portfolio_valuator import (
    calculate_returns,
    revalue_holdings,
    update_holding,
)
from piggy.domain.services.roundup_calculator import RoundupCalculator
from piggy.infrastructure.execution.simulated_broker import OrderExecutor
from piggy.infrastructure.market_data.types import PriceProvider
from piggy.infrastructure.repositories.holding_repository import InMemoryHoldingRepository
from piggy.infrastructure.repositories.ledger_repository import InMemoryLedgerRepository
from piggy.services.sweep_calendar_service import SweepCalendar
from piggy.utils.decimal_utils import coerce_decimal
from piggy.utils.formatting import format_currency, format_percentage
from piggy.utils.time import now_ist_naive, today_ist

logger = logging.getLogger(__name__)

SKIP_ALREADY_RUNNING = "Sweep already running for user"
SKIP_NOT_SWEEP_DAY = "Not a sweep day"
SKIP_BELOW_MINIMUM = "Balance below sweep minimum"
SKIP_NO_ORDERS = "Balance too small for one unit of any allocation"


class SweepService:
    """
    Explicitly constructed orchestration over the pure engines.
    One sweep per user at a time; no state besides the injected stores.
    """

    def __init__(
        self,
        ledger_repo: InMemoryLedgerRepository,
        holding_repo: InMemoryHoldingRepository,
        executor: OrderExecutor,
        price_provider: PriceProvider,
        calendar: Optional[SweepCalendar] = None,
    ):
        self.ledger_repo = ledger_repo
        self.holding_repo = holding_repo
        self.executor = executor
        self.price_provider = price_provider
        self.calendar = calendar or SweepCalendar()

        # user_id -> lock, and how many threads hold or wait on it
        self._user_locks: Dict[str, threading.Lock] = {}
        self._lock_refs: Dict[str, int] = defaultdict(int)
        self._registry_lock = threading.Lock()

    # ------------------------------------------------------------
    # Ledger inputs
    # ------------------------------------------------------------

    def ingest_transactions(
        self,
        user_id: str,
        calculator: RoundupCalculator,
        transactions: Iterable[Transaction],
    ) -> List:
        """
        Append round-up credits for new debits.
        Transactions already credited (by reference) are skipped, so a
        replayed statement never double-counts.
        The read-filter-append runs under the user's lock, so overlapping
        ingests of the same statement credit each transaction once.
        """
        new_entries = calculator.process_to_ledger(transactions, user_id, now_ist_naive())
        appended = []

        with self._user_guard(user_id):
            credited = {
                e.reference
                for e in self.ledger_repo.list_entries(user_id)
                if e.type == LedgerEntryType.ROUNDUP_CREDIT.value
            }

            for entry in new_entries:
                if entry.reference in credited:
                    continue
                self.ledger_repo.append(entry)
                credited.add(entry.reference)
                appended.append(entry)

        logger.info("ROUNDUPS_INGESTED | user=%s count=%d", user_id, len(appended))
        return appended

    def add_manual_topup(self, user_id: str, amount):
        entry = build_manual_topup(user_id, amount, now_ist_naive())
        self.ledger_repo.append(entry)
        logger.info("MANUAL_TOPUP | user=%s amount=%s", user_id, entry.amount)
        return entry

    def get_balance(self, user_id: str) -> Decimal:
        return calculate_balance(self.ledger_repo.list_entries(user_id))

    # ------------------------------------------------------------
    # Sweep
    # ------------------------------------------------------------

    @contextmanager
    def _user_guard(self, user_id: str, blocking: bool = True) -> Iterator[bool]:
        """
        Per-user mutual exclusion. Yields whether the lock was acquired.

        A user's lock is dropped from the registry once no thread holds or
        waits on it, so the registry only tracks users with work in flight.
        """
        with self._registry_lock:
            lock = self._user_locks.setdefault(user_id, threading.Lock())
            self._lock_refs[user_id] += 1

        acquired = lock.acquire(blocking=blocking)
        try:
            yield acquired
        finally:
            if acquired:
                lock.release()
            with self._registry_lock:
                self._lock_refs[user_id] -= 1
                if not self._lock_refs[user_id]:
                    del self._lock_refs[user_id]
                    del self._user_locks[user_id]

    def _snapshot_prices(self, preset: PortfolioPreset) -> Dict[str, Decimal]:
        return {
            symbol: self.price_provider.get_current_price(symbol)
            for symbol in preset.symbols
        }

    def run_sweep(
        self,
        user_id: str,
        preset: PortfolioPreset,
        run_date: Optional[date] = None,
        force: bool = False,
    ) -> SweepResult:
        """
        Run one sweep for a user.

        Args:
            user_id: Account owner
            preset: Allocation preset to invest into
            run_date: Date evaluated against the sweep calendar (default: today IST)
            force: Skip the sweep-day gate (the balance floor still applies)
        """
        run_date = run_date or today_ist()

        with self._user_guard(user_id, blocking=False) as acquired:
            if not acquired:
                logger.warning("SWEEP_SKIPPED_CONCURRENT | user=%s", user_id)
                return SweepResult(
                    user_id=user_id,
                    run_date=run_date,
                    balance=Decimal("0"),
                    swept=False,
                    reason=SKIP_ALREADY_RUNNING,
                )

            # Single read of ledger and prices for the whole run
            balance = self.get_balance(user_id)
            sweeper = InvestmentSweeper.from_preset(preset)
            is_day = True if force else self.calendar.is_sweep_day(run_date)

            if not sweeper.should_sweep(balance, is_day):
                reason = SKIP_NOT_SWEEP_DAY if not is_day else SKIP_BELOW_MINIMUM
                logger.info(
                    "SWEEP_NOT_DUE | user=%s balance=%s reason=%s",
                    user_id,
                    balance,
                    reason,
                )
                return SweepResult(
                    user_id=user_id,
                    run_date=run_date,
                    balance=balance,
                    swept=False,
                    reason=reason,
                )

            prices = self._snapshot_prices(preset)
            orders = sweeper.create_orders(balance, prices)
            return self._execute(user_id, run_date, balance, orders)

    def manual_invest(
        self,
        user_id: str,
        preset: PortfolioPreset,
        amount,
        run_date: Optional[date] = None,
    ) -> SweepResult:
        """
        Invest part of the balance immediately, regardless of sweep day.

        Raises:
            ValueError: If amount is not positive or exceeds the balance
        """
        amount = coerce_decimal(amount)
        run_date = run_date or today_ist()

        if amount <= 0:
            raise ValueError("Investment amount must be positive")

        with self._user_guard(user_id):
            balance = self.get_balance(user_id)
            if amount > balance:
                raise ValueError(
                    f"Investment amount {format_currency(amount)} exceeds piggy balance "
                    f"{format_currency(balance)}"
                )

            sweeper = InvestmentSweeper.from_preset(preset)
            orders = sweeper.create_orders(amount, self._snapshot_prices(preset))
            return self._execute(user_id, run_date, balance, orders)

    def _execute(
        self,
        user_id: str,
        run_date: date,
        balance: Decimal,
        orders: List[Order],
    ) -> SweepResult:
        if not orders:
            logger.info("SWEEP_NO_ORDERS | user=%s balance=%s", user_id, balance)
            return SweepResult(
                user_id=user_id,
                run_date=run_date,
                balance=balance,
                swept=False,
                reason=SKIP_NO_ORDERS,
            )

        filled, failed, touched = [], [], []

        for order in orders:
            try:
                result = self.executor.execute(order)
            except Exception as exc:
                logger.error(
                    "ORDER_EXECUTION_ERROR | user=%s symbol=%s error=%s",
                    user_id,
                    order.symbol,
                    exc,
                )
                failed.append(order)
                continue

            if result.status != OrderStatus.FILLED:
                logger.warning("ORDER_NOT_FILLED | user=%s symbol=%s", user_id, order.symbol)
                failed.append(result)
                continue

            self.ledger_repo.append(
                build_investment_debit(user_id, result.amount, result.id, now_ist_naive())
            )
            holding = update_holding(
                self.holding_repo.get(user_id, result.symbol),
                result.quantity,
                result.price,
                symbol=result.symbol,
            )
            self.holding_repo.put(user_id, holding)
            filled.append(result)
            touched.append(holding)

        logger.info(
            "SWEEP_COMPLETED | user=%s balance=%s filled=%d failed=%d invested=%s",
            user_id,
            balance,
            len(filled),
            len(failed),
            sum((o.amount for o in filled), Decimal("0")),
        )

        return SweepResult(
            user_id=user_id,
            run_date=run_date,
            balance=balance,
            swept=bool(filled),
            orders=tuple(orders),
            filled=tuple(filled),
            failed=tuple(failed),
            holdings=tuple(touched),
        )

    # ------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------

    def build_snapshot(self, user_id: str, weekly_target=None) -> dict:
        """Display-ready piggy and portfolio summary for one user."""
        entries = self.ledger_repo.list_entries(user_id)
        holdings = self.holding_repo.list_for_user(user_id)
        prices = {h.symbol: self.price_provider.get_current_price(h.symbol) for h in holdings}
        holdings = revalue_holdings(holdings, prices)

        balance = calculate_balance(entries)
        returns = calculate_returns(holdings)
        target = settings.WEEKLY_TARGET if weekly_target is None else weekly_target
        weekly = calculate_weekly_progress(entries, today_ist(), target)

        return {
            "positions": [
                {
                    "symbol": h.symbol,
                    "units": h.units,
                    "avg_cost": round(h.avg_cost, 2),
                    "current_price": h.current_price,
                    "current_value": round(h.current_value, 2),
                }
                for h in holdings
            ],
            "summary": {
                "piggy_balance": balance,
                "piggy_balance_display": format_currency(balance),
                "invested": round(returns.invested, 2),
                "current_value": round(returns.current, 2),
                "current_value_display": format_currency(returns.current),
                "gains": round(returns.gains, 2),
                "gains_percent": round(returns.gains_percent, 2),
                "gains_percent_display": format_percentage(returns.gains_percent),
                "weekly_roundups": weekly.amount,
                "weekly_target": weekly.target,
                "weekly_progress_pct": round(weekly.percentage, 2),
            },
        }
