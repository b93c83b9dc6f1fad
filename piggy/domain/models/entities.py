"""
Domain Models - Entities
Pure domain objects with no infrastructure dependencies
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from piggy.domain.exceptions import InvalidRoundupRuleError
from piggy.utils.decimal_utils import coerce_decimal


class TransactionDirection(str, Enum):
    """Direction of a payment event"""
    DEBIT = "debit"
    CREDIT = "credit"


class LedgerEntryType(str, Enum):
    """Known piggy ledger entry types"""
    ROUNDUP_CREDIT = "roundup_credit"
    MANUAL_TOPUP = "manual_topup"
    INVESTMENT_DEBIT = "investment_debit"


class OrderSide(str, Enum):
    """Order side"""
    BUY = "buy"
    SELL = "sell"


class OrderStatus(str, Enum):
    """Order lifecycle status"""
    PENDING = "pending"
    FILLED = "filled"
    FAILED = "failed"


class InstrumentType(str, Enum):
    """Instrument categorization"""
    ETF = "etf"
    MUTUAL_FUND = "mutual_fund"


class PresetName(str, Enum):
    """Named allocation presets"""
    SAFE = "safe"
    BALANCED = "balanced"
    GROWTH = "growth"


@dataclass(frozen=True)
class Transaction:
    """Observed payment event - Immutable"""
    id: str
    amount: Decimal
    direction: TransactionDirection
    timestamp: datetime
    merchant: str = ""
    category: Optional[str] = None
    upi_ref: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "amount", coerce_decimal(self.amount))
        object.__setattr__(self, "direction", TransactionDirection(self.direction))

    @property
    def is_debit(self) -> bool:
        return self.direction == TransactionDirection.DEBIT


@dataclass(frozen=True)
class RoundupRule:
    """Round-up configuration - Immutable"""
    round_to_nearest: Decimal
    min_roundup: Decimal
    max_roundup: Decimal

    def __post_init__(self):
        for name in ("round_to_nearest", "min_roundup", "max_roundup"):
            object.__setattr__(self, name, coerce_decimal(getattr(self, name)))

        if self.round_to_nearest <= Decimal("0"):
            raise InvalidRoundupRuleError("round_to_nearest must be positive")
        if self.min_roundup < Decimal("0") or self.max_roundup < Decimal("0"):
            raise InvalidRoundupRuleError("Round-up bounds cannot be negative")
        if self.min_roundup > self.max_roundup:
            raise InvalidRoundupRuleError(
                f"min_roundup {self.min_roundup} exceeds max_roundup {self.max_roundup}"
            )


@dataclass(frozen=True)
class LedgerEntry:
    """
    Append-only piggy ledger event.

    ``type`` is kept as a plain string so that entries written by newer
    producers still load; the accumulator decides what it understands.
    """
    id: str
    user_id: str
    amount: Decimal
    type: str
    timestamp: datetime
    reference: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "amount", coerce_decimal(self.amount))
        if isinstance(self.type, LedgerEntryType):
            object.__setattr__(self, "type", self.type.value)


@dataclass(frozen=True)
class RoundupEntry:
    """Spare change collected from one debit transaction"""
    amount: Decimal
    reference: str
    timestamp: datetime

    def to_ledger_entry(self, user_id: str) -> LedgerEntry:
        return LedgerEntry(
            id=f"roundup_{self.reference}",
            user_id=user_id,
            amount=self.amount,
            type=LedgerEntryType.ROUNDUP_CREDIT.value,
            timestamp=self.timestamp,
            reference=self.reference,
        )


@dataclass(frozen=True)
class Allocation:
    """Target weight for one instrument - Immutable"""
    symbol: str
    weight_pct: Decimal
    name: str = ""
    instrument_type: InstrumentType = InstrumentType.ETF

    def __post_init__(self):
        if not self.symbol:
            raise ValueError("Allocation symbol cannot be empty")
        object.__setattr__(self, "weight_pct", coerce_decimal(self.weight_pct))
        if not Decimal("0") <= self.weight_pct <= Decimal("100"):
            raise ValueError("Allocation percentage must be between 0 and 100")


@dataclass(frozen=True)
class PortfolioPreset:
    """Named allocation set with its sweep floor"""
    name: str
    allocations: tuple
    min_sweep_amount: Decimal

    def __post_init__(self):
        object.__setattr__(self, "allocations", tuple(self.allocations))
        object.__setattr__(self, "min_sweep_amount", coerce_decimal(self.min_sweep_amount))

    @property
    def total_weight(self) -> Decimal:
        return sum((a.weight_pct for a in self.allocations), Decimal("0"))

    @property
    def symbols(self) -> List[str]:
        return [a.symbol for a in self.allocations]


@dataclass(frozen=True)
class Order:
    """Whole-unit purchase order - Immutable"""
    symbol: str
    quantity: int
    price: Decimal
    amount: Decimal
    side: OrderSide = OrderSide.BUY
    status: OrderStatus = OrderStatus.PENDING
    id: str = field(default_factory=lambda: f"order_{uuid4().hex[:12]}")
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if self.quantity < 1:
            raise ValueError("Order quantity must be at least 1")
        if self.price <= Decimal("0"):
            raise ValueError("Order price must be positive")


@dataclass(frozen=True)
class Holding:
    """Cumulative position in one instrument"""
    symbol: str
    units: Decimal
    avg_cost: Decimal
    current_price: Decimal

    def __post_init__(self):
        for name in ("units", "avg_cost", "current_price"):
            object.__setattr__(self, name, coerce_decimal(getattr(self, name)))

    @property
    def current_value(self) -> Decimal:
        return self.units * self.current_price

    @property
    def invested_value(self) -> Decimal:
        return self.units * self.avg_cost

    def revalue(self, price) -> "Holding":
        return Holding(
            symbol=self.symbol,
            units=self.units,
            avg_cost=self.avg_cost,
            current_price=coerce_decimal(price),
        )


@dataclass(frozen=True)
class Returns:
    """Aggregate portfolio returns - derived, never persisted"""
    invested: Decimal
    current: Decimal
    gains: Decimal
    gains_percent: Decimal


@dataclass(frozen=True)
class WeeklyProgress:
    """Round-ups collected in the current Sunday-based week"""
    week_start: date
    amount: Decimal
    target: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class SweepResult:
    """Outcome of one sweep run for one user"""
    user_id: str
    run_date: date
    balance: Decimal
    swept: bool
    orders: tuple = ()
    filled: tuple = ()
    failed: tuple = ()
    holdings: tuple = ()
    reason: Optional[str] = None

    @property
    def invested_amount(self) -> Decimal:
        return sum((o.amount for o in self.filled), Decimal("0"))
