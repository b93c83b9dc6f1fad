"""
Domain Models Package
Export all domain entities
"""

from .entities import (
    # Enums
    InstrumentType,
    LedgerEntryType,
    OrderSide,
    OrderStatus,
    PresetName,
    TransactionDirection,

    # Entities
    Allocation,
    Holding,
    LedgerEntry,
    Order,
    PortfolioPreset,
    Returns,
    RoundupEntry,
    RoundupRule,
    SweepResult,
    Transaction,
    WeeklyProgress,
)

__all__ = [
    # Enums
    "InstrumentType",
    "LedgerEntryType",
    "OrderSide",
    "OrderStatus",
    "PresetName",
    "TransactionDirection",

    # Entities
    "Allocation",
    "Holding",
    "LedgerEntry",
    "Order",
    "PortfolioPreset",
    "Returns",
    "RoundupEntry",
    "RoundupRule",
    "SweepResult",
    "Transaction",
    "WeeklyProgress",
]
