"""
PORTFOLIO PRESETS

Static allocation presets the sweep engine invests into, plus the default
round-up rule offered to new users.

Rules:
- Read-only strategy definition
- Every preset's weights sum to exactly 100
- Every sweep floor lies strictly between 0 and 1000
- No pricing, no execution
"""

from decimal import Decimal
from typing import Dict

from piggy.domain.exceptions import InvalidPresetError
from piggy.domain.models import (
    Allocation,
    InstrumentType,
    PortfolioPreset,
    PresetName,
    RoundupRule,
)

# -------------------------------------------------------------------
# Instruments
# -------------------------------------------------------------------

NIFTY_ETF = "NIFTYBEES"
GOLD_ETF = "GOLDBEES"
LIQUID_ETF = "LIQUIDBEES"

INSTRUMENT_NAMES = {
    NIFTY_ETF: "Nifty 50 ETF",
    GOLD_ETF: "Gold ETF",
    LIQUID_ETF: "Liquid ETF",
}

MAX_SWEEP_FLOOR = Decimal("1000")

# -------------------------------------------------------------------
# Round-up defaults
# -------------------------------------------------------------------

ROUND_TO_NEAREST_OPTIONS = (10, 20, 50, 100)

DEFAULT_ROUNDUP_RULE = RoundupRule(
    round_to_nearest=Decimal("10"),
    min_roundup=Decimal("1"),
    max_roundup=Decimal("50"),
)

DEFAULT_WEEKLY_TARGET = Decimal("200")


def _etf(symbol: str, weight: str) -> Allocation:
    return Allocation(
        symbol=symbol,
        weight_pct=Decimal(weight),
        name=INSTRUMENT_NAMES[symbol],
        instrument_type=InstrumentType.ETF,
    )


# -------------------------------------------------------------------
# Presets
# -------------------------------------------------------------------

PORTFOLIO_PRESETS: Dict[str, PortfolioPreset] = {
    PresetName.SAFE.value: PortfolioPreset(
        name=PresetName.SAFE.value,
        allocations=(_etf(GOLD_ETF, "100"),),
        min_sweep_amount=Decimal("50"),
    ),
    PresetName.BALANCED.value: PortfolioPreset(
        name=PresetName.BALANCED.value,
        allocations=(_etf(NIFTY_ETF, "70"), _etf(GOLD_ETF, "30")),
        min_sweep_amount=Decimal("100"),
    ),
    PresetName.GROWTH.value: PortfolioPreset(
        name=PresetName.GROWTH.value,
        allocations=(_etf(NIFTY_ETF, "80"), _etf(GOLD_ETF, "20")),
        min_sweep_amount=Decimal("100"),
    ),
}

# -------------------------------------------------------------------
# Validation Helpers
# -------------------------------------------------------------------

def validate_preset(preset: PortfolioPreset) -> None:
    """
    Validate a single portfolio preset.

    Rules enforced:
    - At least one allocation
    - No duplicate symbols
    - Weights sum to exactly 100
    - 0 < min_sweep_amount < 1000

    Raises:
        InvalidPresetError: If any rule is violated
    """
    if not preset.allocations:
        raise InvalidPresetError(f"Preset '{preset.name}' has no allocations")

    symbols = preset.symbols
    if len(symbols) != len(set(symbols)):
        raise InvalidPresetError(f"Preset '{preset.name}' repeats a symbol")

    if preset.total_weight != Decimal("100"):
        raise InvalidPresetError(
            f"Preset '{preset.name}' weights sum to {preset.total_weight}, expected 100"
        )

    if not Decimal("0") < preset.min_sweep_amount < MAX_SWEEP_FLOOR:
        raise InvalidPresetError(
            f"Preset '{preset.name}' sweep floor {preset.min_sweep_amount} "
            f"must be between 0 and {MAX_SWEEP_FLOOR}"
        )


def validate_presets(presets: Dict[str, PortfolioPreset]) -> None:
    if not presets:
        raise InvalidPresetError("At least one preset is required")
    for preset in presets.values():
        validate_preset(preset)


def get_preset(name: str) -> PortfolioPreset:
    """Look up a built-in preset by name."""
    try:
        return PORTFOLIO_PRESETS[PresetName(name).value]
    except ValueError:
        raise InvalidPresetError(f"Unknown portfolio preset: {name}") from None
