"""
Domain errors.

Only programmer errors are modelled as exceptions; expected conditions
(missing price, insufficient balance, unknown ledger type) are handled
locally by the engines.
"""


class InvalidUnitsError(ValueError):
    """Raised when a fill is recorded with zero or negative units."""


class InvalidRoundupRuleError(ValueError):
    """Raised when a round-up rule is internally inconsistent."""


class InvalidPresetError(ValueError):
    """Raised when a portfolio preset violates the weight or sweep-floor rules."""
