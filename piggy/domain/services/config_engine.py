"""
CONFIG ENGINE (ENGINE-0)
Load, validate, and expose preset configuration

RESPONSIBILITIES:
- Load the YAML preset file
- Validate every preset and the default round-up rule
- Expose read-only typed objects

RULES:
❌ No defaults if config missing
✅ Fail fast on invalid config
✅ Deterministic output
"""

import logging
from pathlib import Path
from typing import Dict, Optional

import yaml

from piggy.domain.exceptions import InvalidPresetError
from piggy.domain.models import (
    Allocation,
    InstrumentType,
    PortfolioPreset,
    RoundupRule,
)
from piggy.domain.strategy.presets import validate_presets
from piggy.utils.decimal_utils import coerce_decimal

logger = logging.getLogger(__name__)

PRESETS_FILE = "presets.yml"


class ConfigEngine:
    """
    Configuration Engine
    Single source of truth for preset configuration
    """

    def __init__(self, config_dir: Path):
        """Initialize with config directory"""
        self.config_dir = Path(config_dir)
        self._presets: Optional[Dict[str, PortfolioPreset]] = None
        self._roundup_rule: Optional[RoundupRule] = None

    def load_all(self) -> None:
        """Load and validate all configuration files"""
        preset_file = self.config_dir / PRESETS_FILE
        if not preset_file.exists():
            raise FileNotFoundError(f"Preset config not found: {preset_file}")

        with open(preset_file, "r") as f:
            data = yaml.safe_load(f) or {}

        self._presets = self._parse_presets(data.get("presets"))
        self._roundup_rule = self._parse_roundup(data.get("roundup"))

        validate_presets(self._presets)
        logger.info(
            "CONFIG_LOADED | presets=%s file=%s",
            ",".join(sorted(self._presets)),
            preset_file,
        )

    @staticmethod
    def _parse_presets(raw) -> Dict[str, PortfolioPreset]:
        if not isinstance(raw, dict) or not raw:
            raise InvalidPresetError("'presets' section must be a non-empty mapping")

        presets = {}
        for name, body in raw.items():
            try:
                allocations = tuple(
                    Allocation(
                        symbol=item["symbol"],
                        weight_pct=coerce_decimal(item["weight_pct"]),
                        name=item.get("name", ""),
                        instrument_type=InstrumentType(item.get("type", "etf")),
                    )
                    for item in body["allocations"]
                )
                presets[name] = PortfolioPreset(
                    name=name,
                    allocations=allocations,
                    min_sweep_amount=coerce_decimal(body["min_sweep_amount"]),
                )
            except (KeyError, TypeError, ValueError) as exc:
                raise InvalidPresetError(f"Preset '{name}' is malformed: {exc}") from exc

        return presets

    @staticmethod
    def _parse_roundup(raw) -> RoundupRule:
        if not isinstance(raw, dict):
            raise ValueError("'roundup' section is required")

        return RoundupRule(
            round_to_nearest=coerce_decimal(raw["round_to_nearest"]),
            min_roundup=coerce_decimal(raw["min_roundup"]),
            max_roundup=coerce_decimal(raw["max_roundup"]),
        )

    def _ensure_loaded(self) -> None:
        if self._presets is None:
            raise RuntimeError("ConfigEngine.load_all() has not been called")

    @property
    def presets(self) -> Dict[str, PortfolioPreset]:
        self._ensure_loaded()
        return dict(self._presets)

    @property
    def roundup_rule(self) -> RoundupRule:
        self._ensure_loaded()
        return self._roundup_rule

    def get_preset(self, name: str) -> PortfolioPreset:
        """Get preset by name"""
        self._ensure_loaded()
        try:
            return self._presets[name]
        except KeyError:
            raise InvalidPresetError(f"Unknown portfolio preset: {name}") from None
