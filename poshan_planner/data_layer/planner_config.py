"""Planner configuration: rotation caps, cost surcharges and compliance thresholds."""
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, Optional

import yaml

from poshan_planner.data_layer.models import SLOTS


DEFAULT_SLOT_DISTRIBUTION: Dict[str, float] = {
    "breakfast": 0.25,
    "snack1": 0.08,
    "lunch": 0.35,
    "snack2": 0.08,
    "dinner": 0.24,
}


@dataclass
class PlannerConfig:
    """Tunable constants for one planner instance."""

    # Rotation
    staple_cap: int = 4  # max selections per staple group across the rotation
    variety_cap: int = 3  # max selections per variety bucket
    pulse_lookback_days: int = 1

    # Selection scoring
    protein_weight: float = 10.0
    variety_bonus: float = 50.0
    adequacy_bonus: float = 20.0
    adequacy_threshold: float = 0.80

    # Cost
    wastage_pct: float = 0.07
    spices_allowance: float = 0.50
    currency: str = "INR"

    # Compliance
    compliance_threshold: float = 0.90
    min_leafy_meals_per_week: int = 3

    slot_distribution: Dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_SLOT_DISTRIBUTION)
    )
    seed: Optional[int] = None  # tie-break RNG; None keeps catalog order

    def __post_init__(self):
        unknown = set(self.slot_distribution) - set(SLOTS)
        if unknown:
            raise ValueError(f"Unknown slots in slot_distribution: {sorted(unknown)}")
        for slot in SLOTS:
            self.slot_distribution.setdefault(slot, 0.0)
        if self.staple_cap < 1 or self.variety_cap < 1:
            raise ValueError("staple_cap and variety_cap must be at least 1")
        if self.pulse_lookback_days < 0:
            raise ValueError("pulse_lookback_days must be non-negative")
        if not 0 <= self.wastage_pct < 1:
            raise ValueError(f"wastage_pct must be in [0, 1), got {self.wastage_pct}")


class PlannerConfigLoader:
    """Loader for planner configuration overrides from YAML."""

    def __init__(self, yaml_path: str):
        """Initialize planner config loader from YAML file.

        Args:
            yaml_path: Path to YAML file containing config overrides
        """
        self.yaml_path = Path(yaml_path)

    def load(self) -> PlannerConfig:
        """Load config, applying YAML values over the defaults.

        Returns:
            PlannerConfig object

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            ValueError: If the file contains unknown keys or invalid values
        """
        with open(self.yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}

        known = {f.name for f in fields(PlannerConfig)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown planner config keys: {sorted(unknown)}")

        if "slot_distribution" in data:
            distribution = dict(DEFAULT_SLOT_DISTRIBUTION)
            distribution.update({str(k): float(v) for k, v in data["slot_distribution"].items()})
            data["slot_distribution"] = distribution

        return PlannerConfig(**data)
