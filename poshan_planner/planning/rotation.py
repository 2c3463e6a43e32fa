"""Rotation state: what has been selected so far in one plan generation.

One RotationState is created per ``MealPlanner.generate`` call and threaded
explicitly through every selection. It is never shared between calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from poshan_planner.data_layer.models import MealOption


@dataclass(frozen=True)
class PulseUsage:
    """One selection of a pulse-bearing option."""

    pulse: str
    day: int


@dataclass
class RotationState:
    """Mutable accumulator of rotation-relevant selections.

    pulse_history: most recent first.
    staple_counts[staple] = number of selections carrying the staple.
    variety_counts[bucket] = number of selections from the bucket.
    """

    pulse_history: List[PulseUsage] = field(default_factory=list)
    staple_counts: Dict[str, int] = field(default_factory=dict)
    variety_counts: Dict[str, int] = field(default_factory=dict)
    leafy_meals: int = 0

    @property
    def most_recent_pulse(self) -> Optional[str]:
        return self.pulse_history[0].pulse if self.pulse_history else None

    def pulses_within(self, day: int, lookback_days: int) -> Set[str]:
        """Pulses served on the ``lookback_days`` days before ``day``."""
        earliest = day - lookback_days
        return {u.pulse for u in self.pulse_history if earliest <= u.day < day}

    def staple_count(self, staple: str) -> int:
        return self.staple_counts.get(staple, 0)

    def variety_count(self, bucket: str) -> int:
        return self.variety_counts.get(bucket, 0)

    def record(self, option: MealOption, day: int) -> None:
        """Record a selection made on ``day`` (1-based)."""
        if option.pulse:
            self.pulse_history.insert(0, PulseUsage(option.pulse, day))
        if option.staple:
            self.staple_counts[option.staple] = self.staple_counts.get(option.staple, 0) + 1
        self.variety_counts[option.variety] = self.variety_counts.get(option.variety, 0) + 1
        if option.contains_leafy:
            self.leafy_meals += 1
