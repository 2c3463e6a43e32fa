"""Constraint-filtered greedy selection of one meal option per slot.

For each (day, slot):

1. Keep options for the slot.
2. Keep options satisfying every dietary constraint. None left: NoCandidate.
3. Keep options breaking no rotation rule. None left: fall back to the
   dietary-valid set and flag the selection as rotation_relaxed.
4. Score each survivor (see ``scoring.selection_score``); lowest wins. Ties
   go to catalog order, or to the injected seeded RNG.
5. Record the winner in the RotationState.
"""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from poshan_planner.data_layer.exceptions import NoCandidate
from poshan_planner.data_layer.models import MealOption, NutritionProfile, SlotTarget
from poshan_planner.data_layer.nutrition_db import NutritionDatabase
from poshan_planner.data_layer.planner_config import PlannerConfig
from poshan_planner.nutrition.calculator import NutritionCalculator
from poshan_planner.planning.constraints import DietaryFilter, rotation_violations
from poshan_planner.planning.rotation import RotationState
from poshan_planner.planning.scoring import selection_score


logger = logging.getLogger(__name__)

SCORE_EPSILON = 1e-9


@dataclass(frozen=True)
class SelectionResult:
    """Outcome of selecting one slot."""

    option: MealOption
    score: float
    nutrition: NutritionProfile
    rotation_relaxed: bool = False
    blocked_by: Tuple[str, ...] = ()  # rotation rules that emptied the pool


class MealSelectionStrategy(ABC):
    """Strategy interface for choosing a meal option for one slot.

    The constraint selector is the core implementation; an application can
    substitute another strategy (e.g. one that enriches choices with an
    external recommender) as long as it honours dietary constraints and
    records its choice in the RotationState.
    """

    @abstractmethod
    def select(
        self,
        slot: str,
        target: SlotTarget,
        rotation: RotationState,
        options: Sequence[MealOption],
        dietary_constraints: Iterable[str],
        day: int,
    ) -> SelectionResult:
        """Select one option for ``slot`` on ``day`` (1-based).

        Raises:
            NoCandidate: If no option satisfies slot and dietary constraints
        """
        ...


class ConstraintMealSelector(MealSelectionStrategy):
    """Greedy selector: hard dietary filter, soft rotation filter, score."""

    def __init__(
        self,
        nutrition_db: NutritionDatabase,
        config: Optional[PlannerConfig] = None,
        rng: Optional[random.Random] = None,
        calculator: Optional[NutritionCalculator] = None,
    ):
        """Initialize the selector.

        Args:
            nutrition_db: Database for dietary checks and nutrition
            config: Rotation caps and scoring weights (defaults if None)
            rng: Seeded RNG for tie-breaking; None keeps catalog order
            calculator: Shared NutritionCalculator (created if None)
        """
        self.config = config or PlannerConfig()
        self.rng = rng
        self.dietary_filter = DietaryFilter(nutrition_db)
        self.calculator = calculator or NutritionCalculator(nutrition_db)

    def select(
        self,
        slot: str,
        target: SlotTarget,
        rotation: RotationState,
        options: Sequence[MealOption],
        dietary_constraints: Iterable[str],
        day: int,
    ) -> SelectionResult:
        constraints = sorted(set(dietary_constraints))
        slot_options = [option for option in options if option.slot == slot]
        valid = self.dietary_filter.filter(slot_options, constraints)
        if not valid:
            raise NoCandidate(slot, day, constraints)

        allowed: List[MealOption] = []
        blocked_by = set()
        for option in valid:
            violations = rotation_violations(
                option,
                rotation,
                day,
                self.config.pulse_lookback_days,
                self.config.staple_cap,
                self.config.variety_cap,
            )
            if violations:
                blocked_by.update(violations)
            else:
                allowed.append(option)

        relaxed = not allowed
        if relaxed:
            logger.warning(
                "Day %d %s: no option satisfies rotation rules (%s); relaxing",
                day,
                slot,
                ", ".join(sorted(blocked_by)),
            )
            allowed = valid

        option, score = self._best(allowed, target, rotation)
        rotation.record(option, day)

        return SelectionResult(
            option=option,
            score=score,
            nutrition=self.calculator.calculate_option_nutrition(option),
            rotation_relaxed=relaxed,
            blocked_by=tuple(sorted(blocked_by)) if relaxed else (),
        )

    def _best(
        self, candidates: List[MealOption], target: SlotTarget, rotation: RotationState
    ) -> Tuple[MealOption, float]:
        scored = []
        for option in candidates:
            nutrition = self.calculator.calculate_option_nutrition(option)
            score = selection_score(
                nutrition,
                target,
                variety_unused=rotation.variety_count(option.variety) == 0,
                config=self.config,
            )
            scored.append((option, score))

        best_score = min(score for _, score in scored)
        ties = [(o, s) for o, s in scored if s - best_score <= SCORE_EPSILON]
        if self.rng is not None and len(ties) > 1:
            return self.rng.choice(ties)
        return ties[0]
