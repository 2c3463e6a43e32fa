"""Dietary and rotation constraints as pure predicates.

This module is the single place that answers "may this option be served
here?". Dietary rules are hard and derived strictly from ingredient
identity in the nutrition database. Rotation rules can be relaxed by the
selector when nothing satisfies them.

Dietary constraint strings:
    vegetarian          no animal-product ingredient (meat, fish, egg)
    vegan               vegetarian and no dairy
    no_<x> / <x>_free   no ingredient carrying allergen <x>, nor ingredient <x> itself
    <ingredient key>    that ingredient is excluded
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from poshan_planner.data_layer.models import MealOption
from poshan_planner.data_layer.nutrition_db import NutritionDatabase
from poshan_planner.planning.rotation import RotationState


PULSE_REPEAT = "pulse_repeat"
STAPLE_CAP = "staple_cap"
VARIETY_CAP = "variety_cap"


def _normalize_constraint(constraint: str) -> str:
    return constraint.strip().lower().replace("-", "_").replace(" ", "_")


def _excluded_allergen(constraint: str) -> Optional[str]:
    """Return the allergen named by a no_<x>/<x>_free constraint, or None."""
    if constraint.startswith("no_") and len(constraint) > 3:
        return constraint[3:]
    if constraint.endswith("_free") and len(constraint) > 5:
        return constraint[:-5]
    return None


class DietaryFilter:
    """Evaluates dietary constraints against meal options."""

    def __init__(self, nutrition_db: NutritionDatabase):
        self.nutrition_db = nutrition_db

    def allows(self, option: MealOption, constraint: str) -> bool:
        """True if ``option`` satisfies one dietary constraint."""
        constraint = _normalize_constraint(constraint)
        if not constraint:
            return True

        ingredients = [self.nutrition_db.lookup(key) for key in option.ingredient_keys]

        if constraint == "vegetarian":
            return option.vegetarian
        if constraint == "vegan":
            return option.vegetarian and not any(ing.is_dairy for ing in ingredients)

        allergen = _excluded_allergen(constraint)
        if allergen is not None:
            return not any(
                allergen in ing.allergens or ing.key == allergen for ing in ingredients
            )

        return constraint not in option.ingredient_keys

    def allows_all(self, option: MealOption, constraints: Iterable[str]) -> bool:
        return all(self.allows(option, c) for c in constraints)

    def filter(self, options: Iterable[MealOption], constraints: Iterable[str]) -> List[MealOption]:
        """Options satisfying every constraint, in input order."""
        constraints = list(constraints)
        return [option for option in options if self.allows_all(option, constraints)]


# --- Rotation predicates (True means blocked) ---


def is_pulse_blocked(
    option: MealOption, rotation: RotationState, day: int, lookback_days: int
) -> bool:
    """Pulse equals the most recent pulse or was served in the look-back window."""
    if not option.pulse:
        return False
    if option.pulse == rotation.most_recent_pulse:
        return True
    return option.pulse in rotation.pulses_within(day, lookback_days)


def is_staple_capped(option: MealOption, rotation: RotationState, cap: int) -> bool:
    """Staple already selected ``cap`` times in this rotation."""
    if not option.staple:
        return False
    return rotation.staple_count(option.staple) >= cap


def is_variety_capped(option: MealOption, rotation: RotationState, cap: int) -> bool:
    return rotation.variety_count(option.variety) >= cap


def rotation_violations(
    option: MealOption,
    rotation: RotationState,
    day: int,
    lookback_days: int,
    staple_cap: int,
    variety_cap: int,
) -> List[str]:
    """Names of the rotation rules ``option`` would break on ``day``."""
    violations = []
    if is_pulse_blocked(option, rotation, day, lookback_days):
        violations.append(PULSE_REPEAT)
    if is_staple_capped(option, rotation, staple_cap):
        violations.append(STAPLE_CAP)
    if is_variety_capped(option, rotation, variety_cap):
        violations.append(VARIETY_CAP)
    return violations
