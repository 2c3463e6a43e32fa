"""Daily nutrition targets from a consumer profile.

Two sources of truth:

- School-age children (6-14) follow the school meal programme standards.
  Those standards are per meal, so they are scaled to a full day with a
  band multiplier and the calories clamped to the 1500-1800 kcal range.
- Everyone else gets Mifflin-St Jeor BMR x activity factor, with a goal
  multiplier and clamp for adults, a tighter clamp for ages 15-17, and no
  clamp under 6.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from poshan_planner.data_layer.exceptions import InvalidProfile
from poshan_planner.data_layer.models import (
    ActivityLevel,
    DailyTarget,
    Gender,
    Goal,
    SlotTarget,
    UserProfile,
)


@dataclass(frozen=True)
class ProgramStandard:
    """Per-meal programme standard for an age band."""

    age_group: str
    min_age: int
    max_age: int
    calories_kcal: float
    protein_g: float
    iron_mg: float
    vitamin_a_ug: float
    budget_per_meal: float
    day_multiplier: float  # meal-level standard -> full day; pending confirmation


PROGRAM_STANDARDS: Tuple[ProgramStandard, ...] = (
    ProgramStandard("primary", 6, 10, 450, 12, 3, 40, 12.13, 2.5),
    ProgramStandard("upper_primary", 11, 14, 700, 20, 3, 40, 20.47, 2.2),
)

CHILD_DAY_CALORIE_RANGE = (1500.0, 1800.0)
ADULT_CALORIE_RANGE = (1800.0, 2200.0)
ADOLESCENT_CALORIE_RANGE = (1800.0, 2000.0)

ACTIVITY_FACTORS: Dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.HIGH: 1.75,
}

GOAL_MULTIPLIERS: Dict[Goal, float] = {
    Goal.GAIN: 1.12,
    Goal.LOSE: 0.88,
    Goal.MAINTAIN: 1.0,
}

PROTEIN_CALORIE_SHARE = 0.18
KCAL_PER_G_PROTEIN = 4.0

# Daily iron (mg) and vitamin A (ug) for profiles outside the programme bands.
MICRONUTRIENT_REFERENCE: Dict[Tuple[str, Optional[Gender]], Tuple[float, float]] = {
    ("under_6", None): (11.0, 510.0),
    ("adolescent", Gender.MALE): (22.0, 1000.0),
    ("adolescent", Gender.FEMALE): (18.0, 860.0),
    ("adult", Gender.MALE): (19.0, 1000.0),
    ("adult", Gender.FEMALE): (29.0, 840.0),
}


def program_standard_for_age(age: int) -> Optional[ProgramStandard]:
    """Return the programme band covering *age*, if any."""
    for standard in PROGRAM_STANDARDS:
        if standard.min_age <= age <= standard.max_age:
            return standard
    return None


def _clamp(value: float, bounds: Tuple[float, float]) -> float:
    low, high = bounds
    return max(low, min(high, value))


class NutritionTargetCalculator:
    """Computes DailyTarget for a UserProfile."""

    def calculate(self, profile: UserProfile) -> DailyTarget:
        """Compute the full-day target.

        Args:
            profile: Consumer profile

        Returns:
            DailyTarget with calories rounded to the nearest kcal and protein
            to one decimal

        Raises:
            InvalidProfile: If weight or height is not positive or age is negative
        """
        self._validate(profile)

        standard = program_standard_for_age(profile.age)
        if standard is not None:
            return self._program_target(standard)

        calories = self.tdee(profile)
        if profile.age >= 18:
            calories *= GOAL_MULTIPLIERS[profile.goal]
            calories = _clamp(calories, ADULT_CALORIE_RANGE)
            age_group = "adult"
        elif profile.age >= 15:
            calories = _clamp(calories, ADOLESCENT_CALORIE_RANGE)
            age_group = "adolescent"
        else:
            age_group = "under_6"

        calories = float(round(calories))
        iron, vitamin_a = self._micronutrients(age_group, profile.gender)
        return DailyTarget(
            calories_kcal=calories,
            protein_g=round(calories * PROTEIN_CALORIE_SHARE / KCAL_PER_G_PROTEIN, 1),
            iron_mg=iron,
            vitamin_a_ug=vitamin_a,
            age_group=age_group,
            source="mifflin_st_jeor",
        )

    def bmr(self, profile: UserProfile) -> float:
        """Mifflin-St Jeor basal metabolic rate in kcal/day."""
        self._validate(profile)
        base = 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age
        return base + (5 if profile.gender == Gender.MALE else -161)

    def tdee(self, profile: UserProfile) -> float:
        """BMR scaled by the activity factor, before goal or clamping."""
        return self.bmr(profile) * ACTIVITY_FACTORS[profile.activity_level]

    @staticmethod
    def _validate(profile: UserProfile):
        if profile.weight_kg <= 0:
            raise InvalidProfile(
                f"weight_kg must be positive, got {profile.weight_kg}", "weight_kg", profile.weight_kg
            )
        if profile.height_cm <= 0:
            raise InvalidProfile(
                f"height_cm must be positive, got {profile.height_cm}", "height_cm", profile.height_cm
            )
        if profile.age < 0:
            raise InvalidProfile(f"age must not be negative, got {profile.age}", "age", profile.age)

    @staticmethod
    def _program_target(standard: ProgramStandard) -> DailyTarget:
        m = standard.day_multiplier
        calories = float(round(_clamp(standard.calories_kcal * m, CHILD_DAY_CALORIE_RANGE)))
        return DailyTarget(
            calories_kcal=calories,
            protein_g=round(standard.protein_g * m, 1),
            iron_mg=round(standard.iron_mg * m, 1),
            vitamin_a_ug=round(standard.vitamin_a_ug * m, 1),
            age_group=standard.age_group,
            source="program_standard",
            budget_per_meal=standard.budget_per_meal,
        )

    @staticmethod
    def _micronutrients(age_group: str, gender: Gender) -> Tuple[Optional[float], Optional[float]]:
        key = (age_group, None if age_group == "under_6" else gender)
        return MICRONUTRIENT_REFERENCE.get(key, (None, None))


def distribute_targets(
    target: DailyTarget, slots: Sequence[str], distribution: Dict[str, float]
) -> List[SlotTarget]:
    """Split a daily target across meal slots by calorie share.

    Protein follows the same share as calories.
    """
    return [
        SlotTarget(
            slot=slot,
            calories_kcal=target.calories_kcal * distribution[slot],
            protein_g=target.protein_g * distribution[slot],
        )
        for slot in slots
    ]
