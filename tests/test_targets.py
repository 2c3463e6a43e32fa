"""Tests for daily nutrition targets."""
import pytest

from poshan_planner.data_layer.exceptions import InvalidProfile
from poshan_planner.data_layer.models import ActivityLevel, Gender, Goal, SLOTS, UserProfile
from poshan_planner.data_layer.planner_config import DEFAULT_SLOT_DISTRIBUTION
from poshan_planner.nutrition.targets import (
    NutritionTargetCalculator,
    distribute_targets,
    program_standard_for_age,
)


@pytest.fixture
def calculator():
    return NutritionTargetCalculator()


def _profile(age, gender=Gender.MALE, weight=70.0, height=175.0,
             activity=ActivityLevel.MODERATE, goal=Goal.MAINTAIN):
    return UserProfile(age, gender, weight, height, activity, goal)


class TestAdultTargets:
    """Mifflin-St Jeor targets for adults."""

    def test_reference_adult(self, calculator):
        profile = _profile(25)
        assert calculator.bmr(profile) == pytest.approx(1673.75)
        assert calculator.tdee(profile) == pytest.approx(2594.3125)

        target = calculator.calculate(profile)
        assert target.calories_kcal == 2200
        assert target.protein_g == 99.0
        assert target.age_group == "adult"
        assert target.source == "mifflin_st_jeor"
        assert target.iron_mg == 19.0
        assert target.vitamin_a_ug == 1000.0

    def test_low_tdee_clamped_to_floor(self, calculator):
        profile = _profile(60, Gender.FEMALE, 50, 150, ActivityLevel.SEDENTARY)
        assert calculator.bmr(profile) == pytest.approx(976.5)
        target = calculator.calculate(profile)
        assert target.calories_kcal == 1800
        assert target.protein_g == 81.0

    @pytest.mark.parametrize("activity", list(ActivityLevel))
    @pytest.mark.parametrize("goal", list(Goal))
    def test_adult_range(self, calculator, activity, goal):
        for weight, height in [(45, 150), (70, 175), (110, 190)]:
            target = calculator.calculate(_profile(35, Gender.FEMALE, weight, height, activity, goal))
            assert 1800 <= target.calories_kcal <= 2200

    def test_monotonic_in_activity_when_unclamped(self, calculator):
        values = [
            calculator.calculate(_profile(30, Gender.FEMALE, 55, 160, activity)).calories_kcal
            for activity in (ActivityLevel.SEDENTARY, ActivityLevel.MODERATE, ActivityLevel.HIGH)
        ]
        assert values == sorted(values)
        # bmr 1239: moderate 1920.45, high 2168.25
        assert values[1] == 1920
        assert values[2] == 2168

    def test_goal_multipliers(self, calculator):
        gain = calculator.calculate(_profile(30, Gender.FEMALE, 55, 160, goal=Goal.GAIN))
        lose = calculator.calculate(_profile(30, Gender.FEMALE, 55, 160, goal=Goal.LOSE))
        assert gain.calories_kcal == 2151  # 1920.45 * 1.12
        assert lose.calories_kcal == 1800  # 1690 clamped

    def test_female_micronutrients(self, calculator):
        target = calculator.calculate(_profile(30, Gender.FEMALE, 55, 160))
        assert target.iron_mg == 29.0
        assert target.vitamin_a_ug == 840.0


class TestChildTargets:
    """Programme-standard targets for school-age children."""

    def test_primary_band_is_full_day_not_meal_level(self, calculator):
        target = calculator.calculate(_profile(9, Gender.FEMALE, 28, 130))
        assert target.age_group == "primary"
        assert target.source == "program_standard"
        assert 1500 <= target.calories_kcal <= 1800
        assert target.calories_kcal != 450
        assert target.calories_kcal == 1500  # 450 * 2.5 = 1125, clamped
        assert target.protein_g == 30.0
        assert target.iron_mg == 7.5
        assert target.vitamin_a_ug == 100.0
        assert target.budget_per_meal == 12.13

    def test_upper_primary_band(self, calculator):
        target = calculator.calculate(_profile(12, Gender.MALE, 38, 148))
        assert target.age_group == "upper_primary"
        assert target.calories_kcal == 1540  # 700 * 2.2
        assert target.protein_g == 44.0
        assert target.budget_per_meal == 20.47

    def test_child_goal_has_no_effect(self, calculator):
        lose = calculator.calculate(_profile(9, Gender.FEMALE, 28, 130, goal=Goal.LOSE))
        maintain = calculator.calculate(_profile(9, Gender.FEMALE, 28, 130))
        assert lose == maintain

    @pytest.mark.parametrize("age, band", [(5, None), (6, "primary"), (10, "primary"),
                                           (11, "upper_primary"), (14, "upper_primary"), (15, None)])
    def test_band_boundaries(self, age, band):
        standard = program_standard_for_age(age)
        assert (standard.age_group if standard else None) == band


class TestOtherAgeGroups:
    def test_adolescent_clamp(self, calculator):
        profile = _profile(16, Gender.MALE, 65, 170, ActivityLevel.HIGH)
        assert calculator.tdee(profile) == pytest.approx(2865.625)
        target = calculator.calculate(profile)
        assert target.age_group == "adolescent"
        assert target.calories_kcal == 2000
        assert target.iron_mg == 22.0

    def test_adolescent_lose_equals_maintain(self, calculator):
        lose = calculator.calculate(_profile(16, Gender.FEMALE, 50, 158, goal=Goal.LOSE))
        maintain = calculator.calculate(_profile(16, Gender.FEMALE, 50, 158))
        assert lose == maintain

    def test_under_six_unclamped(self, calculator):
        target = calculator.calculate(_profile(4, Gender.MALE, 16, 100))
        assert target.age_group == "under_6"
        assert target.calories_kcal < 1500
        assert target.iron_mg == 11.0


class TestInvalidProfile:
    @pytest.mark.parametrize(
        "profile, field",
        [
            (_profile(30, weight=0), "weight_kg"),
            (_profile(30, weight=-5), "weight_kg"),
            (_profile(30, height=0), "height_cm"),
            (_profile(-1), "age"),
        ],
    )
    def test_rejected(self, calculator, profile, field):
        with pytest.raises(InvalidProfile) as exc_info:
            calculator.calculate(profile)
        assert exc_info.value.field == field

    def test_child_band_still_validates_weight(self, calculator):
        with pytest.raises(InvalidProfile):
            calculator.calculate(_profile(9, weight=0))


class TestDistributeTargets:
    def test_full_day_shares(self, calculator):
        target = calculator.calculate(_profile(25))
        slots = distribute_targets(target, SLOTS, DEFAULT_SLOT_DISTRIBUTION)
        assert [s.slot for s in slots] == list(SLOTS)
        lunch = slots[2]
        assert lunch.calories_kcal == pytest.approx(770.0)
        assert lunch.protein_g == pytest.approx(34.65)
        assert sum(s.calories_kcal for s in slots) == pytest.approx(2200.0)

    def test_single_slot(self, calculator):
        target = calculator.calculate(_profile(9, Gender.FEMALE, 28, 130))
        (lunch,) = distribute_targets(target, ("lunch",), DEFAULT_SLOT_DISTRIBUTION)
        assert lunch.calories_kcal == pytest.approx(525.0)
