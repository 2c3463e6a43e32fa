"""Tests for plan compliance checks."""
import pytest

from poshan_planner.data_layer.exceptions import PlanningErrorCode
from poshan_planner.data_layer.models import DailyTarget, IngredientPortion, MealOption
from poshan_planner.data_layer.planner_config import PlannerConfig
from poshan_planner.planning import ComplianceChecker, DailyPlan, RotationState
from poshan_planner.planning.plan_models import DailyTotals


TARGET = DailyTarget(calories_kcal=2000, protein_g=90, iron_mg=20, vitamin_a_ug=1000)


def _plan(day, calories=2000.0, protein=90.0, iron=20.0, vitamin_a=1000.0, cost=50.0, unfilled=()):
    return DailyPlan(
        day=day,
        meals=(),
        totals=DailyTotals(calories, protein, iron, vitamin_a, cost),
        unfilled_slots=tuple(unfilled),
    )


@pytest.fixture
def checker():
    return ComplianceChecker(PlannerConfig())


@pytest.fixture
def catalog_option():
    return MealOption(
        id="plain_rice",
        name="Plain Rice",
        slot="lunch",
        items=(IngredientPortion("rice", 300),),
        staple="rice",
        variety="plain_rice",
    )


class TestCheckDay:
    """Nutrient checks at the 90% threshold."""

    def test_all_met(self, checker):
        record, issues = checker.check_day(_plan(1), TARGET)
        assert record.calorie_ok and record.protein_ok
        assert record.iron_ok is True
        assert record.vitamin_a_ok is True
        assert issues == []
        assert record.notes == ()

    def test_threshold_is_ninety_percent(self, checker):
        record, _ = checker.check_day(_plan(1, calories=1800.0, protein=80.0), TARGET)
        assert record.calorie_ok
        assert not record.protein_ok  # 80 < 81

    def test_shortfalls_become_issues(self, checker):
        record, issues = checker.check_day(_plan(3, iron=10.0, vitamin_a=500.0), TARGET)
        assert record.iron_ok is False
        assert record.vitamin_a_ok is False
        assert [i.code for i in issues] == [PlanningErrorCode.NUTRITION_SHORTFALL] * 2
        assert issues[0].context["nutrient"] == "iron"
        assert issues[0].context["day"] == 3
        assert record.notes == tuple(i.message for i in issues)

    def test_missing_micronutrient_target_is_none(self, checker):
        target = DailyTarget(calories_kcal=2000, protein_g=90)
        record, issues = checker.check_day(_plan(1, iron=0.0), target)
        assert record.iron_ok is None
        assert record.vitamin_a_ok is None
        assert issues == []

    def test_unfilled_slots_noted(self, checker):
        record, _ = checker.check_day(_plan(1, unfilled=("breakfast",)), TARGET)
        assert "Unfilled slots: breakfast" in record.notes


class TestCheckBudget:
    def test_no_budget_no_finding(self, checker):
        assert checker.check_budget([_plan(1, cost=500.0)], None) == []

    def test_average_within_budget(self, checker):
        plans = [_plan(1, cost=40.0), _plan(2, cost=60.0)]
        assert checker.check_budget(plans, 50.0) == []

    def test_average_over_budget(self, checker):
        plans = [_plan(1, cost=50.0), _plan(2, cost=60.0)]
        (issue,) = checker.check_budget(plans, 50.0)
        assert issue.code == PlanningErrorCode.BUDGET_EXCEEDED
        assert issue.context == {"average_cost": 55.0, "budget": 50.0}
        assert "INR 55.00/day" in issue.message


class TestCheckVariety:
    def test_staple_over_cap(self):
        checker = ComplianceChecker(PlannerConfig(staple_cap=2, min_leafy_meals_per_week=0))
        rotation = RotationState(staple_counts={"rice": 3, "wheat": 1})
        (issue,) = checker.check_variety(rotation, 3)
        assert issue.code == PlanningErrorCode.VARIETY_WARNING
        assert issue.message == "rice selected 3 times (max 2)"
        assert issue.context == {"staple": "rice", "selections": 3, "cap": 2}

    def test_same_day_selections_count_towards_cap(self, catalog_option):
        checker = ComplianceChecker(PlannerConfig(staple_cap=2, min_leafy_meals_per_week=0))
        rotation = RotationState()
        for _ in range(3):
            rotation.record(catalog_option, day=1)
        (issue,) = checker.check_variety(rotation, 1)
        assert issue.context["selections"] == 3

    def test_leafy_requirement_scales_with_days(self, checker):
        rotation = RotationState(leafy_meals=2)
        (issue,) = checker.check_variety(rotation, 5)
        assert issue.message == "only 2 leafy vegetable meals in 5 days (min 3)"
        assert issue.context["required"] == 3

    def test_leafy_requirement_met(self, checker):
        assert checker.check_variety(RotationState(leafy_meals=3), 7) == []


class TestCheck:
    def test_collects_every_finding(self, checker):
        plans = [_plan(1, protein=10.0, cost=80.0), _plan(2, cost=80.0)]
        report = checker.check(plans, TARGET, 50.0, RotationState())
        assert len(report.records) == 2
        codes = [i.code for i in report.issues]
        assert codes == [
            PlanningErrorCode.NUTRITION_SHORTFALL,
            PlanningErrorCode.BUDGET_EXCEEDED,
            PlanningErrorCode.VARIETY_WARNING,
        ]


class TestWeeklySummary:
    def test_averages(self):
        plans = [
            _plan(1, calories=2000.0, protein=90.0, cost=50.25),
            _plan(2, calories=2100.0, protein=85.0, cost=60.5),
        ]
        summary = ComplianceChecker.weekly_summary(plans)
        assert summary.days == 2
        assert summary.avg_calories_kcal == 2050.0
        assert summary.avg_protein_g == 87.5
        assert summary.total_cost == 110.75
        assert summary.avg_cost_per_day == 55.38

    def test_empty(self):
        assert ComplianceChecker.weekly_summary([]).days == 0
