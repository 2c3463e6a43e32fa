"""Tests for output formatters."""
import json
from pathlib import Path

import pytest

from poshan_planner.data_layer.meal_catalog import MealCatalog
from poshan_planner.data_layer.models import (
    ActivityLevel,
    Gender,
    NutritionProfile,
    PlanRequest,
    UserProfile,
)
from poshan_planner.data_layer.nutrition_db import NutritionDatabase
from poshan_planner.output import (
    format_item_string,
    format_nutrition_breakdown,
    format_plan_json,
    format_plan_json_string,
    format_plan_markdown,
)
from poshan_planner.planning import MealPlanner
from poshan_planner.pricing import CostedItem
from poshan_planner.providers import FallbackPriceProvider


FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="module")
def output():
    nutrition_db = NutritionDatabase(str(FIXTURES / "test_nutrition.json"))
    catalog = MealCatalog(nutrition_db, str(FIXTURES / "test_catalog.json"))
    planner = MealPlanner(catalog, FallbackPriceProvider(str(FIXTURES / "test_prices.json")))
    profile = UserProfile(30, Gender.FEMALE, 60.0, 162.0, ActivityLevel.MODERATE)
    return planner.generate(profile, PlanRequest(rotation_days=2, budget_per_day=10.0))


class TestItemString:
    def test_whole_grams(self):
        assert format_item_string(CostedItem("atta", 120.0, 71.03, 8.52)) == "120g atta"

    def test_fractional_grams(self):
        assert format_item_string(CostedItem("cooking_oil", 7.5, 150.0, 1.13)) == "7.5g cooking oil"


class TestNutritionBreakdown:
    def test_lines(self):
        text = format_nutrition_breakdown(NutritionProfile(412.4, 14.26, iron_mg=3.1, vitamin_a_ug=120))
        assert "**Calories:** 412 kcal" in text
        assert "**Protein:** 14.3g" in text
        assert "**Iron:** 3.1mg" in text

    def test_indent(self):
        text = format_nutrition_breakdown(NutritionProfile(100, 2), indent="  ")
        assert all(line.startswith("  ") for line in text.splitlines())


class TestPlanJson:
    def test_top_level_keys(self, output):
        data = format_plan_json(output)
        assert set(data) == {
            "summary",
            "metadata",
            "daily_target",
            "plan_target",
            "daily_plans",
            "compliance",
            "weekly_summary",
            "issues",
            "warnings",
        }

    def test_meal_entries(self, output):
        day = format_plan_json(output)["daily_plans"][0]
        assert day["day"] == 1
        assert [m["slot"] for m in day["meals"]] == ["snack1", "lunch", "dinner"]
        assert day["unfilled_slots"] == ["breakfast", "snack2"]
        meal = day["meals"][1]
        assert meal["cost"]["total_cost_per_serving"] == round(
            meal["cost"]["subtotal"] + meal["cost"]["spices_allowance"] + meal["cost"]["wastage_amount"], 2
        )
        assert {"ingredient", "grams", "unit_price", "cost"} <= set(meal["items"][0])

    def test_issues_are_coded(self, output):
        codes = {issue["code"] for issue in format_plan_json(output)["issues"]}
        assert {"NO_CANDIDATE", "BUDGET_EXCEEDED"} <= codes

    def test_string_round_trips_through_json(self, output):
        data = json.loads(format_plan_json_string(output))
        assert data["metadata"]["budget_per_day"] == 10.0
        assert data["weekly_summary"]["days"] == 2


class TestPlanMarkdown:
    def test_sections(self, output):
        text = format_plan_markdown(output)
        assert text.startswith("# 2-Day Meal Plan")
        for heading in ("## Targets", "## Warnings", "## Day 1", "## Day 2", "### Day Totals", "## Summary"):
            assert heading in text

    def test_unfilled_slot_marked(self, output):
        assert "### Breakfast: _no suitable option_" in format_plan_markdown(output)

    def test_meal_heading_uses_slot_name(self, output):
        assert "### Morning Snack: Banana Milk" in format_plan_markdown(output)
