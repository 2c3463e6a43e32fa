"""Planning module: constraint-filtered selection and multi-day plan assembly."""

from .compliance import ComplianceChecker, ComplianceReport
from .meal_planner import MealPlanner
from .plan_models import (
    ComplianceRecord,
    DailyPlan,
    DailyTotals,
    MealPlanOutput,
    SelectedMeal,
    WeeklySummary,
)
from .rotation import RotationState
from .selector import ConstraintMealSelector, MealSelectionStrategy, SelectionResult

__all__ = [
    "ComplianceChecker",
    "ComplianceReport",
    "ComplianceRecord",
    "ConstraintMealSelector",
    "DailyPlan",
    "DailyTotals",
    "MealPlanOutput",
    "MealPlanner",
    "MealSelectionStrategy",
    "RotationState",
    "SelectedMeal",
    "SelectionResult",
    "WeeklySummary",
]
