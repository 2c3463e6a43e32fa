"""Plan output models: selected meals, daily plans, compliance and the plan result.

All models are built once during assembly and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from poshan_planner.data_layer.exceptions import PlanningError
from poshan_planner.data_layer.models import DailyTarget, NutritionProfile
from poshan_planner.pricing.cost_estimator import CostBreakdown


@dataclass(frozen=True)
class SelectedMeal:
    """One filled slot of a day."""

    slot: str
    option_id: str
    name: str
    nutrition: NutritionProfile
    cost: CostBreakdown
    score: float
    rotation_relaxed: bool = False


@dataclass(frozen=True)
class DailyTotals:
    calories_kcal: float
    protein_g: float
    iron_mg: float
    vitamin_a_ug: float
    cost_total: float


@dataclass(frozen=True)
class DailyPlan:
    """All meals of one rotation day (1-based)."""

    day: int
    meals: Tuple[SelectedMeal, ...]
    totals: DailyTotals
    unfilled_slots: Tuple[str, ...] = ()

    @property
    def rotation_relaxed(self) -> bool:
        return any(meal.rotation_relaxed for meal in self.meals)


@dataclass(frozen=True)
class ComplianceRecord:
    """Per-day nutrient checks. None means the target is unavailable."""

    day: int
    calorie_ok: bool
    protein_ok: bool
    iron_ok: Optional[bool]
    vitamin_a_ok: Optional[bool]
    notes: Tuple[str, ...] = ()


@dataclass(frozen=True)
class WeeklySummary:
    """Averages over the rotation."""

    days: int
    avg_calories_kcal: float
    avg_protein_g: float
    avg_cost_per_day: float
    total_cost: float


@dataclass
class MealPlanOutput:
    """Result of one MealPlanner.generate call."""

    daily_plans: List[DailyPlan]
    warnings: List[str]
    summary: str
    compliance: List[ComplianceRecord]
    issues: List[PlanningError]
    weekly_summary: WeeklySummary
    daily_target: DailyTarget
    plan_target: DailyTarget  # daily target restricted to the planned slots
    metadata: Dict[str, Any] = field(default_factory=dict)
