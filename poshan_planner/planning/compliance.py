"""Compliance checks over an assembled plan.

Checks never raise: each finding is returned as a PlanningError issue object
for the planner to collect.

- Per day: calories, protein, iron and vitamin A against the plan target at
  ``compliance_threshold`` (90 %). Unavailable targets yield None.
- Plan level: average daily cost against the budget allocation.
- Variety: staples selected more often than the cap (only possible after a
  rotation relaxation) and too few leafy-vegetable meals.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from poshan_planner.data_layer.exceptions import (
    BudgetExceeded,
    NutritionShortfall,
    PlanningError,
    VarietyWarning,
)
from poshan_planner.data_layer.models import DailyTarget
from poshan_planner.data_layer.planner_config import PlannerConfig
from poshan_planner.planning.plan_models import ComplianceRecord, DailyPlan, WeeklySummary
from poshan_planner.planning.rotation import RotationState
from poshan_planner.pricing.cost_estimator import round_money, sum_money


DAYS_PER_WEEK = 7


@dataclass
class ComplianceReport:
    records: List[ComplianceRecord] = field(default_factory=list)
    issues: List[PlanningError] = field(default_factory=list)


def _meets(actual: float, target: Optional[float], threshold: float) -> Optional[bool]:
    if target is None:
        return None
    return actual >= threshold * target


class ComplianceChecker:
    """Annotates daily plans with nutrient, budget and variety findings."""

    def __init__(self, config: Optional[PlannerConfig] = None):
        self.config = config or PlannerConfig()

    def check_day(
        self, plan: DailyPlan, target: DailyTarget
    ) -> Tuple[ComplianceRecord, List[PlanningError]]:
        """Check one day's totals against the plan target.

        Args:
            plan: Assembled daily plan
            target: Target for the planned slots of one day

        Returns:
            The day's ComplianceRecord and its NutritionShortfall issues
        """
        threshold = self.config.compliance_threshold
        totals = plan.totals
        checks = (
            ("calories", totals.calories_kcal, target.calories_kcal),
            ("protein", totals.protein_g, target.protein_g),
            ("iron", totals.iron_mg, target.iron_mg),
            ("vitamin_a", totals.vitamin_a_ug, target.vitamin_a_ug),
        )

        results = {}
        issues: List[PlanningError] = []
        for nutrient, actual, wanted in checks:
            ok = _meets(actual, wanted, threshold)
            results[nutrient] = ok
            if ok is False:
                issues.append(NutritionShortfall(plan.day, nutrient, actual, wanted, threshold))

        notes = tuple(issue.message for issue in issues)
        if plan.unfilled_slots:
            notes += (f"Unfilled slots: {', '.join(plan.unfilled_slots)}",)

        record = ComplianceRecord(
            day=plan.day,
            calorie_ok=bool(results["calories"]),
            protein_ok=bool(results["protein"]),
            iron_ok=results["iron"],
            vitamin_a_ok=results["vitamin_a"],
            notes=notes,
        )
        return record, issues

    def check_budget(self, plans: List[DailyPlan], budget: Optional[float]) -> List[PlanningError]:
        """Average daily cost vs budget; no budget means no finding."""
        if budget is None or not plans:
            return []
        average = round_money(sum_money(p.totals.cost_total for p in plans) / len(plans))
        if average > budget:
            return [BudgetExceeded(average, budget, self.config.currency)]
        return []

    def check_variety(self, rotation: RotationState, rotation_days: int) -> List[PlanningError]:
        issues: List[PlanningError] = []
        cap = self.config.staple_cap
        for staple in sorted(rotation.staple_counts):
            used = rotation.staple_count(staple)
            if used > cap:
                issues.append(
                    VarietyWarning(
                        f"{staple} selected {used} times (max {cap})",
                        {"staple": staple, "selections": used, "cap": cap},
                    )
                )

        required = math.ceil(self.config.min_leafy_meals_per_week * rotation_days / DAYS_PER_WEEK)
        if rotation.leafy_meals < required:
            issues.append(
                VarietyWarning(
                    f"only {rotation.leafy_meals} leafy vegetable meals in {rotation_days} "
                    f"days (min {required})",
                    {"leafy_meals": rotation.leafy_meals, "required": required},
                )
            )
        return issues

    def check(
        self,
        plans: List[DailyPlan],
        target: DailyTarget,
        budget: Optional[float],
        rotation: RotationState,
    ) -> ComplianceReport:
        """Run every check over a plan."""
        report = ComplianceReport()
        for plan in plans:
            record, issues = self.check_day(plan, target)
            report.records.append(record)
            report.issues.extend(issues)
        report.issues.extend(self.check_budget(plans, budget))
        report.issues.extend(self.check_variety(rotation, len(plans)))
        return report

    @staticmethod
    def weekly_summary(plans: List[DailyPlan]) -> WeeklySummary:
        """Average kcal, protein and cost per day over the rotation."""
        n = len(plans)
        if n == 0:
            return WeeklySummary(0, 0.0, 0.0, 0.0, 0.0)
        total_cost = sum_money(p.totals.cost_total for p in plans)
        return WeeklySummary(
            days=n,
            avg_calories_kcal=round(sum(p.totals.calories_kcal for p in plans) / n, 1),
            avg_protein_g=round(sum(p.totals.protein_g for p in plans) / n, 1),
            avg_cost_per_day=round_money(total_cost / n),
            total_cost=total_cost,
        )
