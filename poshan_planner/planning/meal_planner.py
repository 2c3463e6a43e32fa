"""Plan assembly: profile + request -> multi-day costed meal plan."""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Dict, List, Optional

from poshan_planner.data_layer.exceptions import (
    InvalidPlanRequest,
    NoCandidate,
    PlanningError,
    RotationRelaxed,
    SupervisionRequired,
)
from poshan_planner.data_layer.meal_catalog import MealCatalog
from poshan_planner.data_layer.models import (
    DailyTarget,
    Goal,
    PlanMode,
    PlanRequest,
    PriceEntry,
    SlotTarget,
    UserProfile,
)
from poshan_planner.data_layer.planner_config import PlannerConfig
from poshan_planner.nutrition.aggregator import NutritionAggregator
from poshan_planner.nutrition.calculator import NutritionCalculator
from poshan_planner.nutrition.targets import NutritionTargetCalculator, distribute_targets
from poshan_planner.planning.compliance import ComplianceChecker
from poshan_planner.planning.plan_models import (
    DailyPlan,
    DailyTotals,
    MealPlanOutput,
    SelectedMeal,
)
from poshan_planner.planning.rotation import RotationState
from poshan_planner.planning.selector import ConstraintMealSelector, MealSelectionStrategy
from poshan_planner.pricing.cost_estimator import CostEstimator, sum_money
from poshan_planner.providers.price_provider import PriceProvider


logger = logging.getLogger(__name__)


class MealPlanner:
    """Generates multi-day meal plans from a catalog and a price provider."""

    def __init__(
        self,
        catalog: MealCatalog,
        price_provider: PriceProvider,
        config: Optional[PlannerConfig] = None,
        selector: Optional[MealSelectionStrategy] = None,
        target_calculator: Optional[NutritionTargetCalculator] = None,
    ):
        """Initialize meal planner.

        Args:
            catalog: Meal options, already resolved against the nutrition database
            price_provider: Source of price snapshots
            config: Planner configuration (defaults if None)
            selector: Selection strategy. If None, a ConstraintMealSelector is
                built for each generate call, seeded from ``config.seed``
            target_calculator: Daily target calculator (default if None)
        """
        self.catalog = catalog
        self.nutrition_db = catalog.nutrition_db
        self.price_provider = price_provider
        self.config = config or PlannerConfig()
        self.selector = selector
        self.target_calculator = target_calculator or NutritionTargetCalculator()
        self.calculator = NutritionCalculator(self.nutrition_db)
        self.cost_estimator = CostEstimator(self.config)
        self.compliance_checker = ComplianceChecker(self.config)

    def generate(self, profile: UserProfile, request: PlanRequest) -> MealPlanOutput:
        """Generate a plan of ``request.rotation_days`` days.

        Args:
            profile: Consumer profile
            request: Rotation length, mode, extra dietary constraints, location, budget

        Returns:
            MealPlanOutput with daily plans, compliance records and issues

        Raises:
            InvalidProfile: If the profile cannot produce a target
            InvalidPlanRequest: If the request is malformed
            PriceNotFoundError: If the snapshot lacks a catalog ingredient
        """
        self._validate_request(request)
        issues: List[PlanningError] = []

        if profile.is_minor and profile.goal == Goal.LOSE:
            issues.append(SupervisionRequired(profile.age))
            profile = replace(profile, goal=Goal.MAINTAIN)

        daily_target = self.target_calculator.calculate(profile)
        slot_targets = distribute_targets(daily_target, request.slots, self.config.slot_distribution)
        plan_target = self._plan_target(daily_target, request)

        snapshot = self.price_provider.resolve_all(self.catalog.ingredient_keys(), request.location)

        constraints = sorted(profile.dietary_constraints | request.dietary_constraints)
        selector = self.selector or self._default_selector()
        rotation = RotationState()
        options = self.catalog.all()

        logger.info(
            "Generating %d-day %s plan (%s, target %.0f kcal)",
            request.rotation_days,
            request.mode.value,
            daily_target.age_group,
            daily_target.calories_kcal,
        )

        daily_plans: List[DailyPlan] = []
        for day in range(1, request.rotation_days + 1):
            daily_plans.append(
                self._plan_day(day, slot_targets, rotation, options, constraints, snapshot, selector, issues)
            )

        budget = request.budget_per_day
        if budget is None and request.mode == PlanMode.LUNCH_ONLY:
            budget = daily_target.budget_per_meal

        report = self.compliance_checker.check(daily_plans, plan_target, budget, rotation)
        issues.extend(report.issues)
        weekly = self.compliance_checker.weekly_summary(daily_plans)
        warnings = [issue.message for issue in issues]

        return MealPlanOutput(
            daily_plans=daily_plans,
            warnings=warnings,
            summary=(
                f"{weekly.days}-day {request.mode.value} plan: avg {weekly.avg_calories_kcal:.0f} kcal, "
                f"{weekly.avg_protein_g:.1f} g protein, {self.config.currency} "
                f"{weekly.avg_cost_per_day:.2f}/day; {len(warnings)} warning(s)"
            ),
            compliance=report.records,
            issues=issues,
            weekly_summary=weekly,
            daily_target=daily_target,
            plan_target=plan_target,
            metadata={
                "age_group": daily_target.age_group,
                "target_source": daily_target.source,
                "location": request.location,
                "rotation_days": request.rotation_days,
                "mode": request.mode.value,
                "dietary_constraints": constraints,
                "budget_per_day": budget,
                "currency": self.config.currency,
                "price_source": "+".join(sorted({entry.source for entry in snapshot.values()})),
            },
        )

    def _plan_day(
        self,
        day: int,
        slot_targets: List[SlotTarget],
        rotation: RotationState,
        options,
        constraints: List[str],
        snapshot: Dict[str, PriceEntry],
        selector: MealSelectionStrategy,
        issues: List[PlanningError],
    ) -> DailyPlan:
        meals: List[SelectedMeal] = []
        unfilled: List[str] = []
        for target in slot_targets:
            try:
                result = selector.select(target.slot, target, rotation, options, constraints, day)
            except NoCandidate as exc:
                logger.warning("%s", exc)
                issues.append(exc)
                unfilled.append(target.slot)
                continue

            if result.rotation_relaxed:
                issues.append(RotationRelaxed(day, target.slot, list(result.blocked_by)))

            meals.append(
                SelectedMeal(
                    slot=target.slot,
                    option_id=result.option.id,
                    name=result.option.name,
                    nutrition=result.nutrition,
                    cost=self.cost_estimator.estimate(result.option.items, snapshot),
                    score=round(result.score, 2),
                    rotation_relaxed=result.rotation_relaxed,
                )
            )

        nutrition = NutritionAggregator.aggregate([meal.nutrition for meal in meals])
        totals = DailyTotals(
            calories_kcal=round(nutrition.calories, 1),
            protein_g=round(nutrition.protein_g, 1),
            iron_mg=round(nutrition.iron_mg, 2),
            vitamin_a_ug=round(nutrition.vitamin_a_ug, 1),
            cost_total=sum_money(meal.cost.total for meal in meals),
        )
        return DailyPlan(day=day, meals=tuple(meals), totals=totals, unfilled_slots=tuple(unfilled))

    def _default_selector(self) -> ConstraintMealSelector:
        rng = random.Random(self.config.seed) if self.config.seed is not None else None
        return ConstraintMealSelector(self.nutrition_db, self.config, rng=rng, calculator=self.calculator)

    def _plan_target(self, target: DailyTarget, request: PlanRequest) -> DailyTarget:
        """Daily target restricted to the slots being planned."""
        share = sum(self.config.slot_distribution[slot] for slot in request.slots)
        if request.mode == PlanMode.FULL_DAY:
            return target

        def scale(value: Optional[float], ndigits: int) -> Optional[float]:
            return None if value is None else round(value * share, ndigits)

        return replace(
            target,
            calories_kcal=scale(target.calories_kcal, 0),
            protein_g=scale(target.protein_g, 1),
            iron_mg=scale(target.iron_mg, 2),
            vitamin_a_ug=scale(target.vitamin_a_ug, 1),
        )

    def _validate_request(self, request: PlanRequest):
        days = request.rotation_days
        if isinstance(days, bool) or not isinstance(days, int) or days < 1:
            raise InvalidPlanRequest(
                f"rotation_days must be a positive integer, got {days!r}", "rotation_days", days
            )
        if not isinstance(request.mode, PlanMode):
            raise InvalidPlanRequest(f"Unsupported mode {request.mode!r}", "mode", request.mode)
        if request.budget_per_day is not None and request.budget_per_day <= 0:
            raise InvalidPlanRequest(
                f"budget_per_day must be positive, got {request.budget_per_day}",
                "budget_per_day",
                request.budget_per_day,
            )
        if not request.location:
            raise InvalidPlanRequest("location must not be empty", "location", request.location)
        share = sum(self.config.slot_distribution[slot] for slot in request.slots)
        if share <= 0:
            raise InvalidPlanRequest(
                f"Slot distribution gives no calories to {request.mode.value} slots", "mode", request.mode.value
            )
