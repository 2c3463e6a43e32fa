"""Formatters for meal plan output (JSON and Markdown)."""

import json
from typing import Any, Dict, Optional

from poshan_planner.data_layer.models import DailyTarget, NutritionProfile
from poshan_planner.planning.plan_models import (
    ComplianceRecord,
    DailyPlan,
    MealPlanOutput,
    SelectedMeal,
)
from poshan_planner.pricing.cost_estimator import CostedItem


SLOT_NAMES = {
    "breakfast": "Breakfast",
    "snack1": "Morning Snack",
    "lunch": "Lunch",
    "snack2": "Evening Snack",
    "dinner": "Dinner",
}


def _check_mark(ok: Optional[bool]) -> str:
    if ok is None:
        return "n/a"
    return "✅" if ok else "⚠️"


def format_item_string(item: CostedItem) -> str:
    """Format a costed ingredient as a string (e.g., "120g atta").

    Args:
        item: CostedItem from a meal's cost breakdown

    Returns:
        Formatted string like "120g atta" or "7.5g cooking oil"
    """
    if item.grams == int(item.grams):
        qty_str = str(int(item.grams))
    else:
        qty_str = f"{item.grams:.1f}".rstrip("0").rstrip(".")
    return f"{qty_str}g {item.ingredient.replace('_', ' ')}"


def format_nutrition_breakdown(nutrition: NutritionProfile, indent: str = "") -> str:
    """Format nutrition profile as a readable breakdown.

    Args:
        nutrition: NutritionProfile object
        indent: Optional indentation prefix

    Returns:
        Formatted string with calories, protein and micronutrients
    """
    lines = [
        f"{indent}**Calories:** {nutrition.calories:.0f} kcal",
        f"{indent}**Protein:** {nutrition.protein_g:.1f}g",
        f"{indent}**Iron:** {nutrition.iron_mg:.1f}mg",
        f"{indent}**Vitamin A:** {nutrition.vitamin_a_ug:.0f}µg",
    ]
    return "\n".join(lines)


def _target_json(target: DailyTarget) -> Dict[str, Any]:
    return {
        "calories_kcal": target.calories_kcal,
        "protein_g": target.protein_g,
        "iron_mg": target.iron_mg,
        "vitamin_a_ug": target.vitamin_a_ug,
        "age_group": target.age_group,
        "source": target.source,
        "budget_per_meal": target.budget_per_meal,
    }


def _meal_json(meal: SelectedMeal) -> Dict[str, Any]:
    return {
        "slot": meal.slot,
        "option_id": meal.option_id,
        "name": meal.name,
        "items": [
            {
                "ingredient": item.ingredient,
                "grams": item.grams,
                "unit_price": item.unit_price,
                "cost": item.cost,
            }
            for item in meal.cost.items
        ],
        "nutrition": {
            "calories_kcal": round(meal.nutrition.calories, 1),
            "protein_g": round(meal.nutrition.protein_g, 1),
            "iron_mg": round(meal.nutrition.iron_mg, 2),
            "vitamin_a_ug": round(meal.nutrition.vitamin_a_ug, 1),
        },
        "cost": {
            "subtotal": meal.cost.subtotal,
            "spices_allowance": meal.cost.spices_allowance,
            "wastage_amount": meal.cost.wastage_amount,
            "total_cost_per_serving": meal.cost.total,
        },
        "score": meal.score,
        "rotation_relaxed": meal.rotation_relaxed,
    }


def _day_json(plan: DailyPlan) -> Dict[str, Any]:
    return {
        "day": plan.day,
        "meals": [_meal_json(meal) for meal in plan.meals],
        "totals": {
            "calories_kcal": plan.totals.calories_kcal,
            "protein_g": plan.totals.protein_g,
            "iron_mg": plan.totals.iron_mg,
            "vitamin_a_ug": plan.totals.vitamin_a_ug,
            "cost_total": plan.totals.cost_total,
        },
        "unfilled_slots": list(plan.unfilled_slots),
        "rotation_relaxed": plan.rotation_relaxed,
    }


def _compliance_json(record: ComplianceRecord) -> Dict[str, Any]:
    return {
        "day": record.day,
        "calorie_ok": record.calorie_ok,
        "protein_ok": record.protein_ok,
        "iron_ok": record.iron_ok,
        "vitamin_a_ok": record.vitamin_a_ok,
        "notes": list(record.notes),
    }


def format_plan_json(output: MealPlanOutput) -> Dict[str, Any]:
    """Format a MealPlanOutput as JSON (for API usage).

    Args:
        output: MealPlanOutput from MealPlanner.generate

    Returns:
        Dictionary ready for JSON serialization
    """
    weekly = output.weekly_summary
    return {
        "summary": output.summary,
        "metadata": dict(output.metadata),
        "daily_target": _target_json(output.daily_target),
        "plan_target": _target_json(output.plan_target),
        "daily_plans": [_day_json(plan) for plan in output.daily_plans],
        "compliance": [_compliance_json(record) for record in output.compliance],
        "weekly_summary": {
            "days": weekly.days,
            "avg_calories_kcal": weekly.avg_calories_kcal,
            "avg_protein_g": weekly.avg_protein_g,
            "avg_cost_per_day": weekly.avg_cost_per_day,
            "total_cost": weekly.total_cost,
        },
        "issues": [issue.to_dict() for issue in output.issues],
        "warnings": list(output.warnings),
    }


def format_plan_json_string(output: MealPlanOutput, indent: int = 2) -> str:
    """Format a MealPlanOutput as a JSON string.

    Args:
        output: MealPlanOutput from MealPlanner.generate
        indent: JSON indentation (default: 2)

    Returns:
        JSON string
    """
    return json.dumps(format_plan_json(output), indent=indent, ensure_ascii=False)


def format_plan_markdown(output: MealPlanOutput) -> str:
    """Format a MealPlanOutput as Markdown.

    Args:
        output: MealPlanOutput from MealPlanner.generate

    Returns:
        Formatted Markdown string
    """
    currency = output.metadata.get("currency", "INR")
    target = output.plan_target
    lines = []

    lines.append(f"# {len(output.daily_plans)}-Day Meal Plan\n")
    lines.append(f"{output.summary}\n")

    lines.append("## Targets")
    lines.append(f"**Calories:** {target.calories_kcal:.0f} kcal/day")
    lines.append(f"**Protein:** {target.protein_g:.1f}g/day")
    if target.iron_mg is not None:
        lines.append(f"**Iron:** {target.iron_mg:.1f}mg/day")
    if target.vitamin_a_ug is not None:
        lines.append(f"**Vitamin A:** {target.vitamin_a_ug:.0f}µg/day")
    lines.append(f"**Age group:** {target.age_group} ({target.source})")
    lines.append("")

    if output.warnings:
        lines.append("## Warnings\n")
        for warning in output.warnings:
            lines.append(f"- {warning}")
        lines.append("")

    compliance_by_day = {record.day: record for record in output.compliance}
    for plan in output.daily_plans:
        lines.append(f"## Day {plan.day}")
        for meal in plan.meals:
            relaxed = " _(rotation relaxed)_" if meal.rotation_relaxed else ""
            lines.append(f"### {SLOT_NAMES.get(meal.slot, meal.slot)}: {meal.name}{relaxed}")
            lines.append(", ".join(format_item_string(item) for item in meal.cost.items))
            lines.append("")
            lines.append(format_nutrition_breakdown(meal.nutrition))
            lines.append(f"**Cost:** {currency} {meal.cost.total:.2f}")
            lines.append("")
        for slot in plan.unfilled_slots:
            lines.append(f"### {SLOT_NAMES.get(slot, slot)}: _no suitable option_")
            lines.append("")

        totals = plan.totals
        lines.append("### Day Totals")
        lines.append(
            f"{totals.calories_kcal:.0f} kcal | {totals.protein_g:.1f}g protein | "
            f"{totals.iron_mg:.1f}mg iron | {totals.vitamin_a_ug:.0f}µg vitamin A | "
            f"{currency} {totals.cost_total:.2f}"
        )
        record = compliance_by_day.get(plan.day)
        if record is not None:
            lines.append(
                f"Calories {_check_mark(record.calorie_ok)} · Protein {_check_mark(record.protein_ok)} · "
                f"Iron {_check_mark(record.iron_ok)} · Vitamin A {_check_mark(record.vitamin_a_ok)}"
            )
        lines.append("")

    weekly = output.weekly_summary
    lines.append("## Summary")
    lines.append(f"**Average calories:** {weekly.avg_calories_kcal:.0f} kcal/day")
    lines.append(f"**Average protein:** {weekly.avg_protein_g:.1f}g/day")
    lines.append(f"**Average cost:** {currency} {weekly.avg_cost_per_day:.2f}/day")
    lines.append(f"**Total cost:** {currency} {weekly.total_cost:.2f}")
    lines.append("")

    return "\n".join(lines)
