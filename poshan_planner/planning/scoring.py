"""Selection score for a candidate meal option. Lower is better.

    score = |cal - t_cal| + protein_weight * |prot - t_prot|
            - variety_bonus   (bucket not yet used in this rotation)
            - adequacy_bonus  (option reaches adequacy_threshold of both targets)

Pure and deterministic; no constraints and no state mutation.
"""

from __future__ import annotations

from poshan_planner.data_layer.models import NutritionProfile, SlotTarget
from poshan_planner.data_layer.planner_config import PlannerConfig


def is_adequate(nutrition: NutritionProfile, target: SlotTarget, threshold: float) -> bool:
    """Option supplies at least ``threshold`` of both calorie and protein targets."""
    return (
        nutrition.calories >= threshold * target.calories_kcal
        and nutrition.protein_g >= threshold * target.protein_g
    )


def selection_score(
    nutrition: NutritionProfile,
    target: SlotTarget,
    variety_unused: bool,
    config: PlannerConfig,
) -> float:
    """Score one option against a slot target.

    Args:
        nutrition: Per-serving nutrition of the option
        target: Calorie/protein target for the slot
        variety_unused: True if the option's variety bucket has no selections yet
        config: Weights and bonuses

    Returns:
        Score; lower wins
    """
    score = abs(nutrition.calories - target.calories_kcal)
    score += config.protein_weight * abs(nutrition.protein_g - target.protein_g)
    if variety_unused:
        score -= config.variety_bonus
    if is_adequate(nutrition, target, config.adequacy_threshold):
        score -= config.adequacy_bonus
    return score
