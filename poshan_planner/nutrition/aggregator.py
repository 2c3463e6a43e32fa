"""Nutrition aggregator for summing nutrition across meals and days."""
from typing import List

from poshan_planner.data_layer.models import NutritionProfile


class NutritionAggregator:
    """Aggregator for combining nutrition from multiple sources."""

    @staticmethod
    def aggregate(profiles: List[NutritionProfile]) -> NutritionProfile:
        """Sum nutrition profiles.

        Args:
            profiles: List of NutritionProfile objects

        Returns:
            NutritionProfile with summed nutrition (all zeros for an empty list)
        """
        total_calories = 0.0
        total_protein = 0.0
        total_carbs = 0.0
        total_fat = 0.0
        total_iron = 0.0
        total_vitamin_a = 0.0
        total_fiber = 0.0

        for profile in profiles:
            total_calories += profile.calories
            total_protein += profile.protein_g
            total_carbs += profile.carbs_g
            total_fat += profile.fat_g
            total_iron += profile.iron_mg
            total_vitamin_a += profile.vitamin_a_ug
            total_fiber += profile.fiber_g

        return NutritionProfile(
            calories=total_calories,
            protein_g=total_protein,
            carbs_g=total_carbs,
            fat_g=total_fat,
            iron_mg=total_iron,
            vitamin_a_ug=total_vitamin_a,
            fiber_g=total_fiber,
        )
