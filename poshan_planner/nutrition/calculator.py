"""Nutrition calculator for computing nutrition values for portions and meal options."""
from typing import Dict

from poshan_planner.data_layer.models import (
    EMPTY_NUTRITION,
    IngredientPortion,
    MealOption,
    NutritionProfile,
)
from poshan_planner.data_layer.nutrition_db import NutritionDatabase


class NutritionCalculator:
    """Calculator for nutrition values of ingredient portions and meal options."""

    def __init__(self, nutrition_db: NutritionDatabase):
        """Initialize calculator with nutrition database.

        Args:
            nutrition_db: NutritionDatabase instance for per-100g lookup
        """
        self.nutrition_db = nutrition_db
        self._option_cache: Dict[str, NutritionProfile] = {}

    def calculate_portion_nutrition(self, portion: IngredientPortion) -> NutritionProfile:
        """Calculate nutrition for grams of a single ingredient.

        Args:
            portion: Ingredient key and grams

        Returns:
            NutritionProfile scaled from the per-100g values

        Raises:
            IngredientNotFoundError: If ingredient not found in database
        """
        ingredient = self.nutrition_db.lookup(portion.ingredient)
        return ingredient.per_100g.scaled(portion.grams)

    def calculate_option_nutrition(self, option: MealOption) -> NutritionProfile:
        """Calculate total nutrition for one serving of a meal option.

        Results are memoised per option id; catalogs are read-only so an
        option's nutrition never changes during a planner's lifetime.

        Args:
            option: MealOption with ingredient portions

        Returns:
            NutritionProfile with summed nutrition
        """
        cached = self._option_cache.get(option.id)
        if cached is not None:
            return cached

        total = EMPTY_NUTRITION
        for portion in option.items:
            total = total + self.calculate_portion_nutrition(portion)

        self._option_cache[option.id] = total
        return total
