"""Nutrition database for loading per-100g ingredient data from JSON."""
import json
from pathlib import Path
from typing import Dict, List, Optional

from poshan_planner.data_layer.exceptions import CatalogError, IngredientNotFoundError
from poshan_planner.data_layer.models import Ingredient, NutritionProfile


DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_NUTRITION_PATH = DATA_DIR / "nutrition.json"


class NutritionDatabase:
    """Read-only table of ingredients keyed by ingredient key."""

    def __init__(self, json_path: Optional[str] = None):
        """Initialize nutrition database from JSON file.

        Args:
            json_path: Path to JSON file containing nutrition data. Defaults to
                the bundled IFCT table.
        """
        self.json_path = Path(json_path) if json_path else DEFAULT_NUTRITION_PATH
        self._ingredients: Dict[str, Ingredient] = {}
        self._load_ingredients()

    def _load_ingredients(self):
        """Load ingredients from JSON file."""
        with open(self.json_path, "r") as f:
            data = json.load(f)

        for ing_data in data.get("ingredients", []):
            ingredient = self._parse_ingredient(ing_data)
            if ingredient.key in self._ingredients:
                raise CatalogError(f"Duplicate ingredient key '{ingredient.key}' in {self.json_path}")
            self._ingredients[ingredient.key] = ingredient

    def _parse_ingredient(self, ing_data: dict) -> Ingredient:
        """Parse a single ingredient from dictionary data.

        Args:
            ing_data: Dictionary containing ingredient data

        Returns:
            Ingredient object

        Raises:
            CatalogError: If required fields are missing or malformed
        """
        try:
            key = str(ing_data["key"]).strip().lower()
            per_100g = ing_data["per_100g"]
            nutrition = NutritionProfile(
                calories=float(per_100g["calories"]),
                protein_g=float(per_100g["protein_g"]),
                carbs_g=float(per_100g.get("carbs_g", 0.0)),
                fat_g=float(per_100g.get("fat_g", 0.0)),
                iron_mg=float(per_100g.get("iron_mg", 0.0)),
                vitamin_a_ug=float(per_100g.get("vitamin_a_ug", 0.0)),
                fiber_g=float(per_100g.get("fiber_g", 0.0)),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise CatalogError(f"Malformed nutrition entry {ing_data!r}: {exc}") from exc

        return Ingredient(
            key=key,
            per_100g=nutrition,
            category=str(ing_data.get("category", "other")),
            group=ing_data.get("group"),
            animal_product=bool(ing_data.get("animal_product", False)),
            allergens=frozenset(str(a).lower() for a in ing_data.get("allergens", [])),
        )

    def lookup(self, key: str) -> Ingredient:
        """Get an ingredient by key.

        Raises:
            IngredientNotFoundError: If the key is not in the table
        """
        ingredient = self._ingredients.get(key.strip().lower())
        if ingredient is None:
            raise IngredientNotFoundError(key)
        return ingredient

    def get(self, key: str) -> Optional[Ingredient]:
        """Get an ingredient by key, or None if not found."""
        return self._ingredients.get(key.strip().lower())

    def all(self) -> List[Ingredient]:
        return list(self._ingredients.values())

    def keys(self) -> List[str]:
        return list(self._ingredients)

    def __contains__(self, key: str) -> bool:
        return key.strip().lower() in self._ingredients

    def __len__(self) -> int:
        return len(self._ingredients)
