"""Meal catalog: the pool of dishes the planner selects from.

Options are loaded from JSON and tagged once, at load time, from ingredient
identity in the nutrition database:

- ``staple``: rotation group of the heaviest staple ingredient
- ``pulse``: key of the heaviest pulse ingredient
- ``vegetarian``: no ingredient is an animal product
- ``contains_leafy``: at least one leafy vegetable

An option referencing an ingredient that the nutrition database does not know
fails the whole load, so the planner never meets an unresolvable key.
"""
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from poshan_planner.data_layer.exceptions import CatalogError
from poshan_planner.data_layer.models import SLOTS, IngredientPortion, MealOption
from poshan_planner.data_layer.nutrition_db import DATA_DIR, NutritionDatabase


DEFAULT_CATALOG_PATH = DATA_DIR / "meal_catalog.json"


class MealCatalog:
    """Read-only, ordered collection of MealOption objects."""

    def __init__(
        self,
        nutrition_db: NutritionDatabase,
        json_path: Optional[str] = None,
        options_data: Optional[List[Dict[str, Any]]] = None,
    ):
        """Initialize the catalog from a JSON file or parsed option dictionaries.

        Args:
            nutrition_db: Database used to resolve ingredient tags
            json_path: Path to catalog JSON. Defaults to the bundled catalog.
            options_data: Already-parsed options; when given, no file is read
                and ``json_path`` is None.

        Raises:
            CatalogError: If an option is malformed or ids collide
            IngredientNotFoundError: If an option references an unknown ingredient
        """
        self.nutrition_db = nutrition_db
        if options_data is None:
            self.json_path = Path(json_path) if json_path else DEFAULT_CATALOG_PATH
            with open(self.json_path, "r") as f:
                options_data = json.load(f).get("meal_options", [])
        else:
            self.json_path = None
        self._options = self._build(options_data)

    @classmethod
    def from_dicts(
        cls, options_data: List[Dict[str, Any]], nutrition_db: NutritionDatabase
    ) -> "MealCatalog":
        """Build a catalog from already-parsed option dictionaries."""
        return cls(nutrition_db, options_data=options_data)

    def _build(self, options_data: List[Dict[str, Any]]) -> List[MealOption]:
        options: List[MealOption] = []
        seen = set()
        for option_data in options_data:
            option = self._parse_option(option_data)
            if option.id in seen:
                raise CatalogError(f"Duplicate meal option id '{option.id}'", option.id)
            seen.add(option.id)
            options.append(option)
        return options

    def _parse_option(self, option_data: dict) -> MealOption:
        """Parse one option and resolve its rotation tags.

        Args:
            option_data: Dictionary with id, name, slot, items and optional variety

        Returns:
            Tagged MealOption
        """
        option_id = option_data.get("id")
        if not option_id:
            raise CatalogError(f"Meal option without id: {option_data!r}")

        slot = option_data.get("slot")
        if slot not in SLOTS:
            raise CatalogError(f"Meal option '{option_id}' has unknown slot '{slot}'", option_id)

        items = []
        for item_data in option_data.get("items", []):
            try:
                grams = float(item_data["grams"])
                key = str(item_data["ingredient"]).strip().lower()
            except (KeyError, TypeError, ValueError) as exc:
                raise CatalogError(
                    f"Meal option '{option_id}' has a malformed item {item_data!r}", option_id
                ) from exc
            if grams <= 0:
                raise CatalogError(
                    f"Meal option '{option_id}' has non-positive grams for '{key}'", option_id
                )
            items.append(IngredientPortion(ingredient=key, grams=grams))

        if not items:
            raise CatalogError(f"Meal option '{option_id}' has no ingredients", option_id)

        # Raises IngredientNotFoundError for unknown keys
        ingredients = [self.nutrition_db.lookup(item.ingredient) for item in items]

        staple = None
        pulse = None
        staple_grams = 0.0
        pulse_grams = 0.0
        for item, ingredient in zip(items, ingredients):
            if ingredient.is_staple and item.grams > staple_grams:
                staple = ingredient.group or ingredient.key
                staple_grams = item.grams
            if ingredient.is_pulse and item.grams > pulse_grams:
                pulse = ingredient.key
                pulse_grams = item.grams

        return MealOption(
            id=str(option_id),
            name=str(option_data.get("name", option_id)),
            slot=slot,
            items=tuple(items),
            staple=staple,
            pulse=pulse,
            variety=str(option_data.get("variety") or option_id),
            vegetarian=not any(ing.animal_product for ing in ingredients),
            contains_leafy=any(ing.is_leafy for ing in ingredients),
        )

    def all(self) -> List[MealOption]:
        """All options in catalog order."""
        return list(self._options)

    def for_slot(self, slot: str) -> List[MealOption]:
        """Options for one slot, in catalog order."""
        return [option for option in self._options if option.slot == slot]

    def get(self, option_id: str) -> Optional[MealOption]:
        for option in self._options:
            if option.id == option_id:
                return option
        return None

    def ingredient_keys(self) -> List[str]:
        """Sorted unique ingredient keys referenced by any option."""
        keys = set()
        for option in self._options:
            keys.update(option.ingredient_keys)
        return sorted(keys)

    def __len__(self) -> int:
        return len(self._options)
