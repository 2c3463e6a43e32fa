"""Data models for the meal planning engine."""
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional, Tuple


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class ActivityLevel(str, Enum):
    SEDENTARY = "sedentary"
    MODERATE = "moderate"
    HIGH = "high"


class Goal(str, Enum):
    MAINTAIN = "maintain"
    LOSE = "lose"
    GAIN = "gain"


class PlanMode(str, Enum):
    FULL_DAY = "full_day"
    LUNCH_ONLY = "lunch_only"


# Meal slots in the order they are planned within a day.
SLOTS: Tuple[str, ...] = ("breakfast", "snack1", "lunch", "snack2", "dinner")


@dataclass(frozen=True)
class UserProfile:
    """Biometric and activity profile of the person being planned for."""

    age: int  # years
    gender: Gender
    weight_kg: float
    height_cm: float
    activity_level: ActivityLevel
    goal: Goal = Goal.MAINTAIN
    dietary_constraints: FrozenSet[str] = frozenset()

    @property
    def is_minor(self) -> bool:
        return self.age < 18


@dataclass(frozen=True)
class NutritionProfile:
    """Nutrition values, either per 100g or for a resolved portion."""

    calories: float
    protein_g: float
    carbs_g: float = 0.0
    fat_g: float = 0.0
    iron_mg: float = 0.0
    vitamin_a_ug: float = 0.0
    fiber_g: float = 0.0

    def scaled(self, grams: float) -> "NutritionProfile":
        """Return values for ``grams`` of an item described per 100g."""
        factor = grams / 100.0
        return NutritionProfile(
            calories=self.calories * factor,
            protein_g=self.protein_g * factor,
            carbs_g=self.carbs_g * factor,
            fat_g=self.fat_g * factor,
            iron_mg=self.iron_mg * factor,
            vitamin_a_ug=self.vitamin_a_ug * factor,
            fiber_g=self.fiber_g * factor,
        )

    def __add__(self, other: "NutritionProfile") -> "NutritionProfile":
        return NutritionProfile(
            calories=self.calories + other.calories,
            protein_g=self.protein_g + other.protein_g,
            carbs_g=self.carbs_g + other.carbs_g,
            fat_g=self.fat_g + other.fat_g,
            iron_mg=self.iron_mg + other.iron_mg,
            vitamin_a_ug=self.vitamin_a_ug + other.vitamin_a_ug,
            fiber_g=self.fiber_g + other.fiber_g,
        )


EMPTY_NUTRITION = NutritionProfile(0.0, 0.0)


@dataclass(frozen=True)
class Ingredient:
    """A row of the static nutrition reference table."""

    key: str  # e.g. "toor_dal"
    per_100g: NutritionProfile
    category: str  # "staple", "pulse", "vegetable", "leafy_vegetable", "dairy", ...
    group: Optional[str] = None  # rotation key, e.g. "rice" / "wheat" / "millet" for staples
    animal_product: bool = False  # meat, fish, egg (dairy is not)
    allergens: FrozenSet[str] = frozenset()

    @property
    def is_staple(self) -> bool:
        return self.category == "staple"

    @property
    def is_pulse(self) -> bool:
        return self.category == "pulse"

    @property
    def is_dairy(self) -> bool:
        return self.category == "dairy"

    @property
    def is_leafy(self) -> bool:
        return self.category == "leafy_vegetable"


@dataclass(frozen=True)
class IngredientPortion:
    """An ingredient key and the grams of it in one serving."""

    ingredient: str
    grams: float


@dataclass(frozen=True)
class MealOption:
    """A catalog dish for one meal slot.

    Rotation tags (staple, pulse, variety) and the vegetarian flag are
    resolved once when the catalog is loaded, from ingredient identity.
    """

    id: str
    name: str
    slot: str
    items: Tuple[IngredientPortion, ...]
    staple: Optional[str] = None  # staple group, e.g. "rice"
    pulse: Optional[str] = None  # pulse ingredient key, e.g. "moong_dal"
    variety: str = ""
    vegetarian: bool = True
    contains_leafy: bool = False

    @property
    def ingredient_keys(self) -> Tuple[str, ...]:
        return tuple(item.ingredient for item in self.items)


@dataclass(frozen=True)
class PriceEntry:
    """Unit price of one ingredient in a price snapshot.

    ``unit`` is "kg", "litre" or "piece". Litre prices are treated as per kg
    (density 1). Piece prices carry ``grams_per_piece`` so that grams can be
    converted to a per-kg equivalent.
    """

    ingredient_key: str
    unit_price: float
    unit: str = "kg"
    source: str = "fallback"
    timestamp: Optional[str] = None
    grams_per_piece: Optional[float] = None

    @property
    def price_per_kg(self) -> float:
        if self.unit == "piece":
            if not self.grams_per_piece:
                raise ValueError(
                    f"Piece-priced ingredient '{self.ingredient_key}' needs grams_per_piece"
                )
            return self.unit_price * 1000.0 / self.grams_per_piece
        return self.unit_price


@dataclass(frozen=True)
class DailyTarget:
    """Full-day nutrition target."""

    calories_kcal: float
    protein_g: float
    iron_mg: Optional[float] = None
    vitamin_a_ug: Optional[float] = None
    age_group: str = "adult"  # "primary", "upper_primary", "under_6", "adolescent", "adult"
    source: str = "mifflin_st_jeor"  # or "program_standard"
    budget_per_meal: Optional[float] = None  # program allocation for child bands


@dataclass(frozen=True)
class PlanRequest:
    """Caller-supplied parameters for one plan generation."""

    rotation_days: int = 5
    mode: PlanMode = PlanMode.FULL_DAY
    dietary_constraints: FrozenSet[str] = frozenset()
    location: str = "default"
    budget_per_day: Optional[float] = None

    @property
    def slots(self) -> Tuple[str, ...]:
        if self.mode == PlanMode.LUNCH_ONLY:
            return ("lunch",)
        return SLOTS


@dataclass(frozen=True)
class SlotTarget:
    """Calorie and protein target for one meal slot."""

    slot: str
    calories_kcal: float
    protein_g: float
