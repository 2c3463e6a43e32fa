"""Structured error types for the planning engine.

Fatal errors are raised and surface to the caller before or during plan
generation. Non-fatal issues (budget, nutrition shortfall, rotation
relaxation, ...) use the same classes so they carry a code and context, but
the planner collects them on the plan output instead of raising them.

    InvalidProfile          fatal, nothing is generated
    InvalidPlanRequest      fatal, nothing is generated
    CatalogError            fatal, reference data is inconsistent
    IngredientNotFoundError fatal, unknown ingredient key
    PriceNotFoundError      fatal, snapshot lacks a catalog ingredient
    NoCandidate             fatal for one slot, planner records it and leaves the slot empty
    BudgetExceeded          non-fatal
    NutritionShortfall      non-fatal
    RotationRelaxed         non-fatal
    SupervisionRequired     non-fatal
    VarietyWarning          non-fatal
"""

from enum import Enum
from typing import Any, Dict, Optional


class PlanningErrorCode(Enum):
    """Codes for every planning failure mode and compliance issue."""

    INVALID_PROFILE = "INVALID_PROFILE"
    INVALID_REQUEST = "INVALID_REQUEST"
    CATALOG_ERROR = "CATALOG_ERROR"
    INGREDIENT_NOT_FOUND = "INGREDIENT_NOT_FOUND"
    PRICE_NOT_FOUND = "PRICE_NOT_FOUND"
    NO_CANDIDATE = "NO_CANDIDATE"

    BUDGET_EXCEEDED = "BUDGET_EXCEEDED"
    NUTRITION_SHORTFALL = "NUTRITION_SHORTFALL"
    ROTATION_RELAXED = "ROTATION_RELAXED"
    SUPERVISION_REQUIRED = "SUPERVISION_REQUIRED"
    VARIETY_WARNING = "VARIETY_WARNING"


class PlanningError(Exception):
    """Base class for planning errors and issues.

    Attributes:
        code: PlanningErrorCode identifying the failure mode
        message: Human-readable description
        context: Dictionary of relevant values (day, slot, ingredient, ...)
    """

    def __init__(
        self,
        code: PlanningErrorCode,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.context = context or {}
        super().__init__(f"[{code.value}] {message}")

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code!r}, "
            f"message={self.message!r}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context,
        }


class InvalidProfile(PlanningError):
    """Raised when biometric input cannot be used (non-positive weight/height, negative age)."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        context: Dict[str, Any] = {}
        if field is not None:
            context["field"] = field
            context["value"] = value
        super().__init__(PlanningErrorCode.INVALID_PROFILE, message, context)
        self.field = field
        self.value = value


class InvalidPlanRequest(PlanningError):
    """Raised when a PlanRequest is malformed (e.g. rotation_days < 1)."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        context: Dict[str, Any] = {}
        if field is not None:
            context["field"] = field
            context["value"] = value
        super().__init__(PlanningErrorCode.INVALID_REQUEST, message, context)


class CatalogError(PlanningError):
    """Raised when the meal catalog or reference data cannot be loaded consistently."""

    def __init__(self, message: str, option_id: Optional[str] = None):
        context = {"option_id": option_id} if option_id else {}
        super().__init__(PlanningErrorCode.CATALOG_ERROR, message, context)
        self.option_id = option_id


class IngredientNotFoundError(PlanningError):
    """Raised when an ingredient is not found in the nutrition database."""

    def __init__(self, ingredient_key: str):
        super().__init__(
            PlanningErrorCode.INGREDIENT_NOT_FOUND,
            f"Ingredient '{ingredient_key}' not found in nutrition database",
            {"ingredient_key": ingredient_key},
        )
        self.ingredient_key = ingredient_key


class PriceNotFoundError(PlanningError):
    """Raised when a price snapshot has no entry for a required ingredient."""

    def __init__(self, ingredient_key: str):
        super().__init__(
            PlanningErrorCode.PRICE_NOT_FOUND,
            f"No price for ingredient '{ingredient_key}' in price snapshot",
            {"ingredient_key": ingredient_key},
        )
        self.ingredient_key = ingredient_key


class NoCandidate(PlanningError):
    """Raised when no catalog option satisfies slot and dietary constraints."""

    def __init__(self, slot: str, day: Optional[int] = None, constraints: Optional[list] = None):
        context: Dict[str, Any] = {"slot": slot}
        if day is not None:
            context["day"] = day
        if constraints:
            context["dietary_constraints"] = sorted(constraints)
        where = f"day {day} {slot}" if day is not None else slot
        super().__init__(
            PlanningErrorCode.NO_CANDIDATE,
            f"No meal option satisfies the dietary constraints for {where}; slot left empty",
            context,
        )
        self.slot = slot
        self.day = day


class BudgetExceeded(PlanningError):
    """Average daily cost above the budget allocation."""

    def __init__(self, average_cost: float, budget: float, currency: str = "INR"):
        super().__init__(
            PlanningErrorCode.BUDGET_EXCEEDED,
            f"Average cost {currency} {average_cost:.2f}/day exceeds budget "
            f"allocation {currency} {budget:.2f}/day",
            {"average_cost": average_cost, "budget": budget},
        )


class NutritionShortfall(PlanningError):
    """A day's total of one nutrient below the compliance threshold."""

    def __init__(self, day: int, nutrient: str, actual: float, target: float, threshold: float):
        super().__init__(
            PlanningErrorCode.NUTRITION_SHORTFALL,
            f"Day {day}: {nutrient} {actual:.1f} is below {threshold * 100:.0f}% "
            f"of target {target:.1f}",
            {"day": day, "nutrient": nutrient, "actual": actual, "target": target},
        )


class RotationRelaxed(PlanningError):
    """Rotation rules had to be dropped to fill a slot."""

    def __init__(self, day: int, slot: str, blocked_by: list):
        super().__init__(
            PlanningErrorCode.ROTATION_RELAXED,
            f"Day {day} {slot}: rotation rules relaxed ({', '.join(blocked_by)}); "
            f"no option satisfied them",
            {"day": day, "slot": slot, "blocked_by": list(blocked_by)},
        )


class SupervisionRequired(PlanningError):
    """Weight-loss goal requested for a minor."""

    def __init__(self, age: int):
        super().__init__(
            PlanningErrorCode.SUPERVISION_REQUIRED,
            "Weight loss goals for children require clinician supervision. "
            "Using maintenance calories instead.",
            {"age": age},
        )


class VarietyWarning(PlanningError):
    """Rotation-level variety rule not met."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(PlanningErrorCode.VARIETY_WARNING, message, context)
