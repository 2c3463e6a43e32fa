"""Tests for structured planning errors."""
import pytest

from poshan_planner.data_layer.exceptions import (
    BudgetExceeded,
    CatalogError,
    IngredientNotFoundError,
    InvalidPlanRequest,
    InvalidProfile,
    NoCandidate,
    NutritionShortfall,
    PlanningError,
    PlanningErrorCode,
    PriceNotFoundError,
    RotationRelaxed,
    SupervisionRequired,
    VarietyWarning,
)


class TestPlanningError:
    """Tests for the base error."""

    def test_str_includes_code(self):
        err = PlanningError(PlanningErrorCode.CATALOG_ERROR, "bad catalog")
        assert str(err) == "[CATALOG_ERROR] bad catalog"

    def test_context_defaults_to_empty_dict(self):
        err = PlanningError(PlanningErrorCode.CATALOG_ERROR, "bad catalog")
        assert err.context == {}

    def test_to_dict(self):
        err = PlanningError(PlanningErrorCode.NO_CANDIDATE, "nothing", {"slot": "lunch"})
        assert err.to_dict() == {
            "code": "NO_CANDIDATE",
            "message": "nothing",
            "context": {"slot": "lunch"},
        }

    def test_repr(self):
        err = PlanningError(PlanningErrorCode.NO_CANDIDATE, "nothing")
        assert "PlanningError(" in repr(err)
        assert "NO_CANDIDATE" in repr(err)

    def test_can_be_raised_and_caught_as_exception(self):
        with pytest.raises(PlanningError):
            raise IngredientNotFoundError("saffron")


class TestErrorSubclasses:
    """Each subclass carries its code and context."""

    @pytest.mark.parametrize(
        "error, code",
        [
            (InvalidProfile("bad weight", "weight_kg", 0), PlanningErrorCode.INVALID_PROFILE),
            (InvalidPlanRequest("bad days", "rotation_days", 0), PlanningErrorCode.INVALID_REQUEST),
            (CatalogError("dup", "idli"), PlanningErrorCode.CATALOG_ERROR),
            (IngredientNotFoundError("saffron"), PlanningErrorCode.INGREDIENT_NOT_FOUND),
            (PriceNotFoundError("saffron"), PlanningErrorCode.PRICE_NOT_FOUND),
            (NoCandidate("lunch", 2, ["vegan"]), PlanningErrorCode.NO_CANDIDATE),
            (BudgetExceeded(60.0, 50.0), PlanningErrorCode.BUDGET_EXCEEDED),
            (NutritionShortfall(1, "protein", 50, 99, 0.9), PlanningErrorCode.NUTRITION_SHORTFALL),
            (RotationRelaxed(2, "lunch", ["pulse_repeat"]), PlanningErrorCode.ROTATION_RELAXED),
            (SupervisionRequired(9), PlanningErrorCode.SUPERVISION_REQUIRED),
            (VarietyWarning("rice used on 5 days (max 4)"), PlanningErrorCode.VARIETY_WARNING),
        ],
    )
    def test_codes(self, error, code):
        assert error.code == code
        assert error.to_dict()["code"] == code.value

    def test_invalid_profile_context(self):
        err = InvalidProfile("weight_kg must be positive", "weight_kg", -1)
        assert err.context == {"field": "weight_kg", "value": -1}
        assert err.field == "weight_kg"

    def test_no_candidate_context(self):
        err = NoCandidate("lunch", 3, ["vegan", "no_peanut"])
        assert err.context == {
            "slot": "lunch",
            "day": 3,
            "dietary_constraints": ["no_peanut", "vegan"],
        }
        assert "day 3 lunch" in err.message

    def test_supervision_message(self):
        err = SupervisionRequired(9)
        assert "clinician supervision" in err.message
        assert "maintenance calories" in err.message

    def test_budget_message_uses_currency(self):
        err = BudgetExceeded(61.234, 50.0, "INR")
        assert "INR 61.23/day" in err.message
        assert err.context == {"average_cost": 61.234, "budget": 50.0}
