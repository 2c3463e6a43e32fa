"""Tests for per-serving cost estimation."""
from pathlib import Path

import pytest

from poshan_planner.data_layer.exceptions import PriceNotFoundError
from poshan_planner.data_layer.models import IngredientPortion, PriceEntry
from poshan_planner.data_layer.planner_config import PlannerConfig
from poshan_planner.pricing import CostEstimator, round_money, sum_money
from poshan_planner.providers import FallbackPriceProvider


FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def snapshot():
    return FallbackPriceProvider(str(FIXTURES / "test_prices.json")).snapshot("default")


@pytest.fixture
def estimator():
    return CostEstimator()


class TestCostEstimator:
    """Tests for CostEstimator.estimate."""

    def test_dal_rice_serving(self, estimator, snapshot):
        breakdown = estimator.estimate(
            [IngredientPortion("rice", 200), IngredientPortion("toor_dal", 40)], snapshot
        )
        assert [item.cost for item in breakdown.items] == [17.2, 5.68]
        assert breakdown.subtotal == 22.88
        assert breakdown.spices_allowance == 0.5
        assert breakdown.wastage_amount == 1.6
        assert breakdown.total == 24.98

    def test_piece_priced_item(self, estimator, snapshot):
        breakdown = estimator.estimate([IngredientPortion("banana", 120)], snapshot)
        assert breakdown.items[0].cost == 6.0
        assert breakdown.items[0].unit_price == 50.0

    def test_litre_priced_item(self, estimator, snapshot):
        breakdown = estimator.estimate([IngredientPortion("milk", 200)], snapshot)
        assert breakdown.items[0].cost == 10.8

    def test_total_adds_up(self, estimator, snapshot):
        portions = [
            IngredientPortion("atta", 120),
            IngredientPortion("paneer", 60),
            IngredientPortion("cooking_oil", 7),
            IngredientPortion("spinach", 80),
        ]
        breakdown = estimator.estimate(portions, snapshot)
        assert breakdown.subtotal == round(sum(i.cost for i in breakdown.items), 2)
        assert breakdown.total == round(
            breakdown.subtotal + breakdown.spices_allowance + breakdown.wastage_amount, 2
        )

    def test_config_surcharges(self, snapshot):
        estimator = CostEstimator(PlannerConfig(wastage_pct=0.10, spices_allowance=1.0))
        breakdown = estimator.estimate([IngredientPortion("rice", 100)], snapshot)
        assert breakdown.subtotal == 8.6
        assert breakdown.wastage_amount == 0.86
        assert breakdown.total == 10.46

    def test_missing_price_raises(self, estimator):
        snapshot = {"rice": PriceEntry("rice", 86.0)}
        with pytest.raises(PriceNotFoundError) as exc_info:
            estimator.estimate(
                [IngredientPortion("rice", 100), IngredientPortion("saffron", 1)], snapshot
            )
        assert exc_info.value.ingredient_key == "saffron"


class TestMoneyHelpers:
    def test_round_money(self):
        assert round_money(1.006) == 1.01
        assert round_money(2.0) == 2.0

    def test_sum_money(self):
        assert sum_money([0.1, 0.2]) == 0.3
        assert sum_money([]) == 0
