"""Per-serving cost of a meal option from a price snapshot.

    item cost       = round(price_per_kg * grams / 1000, 2)
    subtotal        = round(sum(item costs), 2)
    wastage_amount  = round(subtotal * wastage_pct, 2)
    total           = round(subtotal + spices_allowance + wastage_amount, 2)

Every aggregation step is rounded to 2 decimals so reported totals add up
exactly to what a reader would compute from the reported parts.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from poshan_planner.data_layer.exceptions import PriceNotFoundError
from poshan_planner.data_layer.models import IngredientPortion, PriceEntry
from poshan_planner.data_layer.planner_config import PlannerConfig


@dataclass(frozen=True)
class CostedItem:
    """One ingredient portion with its price."""

    ingredient: str
    grams: float
    unit_price: float  # per kg equivalent
    cost: float


@dataclass(frozen=True)
class CostBreakdown:
    """Cost of one serving."""

    items: Tuple[CostedItem, ...]
    subtotal: float
    spices_allowance: float
    wastage_amount: float
    total: float


def round_money(value: float) -> float:
    return round(value, 2)


def sum_money(values: Iterable[float]) -> float:
    """Sum already-rounded amounts, rounding the result."""
    return round_money(sum(values))


class CostEstimator:
    """Costs ingredient portions against a price snapshot."""

    def __init__(self, config: Optional[PlannerConfig] = None):
        self.config = config or PlannerConfig()

    def estimate(
        self, items: Iterable[IngredientPortion], snapshot: Dict[str, PriceEntry]
    ) -> CostBreakdown:
        """Cost one serving.

        Args:
            items: Ingredient portions of the serving
            snapshot: Price snapshot keyed by ingredient key

        Returns:
            CostBreakdown with per-item costs and surcharges

        Raises:
            PriceNotFoundError: If an ingredient has no price in the snapshot
        """
        costed: List[CostedItem] = []
        for item in items:
            entry = snapshot.get(item.ingredient)
            if entry is None:
                raise PriceNotFoundError(item.ingredient)
            price_per_kg = entry.price_per_kg
            costed.append(
                CostedItem(
                    ingredient=item.ingredient,
                    grams=item.grams,
                    unit_price=round_money(price_per_kg),
                    cost=round_money(price_per_kg * item.grams / 1000.0),
                )
            )

        subtotal = sum_money(c.cost for c in costed)
        spices = round_money(self.config.spices_allowance)
        wastage = round_money(subtotal * self.config.wastage_pct)
        total = round_money(subtotal + spices + wastage)

        return CostBreakdown(
            items=tuple(costed),
            subtotal=subtotal,
            spices_allowance=spices,
            wastage_amount=wastage,
            total=total,
        )
