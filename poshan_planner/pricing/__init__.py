"""Meal costing against price snapshots."""

from poshan_planner.pricing.cost_estimator import (
    CostBreakdown,
    CostedItem,
    CostEstimator,
    round_money,
    sum_money,
)

__all__ = [
    "CostBreakdown",
    "CostedItem",
    "CostEstimator",
    "round_money",
    "sum_money",
]
