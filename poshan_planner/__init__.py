"""Poshan Planner: constraint-based multi-day meal planning with costing."""

__version__ = "0.1.0"
