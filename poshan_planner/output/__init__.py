"""Output formatting for meal plans."""

from poshan_planner.output.formatters import (
    format_plan_json,
    format_plan_json_string,
    format_plan_markdown,
    format_item_string,
    format_nutrition_breakdown
)

__all__ = [
    "format_plan_json",
    "format_plan_json_string",
    "format_plan_markdown",
    "format_item_string",
    "format_nutrition_breakdown"
]
