#!/usr/bin/env python3
"""Command-line interface for the Poshan meal planner."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from poshan_planner.data_layer.exceptions import (
    InvalidPlanRequest,
    InvalidProfile,
    PlanningError,
)
from poshan_planner.data_layer.meal_catalog import MealCatalog
from poshan_planner.data_layer.models import PlanMode, PlanRequest
from poshan_planner.data_layer.nutrition_db import NutritionDatabase
from poshan_planner.data_layer.planner_config import PlannerConfig, PlannerConfigLoader
from poshan_planner.data_layer.user_profile import UserProfileLoader
from poshan_planner.output.formatters import format_plan_json_string, format_plan_markdown
from poshan_planner.planning.meal_planner import MealPlanner
from poshan_planner.providers.fallback_provider import FallbackPriceProvider, load_live_prices


EXIT_INPUT_ERROR = 1
EXIT_INVALID_REQUEST = 2
EXIT_DATA_ERROR = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate multi-day meal plans with nutrition, rotation and cost checks"
    )
    parser.add_argument(
        "--profile",
        type=str,
        default="config/user_profile.yaml",
        help="Path to user profile YAML file (default: config/user_profile.yaml)"
    )
    parser.add_argument(
        "--days",
        type=int,
        default=5,
        help="Number of rotation days to plan (default: 5)"
    )
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in PlanMode],
        default=PlanMode.FULL_DAY.value,
        help="Plan all five slots or only lunch (default: full_day)"
    )
    parser.add_argument(
        "--location",
        type=str,
        default="default",
        help="Location label for price lookup (default: default)"
    )
    parser.add_argument(
        "--budget",
        type=float,
        help="Budget per plan day; in lunch_only mode defaults to the programme allocation"
    )
    parser.add_argument(
        "--constraint",
        action="append",
        default=[],
        help="Extra dietary constraint (repeatable), e.g. vegetarian, vegan, no_peanut, onion"
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Optional planner config YAML overriding caps, thresholds and surcharges"
    )
    parser.add_argument(
        "--live-prices",
        type=str,
        help="Optional JSON file of live prices merged over the fallback table"
    )
    parser.add_argument(
        "--catalog",
        type=str,
        help="Meal catalog JSON (default: bundled catalog)"
    )
    parser.add_argument(
        "--nutrition",
        type=str,
        help="Nutrition database JSON (default: bundled IFCT table)"
    )
    parser.add_argument(
        "--prices",
        type=str,
        help="Fallback price table JSON (default: bundled table)"
    )
    parser.add_argument(
        "--output",
        type=str,
        choices=["markdown", "json", "both"],
        default="markdown",
        help="Output format: markdown (default), json, or both"
    )
    parser.add_argument(
        "--output-file",
        type=str,
        help="Optional file path to save output (default: print to stdout)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log planner decisions to stderr"
    )
    return parser


def _write_outputs(result, output: str, output_file: Optional[str]):
    if output in ["markdown", "both"]:
        markdown_output = format_plan_markdown(result)
        if output_file:
            output_path = Path(output_file)
            if output == "both":
                output_path = output_path.with_suffix(".md")
            output_path.write_text(markdown_output)
            print(f"Markdown output saved to {output_path}", file=sys.stderr)
        else:
            print(markdown_output)

    if output in ["json", "both"]:
        json_output = format_plan_json_string(result, indent=2)
        if output_file:
            output_path = Path(output_file)
            if output == "both":
                output_path = output_path.with_suffix(".json")
            output_path.write_text(json_output)
            print(f"JSON output saved to {output_path}", file=sys.stderr)
        else:
            if output == "both":
                print("\n" + "=" * 80 + "\n", file=sys.stdout)
            print(json_output)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    profile_path = Path(args.profile)
    if not profile_path.exists():
        print(f"Error: User profile file not found: {profile_path}", file=sys.stderr)
        print(
            f"Hint: Copy config/user_profile.yaml.example to {profile_path} and customize it",
            file=sys.stderr,
        )
        return EXIT_INPUT_ERROR

    for label, path in (
        ("Planner config", args.config),
        ("Live prices", args.live_prices),
        ("Catalog", args.catalog),
        ("Nutrition database", args.nutrition),
        ("Price table", args.prices),
    ):
        if path and not Path(path).exists():
            print(f"Error: {label} file not found: {path}", file=sys.stderr)
            return EXIT_INPUT_ERROR

    try:
        print(f"Loading user profile from {profile_path}...", file=sys.stderr)
        profile = UserProfileLoader(str(profile_path)).load()
        config = PlannerConfigLoader(args.config).load() if args.config else PlannerConfig()

        nutrition_db = NutritionDatabase(args.nutrition)
        catalog = MealCatalog(nutrition_db, args.catalog)
        print(f"Found {len(catalog)} meal options", file=sys.stderr)

        live_prices = load_live_prices(args.live_prices) if args.live_prices else None
        provider = FallbackPriceProvider(args.prices, live_prices=live_prices)

        request = PlanRequest(
            rotation_days=args.days,
            mode=PlanMode(args.mode),
            dietary_constraints=frozenset(c.strip().lower() for c in args.constraint),
            location=args.location,
            budget_per_day=args.budget,
        )

        print("Planning meals...", file=sys.stderr)
        result = MealPlanner(catalog, provider, config).generate(profile, request)
    except (InvalidProfile, InvalidPlanRequest) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID_REQUEST
    except PlanningError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DATA_ERROR
    except (KeyError, ValueError, yaml.YAMLError) as e:
        print(f"Error: invalid input: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    _write_outputs(result, args.output, args.output_file)

    if not result.warnings:
        print("\n✅ Meal plan generated successfully!", file=sys.stderr)
    else:
        print("\n⚠️  Meal plan generated with warnings:", file=sys.stderr)
        for warning in result.warnings:
            print(f"   - {warning}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
