"""Price provider backed by the bundled fallback price table.

The fallback table prices ingredients through categories ("dal", "veg",
...) so a new ingredient only needs a category mapping. Live prices,
collected elsewhere, can be layered over it per location.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from poshan_planner.data_layer.exceptions import CatalogError
from poshan_planner.data_layer.models import PriceEntry
from poshan_planner.data_layer.nutrition_db import DATA_DIR
from poshan_planner.providers.price_provider import PriceProvider


logger = logging.getLogger(__name__)

DEFAULT_PRICES_PATH = DATA_DIR / "fallback_prices.json"

VALID_UNITS = ("kg", "litre", "piece")


def parse_price_entry(
    ingredient_key: str,
    entry_data: Dict[str, Any],
    source: str,
    timestamp: Optional[str] = None,
    require_piece_weight: bool = True,
) -> PriceEntry:
    """Parse one price dictionary into a PriceEntry.

    Args:
        ingredient_key: Ingredient the price applies to
        entry_data: Dictionary with unit_price, unit and optional grams_per_piece
        source: Source label stored on the entry
        timestamp: Optional snapshot timestamp
        require_piece_weight: If False, a piece price may omit grams_per_piece
            (live overrides inherit it from the fallback table)

    Raises:
        CatalogError: If the unit is unknown, the price is not positive, or a
            piece price lacks a required grams_per_piece
    """
    unit = str(entry_data.get("unit", "kg")).lower()
    if unit not in VALID_UNITS:
        raise CatalogError(f"Unknown price unit '{unit}' for '{ingredient_key}'")
    unit_price = float(entry_data["unit_price"])
    if unit_price <= 0:
        raise CatalogError(f"Non-positive price for '{ingredient_key}': {unit_price}")
    grams_per_piece = entry_data.get("grams_per_piece")
    if unit == "piece" and not grams_per_piece and require_piece_weight:
        raise CatalogError(f"Piece price for '{ingredient_key}' needs grams_per_piece")
    return PriceEntry(
        ingredient_key=ingredient_key,
        unit_price=unit_price,
        unit=unit,
        source=entry_data.get("source", source),
        timestamp=entry_data.get("timestamp", timestamp),
        grams_per_piece=float(grams_per_piece) if grams_per_piece else None,
    )


def load_live_prices(json_path: str) -> Dict[str, Dict[str, PriceEntry]]:
    """Load a live price file into per-location override tables.

    Expected shape::

        {"location": "pune", "timestamp": "...", "prices": {"rice": {"unit_price": 90, "unit": "kg"}}}

    or a list of such objects for several locations. A piece price without
    ``grams_per_piece`` is completed from the fallback table when the
    provider merges it.
    """
    with open(json_path, "r") as f:
        data = json.load(f)

    documents = data if isinstance(data, list) else [data]
    overrides: Dict[str, Dict[str, PriceEntry]] = {}
    for document in documents:
        location = str(document.get("location", "default"))
        timestamp = document.get("timestamp")
        table = overrides.setdefault(location, {})
        for key, entry_data in document.get("prices", {}).items():
            key = key.strip().lower()
            table[key] = parse_price_entry(
                key, entry_data, "live", timestamp, require_piece_weight=False
            )
    return overrides


class FallbackPriceProvider(PriceProvider):
    """Provider serving the fallback table, optionally overlaid with live prices.

    All data is loaded when the provider is constructed; :meth:`snapshot`
    only copies and merges in-memory tables.
    """

    def __init__(
        self,
        json_path: Optional[str] = None,
        live_prices: Optional[Dict[str, Dict[str, PriceEntry]]] = None,
    ) -> None:
        self.json_path = Path(json_path) if json_path else DEFAULT_PRICES_PATH
        self._live_prices = live_prices or {}
        self._fallback: Dict[str, PriceEntry] = {}
        self.currency = "INR"
        self._load_fallback()

    def _load_fallback(self):
        with open(self.json_path, "r") as f:
            data = json.load(f)

        self.currency = data.get("currency", self.currency)
        source = data.get("source", "fallback")
        categories = data.get("categories", {})
        for key, category in data.get("ingredients", {}).items():
            if category not in categories:
                raise CatalogError(f"Ingredient '{key}' maps to unknown price category '{category}'")
            self._fallback[key.strip().lower()] = parse_price_entry(
                key.strip().lower(), categories[category], source
            )

    def snapshot(self, location: str) -> Dict[str, PriceEntry]:
        """Fallback prices merged with live overrides for *location*."""
        prices = dict(self._fallback)
        overrides = self._live_prices.get(location, {})
        for key, entry in overrides.items():
            if entry.unit == "piece" and not entry.grams_per_piece:
                base = self._fallback.get(key)
                if base is None or not base.grams_per_piece:
                    raise CatalogError(
                        f"Live piece price for '{key}' needs grams_per_piece"
                    )
                entry = PriceEntry(
                    ingredient_key=key,
                    unit_price=entry.unit_price,
                    unit=entry.unit,
                    source=entry.source,
                    timestamp=entry.timestamp,
                    grams_per_piece=base.grams_per_piece,
                )
            prices[key] = entry
        if overrides:
            logger.info("Applied %d live price overrides for %s", len(overrides), location)
        return prices
