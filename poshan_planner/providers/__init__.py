"""Provider abstraction layer for ingredient price lookup.

This package decouples the cost estimator and planner from concrete
price sources (bundled fallback table vs. live price files).
"""

from poshan_planner.providers.price_provider import PriceProvider
from poshan_planner.providers.fallback_provider import (
    FallbackPriceProvider,
    load_live_prices,
)

__all__ = [
    "PriceProvider",
    "FallbackPriceProvider",
    "load_live_prices",
]
