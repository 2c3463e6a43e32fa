"""Abstract base class for ingredient price providers.

The planner depends ONLY on this interface. A provider hands out an
immutable snapshot of prices for a location; the planner never performs
network I/O itself, so any live fetching happens before ``snapshot`` is
called and its result is merged into the snapshot.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable

from poshan_planner.data_layer.exceptions import PriceNotFoundError
from poshan_planner.data_layer.models import PriceEntry


class PriceProvider(ABC):
    """Abstraction for ingredient price lookup."""

    @abstractmethod
    def snapshot(self, location: str) -> Dict[str, PriceEntry]:
        """Return a price snapshot for *location*.

        The returned mapping is a fresh object keyed by ingredient key.
        Callers treat it as read-only; a newer snapshot replaces it
        wholesale.

        Args:
            location: Location label (e.g. "default", "pune").

        Returns:
            Mapping of ingredient key to PriceEntry.
        """
        ...

    def resolve_all(self, ingredient_keys: Iterable[str], location: str) -> Dict[str, PriceEntry]:
        """Take a snapshot and check that every required ingredient is priced.

        Must raise on failure (fail-fast semantics), so that no missing price
        is discovered halfway through a plan.

        Args:
            ingredient_keys: All ingredient keys that will be costed.
            location: Location label passed to :meth:`snapshot`.

        Returns:
            The snapshot.

        Raises:
            PriceNotFoundError: For the first (sorted) key without a price.
        """
        prices = self.snapshot(location)
        for key in sorted(set(ingredient_keys)):
            if key not in prices:
                raise PriceNotFoundError(key)
        return prices
