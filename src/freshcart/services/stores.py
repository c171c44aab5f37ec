"""Store ranking and nearby supermarket lookups."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Protocol

from freshcart.domain.geo import Coordinate, StoreRecord
from freshcart.services.geo import distance_km

PRICE_TIERS: dict[str, int] = {
    "Sheng Siong": 1,
    "Giant": 2,
    "FairPrice": 3,
    "Cold Storage": 4,
    "FairPrice Finest": 5,
}
DEFAULT_PRICE_TIER = 3

_logger = logging.getLogger(__name__)


class LookupFailure(Exception):  # noqa: N818
    """Raised when nearby stores cannot be retrieved."""


class StoreRepository(Protocol):
    """Read-only access to the supermarket catalog."""

    def list_stores(self) -> list[StoreRecord]:
        """Return every store in the catalog."""


class StoreLookup(Protocol):
    """Interface for finding stores around a coordinate."""

    async def find_nearby(
        self, coordinate: Coordinate, radius_km: float
    ) -> list[StoreRecord]:
        """Return stores within the radius with distances filled in."""


def price_tier(store_type: str) -> int:
    """Return the price tier for a chain, lower is cheaper."""
    return PRICE_TIERS.get(store_type, DEFAULT_PRICE_TIER)


def price_label(store_type: str) -> str:
    """Return a short price indicator for a chain."""
    tier = price_tier(store_type)
    if tier == 1:
        return "$ Budget"
    if tier == 2:  # noqa: PLR2004
        return "$$ Value"
    return "$$$"


def rank(
    candidates: Sequence[StoreRecord], origin: Coordinate, radius_km: float
) -> list[StoreRecord]:
    """Filter stores to the radius and sort them by distance.

    Distances are always measured from the coordinates; a distance supplied
    by the lookup may be rounded and is replaced.
    """
    measured = [
        replace(store, distance_km=distance_km(origin, store.coordinate))
        for store in candidates
    ]
    within = [store for store in measured if store.distance_km <= radius_km]
    return sorted(within, key=lambda store: store.distance_km)


def rank_by_price(candidates: Sequence[StoreRecord]) -> list[StoreRecord]:
    """Sort stores by price tier, then by distance."""

    def sort_key(store: StoreRecord) -> tuple[int, bool, float]:
        missing = store.distance_km is None
        return (price_tier(store.store_type), missing, store.distance_km or 0.0)

    return sorted(candidates, key=sort_key)


@dataclass
class CatalogStoreLookup(StoreLookup):
    """Nearby lookup computed locally over the store catalog."""

    repository: StoreRepository

    async def find_nearby(
        self, coordinate: Coordinate, radius_km: float
    ) -> list[StoreRecord]:
        """Measure every catalog store and keep those within the radius."""
        try:
            stores = self.repository.list_stores()
        except Exception as exc:
            raise LookupFailure("Failed to load supermarket catalog") from exc
        nearby = rank(stores, coordinate, radius_km)
        _logger.info(
            "Found %s of %s supermarkets within %skm",
            len(nearby),
            len(stores),
            radius_km,
        )
        return nearby


@dataclass
class StoreService:
    """Service answering nearby and cheapest-nearby store queries."""

    lookup: StoreLookup
    nearby_radius_km: float = 5.0
    cheapest_radius_km: float = 0.035

    async def nearby(
        self, origin: Coordinate, radius_km: float | None = None
    ) -> list[StoreRecord]:
        """Return stores around the origin, nearest first."""
        radius = self.nearby_radius_km if radius_km is None else radius_km
        stores = await self.lookup.find_nearby(origin, radius)
        return rank(stores, origin, radius)

    async def cheapest_nearby(self, origin: Coordinate) -> list[StoreRecord]:
        """Return stores within the tight radius, cheapest chain first."""
        stores = await self.lookup.find_nearby(origin, self.cheapest_radius_km)
        return rank_by_price(rank(stores, origin, self.cheapest_radius_km))
