"""Supabase-backed supermarket catalog."""

from dataclasses import dataclass

from supabase import Client

from freshcart.domain.geo import Coordinate, StoreRecord
from freshcart.services.stores import StoreRepository

_COLUMNS = "id, name, address, latitude, longitude, type, phone, opening_hours"


@dataclass
class SupabaseStoreRepository(StoreRepository):
    """Reads supermarkets from the Supabase `supermarkets` table."""

    client: Client

    def list_stores(self) -> list[StoreRecord]:
        """Return every supermarket row."""
        response = self.client.table("supermarkets").select(_COLUMNS).execute()
        return [parse_store_row(row) for row in response.data or []]


def parse_store_row(row: dict[str, object]) -> StoreRecord:
    """Build a store record from a catalog or edge-function row."""
    distance = row.get("distance")
    return StoreRecord(
        id=str(row["id"]),
        name=str(row.get("name", "")),
        address=str(row.get("address", "")),
        coordinate=Coordinate(
            latitude=float(row["latitude"]),
            longitude=float(row["longitude"]),
        ),
        store_type=str(row.get("type", "")),
        distance_km=float(distance) if distance is not None else None,
        phone=row.get("phone"),
        opening_hours=row.get("opening_hours"),
    )
