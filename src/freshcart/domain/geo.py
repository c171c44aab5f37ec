"""Geographic domain models."""

from dataclasses import dataclass

MAX_LATITUDE = 90.0
MAX_LONGITUDE = 180.0


@dataclass(frozen=True)
class Coordinate:
    """A point on Earth in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -MAX_LATITUDE <= self.latitude <= MAX_LATITUDE:
            raise ValueError(f"Latitude out of range: {self.latitude}")
        if not -MAX_LONGITUDE <= self.longitude <= MAX_LONGITUDE:
            raise ValueError(f"Longitude out of range: {self.longitude}")


@dataclass(frozen=True)
class StoreRecord:
    """Supermarket entry from the read-only catalog."""

    id: str
    name: str
    address: str
    coordinate: Coordinate
    store_type: str
    distance_km: float | None = None
    phone: str | None = None
    opening_hours: str | None = None
