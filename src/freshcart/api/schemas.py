"""Request and response models for the HTTP API."""

from urllib.parse import quote_plus

from pydantic import BaseModel, ConfigDict, Field

from freshcart.domain.geo import Coordinate, StoreRecord
from freshcart.domain.nutrition import HealthInsights, NutritionFacts, NutritionScore
from freshcart.services.geo import round_distance
from freshcart.services.stores import price_label, price_tier


class CoordinateRequest(BaseModel):
    """A coordinate posted by the client."""

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)

    def to_coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


class NearbyRequest(CoordinateRequest):
    radius_km: float | None = Field(default=None, ge=0.0)


class ProximityRequest(CoordinateRequest):
    session_id: str = Field(min_length=1)


class NutritionFactsPayload(BaseModel):
    """Nutrition facts per 100g/100ml."""

    model_config = ConfigDict(populate_by_name=True)

    calories: float = Field(ge=0.0)
    fat: float = Field(default=0.0, ge=0.0)
    saturated_fat: float = Field(default=0.0, ge=0.0, alias="saturatedFat")
    carbs: float = Field(default=0.0, ge=0.0)
    sugar: float = Field(default=0.0, ge=0.0)
    protein: float = Field(default=0.0, ge=0.0)
    sodium: float = Field(default=0.0, ge=0.0)
    fiber: float = Field(default=0.0, ge=0.0)

    def to_facts(self) -> NutritionFacts:
        return NutritionFacts(**self.model_dump())


class IdentifyRequest(BaseModel):
    barcode: str | None = None
    image_base64: str | None = None


def store_payload(store: StoreRecord) -> dict[str, object]:
    """Serialize a store for display with a rounded distance."""
    return {
        "id": store.id,
        "name": store.name,
        "address": store.address,
        "type": store.store_type,
        "latitude": store.coordinate.latitude,
        "longitude": store.coordinate.longitude,
        "distance_km": (
            round_distance(store.distance_km) if store.distance_km is not None else None
        ),
        "phone": store.phone,
        "opening_hours": store.opening_hours,
        "price_tier": price_tier(store.store_type),
        "price_label": price_label(store.store_type),
        "maps_url": maps_url(store),
    }


def maps_url(store: StoreRecord) -> str:
    """Return a Google Maps search link for directions."""
    query = quote_plus(f"{store.name}, {store.address}")
    return f"https://www.google.com/maps/search/?api=1&query={query}"


def nutrition_payload(
    score: NutritionScore, insights: HealthInsights
) -> dict[str, object]:
    return {
        "score": score.score,
        "grade": score.grade,
        "color": score.color,
        "positive": list(insights.positive),
        "warnings": list(insights.warnings),
    }
