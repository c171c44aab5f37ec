"""Models for product identification results."""

from datetime import datetime

from pydantic import BaseModel, Field

from freshcart.domain.nutrition import NutritionFacts


class NutritionExtract(BaseModel):
    """Nutrition facts per 100g/100ml as returned by the model."""

    calories: float = Field(ge=0.0)
    fat: float = Field(ge=0.0)
    saturated_fat: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    sugar: float = Field(ge=0.0)
    protein: float = Field(ge=0.0)
    sodium: float = Field(ge=0.0)
    fiber: float = Field(ge=0.0)

    def to_facts(self) -> NutritionFacts:
        return NutritionFacts(**self.model_dump())


class ProductExtract(BaseModel):
    """Structured output for product identification."""

    name: str
    brand: str
    category: str
    price: str
    nutrition: NutritionExtract


class ScannedProduct(BaseModel):
    """Identified product attached to a scan."""

    name: str
    brand: str
    category: str
    price: str
    nutrition: NutritionExtract | None
    barcode: str
    scan_location: str
    scanned_at: datetime
    confidence: int | None = Field(default=None, ge=0, le=100)

    def nutrition_facts(self) -> NutritionFacts | None:
        """Return nutrition as a domain value, if present."""
        if self.nutrition is None:
            return None
        return self.nutrition.to_facts()
