"""Nutrition domain models."""

import math
from dataclasses import dataclass, fields


@dataclass(frozen=True)
class NutritionFacts:
    """Nutrition facts per 100g/100ml."""

    calories: float
    fat: float
    saturated_fat: float
    carbs: float
    sugar: float
    protein: float
    sodium: float
    fiber: float

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if math.isnan(value):
                raise ValueError(f"{item.name} must be a number")
            if value < 0:
                raise ValueError(f"{item.name} must not be negative")


@dataclass(frozen=True)
class NutritionScore:
    """Derived health score for a product."""

    score: int
    grade: str
    color: str


@dataclass(frozen=True)
class HealthInsights:
    """Positive aspects and warnings for a product."""

    positive: tuple[str, ...]
    warnings: tuple[str, ...]
