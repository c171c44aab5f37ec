"""Nutrition scoring and health insights."""

from freshcart.domain.nutrition import HealthInsights, NutritionFacts, NutritionScore

HIGH_CALORIES = 400
HIGH_SUGAR = 20
HIGH_SODIUM = 1.5
HIGH_SATURATED_FAT = 10
HIGH_PROTEIN = 10
HIGH_FIBER = 5
LOW_CALORIES = 200
LOW_SODIUM = 0.5
LOW_SUGAR = 5

_GRADES = (
    (85, "A", "green"),
    (70, "B", "yellow"),
    (55, "C", "orange"),
)


def score(facts: NutritionFacts | None) -> NutritionScore:
    """Score nutrition facts on a 0-100 scale with a letter grade."""
    if facts is None:
        return NutritionScore(score=0, grade="N/A", color="gray")

    value = 100
    if facts.calories > HIGH_CALORIES:
        value -= 20
    if facts.sugar > HIGH_SUGAR:
        value -= 15
    if facts.sodium > HIGH_SODIUM:
        value -= 15
    if facts.saturated_fat > HIGH_SATURATED_FAT:
        value -= 10

    if facts.protein > HIGH_PROTEIN:
        value += 5
    if facts.fiber > HIGH_FIBER:
        value += 5

    value = max(0, min(100, value))
    for threshold, grade, color in _GRADES:
        if value >= threshold:
            return NutritionScore(score=value, grade=grade, color=color)
    return NutritionScore(score=value, grade="D", color="red")


def insights(facts: NutritionFacts | None) -> HealthInsights:
    """List positive aspects and warnings in a fixed order."""
    if facts is None:
        return HealthInsights(positive=(), warnings=())

    positive: list[str] = []
    if facts.protein > HIGH_PROTEIN:
        positive.append("High in protein")
    if facts.fiber > HIGH_FIBER:
        positive.append("Good source of fiber")
    if facts.calories < LOW_CALORIES:
        positive.append("Low calorie option")
    if facts.sodium < LOW_SODIUM:
        positive.append("Low sodium")
    if facts.sugar < LOW_SUGAR:
        positive.append("Low sugar")

    # Values between the low and high bands trigger neither list.
    warnings: list[str] = []
    if facts.calories > HIGH_CALORIES:
        warnings.append("High in calories")
    if facts.sugar > HIGH_SUGAR:
        warnings.append("High in sugar")
    if facts.sodium > HIGH_SODIUM:
        warnings.append("High in sodium")
    if facts.saturated_fat > HIGH_SATURATED_FAT:
        warnings.append("High in saturated fat")

    return HealthInsights(positive=tuple(positive), warnings=tuple(warnings))
