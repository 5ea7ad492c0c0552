"""Sanity gate between a raw provider result and acceptance."""

import math

from nutriscan.domain.nutrition import NutritionResult


def validate(candidate: NutritionResult) -> bool:
    """Return True when a candidate looks like a real answer.

    Catches empty or garbage parses from text-based providers. It does not
    audit nutritional accuracy.
    """
    if not candidate.food_name.strip():
        return False
    macros = (candidate.calories, candidate.protein, candidate.carbs, candidate.fat)
    numbers = [*macros, candidate.fiber, candidate.confidence]
    numbers.extend(entry.amount for entry in candidate.vitamins)
    numbers.extend(entry.amount for entry in candidate.minerals)
    if not all(math.isfinite(value) for value in numbers):
        return False
    if all(value == 0 for value in macros):
        return False
    if any(value < 0 for value in numbers):
        return False
    if candidate.confidence > 1:
        return False
    return not (
        not candidate.vitamins and not candidate.minerals and candidate.calories == 0
    )
