"""Profile-specific guidance appended to resolved results."""

from nutriscan.domain.nutrition import NutritionResult
from nutriscan.domain.profiles import ProfileMode

PROFILE_ADVICE: dict[ProfileMode, str] = {
    ProfileMode.CHILDREN: "Excellent for growing children's nutritional needs.",
    ProfileMode.PREGNANT: "Extra folic acid and iron recommended during pregnancy.",
    ProfileMode.ELDERLY: (
        "Prefer soft, easily digested portions that support bone and heart health."
    ),
    ProfileMode.WEIGHT_LOSS: (
        "Watch portion size and pair with fiber and protein to stay full longer."
    ),
    ProfileMode.ANEMIA: "Pair with vitamin C sources to enhance iron absorption.",
}

_HIGH_PROTEIN_GRAMS = 10
_LOW_CALORIES = 100


def augment(result: NutritionResult, profile: ProfileMode | None) -> NutritionResult:
    """Return a copy of the result with the profile advice appended once."""
    advice = PROFILE_ADVICE.get(profile) if profile is not None else None
    if advice is None or advice in result.profile_advice:
        return result.model_copy()
    existing = result.profile_advice.strip()
    combined = f"{existing} {advice}" if existing else advice
    return result.model_copy(update={"profile_advice": combined})


def baseline_advice(food_name: str, calories: float, protein: float) -> str:
    """Describe a database record in one sentence based on its macros."""
    if protein > _HIGH_PROTEIN_GRAMS:
        return f"{food_name} is a good source of protein with {protein:g}g per serving."
    if calories < _LOW_CALORIES:
        return (
            f"{food_name} is a low-calorie option with {calories:g} calories "
            "per serving."
        )
    return (
        f"{food_name} provides {calories:g} calories and {protein:g}g protein "
        "per serving."
    )
