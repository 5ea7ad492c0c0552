"""Spoken summary composition for resolved results."""

from nutriscan.domain.nutrition import NutrientEntry, NutritionResult
from nutriscan.domain.profiles import ProfileMode

SPOKEN_PROFILE_TIPS: dict[ProfileMode, str] = {
    ProfileMode.CHILDREN: (
        "This food provides essential nutrients for healthy growth and development."
    ),
    ProfileMode.PREGNANT: (
        "Good nutritional choice supporting both maternal and fetal health."
    ),
    ProfileMode.ELDERLY: (
        "Suitable for maintaining health and vitality in older adults."
    ),
    ProfileMode.WEIGHT_LOSS: "This fits well into a balanced weight management plan.",
    ProfileMode.ANEMIA: "Contains nutrients that help prevent anemia and boost energy.",
}
DEFAULT_PROFILE_TIP = "Nutritional analysis complete."
BALANCED_CHOICE = "This appears to be a nutritionally balanced choice."

_MAX_LISTED = 3


def build_summary(result: NutritionResult, profile: ProfileMode | None) -> str:
    """Compose the sentence sequence handed to speech synthesis."""
    sentences = [
        f"I found {result.food_name}.",
        (
            f"It contains {_amount(result.calories)} calories and "
            f"{_amount(result.protein)} grams of protein."
        ),
    ]
    if result.vitamins:
        sentences.append(f"Key vitamins: {_list_entries(result.vitamins)}.")
    if result.minerals:
        sentences.append(f"Key minerals: {_list_entries(result.minerals)}.")
    sentences.append(_profile_sentence(result, profile))
    sentences.append(_risk_sentence(result))
    return " ".join(sentences)


def _profile_sentence(result: NutritionResult, profile: ProfileMode | None) -> str:
    advice = result.profile_advice.strip()
    if advice:
        return advice
    if profile is None:
        return DEFAULT_PROFILE_TIP
    return SPOKEN_PROFILE_TIPS.get(profile, DEFAULT_PROFILE_TIP)


def _risk_sentence(result: NutritionResult) -> str:
    if not result.deficiency_risks:
        return BALANCED_CHOICE
    risk = result.deficiency_risks[0]
    reason = risk.reason.strip()
    if reason:
        if not reason.endswith((".", "!", "?")):
            reason = f"{reason}."
        return f"Please note: {reason}"
    return f"Please note: {risk.risk_level} risk of {risk.nutrient} deficiency."


def _list_entries(entries: list[NutrientEntry]) -> str:
    return ", ".join(
        f"{entry.name} {_amount(entry.amount)} {entry.unit}".rstrip()
        for entry in entries[:_MAX_LISTED]
    )


def _amount(value: float) -> str:
    return f"{round(value, 1):g}"
