"""Schema-validated deserialization of generative model responses."""

import json

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from nutriscan.domain.errors import NoIdentification, ParseFailed
from nutriscan.domain.nutrition import NutritionResult

_UNKNOWN_LABELS = {"", "unknown", "none", "n/a", "no food", "not food"}


class IdentificationPayload(BaseModel):
    """Structured output expected from identification prompts."""

    food_name: str | None = Field(
        default=None, validation_alias=AliasChoices("foodName", "food_name", "label")
    )
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


IDENTIFICATION_PROMPT = (
    "Identify the main food item in this image. "
    'Respond with a JSON object {"foodName": string or null, "confidence": number '
    "between 0 and 1}. Use a short common name such as \"banana\" or "
    '"chicken biryani". Use null for foodName if no food is visible.'
)

ESTIMATE_PROMPT = """You are a nutrition expert trained on ICMR (Indian Council of \
Medical Research) guidelines. Estimate the nutrition of one typical serving of \
"{label}". Write culturalNote in plain English; the listener speaks {language}.

Return ONLY a JSON object with this structure:
{{
  "foodName": "{label}",
  "confidence": 0.6,
  "servingBasis": "1 serving (approx. grams)",
  "calories": 0,
  "protein": 0,
  "carbs": 0,
  "fat": 0,
  "fiber": 0,
  "vitamins": [{{"name": "Vitamin C", "amount": 0, "unit": "mg", \
"dailyValuePercent": 0}}],
  "minerals": [{{"name": "Iron", "amount": 0, "unit": "mg", \
"dailyValuePercent": 0}}],
  "deficiencyRisks": [{{"nutrient": "Vitamin B12", "riskLevel": "low|medium|high", \
"reason": "short reason"}}],
  "profileAdvice": "one sentence of general advice",
  "culturalNote": "traditional context for this food, if any"
}}"""


def parse_identification(provider: str, raw_text: str | None) -> str:
    """Return the identified label from a model response."""
    document = _load_object(provider, raw_text)
    try:
        payload = IdentificationPayload.model_validate(document)
    except ValidationError as exc:
        raise ParseFailed(provider, f"identification schema mismatch: {exc}") from exc
    label = (payload.food_name or "").strip()
    if label.lower() in _UNKNOWN_LABELS:
        raise NoIdentification(provider, "model could not name the image content")
    return label


def parse_estimate(
    provider: str, raw_text: str | None, *, label: str, max_confidence: float
) -> NutritionResult:
    """Return an estimate with its confidence capped for generative sources."""
    document = _load_object(provider, raw_text)
    if not document.get("foodName"):
        document["foodName"] = label
    try:
        result = NutritionResult.model_validate(document)
    except ValidationError as exc:
        raise ParseFailed(provider, f"nutrition schema mismatch: {exc}") from exc
    confidence = min(result.confidence or max_confidence, max_confidence)
    return result.model_copy(update={"confidence": confidence})


def _load_object(provider: str, raw_text: str | None) -> dict[str, object]:
    text = _strip_fence((raw_text or "").strip())
    if not text:
        raise ParseFailed(provider, "empty response")
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseFailed(provider, f"response is not JSON: {exc.msg}") from exc
    if not isinstance(document, dict):
        raise ParseFailed(provider, "response is not a JSON object")
    return document


def _strip_fence(text: str) -> str:
    """Remove a single surrounding markdown code fence, if present."""
    if not (text.startswith("```") and text.endswith("```")):
        return text
    body = text[3:-3]
    first_line, _, rest = body.partition("\n")
    if first_line.strip().isalpha() or not first_line.strip():
        body = rest
    return body.strip()
