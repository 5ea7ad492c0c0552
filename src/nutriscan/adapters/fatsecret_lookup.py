"""Nutrition lookup provider backed by the FatSecret food database."""

from dataclasses import dataclass

import httpx

from nutriscan.adapters.fatsecret_client import FatSecretClient
from nutriscan.adapters.http_errors import provider_error_from_http
from nutriscan.domain.errors import NotFound, ProviderUnavailable
from nutriscan.domain.nutrition import NutrientEntry, NutritionResult
from nutriscan.services.advice import baseline_advice

_VITAMINS = (
    ("vitamin_a", "Vitamin A", "mcg"),
    ("vitamin_c", "Vitamin C", "mg"),
    ("vitamin_d", "Vitamin D", "mcg"),
)
_MINERALS = (
    ("iron", "Iron", "mg"),
    ("calcium", "Calcium", "mg"),
    ("potassium", "Potassium", "mg"),
    ("sodium", "Sodium", "mg"),
)


@dataclass
class FatSecretLookupProvider:
    """Lookup provider that resolves a label to a FatSecret food serving."""

    client: FatSecretClient | None
    name: str = "fatsecret"
    confidence: float = 0.85

    def is_available(self) -> bool:
        return self.client is not None

    async def lookup(self, label: str) -> NutritionResult:
        """Search FatSecret for the label and return its default serving."""
        if self.client is None:
            raise ProviderUnavailable(self.name, "credential not configured")
        try:
            token = await self.client.fetch_token()
            search = await self.client.search_foods(token, label)
            if "error" in search:
                raise ProviderUnavailable(self.name, f"API error: {search['error']}")
            foods = _as_list((search.get("foods") or {}).get("food"))
            if not foods:
                raise NotFound(self.name, f"no FatSecret match for {label!r}")
            detail = await self.client.get_food(token, str(foods[0]["food_id"]))
            return self._to_result(detail.get("food") or {}, label)
        except httpx.HTTPError as exc:
            raise provider_error_from_http(self.name, exc) from exc
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise ProviderUnavailable(self.name, f"malformed response: {exc}") from exc

    def _to_result(self, food: dict[str, object], label: str) -> NutritionResult:
        servings = _as_list((food.get("servings") or {}).get("serving"))
        if not servings:
            raise NotFound(self.name, f"no servings listed for {label!r}")
        serving = next(
            (item for item in servings if str(item.get("is_default")) == "1"),
            servings[0],
        )
        food_name = str(food.get("food_name") or label)
        calories = _number(serving.get("calories"))
        protein = _number(serving.get("protein"))
        return NutritionResult(
            food_name=food_name,
            confidence=self.confidence,
            serving_basis=str(serving.get("serving_description") or "1 serving"),
            calories=calories,
            protein=protein,
            carbs=_number(serving.get("carbohydrate")),
            fat=_number(serving.get("fat")),
            fiber=_number(serving.get("fiber")),
            vitamins=_entries(serving, _VITAMINS),
            minerals=_entries(serving, _MINERALS),
            profile_advice=baseline_advice(food_name, calories, protein),
        )


def _as_list(value: object) -> list[dict[str, object]]:
    """FatSecret returns a bare object instead of a list for single results."""
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    return list(value)


def _number(value: object) -> float:
    if value in (None, ""):
        return 0.0
    return float(value)


def _entries(
    serving: dict[str, object], fields: tuple[tuple[str, str, str], ...]
) -> list[NutrientEntry]:
    return [
        NutrientEntry(name=name, amount=_number(serving.get(key)), unit=unit)
        for key, name, unit in fields
        if serving.get(key) not in (None, "")
    ]
