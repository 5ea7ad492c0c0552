"""Nutrition lookup provider backed by USDA FoodData Central."""

from dataclasses import dataclass

import httpx

from nutriscan.adapters.fdc_client import FdcClient
from nutriscan.adapters.http_errors import provider_error_from_http
from nutriscan.domain.errors import NotFound, ProviderUnavailable
from nutriscan.domain.nutrition import NutrientEntry, NutritionResult
from nutriscan.services.advice import baseline_advice

_MACRO_IDS = {
    "protein": 1003,
    "fat": 1004,
    "carbs": 1005,
    "fiber": 1079,
}
# Foundation foods report Atwater energy instead of 1008.
_ENERGY_IDS = (1008, 2047, 2048)

_VITAMINS: dict[int, tuple[str, str]] = {
    1106: ("Vitamin A", "mcg"),
    1162: ("Vitamin C", "mg"),
    1114: ("Vitamin D", "mcg"),
    1178: ("Vitamin B12", "mcg"),
    1177: ("Folate", "mcg"),
}
_MINERALS: dict[int, tuple[str, str]] = {
    1089: ("Iron", "mg"),
    1087: ("Calcium", "mg"),
    1095: ("Zinc", "mg"),
    1090: ("Magnesium", "mg"),
    1092: ("Potassium", "mg"),
    1093: ("Sodium", "mg"),
}


@dataclass
class FdcLookupProvider:
    """Lookup provider that resolves a label to an FDC food record."""

    client: FdcClient | None
    name: str = "fdc"
    confidence: float = 0.85
    page_size: int = 5

    def is_available(self) -> bool:
        return self.client is not None

    async def lookup(self, label: str) -> NutritionResult:
        """Search FDC for the label and return the top match's nutrients."""
        if self.client is None:
            raise ProviderUnavailable(self.name, "credential not configured")
        try:
            search = await self.client.search_foods(label, page_size=self.page_size)
            foods = search.get("foods") or []
            if not foods:
                raise NotFound(self.name, f"no FDC match for {label!r}")
            payload = await self.client.get_food(int(foods[0]["fdcId"]))
            return self._to_result(payload, label)
        except httpx.HTTPError as exc:
            raise provider_error_from_http(self.name, exc) from exc
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise ProviderUnavailable(self.name, f"malformed response: {exc}") from exc

    def _to_result(self, payload: dict[str, object], label: str) -> NutritionResult:
        nutrients = _index_nutrients(payload.get("foodNutrients") or [])
        food_name = str(payload.get("description") or label)
        calories = next(
            (nutrients[nid][0] for nid in _ENERGY_IDS if nid in nutrients), 0.0
        )
        protein = nutrients.get(_MACRO_IDS["protein"], (0.0, ""))[0]
        return NutritionResult(
            food_name=food_name,
            confidence=self.confidence,
            serving_basis="100g",
            calories=calories,
            protein=protein,
            carbs=nutrients.get(_MACRO_IDS["carbs"], (0.0, ""))[0],
            fat=nutrients.get(_MACRO_IDS["fat"], (0.0, ""))[0],
            fiber=nutrients.get(_MACRO_IDS["fiber"], (0.0, ""))[0],
            vitamins=_entries(nutrients, _VITAMINS),
            minerals=_entries(nutrients, _MINERALS),
            profile_advice=baseline_advice(food_name, calories, protein),
        )


def _index_nutrients(
    food_nutrients: list[dict[str, object]],
) -> dict[int, tuple[float, str]]:
    """Map nutrient id to (amount, unit) for both search and detail shapes."""
    values: dict[int, tuple[float, str]] = {}
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient_info.get("id") or nutrient.get("nutrientId")
        amount = nutrient.get("amount", nutrient.get("value"))
        if nutrient_id is None or amount is None:
            continue
        unit = nutrient_info.get("unitName") or nutrient.get("unitName") or ""
        values[int(nutrient_id)] = (float(amount), str(unit))
    return values


def _entries(
    nutrients: dict[int, tuple[float, str]], table: dict[int, tuple[str, str]]
) -> list[NutrientEntry]:
    entries: list[NutrientEntry] = []
    for nutrient_id, (name, default_unit) in table.items():
        if nutrient_id not in nutrients:
            continue
        amount, unit = nutrients[nutrient_id]
        entries.append(
            NutrientEntry(name=name, amount=amount, unit=_unit(unit, default_unit))
        )
    return entries


def _unit(raw: str, default: str) -> str:
    unit = raw.strip().lower()
    if unit in {"ug", "µg"}:
        return "mcg"
    return unit or default
