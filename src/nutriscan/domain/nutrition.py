"""Nutrition result models shared by providers and the API."""

from enum import StrEnum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class RiskLevel(StrEnum):
    """Severity of a nutrient deficiency risk."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False
    )


class NutrientEntry(_CamelModel):
    """Single vitamin or mineral amount."""

    name: str
    amount: float = 0.0
    unit: str = ""
    daily_value_percent: float | None = Field(
        default=None,
        serialization_alias="dailyValuePercent",
        validation_alias=AliasChoices(
            "dailyValuePercent", "daily_value_percent", "dailyValue"
        ),
    )

    @field_validator("amount", mode="before")
    @classmethod
    def _null_amount(cls, value: object) -> object:
        return 0.0 if value is None else value


class DeficiencyRisk(_CamelModel):
    """Nutrient the food leaves the eater at risk of lacking."""

    nutrient: str
    risk_level: RiskLevel = Field(
        default=RiskLevel.MEDIUM,
        serialization_alias="riskLevel",
        validation_alias=AliasChoices("riskLevel", "risk_level", "risk"),
    )
    reason: str = ""

    @field_validator("risk_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class NutritionResult(_CamelModel):
    """Canonical structured output of a successful resolution.

    Macro fields always carry a number; missing or null values from a
    provider become 0 so consumers never branch on absent fields.
    """

    food_name: str
    confidence: float = 0.0
    serving_basis: str = "1 serving"
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    vitamins: list[NutrientEntry] = Field(default_factory=list)
    minerals: list[NutrientEntry] = Field(default_factory=list)
    deficiency_risks: list[DeficiencyRisk] = Field(
        default_factory=list,
        serialization_alias="deficiencyRisks",
        validation_alias=AliasChoices(
            "deficiencyRisks", "deficiency_risks", "deficiencyRisk"
        ),
    )
    profile_advice: str = ""
    cultural_note: str | None = Field(
        default=None,
        serialization_alias="culturalNote",
        validation_alias=AliasChoices(
            "culturalNote", "cultural_note", "culturalContext"
        ),
    )

    @field_validator(
        "confidence", "calories", "protein", "carbs", "fat", "fiber", mode="before"
    )
    @classmethod
    def _null_number(cls, value: object) -> object:
        return 0.0 if value is None else value

    @field_validator("vitamins", "minerals", "deficiency_risks", mode="before")
    @classmethod
    def _null_list(cls, value: object) -> object:
        return [] if value is None else value

    @field_validator("profile_advice", mode="before")
    @classmethod
    def _null_text(cls, value: object) -> object:
        return "" if value is None else value

    def to_payload(self) -> dict[str, object]:
        """Serialize to the camelCase JSON shape returned by the API."""
        return self.model_dump(mode="json", by_alias=True)
