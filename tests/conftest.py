"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import pytest

from nutriscan.config import Settings
from nutriscan.containers import AppContainer
from nutriscan.domain.errors import NotFound, ProviderError, ProviderUnavailable
from nutriscan.domain.nutrition import DeficiencyRisk, NutrientEntry, NutritionResult
from nutriscan.services.pipeline import ResolutionPipeline
from nutriscan.services.speech import SpeechService


def make_result(**overrides: object) -> NutritionResult:
    """Build a plausible banana result, overriding selected fields."""
    values: dict[str, object] = {
        "food_name": "banana",
        "confidence": 0.85,
        "serving_basis": "100g",
        "calories": 89,
        "protein": 1.1,
        "carbs": 23,
        "fat": 0.3,
        "fiber": 2.6,
        "vitamins": [
            NutrientEntry(name="Vitamin C", amount=8.7, unit="mg"),
            NutrientEntry(name="Vitamin B6", amount=0.4, unit="mg"),
        ],
        "minerals": [
            NutrientEntry(name="Potassium", amount=358, unit="mg"),
            NutrientEntry(name="Magnesium", amount=27, unit="mg"),
        ],
        "deficiency_risks": [
            DeficiencyRisk(
                nutrient="Iron",
                risk_level="medium",
                reason="Bananas contain little iron",
            )
        ],
        "profile_advice": "banana is a low-calorie option with 89 calories per serving.",
    }
    values.update(overrides)
    return NutritionResult(**values)


@dataclass
class FakeIdentifier:
    """Identification provider returning a fixed label or raising."""

    name: str
    label: str | None = "banana"
    error: ProviderError | None = None
    available: bool = True
    delay: float = 0.0
    calls: int = 0

    def is_available(self) -> bool:
        return self.available

    async def identify(self, image: bytes) -> str:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        assert self.label is not None
        return self.label


@dataclass
class FakeLookup:
    """Lookup provider keyed by exact query string."""

    name: str
    records: dict[str, NutritionResult] = field(default_factory=dict)
    error: ProviderError | None = None
    available: bool = True
    queries: list[str] = field(default_factory=list)

    def is_available(self) -> bool:
        return self.available

    async def lookup(self, label: str) -> NutritionResult:
        self.queries.append(label)
        if self.error is not None:
            raise self.error
        if label not in self.records:
            raise NotFound(self.name, f"no record for {label}")
        return self.records[label]


@dataclass
class FakeEstimator:
    """Estimate provider returning a fixed result or raising."""

    name: str
    result: NutritionResult | None = None
    error: ProviderError | None = None
    available: bool = True
    calls: list[tuple[str, str]] = field(default_factory=list)

    def is_available(self) -> bool:
        return self.available

    async def estimate(self, label: str, language: str = "en") -> NutritionResult:
        self.calls.append((label, language))
        if self.error is not None:
            raise self.error
        if self.result is None:
            raise ProviderUnavailable(self.name, "no canned result")
        return self.result


@dataclass
class FakeTranslator:
    """Translator that tags text with the target language."""

    available: bool = True
    error: ProviderError | None = None
    requests: list[tuple[str, str]] = field(default_factory=list)

    def is_available(self) -> bool:
        return self.available

    async def translate(self, text: str, language_name: str) -> str:
        self.requests.append((text, language_name))
        if self.error is not None:
            raise self.error
        return f"[{language_name}] {text}"


@dataclass
class FakeSynthesizer:
    """Synthesizer that returns the spoken text as bytes."""

    available: bool = True
    error: ProviderError | None = None
    requests: list[tuple[str, str]] = field(default_factory=list)

    def is_available(self) -> bool:
        return self.available

    async def synthesize(self, text: str, voice: str) -> bytes:
        self.requests.append((text, voice))
        if self.error is not None:
            raise self.error
        return text.encode("utf-8")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        openai_api_key="openai-key",
        lovable_api_key="lovable-key",
        fatsecret_client_id="fs-id",
        fatsecret_client_secret="fs-secret",
        fdc_api_key="fdc-key",
        gemini_api_key="gemini-key",
    )


@pytest.fixture
def identifier() -> FakeIdentifier:
    return FakeIdentifier(name="lovable")


@pytest.fixture
def lookup() -> FakeLookup:
    return FakeLookup(name="fatsecret", records={"banana": make_result()})


@pytest.fixture
def estimator() -> FakeEstimator:
    return FakeEstimator(name="gemini")


@pytest.fixture
def synthesizer() -> FakeSynthesizer:
    return FakeSynthesizer()


@pytest.fixture
def container(
    settings: Settings,
    identifier: FakeIdentifier,
    lookup: FakeLookup,
    estimator: FakeEstimator,
    synthesizer: FakeSynthesizer,
) -> AppContainer:
    pipeline = ResolutionPipeline(
        identifiers=[identifier],
        lookups=[lookup],
        estimators=[estimator],
        timeout_seconds=1.0,
    )
    speech_service = SpeechService(
        translator=FakeTranslator(),
        synthesizer=synthesizer,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        pipeline=pipeline,
        speech_service=speech_service,
        close_resources=close_resources,
    )
