"""Tests for the resolution pipeline."""

import asyncio

import pytest

from nutriscan.domain.errors import (
    IdentificationFailed,
    NoIdentification,
    NutritionUnavailable,
    ParseFailed,
    ProviderUnavailable,
)
from nutriscan.domain.pipeline import Capability
from nutriscan.domain.profiles import LanguageTag, ProfileMode
from nutriscan.services.advice import PROFILE_ADVICE
from nutriscan.services.pipeline import ResolutionPipeline, label_variants
from nutriscan.services.summary import build_summary
from nutriscan.services.validation import validate
from tests.conftest import FakeEstimator, FakeIdentifier, FakeLookup, make_result


def test_priority_order_is_respected() -> None:
    first = FakeIdentifier(
        name="lovable", error=ProviderUnavailable("lovable", "quota exceeded")
    )
    second = FakeIdentifier(name="openai", label="banana")
    pipeline = ResolutionPipeline(
        identifiers=[first, second],
        lookups=[FakeLookup(name="fatsecret", records={"banana": make_result()})],
    )

    resolution = asyncio.run(pipeline.resolve_food(b"img", None))

    names = [attempt.provider_name for attempt in resolution.attempts]
    assert names[:2] == ["lovable", "openai"]
    assert resolution.attempts[0].error_kind == "ProviderUnavailable"
    assert resolution.attempts[1].succeeded
    assert resolution.result.food_name == "banana"


def test_identification_failure_skips_nutrition_providers() -> None:
    lookup = FakeLookup(name="fatsecret", records={"banana": make_result()})
    estimator = FakeEstimator(name="gemini", result=make_result())
    pipeline = ResolutionPipeline(
        identifiers=[
            FakeIdentifier(
                name="lovable", error=ProviderUnavailable("lovable", "unauthorized")
            ),
            FakeIdentifier(name="openai", error=NoIdentification("openai", "blurry")),
        ],
        lookups=[lookup],
        estimators=[estimator],
    )

    with pytest.raises(IdentificationFailed) as excinfo:
        asyncio.run(pipeline.resolve_food(b"img", ProfileMode.ANEMIA))

    attempts = excinfo.value.attempts
    assert [attempt.error_kind for attempt in attempts] == [
        "ProviderUnavailable",
        "NoIdentification",
    ]
    assert all(a.capability is Capability.IDENTIFICATION for a in attempts)
    assert lookup.queries == []
    assert estimator.calls == []


def test_unavailable_provider_is_skipped_without_a_call() -> None:
    skipped = FakeIdentifier(name="lovable", available=False)
    used = FakeIdentifier(name="openai")
    pipeline = ResolutionPipeline(
        identifiers=[skipped, used],
        lookups=[FakeLookup(name="fdc", records={"banana": make_result()})],
    )

    resolution = asyncio.run(pipeline.resolve_food(b"img", None))

    assert skipped.calls == 0
    assert used.calls == 1
    assert resolution.attempts[0].error_kind == "ProviderUnavailable"


def test_plural_variant_resolves_singular_label() -> None:
    lookup = FakeLookup(
        name="fdc", records={"bananas": make_result(food_name="Bananas, raw")}
    )
    pipeline = ResolutionPipeline(
        identifiers=[FakeIdentifier(name="openai", label="banana")],
        lookups=[lookup],
    )

    resolution = asyncio.run(pipeline.resolve_food(b"img", None))

    assert lookup.queries == ["banana", "bananas"]
    lookup_attempts = [
        a for a in resolution.attempts if a.capability is Capability.LOOKUP
    ]
    assert [(a.query, a.succeeded) for a in lookup_attempts] == [
        ("banana", False),
        ("bananas", True),
    ]
    assert resolution.result.food_name == "Bananas, raw"


def test_unavailable_lookup_moves_to_next_provider_without_variants() -> None:
    down = FakeLookup(name="fatsecret", error=ProviderUnavailable("fatsecret", "500"))
    backup = FakeLookup(name="fdc", records={"banana": make_result()})
    pipeline = ResolutionPipeline(
        identifiers=[FakeIdentifier(name="openai")], lookups=[down, backup]
    )

    resolution = asyncio.run(pipeline.resolve_food(b"img", None))

    assert down.queries == ["banana"]
    assert backup.queries == ["banana"]
    assert resolution.result.food_name == "banana"


def test_rejected_lookup_falls_through_to_estimate() -> None:
    garbage = make_result(calories=0, protein=0, carbs=0, fat=0)
    estimate = make_result(food_name="banana", confidence=0.5)
    lookup = FakeLookup(name="fatsecret", records={"banana": garbage})
    estimator = FakeEstimator(name="gemini", result=estimate)
    pipeline = ResolutionPipeline(
        identifiers=[FakeIdentifier(name="openai")],
        lookups=[lookup],
        estimators=[estimator],
    )

    resolution = asyncio.run(
        pipeline.resolve_food(b"img", None, language=LanguageTag.HI)
    )

    assert lookup.queries == ["banana"]
    assert estimator.calls == [("banana", "hi")]
    kinds = [(a.provider_name, a.error_kind) for a in resolution.attempts]
    assert ("fatsecret", "Rejected") in kinds
    assert resolution.result.confidence == 0.5


def test_every_variant_miss_falls_back_to_estimators_in_order() -> None:
    lookup = FakeLookup(name="fdc")
    failing = FakeEstimator(name="gemini", error=ParseFailed("gemini", "not json"))
    working = FakeEstimator(name="openai", result=make_result(confidence=0.6))
    pipeline = ResolutionPipeline(
        identifiers=[FakeIdentifier(name="openai", label="apple")],
        lookups=[lookup],
        estimators=[failing, working],
    )

    resolution = asyncio.run(pipeline.resolve_food(b"img", None))

    assert lookup.queries == ["apple", "apples", "raw apple", "fresh apple"]
    estimate_attempts = [
        (a.provider_name, a.error_kind)
        for a in resolution.attempts
        if a.capability is Capability.ESTIMATE
    ]
    assert estimate_attempts == [("gemini", "ParseFailed"), ("openai", None)]


def test_nutrition_unavailable_carries_label_and_never_fabricates() -> None:
    rejected = make_result(food_name="", calories=0)
    pipeline = ResolutionPipeline(
        identifiers=[FakeIdentifier(name="openai", label="dal")],
        lookups=[FakeLookup(name="fatsecret")],
        estimators=[FakeEstimator(name="gemini", result=rejected)],
    )

    with pytest.raises(NutritionUnavailable) as excinfo:
        asyncio.run(pipeline.resolve_food(b"img", ProfileMode.CHILDREN))

    assert excinfo.value.label == "dal"
    assert excinfo.value.attempts[-1].error_kind == "Rejected"


def test_slow_provider_times_out_as_unavailable() -> None:
    slow = FakeIdentifier(name="lovable", delay=5)
    pipeline = ResolutionPipeline(
        identifiers=[slow, FakeIdentifier(name="openai")],
        lookups=[FakeLookup(name="fdc", records={"banana": make_result()})],
        timeout_seconds=0.01,
    )

    resolution = asyncio.run(pipeline.resolve_food(b"img", None))

    assert resolution.attempts[0].provider_name == "lovable"
    assert resolution.attempts[0].error_kind == "ProviderUnavailable"
    assert resolution.result.food_name == "banana"


def test_cancellation_propagates_without_partial_result() -> None:
    slow = FakeIdentifier(name="lovable", delay=5)
    pipeline = ResolutionPipeline(identifiers=[slow], timeout_seconds=10)

    async def run() -> None:
        task = asyncio.create_task(pipeline.resolve_food(b"img", None))
        await asyncio.sleep(0.01)
        task.cancel()
        await task

    with pytest.raises(asyncio.CancelledError):
        asyncio.run(run())
    assert slow.calls == 1


def test_banana_scenario_end_to_end() -> None:
    pipeline = ResolutionPipeline(
        identifiers=[FakeIdentifier(name="lovable", label="banana")],
        lookups=[FakeLookup(name="fatsecret", records={"banana": make_result()})],
    )

    resolution = asyncio.run(pipeline.resolve_food(b"img", ProfileMode.ANEMIA))
    summary = build_summary(resolution.result, ProfileMode.ANEMIA)

    assert validate(resolution.result)
    assert PROFILE_ADVICE[ProfileMode.ANEMIA] in resolution.result.profile_advice
    assert "banana" in summary
    assert "89" in summary
    assert summary.endswith("Please note: Bananas contain little iron.")


def test_success_always_passes_validation() -> None:
    candidates = [
        make_result(calories=0, protein=0, carbs=0, fat=0),
        make_result(protein=-1),
        make_result(),
    ]
    pipeline = ResolutionPipeline(
        identifiers=[FakeIdentifier(name="openai")],
        lookups=[
            FakeLookup(name=f"lookup-{index}", records={"banana": candidate})
            for index, candidate in enumerate(candidates)
        ],
    )

    resolution = asyncio.run(pipeline.resolve_food(b"img", None))

    assert validate(resolution.result)
    assert resolution.attempts[-1].provider_name == "lookup-2"


def test_label_variants() -> None:
    assert label_variants("banana") == [
        "banana",
        "bananas",
        "raw banana",
        "fresh banana",
    ]
    assert label_variants("Cherries") == [
        "Cherries",
        "Cherry",
        "raw Cherries",
        "fresh Cherries",
    ]
    assert label_variants("  sweet   potato ")[:2] == [
        "sweet potato",
        "sweet potatoes",
    ]
    assert label_variants("peaches")[1] == "peach"
