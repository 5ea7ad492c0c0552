"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from nutriscan.adapters.fatsecret_client import HttpxFatSecretClient
from nutriscan.adapters.fatsecret_lookup import FatSecretLookupProvider
from nutriscan.adapters.fdc_client import HttpxFdcClient
from nutriscan.adapters.fdc_lookup import FdcLookupProvider
from nutriscan.adapters.gemini_client import GeminiConfig, GeminiNutritionEstimator
from nutriscan.adapters.openai_chat_client import OpenAIProviderConfig
from nutriscan.adapters.openai_estimate_client import OpenAINutritionEstimator
from nutriscan.adapters.openai_speech_client import (
    OpenAISpeechSynthesizer,
    OpenAITranslationClient,
)
from nutriscan.adapters.openai_vision_client import OpenAIVisionIdentifier
from nutriscan.config import Settings, parse_provider_order
from nutriscan.services.pipeline import ResolutionPipeline
from nutriscan.services.providers import (
    IdentificationProvider,
    NutritionEstimateProvider,
    NutritionLookupProvider,
)
from nutriscan.services.speech import SpeechService

_SPEECH_TIMEOUT_SECONDS = 30.0

_T = TypeVar("_T")


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    pipeline: ResolutionPipeline
    speech_service: SpeechService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timeout = resolved_settings.provider_timeout_seconds

    lovable_identifier = OpenAIVisionIdentifier.create(
        OpenAIProviderConfig(
            name="lovable",
            api_key=resolved_settings.lovable_api_key,
            model=resolved_settings.lovable_model,
            base_url=resolved_settings.lovable_base_url,
            timeout_seconds=timeout,
        )
    )
    openai_identifier = OpenAIVisionIdentifier.create(
        OpenAIProviderConfig(
            name="openai",
            api_key=resolved_settings.openai_api_key,
            model=resolved_settings.openai_vision_model,
            timeout_seconds=timeout,
        )
    )
    identifiers: dict[str, IdentificationProvider] = {
        "lovable": lovable_identifier,
        "openai": openai_identifier,
    }

    fatsecret_client = None
    if (
        resolved_settings.fatsecret_client_id
        and resolved_settings.fatsecret_client_secret
    ):
        fatsecret_client = HttpxFatSecretClient.create(
            client_id=resolved_settings.fatsecret_client_id,
            client_secret=resolved_settings.fatsecret_client_secret,
            token_url=resolved_settings.fatsecret_token_url,
            base_url=resolved_settings.fatsecret_base_url,
            timeout_seconds=timeout,
        )
    fdc_client = None
    if resolved_settings.fdc_api_key:
        fdc_client = HttpxFdcClient.create(
            api_key=resolved_settings.fdc_api_key,
            base_url=resolved_settings.fdc_base_url,
            timeout_seconds=timeout,
        )
    lookups: dict[str, NutritionLookupProvider] = {
        "fatsecret": FatSecretLookupProvider(client=fatsecret_client),
        "fdc": FdcLookupProvider(client=fdc_client),
    }

    max_confidence = resolved_settings.estimate_max_confidence
    openai_estimator = OpenAINutritionEstimator.create(
        OpenAIProviderConfig(
            name="openai",
            api_key=resolved_settings.openai_api_key,
            model=resolved_settings.openai_estimate_model,
            timeout_seconds=timeout,
        ),
        max_confidence=max_confidence,
    )
    gemini_estimator = GeminiNutritionEstimator.create(
        GeminiConfig(
            api_key=resolved_settings.gemini_api_key,
            model=resolved_settings.gemini_model,
        ),
        max_confidence=max_confidence,
    )
    estimators: dict[str, NutritionEstimateProvider] = {
        "gemini": gemini_estimator,
        "openai": openai_estimator,
    }

    pipeline = ResolutionPipeline(
        identifiers=_ordered(identifiers, resolved_settings.identification_providers),
        lookups=_ordered(lookups, resolved_settings.lookup_providers),
        estimators=_ordered(estimators, resolved_settings.estimate_providers),
        timeout_seconds=timeout,
    )

    translator = OpenAITranslationClient.create(
        OpenAIProviderConfig(
            name="openai-translation",
            api_key=resolved_settings.openai_api_key,
            model=resolved_settings.translation_model,
            timeout_seconds=_SPEECH_TIMEOUT_SECONDS,
        )
    )
    synthesizer = OpenAISpeechSynthesizer.create(
        OpenAIProviderConfig(
            name="openai-tts",
            api_key=resolved_settings.openai_api_key,
            model=resolved_settings.tts_model,
            timeout_seconds=_SPEECH_TIMEOUT_SECONDS,
        )
    )
    speech_service = SpeechService(
        translator=translator,
        synthesizer=synthesizer,
        default_voice=resolved_settings.default_voice,
    )

    async def close_resources() -> None:
        await lovable_identifier.close()
        await openai_identifier.close()
        await openai_estimator.close()
        await gemini_estimator.close()
        await translator.close()
        await synthesizer.close()
        if fatsecret_client is not None:
            await fatsecret_client.close()
        if fdc_client is not None:
            await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        pipeline=pipeline,
        speech_service=speech_service,
        close_resources=close_resources,
    )


def _ordered(providers: dict[str, _T], raw_order: str) -> list[_T]:
    """Select providers by name in the configured priority order."""
    names = parse_provider_order(raw_order, set(providers))
    return [providers[name] for name in names]
