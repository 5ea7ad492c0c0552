"""Generative nutrition estimates from Google Gemini."""

from dataclasses import dataclass

import httpx
from google import genai
from google.genai import errors, types

from nutriscan.domain.errors import ProviderUnavailable
from nutriscan.domain.nutrition import NutritionResult
from nutriscan.domain.profiles import LanguageTag
from nutriscan.services.parsing import ESTIMATE_PROMPT, parse_estimate


@dataclass(frozen=True)
class GeminiConfig:
    """Credential and model for the Gemini estimate provider."""

    api_key: str | None
    model: str = "gemini-2.5-flash"
    name: str = "gemini"


@dataclass
class GeminiNutritionEstimator:
    """Estimate provider using Gemini's JSON response mode."""

    config: GeminiConfig
    client: genai.Client | None
    max_confidence: float = 0.6

    @classmethod
    def create(
        cls, config: GeminiConfig, max_confidence: float = 0.6
    ) -> "GeminiNutritionEstimator":
        """Create an estimator, leaving the client unset without a credential."""
        client = genai.Client(api_key=config.api_key) if config.api_key else None
        return cls(config=config, client=client, max_confidence=max_confidence)

    @property
    def name(self) -> str:
        return self.config.name

    def is_available(self) -> bool:
        return self.client is not None

    async def estimate(self, label: str, language: str = "en") -> NutritionResult:
        """Estimate nutrition for one serving of the labelled food."""
        if self.client is None:
            raise ProviderUnavailable(self.name, "credential not configured")
        prompt = ESTIMATE_PROMPT.format(
            label=label, language=LanguageTag.parse(language).display_name
        )
        try:
            response = await self.client.aio.models.generate_content(
                model=self.config.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    temperature=0.2,
                ),
            )
        except (errors.APIError, httpx.HTTPError) as exc:
            raise ProviderUnavailable(self.name, f"API error: {exc}") from exc
        return parse_estimate(
            self.name, response.text, label=label, max_confidence=self.max_confidence
        )

    async def close(self) -> None:
        """Close the underlying async HTTP session."""
        if self.client is not None:
            await self.client.aio.aclose()
