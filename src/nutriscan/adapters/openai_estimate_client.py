"""Generative nutrition estimates from an OpenAI chat model."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from nutriscan.adapters.openai_chat_client import (
    OpenAIProviderConfig,
    complete_json,
    create_async_openai,
)
from nutriscan.domain.nutrition import NutritionResult
from nutriscan.domain.profiles import LanguageTag
from nutriscan.services.parsing import ESTIMATE_PROMPT, parse_estimate


@dataclass
class OpenAINutritionEstimator:
    """Estimate provider that prompts a text model for a nutrition JSON."""

    config: OpenAIProviderConfig
    client: AsyncOpenAI | None
    max_confidence: float = 0.6

    @classmethod
    def create(
        cls, config: OpenAIProviderConfig, max_confidence: float = 0.6
    ) -> "OpenAINutritionEstimator":
        """Create an estimator with a managed SDK client."""
        return cls(
            config=config,
            client=create_async_openai(config),
            max_confidence=max_confidence,
        )

    @property
    def name(self) -> str:
        return self.config.name

    def is_available(self) -> bool:
        return self.client is not None

    async def estimate(self, label: str, language: str = "en") -> NutritionResult:
        """Estimate nutrition for one serving of the labelled food."""
        prompt = ESTIMATE_PROMPT.format(
            label=label, language=LanguageTag.parse(language).display_name
        )
        raw = await complete_json(
            self.client, self.config, [{"role": "user", "content": prompt}]
        )
        return parse_estimate(
            self.name, raw, label=label, max_confidence=self.max_confidence
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self.client is not None:
            await self.client.close()
