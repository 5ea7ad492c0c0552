"""OpenAI translation and text-to-speech adapters."""

from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from nutriscan.adapters.openai_chat_client import (
    OpenAIProviderConfig,
    create_async_openai,
)
from nutriscan.domain.errors import ProviderUnavailable

TRANSLATION_PROMPT = (
    "Translate the following English text to {language}. Keep medical and "
    "nutritional terms accurate. Respond only with the translation, no "
    "explanations."
)


@dataclass
class OpenAITranslationClient:
    """Translation backed by OpenAI chat completions."""

    config: OpenAIProviderConfig
    client: AsyncOpenAI | None

    @classmethod
    def create(cls, config: OpenAIProviderConfig) -> "OpenAITranslationClient":
        """Create a translation client with a managed SDK client."""
        return cls(config=config, client=create_async_openai(config))

    def is_available(self) -> bool:
        return self.client is not None

    async def translate(self, text: str, language_name: str) -> str:
        """Translate English text into the named language."""
        if self.client is None:
            raise ProviderUnavailable(self.config.name, "credential not configured")
        try:
            response = await self.client.chat.completions.create(
                model=self.config.model,
                messages=[
                    {
                        "role": "system",
                        "content": TRANSLATION_PROMPT.format(language=language_name),
                    },
                    {"role": "user", "content": text},
                ],
                max_tokens=500,
                temperature=0.3,
            )
        except openai.APIError as exc:
            raise ProviderUnavailable(self.config.name, f"API error: {exc}") from exc
        if not response.choices:
            raise ProviderUnavailable(self.config.name, "API returned no choices")
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self.client is not None:
            await self.client.close()


@dataclass
class OpenAISpeechSynthesizer:
    """Speech synthesis backed by OpenAI's audio API."""

    config: OpenAIProviderConfig
    client: AsyncOpenAI | None

    @classmethod
    def create(cls, config: OpenAIProviderConfig) -> "OpenAISpeechSynthesizer":
        """Create a synthesizer with a managed SDK client."""
        return cls(config=config, client=create_async_openai(config))

    def is_available(self) -> bool:
        return self.client is not None

    async def synthesize(self, text: str, voice: str) -> bytes:
        """Return MP3 audio bytes for the text."""
        if self.client is None:
            raise ProviderUnavailable(self.config.name, "credential not configured")
        try:
            response = await self.client.audio.speech.create(
                model=self.config.model,
                input=text,
                voice=voice,
                response_format="mp3",
            )
        except openai.APIError as exc:
            raise ProviderUnavailable(
                self.config.name, f"Failed to generate speech: {exc}"
            ) from exc
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self.client is not None:
            await self.client.close()
