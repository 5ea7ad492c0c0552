"""Vision identification over OpenAI-compatible chat completions."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from nutriscan.adapters.openai_chat_client import (
    OpenAIProviderConfig,
    complete_json,
    create_async_openai,
)
from nutriscan.services.images import to_data_url
from nutriscan.services.parsing import IDENTIFICATION_PROMPT, parse_identification


@dataclass
class OpenAIVisionIdentifier:
    """Identification provider backed by a vision-capable chat model.

    Serves both OpenAI itself and gateways speaking the same protocol,
    such as the Lovable AI gateway in front of Gemini.
    """

    config: OpenAIProviderConfig
    client: AsyncOpenAI | None

    @classmethod
    def create(cls, config: OpenAIProviderConfig) -> "OpenAIVisionIdentifier":
        """Create an identifier with a managed SDK client."""
        return cls(config=config, client=create_async_openai(config))

    @property
    def name(self) -> str:
        return self.config.name

    def is_available(self) -> bool:
        return self.client is not None

    async def identify(self, image: bytes) -> str:
        """Ask the model to name the main food in the image."""
        messages: list[dict[str, object]] = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": IDENTIFICATION_PROMPT},
                    {"type": "image_url", "image_url": {"url": to_data_url(image)}},
                ],
            }
        ]
        raw = await complete_json(self.client, self.config, messages, max_tokens=200)
        return parse_identification(self.name, raw)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self.client is not None:
            await self.client.close()
