"""Shared plumbing for OpenAI-compatible chat completion providers."""

from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from nutriscan.domain.errors import ProviderUnavailable


@dataclass(frozen=True)
class OpenAIProviderConfig:
    """Credential and model for one OpenAI-compatible provider."""

    name: str
    api_key: str | None
    model: str
    base_url: str | None = None
    timeout_seconds: float = 10.0


def create_async_openai(config: OpenAIProviderConfig) -> AsyncOpenAI | None:
    """Create an SDK client, or None when the credential is missing."""
    if not config.api_key:
        return None
    return AsyncOpenAI(
        api_key=config.api_key,
        base_url=config.base_url,
        timeout=config.timeout_seconds,
        max_retries=0,
    )


async def complete_json(
    client: AsyncOpenAI | None,
    config: OpenAIProviderConfig,
    messages: list[dict[str, object]],
    *,
    max_tokens: int = 1500,
) -> str:
    """Run a JSON-mode chat completion and return the message text."""
    if client is None:
        raise ProviderUnavailable(config.name, "credential not configured")
    try:
        response = await client.chat.completions.create(
            model=config.model,
            messages=messages,
            response_format={"type": "json_object"},
            max_tokens=max_tokens,
            temperature=0.3,
        )
    except openai.APIError as exc:
        raise ProviderUnavailable(config.name, f"API error: {exc}") from exc
    if not response.choices:
        raise ProviderUnavailable(config.name, "API returned no choices")
    return response.choices[0].message.content or ""
