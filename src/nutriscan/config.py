"""Application configuration."""

import logging
import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

_logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Every credential is optional; a missing credential disables the
    provider that needs it.
    """

    openai_api_key: str | None = None
    openai_vision_model: str = "gpt-4o"
    openai_estimate_model: str = "gpt-4o-mini"
    lovable_api_key: str | None = None
    lovable_base_url: str = "https://ai.gateway.lovable.dev/v1"
    lovable_model: str = "google/gemini-2.5-flash"
    fatsecret_client_id: str | None = None
    fatsecret_client_secret: str | None = None
    fatsecret_token_url: str = "https://oauth.fatsecret.com/connect/token"
    fatsecret_base_url: str = "https://platform.fatsecret.com/rest"
    fdc_api_key: str | None = None
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.5-flash"
    identification_providers: str = "lovable,openai"
    lookup_providers: str = "fatsecret,fdc"
    estimate_providers: str = "gemini,openai"
    provider_timeout_seconds: float = 10.0
    estimate_max_confidence: float = 0.6
    translation_model: str = "gpt-4o-mini"
    tts_model: str = "tts-1"
    default_voice: str = "alloy"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_provider_order(raw: str | None, known: set[str]) -> list[str]:
    """Parse a comma-separated provider priority list from env."""
    if raw is None:
        return []
    order: list[str] = []
    for chunk in raw.split(","):
        name = chunk.strip().lower()
        if not name or name in order:
            continue
        if name not in known:
            _logger.warning("Ignoring unknown provider in priority list: %s", name)
            continue
        order.append(name)
    return order
