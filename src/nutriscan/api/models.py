"""Pydantic models for API request payloads."""

from pydantic import BaseModel, Field


class AnalyzeFoodRequest(BaseModel):
    """Body of an analyze-food request."""

    image_data: str | None = Field(default=None, alias="imageData")
    profile_mode: str | None = Field(default=None, alias="profileMode")
    language: str | None = None


class TextToSpeechRequest(BaseModel):
    """Body of a text-to-speech request."""

    text: str | None = None
    language: str | None = None
    voice: str | None = None
