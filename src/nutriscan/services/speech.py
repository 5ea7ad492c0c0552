"""Translation and speech synthesis for spoken nutrition summaries."""

import logging
from dataclasses import dataclass
from typing import Protocol

from nutriscan.domain.errors import ProviderError, SpeechError
from nutriscan.domain.profiles import LanguageTag

_logger = logging.getLogger(__name__)


class TranslationClient(Protocol):
    """Interface for text translation."""

    def is_available(self) -> bool:
        """Return False when the client lacks its credential."""

    async def translate(self, text: str, language_name: str) -> str:
        """Translate English text into the named language."""


class SpeechSynthesizer(Protocol):
    """Interface for text-to-speech synthesis."""

    def is_available(self) -> bool:
        """Return False when the client lacks its credential."""

    async def synthesize(self, text: str, voice: str) -> bytes:
        """Return MP3 audio bytes for the text."""


@dataclass
class SpeechService:
    """Service that translates a summary and turns it into audio."""

    translator: TranslationClient
    synthesizer: SpeechSynthesizer
    default_voice: str = "alloy"

    async def speak(
        self, text: str | None, language: str | None, voice: str | None = None
    ) -> bytes:
        """Return MP3 audio for the text spoken in the requested language."""
        if not text or not text.strip():
            raise SpeechError("Text is required")
        if not self.synthesizer.is_available():
            raise SpeechError("OpenAI API key not configured")

        tag = LanguageTag.parse(language)
        resolved_voice = voice or self.default_voice
        _logger.info("Generating speech language=%s voice=%s", tag, resolved_voice)
        speech_text = await self._translate(text, tag)
        try:
            return await self.synthesizer.synthesize(speech_text, resolved_voice)
        except ProviderError as exc:
            raise SpeechError(exc.message or "Failed to generate speech") from exc

    async def _translate(self, text: str, tag: LanguageTag) -> str:
        if tag is LanguageTag.EN or not self.translator.is_available():
            return text
        try:
            translated = await self.translator.translate(text, tag.display_name)
        except ProviderError as exc:
            _logger.warning("Translation to %s failed, speaking English: %s", tag, exc)
            return text
        return translated.strip() or text
