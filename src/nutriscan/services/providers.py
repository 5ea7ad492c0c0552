"""Capability interfaces implemented by external data and AI providers."""

from typing import Protocol

from nutriscan.domain.nutrition import NutritionResult


class Provider(Protocol):
    """Common surface of every provider."""

    @property
    def name(self) -> str:
        """Short provider name used in attempt logs and configuration."""

    def is_available(self) -> bool:
        """Return False when the provider lacks its credential."""


class IdentificationProvider(Provider, Protocol):
    """Names the food shown in an image."""

    async def identify(self, image: bytes) -> str:
        """Return a food label or raise NoIdentification/ProviderUnavailable."""


class NutritionLookupProvider(Provider, Protocol):
    """Looks a food label up in a nutrition database."""

    async def lookup(self, label: str) -> NutritionResult:
        """Return nutrition data or raise NotFound/ProviderUnavailable."""


class NutritionEstimateProvider(Provider, Protocol):
    """Produces a generative best-effort nutrition estimate."""

    async def estimate(self, label: str, language: str = "en") -> NutritionResult:
        """Return estimated nutrition or raise ParseFailed/ProviderUnavailable."""
