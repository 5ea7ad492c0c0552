"""Multi-provider food identification and nutrition resolution."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from nutriscan.domain.errors import (
    IdentificationFailed,
    NoIdentification,
    NutritionUnavailable,
    ProviderError,
    ProviderUnavailable,
)
from nutriscan.domain.nutrition import NutritionResult
from nutriscan.domain.pipeline import Capability, PipelineAttempt, Resolution
from nutriscan.domain.profiles import LanguageTag, ProfileMode
from nutriscan.services.advice import augment
from nutriscan.services.providers import (
    IdentificationProvider,
    NutritionEstimateProvider,
    NutritionLookupProvider,
    Provider,
)
from nutriscan.services.validation import validate

_logger = logging.getLogger(__name__)

_T = TypeVar("_T")

_REJECTED = "Rejected"
_LABEL_PREFIXES = ("raw ", "fresh ")


@dataclass
class ResolutionPipeline:
    """Tries providers in priority order until one yields a validated result.

    Calls are sequential: the first success short-circuits the remaining
    providers. Provider failures are recorded as attempts and never reach
    the caller; only IdentificationFailed and NutritionUnavailable do.
    """

    identifiers: Sequence[IdentificationProvider]
    lookups: Sequence[NutritionLookupProvider] = field(default_factory=list)
    estimators: Sequence[NutritionEstimateProvider] = field(default_factory=list)
    timeout_seconds: float = 10.0

    async def resolve_food(
        self,
        image: bytes,
        profile: ProfileMode | None,
        language: LanguageTag = LanguageTag.EN,
    ) -> Resolution:
        """Identify the food in an image and resolve validated nutrition."""
        attempts: list[PipelineAttempt] = []
        label = await self._identify(image, attempts)
        if label is None:
            _logger.warning("Identification failed: %s", _describe(attempts))
            raise IdentificationFailed(
                "No identification provider could name the food", attempts
            )
        _logger.info("Identified food label=%s language=%s", label, language)

        result = await self._lookup(label, attempts)
        if result is None:
            result = await self._estimate(label, language, attempts)
        if result is None:
            _logger.warning(
                "Nutrition unavailable for label=%s: %s", label, _describe(attempts)
            )
            raise NutritionUnavailable(label, attempts)
        return Resolution(result=augment(result, profile), attempts=attempts)

    async def _identify(
        self, image: bytes, attempts: list[PipelineAttempt]
    ) -> str | None:
        for provider in self.identifiers:
            try:
                label = await self._call(
                    provider, lambda provider=provider: provider.identify(image)
                )
            except ProviderError as exc:
                _record(attempts, provider, Capability.IDENTIFICATION, exc.kind, None)
                continue
            label = label.strip()
            if not label:
                _record(
                    attempts,
                    provider,
                    Capability.IDENTIFICATION,
                    NoIdentification.kind,
                    None,
                )
                continue
            _record(attempts, provider, Capability.IDENTIFICATION, None, label)
            return label
        return None

    async def _lookup(
        self, label: str, attempts: list[PipelineAttempt]
    ) -> NutritionResult | None:
        for provider in self.lookups:
            for variant in label_variants(label):
                try:
                    candidate = await self._call(
                        provider,
                        lambda provider=provider, variant=variant: provider.lookup(
                            variant
                        ),
                    )
                except ProviderError as exc:
                    _record(attempts, provider, Capability.LOOKUP, exc.kind, variant)
                    if isinstance(exc, ProviderUnavailable):
                        break
                    continue
                if validate(candidate):
                    _record(attempts, provider, Capability.LOOKUP, None, variant)
                    return candidate
                _record(attempts, provider, Capability.LOOKUP, _REJECTED, variant)
                break
        return None

    async def _estimate(
        self, label: str, language: LanguageTag, attempts: list[PipelineAttempt]
    ) -> NutritionResult | None:
        for provider in self.estimators:
            try:
                candidate = await self._call(
                    provider,
                    lambda provider=provider: provider.estimate(label, language.value),
                )
            except ProviderError as exc:
                _record(attempts, provider, Capability.ESTIMATE, exc.kind, label)
                continue
            if validate(candidate):
                _record(attempts, provider, Capability.ESTIMATE, None, label)
                return candidate
            _record(attempts, provider, Capability.ESTIMATE, _REJECTED, label)
        return None

    async def _call(
        self, provider: Provider, call: Callable[[], Awaitable[_T]]
    ) -> _T:
        """Call a provider under the per-call timeout."""
        if not provider.is_available():
            raise ProviderUnavailable(provider.name, "credential not configured")
        try:
            async with asyncio.timeout(self.timeout_seconds):
                return await call()
        except TimeoutError as exc:
            raise ProviderUnavailable(
                provider.name, f"timed out after {self.timeout_seconds}s"
            ) from exc


def label_variants(label: str) -> list[str]:
    """Return the label followed by lookup retry variants, without duplicates."""
    base = " ".join(label.split())
    candidates = [base, _toggle_plural(base)]
    candidates.extend(f"{prefix}{base}" for prefix in _LABEL_PREFIXES)
    variants: list[str] = []
    seen: set[str] = set()
    for candidate in candidates:
        key = candidate.lower()
        if candidate and key not in seen:
            seen.add(key)
            variants.append(candidate)
    return variants


def _toggle_plural(label: str) -> str:
    """Switch the last word of a label between singular and plural."""
    head, _, word = label.rpartition(" ")
    lower = word.lower()
    if len(lower) > 3 and lower.endswith("ies"):  # noqa: PLR2004
        toggled = word[:-3] + "y"
    elif lower.endswith(("ches", "shes", "sses", "xes", "oes")):
        toggled = word[:-2]
    elif lower.endswith("s") and not lower.endswith("ss"):
        toggled = word[:-1]
    elif lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        toggled = word[:-1] + "ies"
    elif lower.endswith(("ch", "sh", "ss", "x", "o")):
        toggled = word + "es"
    else:
        toggled = word + "s"
    return f"{head} {toggled}" if head else toggled


def _record(
    attempts: list[PipelineAttempt],
    provider: Provider,
    capability: Capability,
    error_kind: str | None,
    query: str | None,
) -> None:
    attempt = PipelineAttempt(
        provider_name=provider.name,
        capability=capability,
        succeeded=error_kind is None,
        error_kind=error_kind,
        query=query,
    )
    attempts.append(attempt)
    if error_kind is None:
        _logger.info(
            "Provider %s succeeded (%s, query=%s)", provider.name, capability, query
        )
    else:
        _logger.info(
            "Provider %s failed (%s, query=%s): %s",
            provider.name,
            capability,
            query,
            error_kind,
        )


def _describe(attempts: list[PipelineAttempt]) -> str:
    if not attempts:
        return "no providers configured"
    return ", ".join(
        f"{attempt.provider_name}/{attempt.capability}="
        f"{'ok' if attempt.succeeded else attempt.error_kind}"
        for attempt in attempts
    )
