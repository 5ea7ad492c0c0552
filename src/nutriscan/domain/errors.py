"""Error taxonomy for providers, the resolution pipeline and speech."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nutriscan.domain.pipeline import PipelineAttempt


class ProviderError(Exception):
    """Base class for recoverable provider-level failures."""

    kind = "ProviderError"

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message


class ProviderUnavailable(ProviderError):
    """Provider is unconfigured, unreachable, unauthenticated or over quota."""

    kind = "ProviderUnavailable"


class NoIdentification(ProviderError):
    """Provider was reached but could not name the image content."""

    kind = "NoIdentification"


class NotFound(ProviderError):
    """Provider was reached but has no record for the label."""

    kind = "NotFound"


class ParseFailed(ProviderError):
    """Provider answered with a payload that does not match the schema."""

    kind = "ParseFailed"


class PipelineError(Exception):
    """Terminal failure of a resolution call."""

    error = "Food analysis failed"

    def __init__(self, message: str, attempts: "list[PipelineAttempt]") -> None:
        super().__init__(message)
        self.message = message
        self.attempts = attempts


class IdentificationFailed(PipelineError):
    """Every identification provider failed."""

    error = "Could not identify food in the image"


class NutritionUnavailable(PipelineError):
    """A label was identified but no nutrition source produced valid data."""

    error = "Nutrition data unavailable"

    def __init__(self, label: str, attempts: "list[PipelineAttempt]") -> None:
        super().__init__(
            f"Identified {label} but no nutrition data could be resolved", attempts
        )
        self.label = label


class SpeechError(Exception):
    """Speech request could not be fulfilled."""


class InvalidImageError(ValueError):
    """Image payload is missing or cannot be decoded."""
