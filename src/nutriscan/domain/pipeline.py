"""Domain models for a single resolution call."""

from dataclasses import dataclass, field
from enum import StrEnum

from nutriscan.domain.nutrition import NutritionResult


class Capability(StrEnum):
    """Kind of work a provider performs."""

    IDENTIFICATION = "identification"
    LOOKUP = "lookup"
    ESTIMATE = "estimate"


@dataclass(frozen=True)
class PipelineAttempt:
    """One provider call, or skipped call, made during a resolution."""

    provider_name: str
    capability: Capability
    succeeded: bool
    error_kind: str | None = None
    query: str | None = None


@dataclass(frozen=True)
class Resolution:
    """Validated result plus the attempts that produced it."""

    result: NutritionResult
    attempts: list[PipelineAttempt] = field(default_factory=list)
