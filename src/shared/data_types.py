"""Data types for the agent routing system."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

Vector = Sequence[float]

FALLBACK_LABEL = "fallback_agent"


class RouterState(Enum):
    """Lifecycle states of the agent router."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    DEGRADED = "degraded"


class FallbackReason(Enum):
    """Why a query was routed to the fallback label."""

    BLANK_QUERY = "blank_query"
    DEGRADED = "degraded"
    NO_RESULTS = "no_results"
    BELOW_THRESHOLD = "below_threshold"
    EMPTY_LABEL = "empty_label"
    PROVIDER_ERROR = "provider_error"
    STORAGE_ERROR = "storage_error"
    DIMENSION_MISMATCH = "dimension_mismatch"
    CONFIG_ERROR = "config_error"
    UNEXPECTED_ERROR = "unexpected_error"


@dataclass(frozen=True)
class CorpusItem:
    """Example utterance with its label and embedding."""

    example_text: str
    label: str
    vector: tuple[float, ...]


@dataclass(frozen=True)
class ScoredMatch:
    """Stored record scored against a query vector."""

    record_id: int
    label: str
    content: str
    score: float


@dataclass
class RouteDecision:
    """Result of routing a single query."""

    label: str
    score: float = 0.0
    matched: bool = False
    reason: FallbackReason | None = None
    candidates: list[ScoredMatch] = field(default_factory=list)

    @classmethod
    def match(
        cls, best: ScoredMatch, candidates: list[ScoredMatch]
    ) -> "RouteDecision":
        """Build a decision for a confident match."""
        return cls(
            label=best.label, score=best.score, matched=True, candidates=candidates
        )

    @classmethod
    def fallback(
        cls,
        reason: FallbackReason,
        fallback_label: str = FALLBACK_LABEL,
        score: float = 0.0,
        candidates: list[ScoredMatch] | None = None,
    ) -> "RouteDecision":
        """Build a decision that routes to the fallback label."""
        return cls(
            label=fallback_label,
            score=score,
            matched=False,
            reason=reason,
            candidates=candidates or [],
        )


@dataclass
class LabeledQuery:
    """Evaluation query with its expected label."""

    query_id: int | str
    text: str
    expected_label: str


@dataclass
class EvaluatedQuery:
    """Labeled query together with the router's decision."""

    query: LabeledQuery
    decision: RouteDecision
    latency: float

    @property
    def is_correct(self) -> bool:
        """Whether the routed label equals the expected label."""
        return self.decision.label == self.query.expected_label
