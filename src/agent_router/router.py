"""Embedding-similarity intent router mapping user queries to agent codes."""

import threading
from typing import Any, Callable

from agent_router.embedding_cache import EmbeddingCache
from agent_router.vector_store import LocalVectorStore
from shared.base_provider import EmbeddingProvider
from shared.data_types import (
    FALLBACK_LABEL,
    CorpusItem,
    FallbackReason,
    RouteDecision,
    RouterState,
)
from shared.exceptions import (
    ConfigError,
    DimensionMismatchError,
    ProviderError,
    StorageError,
)
from utils.corpus_loader import ExampleCorpusLoader, default_corpus
from utils.logger import get_logger

DEFAULT_THRESHOLD = 0.50
DEFAULT_TOP_K = 5


def fallback_reason_for(error: Exception) -> FallbackReason:
    """Map an exception raised while routing to a fallback reason."""
    if isinstance(error, ProviderError):
        return FallbackReason.PROVIDER_ERROR
    if isinstance(error, DimensionMismatchError):
        return FallbackReason.DIMENSION_MISMATCH
    if isinstance(error, StorageError):
        return FallbackReason.STORAGE_ERROR
    if isinstance(error, ConfigError):
        return FallbackReason.CONFIG_ERROR
    return FallbackReason.UNEXPECTED_ERROR


class AgentRouter:
    """
    Routes free-text queries to the closest agent label.

    The router embeds the query, finds the most similar stored example and
    returns its label when the similarity clears the threshold. Every other
    outcome, including any failure, yields the fallback label.

    Lifecycle: UNINITIALIZED -> INITIALIZING -> READY, or DEGRADED when
    initialization fails. initialize() is a one-shot barrier; route() on an
    uninitialized router runs it first, so no query is served before the
    store is populated. Once READY or DEGRADED, route() is safe to call
    from multiple threads.
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        vector_store: LocalVectorStore,
        corpus_loader: ExampleCorpusLoader | None = None,
        cache: EmbeddingCache | None = None,
        threshold: float = DEFAULT_THRESHOLD,
        top_k: int = DEFAULT_TOP_K,
        fallback_label: str = FALLBACK_LABEL,
        default_examples: Callable[[], dict[str, list[str]]] = default_corpus,
    ):
        """
        Initialize the agent router.

        Args:
            provider: Embedding provider
            vector_store: Store holding example embeddings
            corpus_loader: Source of label -> examples; None uses the built-in corpus
            cache: Embedding cache, a new one if not given
            threshold: Minimum cosine similarity for a match
            top_k: Number of candidates retrieved per query
            fallback_label: Label returned when no confident match exists
            default_examples: Factory for the built-in corpus
        """
        if top_k <= 0:
            raise ValueError(f"top_k must be positive, got {top_k}")

        self.provider = provider
        self.vector_store = vector_store
        self.corpus_loader = corpus_loader
        self.cache = cache if cache is not None else EmbeddingCache()
        self.threshold = threshold
        self.top_k = top_k
        self.fallback_label = fallback_label
        self.default_examples = default_examples
        self.logger = get_logger(f"{__name__}.AgentRouter")

        self._state = RouterState.UNINITIALIZED
        self._init_lock = threading.Lock()
        self.init_error: str | None = None
        self.agent_examples: dict[str, list[str]] = {}
        self.inserted_records = 0

    @property
    def state(self) -> RouterState:
        return self._state

    @property
    def is_ready(self) -> bool:
        """True once initialization finished, degraded or not."""
        return self._state in (RouterState.READY, RouterState.DEGRADED)

    def initialize(self) -> RouterState:
        """
        Load the corpus and populate the vector store once.

        Returns:
            Resulting router state
        """
        with self._init_lock:
            if self._state is not RouterState.UNINITIALIZED:
                return self._state

            self._state = RouterState.INITIALIZING
            self.logger.info("Initializing agent router")

            try:
                self.agent_examples = self._load_examples()
                if self.vector_store.has_data():
                    self.logger.info(
                        "Vector store already populated, skipping example insertion"
                    )
                else:
                    self._populate_store()
            except Exception as e:
                self.init_error = f"{type(e).__name__}: {e}"
                self._state = RouterState.DEGRADED
                self.logger.error(
                    f"Router initialization failed, all queries will use "
                    f"'{self.fallback_label}': {self.init_error}"
                )
                return self._state

            self._state = RouterState.READY
            self.logger.info(
                f"Agent router ready with {len(self.agent_examples)} labels"
            )
            return self._state

    def _load_examples(self) -> dict[str, list[str]]:
        """Load the corpus, substituting the built-in one on failure."""
        examples: dict[str, list[str]] = {}
        if self.corpus_loader is not None:
            try:
                examples = self.corpus_loader.load()
            except Exception as e:
                self.logger.error(f"Corpus loader failed: {e}")
                examples = {}

        if not examples:
            self.logger.warning("Using built-in default agent examples")
            examples = self.default_examples()

        return examples

    def _populate_store(self) -> None:
        """Embed every example and insert them in a single batch."""
        self.logger.info("Populating vector store with agent examples")

        items = []
        for label, examples in self.agent_examples.items():
            for example in examples:
                vector = self.cache.get_or_compute(example, self.provider.embed)
                items.append(CorpusItem(example_text=example, label=label, vector=vector))

        if items:
            record_ids = self.vector_store.insert_batch(items)
            self.inserted_records = len(record_ids)
            self.logger.info(f"Inserted {self.inserted_records} agent examples")

    def route_with_details(self, query: str | None) -> RouteDecision:
        """
        Route a query and report how the label was chosen.

        Never raises; failures become fallback decisions with a reason.

        Args:
            query: User query

        Returns:
            RouteDecision for the query
        """
        if not isinstance(query, str) or not query.strip():
            return RouteDecision.fallback(
                FallbackReason.BLANK_QUERY, self.fallback_label
            )

        try:
            if not self.is_ready:
                self.initialize()

            if self._state is RouterState.DEGRADED:
                return RouteDecision.fallback(
                    FallbackReason.DEGRADED, self.fallback_label
                )

            vector = self.cache.get_or_compute(query, self.provider.embed)
            results = self.vector_store.query_top_k(vector, self.top_k)

            if not results:
                return RouteDecision.fallback(
                    FallbackReason.NO_RESULTS, self.fallback_label
                )

            best = results[0]
            if best.score < self.threshold:
                self.logger.debug(
                    f"Best score {best.score:.3f} below threshold {self.threshold}, "
                    f"returning {self.fallback_label}"
                )
                return RouteDecision.fallback(
                    FallbackReason.BELOW_THRESHOLD,
                    self.fallback_label,
                    score=best.score,
                    candidates=results,
                )

            if not best.label or not best.label.strip():
                return RouteDecision.fallback(
                    FallbackReason.EMPTY_LABEL,
                    self.fallback_label,
                    score=best.score,
                    candidates=results,
                )

            self.logger.info(f"Matched agent: {best.label} (score: {best.score:.2f})")
            return RouteDecision.match(best, results)

        except Exception as e:
            reason = fallback_reason_for(e)
            self.logger.error(f"Routing failed ({reason.value}): {e}")
            return RouteDecision.fallback(reason, self.fallback_label)

    def route(self, query: str | None) -> str:
        """
        Return the best matching agent label for a query.

        Args:
            query: User query

        Returns:
            Matched label, or the fallback label when nothing matches
            confidently or anything fails
        """
        return self.route_with_details(query).label

    def get_available_labels(self) -> set[str]:
        """Labels known after initialization."""
        return set(self.agent_examples)

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_cache_size(self) -> int:
        return self.cache.size()

    def get_router_info(self) -> dict[str, Any]:
        """
        Get information about the router configuration and state.

        Returns:
            Dictionary with router information
        """
        return {
            "state": self._state.value,
            "threshold": self.threshold,
            "top_k": self.top_k,
            "fallback_label": self.fallback_label,
            "labels": sorted(self.agent_examples),
            "total_examples": sum(len(v) for v in self.agent_examples.values()),
            "inserted_records": self.inserted_records,
            "store_path": str(self.vector_store.db_path),
            "cache": self.cache.stats(),
            "provider": self.provider.get_provider_info(),
            "init_error": self.init_error,
        }
