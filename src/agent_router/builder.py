"""Builder for wiring an AgentRouter from configuration."""

from typing import Any

from agent_router.embedding_cache import EmbeddingCache
from agent_router.embedding_providers import create_embedding_provider
from agent_router.router import AgentRouter
from agent_router.vector_store import LocalVectorStore
from shared.base_provider import EmbeddingProvider
from utils.config_loader import AppConfig
from utils.corpus_loader import ExampleCorpusLoader
from utils.logger import get_logger


class RouterBuilder:
    """Creates providers, stores and routers from an AppConfig."""

    def __init__(
        self,
        config: AppConfig,
        provider: EmbeddingProvider | None = None,
    ):
        """
        Initialize router builder.

        Args:
            config: Router configuration
            provider: Optional provider overriding the configured one
        """
        self.config = config
        self._provider = provider
        self.logger = get_logger(f"{__name__}.RouterBuilder")

    def create_provider(self) -> EmbeddingProvider:
        if self._provider is None:
            self._provider = create_embedding_provider(self.config.embedding)
            self.logger.info(
                f"Initialized {self.config.embedding.type} provider with model: "
                f"{self.config.embedding.model}"
            )
        return self._provider

    def create_vector_store(self) -> LocalVectorStore:
        return LocalVectorStore(self.config.vector_store.path)

    def create_corpus_loader(self) -> ExampleCorpusLoader:
        return ExampleCorpusLoader(self.config.routing.corpus_path)

    def build(self, cache: EmbeddingCache | None = None) -> AgentRouter:
        """
        Create an uninitialized router.

        Args:
            cache: Optional shared embedding cache

        Returns:
            AgentRouter ready for initialize()
        """
        routing = self.config.routing
        router = AgentRouter(
            provider=self.create_provider(),
            vector_store=self.create_vector_store(),
            corpus_loader=self.create_corpus_loader(),
            cache=cache,
            threshold=routing.threshold,
            top_k=routing.top_k,
            fallback_label=routing.fallback_label,
        )
        self.logger.info(
            f"Built router (threshold: {routing.threshold}, top_k: {routing.top_k}, "
            f"store: {self.config.vector_store.path})"
        )
        return router

    def get_build_summary(self) -> dict[str, Any]:
        """
        Get summary information about the configured router.

        Returns:
            Summary dictionary
        """
        return {
            "embedding_type": self.config.embedding.type,
            "embedding_model": self.config.embedding.model,
            "embedding_timeout": self.config.embedding.timeout,
            "store_path": self.config.vector_store.path,
            "corpus_path": self.config.routing.corpus_path,
            "threshold": self.config.routing.threshold,
            "top_k": self.config.routing.top_k,
            "fallback_label": self.config.routing.fallback_label,
        }
