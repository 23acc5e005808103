"""Abstract embedding provider interface."""

import threading
from abc import ABC, abstractmethod
from typing import Any


class EmbeddingProvider(ABC):
    """Abstract base class for all embedding providers."""

    def __init__(self, model: str, track_usage: bool = True):
        """
        Initialize base provider.

        Args:
            model: Embedding model name
            track_usage: Whether to accumulate token and cost usage
        """
        self.model = model
        self.track_usage = track_usage

        self.embedding_calls = 0
        self.total_tokens = 0
        self.total_cost = 0.0
        self._usage_lock = threading.Lock()

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """
        Embed a single text.

        Args:
            text: Text to embed

        Returns:
            Embedding vector

        Raises:
            ProviderError: If the embedding call fails
        """
        pass

    @property
    @abstractmethod
    def provider_type(self) -> str:
        """Short provider identifier used in logs and reports."""
        pass

    def record_usage(self, tokens: int = 0, cost: float = 0.0) -> None:
        """Accumulate usage for one embedding call."""
        with self._usage_lock:
            self.embedding_calls += 1
            if self.track_usage:
                self.total_tokens += tokens
                self.total_cost += cost

    def get_provider_info(self) -> dict[str, Any]:
        """
        Get provider configuration and usage.

        Returns:
            Dictionary with provider information
        """
        with self._usage_lock:
            return {
                "provider_type": self.provider_type,
                "model": self.model,
                "track_usage": self.track_usage,
                "embedding_calls": self.embedding_calls,
                "total_tokens": self.total_tokens,
                "total_cost": self.total_cost,
            }
