"""Embedding provider implementations."""

import math
import os
from typing import Any, Iterable

import litellm
from redisvl.utils.vectorize import HFTextVectorizer

from shared.base_provider import EmbeddingProvider
from shared.exceptions import ConfigError, ProviderError, classify_provider_error
from utils.config_loader import EmbeddingConfig
from utils.cost_calculator import EmbeddingCostCalculator
from utils.logger import get_logger

# Disable tokenizer parallelism to prevent deadlocks with threaded callers
os.environ.setdefault("TOKENIZERS_PARALLELISM", "false")


def to_finite_vector(values: Iterable[Any]) -> list[float]:
    """Convert raw embedding values to floats, rejecting NaN and infinity."""
    try:
        vector = [float(x) for x in values]
    except (TypeError, ValueError) as e:
        raise ProviderError(f"Embedding response is not numeric: {e}") from e

    if not all(math.isfinite(x) for x in vector):
        raise ProviderError("Embedding response contains non-finite values")
    return vector


class LiteLLMEmbeddingProvider(EmbeddingProvider):
    """Remote embeddings through litellm (OpenAI-compatible endpoints)."""

    def __init__(
        self,
        model: str = "text-embedding-3-small",
        api_key: str | None = None,
        api_base: str | None = None,
        timeout: float = 10.0,
        track_usage: bool = True,
    ):
        """
        Initialize litellm embedding provider.

        Args:
            model: litellm model name, e.g. "text-embedding-3-small"
            api_key: API key; embedding fails with ConfigError if missing
            api_base: Optional base URL of an OpenAI-compatible endpoint
            timeout: Per-call timeout in seconds
            track_usage: Whether to accumulate token and cost usage
        """
        super().__init__(model=model, track_usage=track_usage)
        self.api_key = api_key
        self.api_base = api_base
        self.timeout = timeout
        self.logger = get_logger(f"{__name__}.LiteLLMEmbeddingProvider")

        litellm.suppress_debug_info = True

    @property
    def provider_type(self) -> str:
        return "litellm"

    def embed(self, text: str) -> list[float]:
        if not self.api_key:
            raise ConfigError(f"No API key configured for embedding model {self.model}")

        try:
            response = litellm.embedding(
                model=self.model,
                input=[text],
                api_key=self.api_key,
                api_base=self.api_base,
                timeout=self.timeout,
            )
        except Exception as e:
            classified = classify_provider_error(e)
            self.logger.error(
                f"Embedding call failed ({type(classified).__name__}): {e}"
            )
            raise classified from e

        vector = self._extract_vector(response)
        self.record_usage(*self._usage_from_response(response, text))
        return vector

    @staticmethod
    def _extract_vector(response: Any) -> list[float]:
        """Pull the first embedding out of a litellm response."""
        data = getattr(response, "data", None)
        if not data:
            raise ProviderError("Embedding response contained no data")

        item = data[0]
        embedding = item.get("embedding") if isinstance(item, dict) else getattr(
            item, "embedding", None
        )
        if not embedding:
            raise ProviderError("Embedding response contained an empty vector")

        return to_finite_vector(embedding)

    def _usage_from_response(self, response: Any, text: str) -> tuple[int, float]:
        if not self.track_usage:
            return 0, 0.0

        usage = getattr(response, "usage", None)
        tokens = getattr(usage, "prompt_tokens", None) if usage is not None else None
        if not tokens:
            tokens = EmbeddingCostCalculator.estimate_tokens(text)

        return tokens, EmbeddingCostCalculator.calculate_cost(tokens, self.model)

    def get_provider_info(self) -> dict[str, Any]:
        info = super().get_provider_info()
        info.update({"api_base": self.api_base, "timeout": self.timeout})
        return info


class HuggingFaceEmbeddingProvider(EmbeddingProvider):
    """Local sentence-transformers embeddings through redisvl."""

    def __init__(self, model: str = "sentence-transformers/all-MiniLM-L6-v2"):
        super().__init__(model=model, track_usage=False)
        self.logger = get_logger(f"{__name__}.HuggingFaceEmbeddingProvider")
        self._vectorizer: HFTextVectorizer | None = None

    @property
    def provider_type(self) -> str:
        return "huggingface"

    def _get_vectorizer(self) -> HFTextVectorizer:
        # Model weights load on first use
        if self._vectorizer is None:
            try:
                self._vectorizer = HFTextVectorizer(model=self.model)
                self.logger.info(f"Loaded HuggingFace model: {self.model}")
            except Exception as e:
                raise ProviderError(f"Failed to load model {self.model}: {e}") from e
        return self._vectorizer

    def embed(self, text: str) -> list[float]:
        vectorizer = self._get_vectorizer()
        try:
            vector = vectorizer.embed(text)
        except Exception as e:
            raise ProviderError(f"Local embedding failed: {e}") from e

        self.record_usage()
        return to_finite_vector(vector)


def create_embedding_provider(config: EmbeddingConfig) -> EmbeddingProvider:
    """
    Create an embedding provider from configuration.

    Args:
        config: Embedding configuration

    Returns:
        Configured provider instance

    Raises:
        ConfigError: If the provider type is unsupported
    """
    logger = get_logger(f"{__name__}.create_embedding_provider")
    provider_type = config.type.lower()

    if provider_type in ("litellm", "openai"):
        api_key = os.getenv(config.api_key_env) if config.api_key_env else None
        api_base = os.getenv(config.api_base_env) if config.api_base_env else None
        if not api_key:
            logger.warning(
                f"API key not found in environment variable {config.api_key_env}; "
                "routing will fall back until it is configured"
            )
        return LiteLLMEmbeddingProvider(
            model=config.model,
            api_key=api_key,
            api_base=api_base or None,
            timeout=config.timeout,
            track_usage=config.track_usage,
        )
    elif provider_type == "huggingface":
        return HuggingFaceEmbeddingProvider(model=config.model)
    else:
        raise ConfigError(f"Unsupported embedding provider type: {config.type}")
