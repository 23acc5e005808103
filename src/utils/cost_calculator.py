"""Token and cost estimation for remote embedding calls."""

import tiktoken

from utils.logger import get_logger

logger = get_logger(__name__)


class EmbeddingCostCalculator:
    """Calculator for embedding API costs and token usage."""

    # Embedding model pricing (per 1K tokens)
    PRICING_PER_1K = {
        "text-embedding-3-small": 0.00002,
        "text-embedding-3-large": 0.00013,
        "text-embedding-ada-002": 0.0001,
    }
    DEFAULT_PRICE_PER_1K = 0.00002

    @staticmethod
    def _base_model_name(model: str) -> str:
        """Strip a litellm provider prefix such as 'openai/'."""
        return model.split("/", 1)[1] if "/" in model else model

    @classmethod
    def price_per_1k(cls, model: str) -> float:
        """Price per 1K tokens for a model, defaulting for unknown models."""
        return cls.PRICING_PER_1K.get(
            cls._base_model_name(model), cls.DEFAULT_PRICE_PER_1K
        )

    @staticmethod
    def estimate_tokens(text: str) -> int:
        """
        Estimate token count for text using tiktoken.

        Args:
            text: Input text to tokenize

        Returns:
            Estimated token count
        """
        try:
            encoding = tiktoken.get_encoding("cl100k_base")
            return len(encoding.encode(text))
        except Exception as e:
            # Encoding files may be unavailable offline
            logger.debug(f"tiktoken unavailable, using word estimate: {e}")
            return max(1, int(len(text.split()) * 1.3))

    @classmethod
    def calculate_cost(cls, tokens: int, model: str) -> float:
        """Cost in dollars for a token count."""
        return (tokens / 1000) * cls.price_per_1k(model)

    @classmethod
    def calculate_text_cost(cls, text: str, model: str) -> tuple[int, float]:
        """
        Calculate estimated tokens and cost for embedding a text.

        Args:
            text: Input text to embed
            model: Embedding model name

        Returns:
            Tuple of (token_count, cost_in_dollars)
        """
        tokens = cls.estimate_tokens(text)
        return tokens, cls.calculate_cost(tokens, model)
