"""Semantic routing components for embedding-based agent selection."""

from .builder import RouterBuilder
from .embedding_cache import EmbeddingCache
from .router import AgentRouter
from .similarity import cosine_similarity
from .vector_store import LocalVectorStore

__all__ = [
    "AgentRouter",
    "EmbeddingCache",
    "LocalVectorStore",
    "RouterBuilder",
    "cosine_similarity",
]
