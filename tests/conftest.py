"""
Shared test fixtures and configuration for pytest.
"""

import sys
import threading
from pathlib import Path
from typing import Callable

import pytest

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from agent_router.vector_store import LocalVectorStore  # noqa: E402
from shared.base_provider import EmbeddingProvider  # noqa: E402
from shared.exceptions import ProviderError  # noqa: E402
from utils.config_loader import AppConfig  # noqa: E402


class FakeEmbeddingProvider(EmbeddingProvider):
    """Deterministic provider returning preset vectors per text."""

    def __init__(
        self,
        vectors: dict[str, list[float]] | None = None,
        default: list[float] | None = None,
        error: Exception | None = None,
    ):
        super().__init__(model="fake-embedding", track_usage=False)
        self.vectors = dict(vectors or {})
        self.default = default
        self.error = error
        self.calls: list[str] = []
        self._calls_lock = threading.Lock()

    @property
    def provider_type(self) -> str:
        return "fake"

    @property
    def call_count(self) -> int:
        with self._calls_lock:
            return len(self.calls)

    def embed(self, text: str) -> list[float]:
        with self._calls_lock:
            self.calls.append(text)
        if self.error is not None:
            raise self.error
        if text in self.vectors:
            return list(self.vectors[text])
        if self.default is not None:
            return list(self.default)
        raise ProviderError(f"No fake vector for {text!r}")


class CountingVectorStore(LocalVectorStore):
    """LocalVectorStore recording how often it is queried."""

    def __init__(self, *args, query_error: Exception | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.query_calls = 0
        self.insert_calls = 0
        self.query_error = query_error

    def query_top_k(self, query, k):
        self.query_calls += 1
        if self.query_error is not None:
            raise self.query_error
        return super().query_top_k(query, k)

    def insert_batch(self, items):
        self.insert_calls += 1
        return super().insert_batch(items)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fake_provider_factory() -> Callable[..., FakeEmbeddingProvider]:
    return FakeEmbeddingProvider


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "agent_embeddings.db"


@pytest.fixture
def vector_store(store_path: Path) -> CountingVectorStore:
    return CountingVectorStore(store_path)


@pytest.fixture
def agent_vectors() -> dict[str, list[float]]:
    """Orthogonal example vectors for three agents plus a few queries."""
    return {
        "解析文档内容": [1.0, 0.0, 0.0],
        "分析PDF文件": [0.9, 0.1, 0.0],
        "查询专利用途": [0.0, 1.0, 0.0],
        "搜索专利信息": [0.1, 0.9, 0.0],
        "智能问答": [0.0, 0.0, 1.0],
    }


@pytest.fixture
def agent_examples() -> dict[str, list[str]]:
    return {
        "doc_analyzer": ["解析文档内容", "分析PDF文件"],
        "patent_search": ["查询专利用途", "搜索专利信息"],
        "tech_qa": ["智能问答"],
    }


@pytest.fixture
def corpus_file(tmp_path: Path, agent_examples: dict[str, list[str]]) -> Path:
    path = tmp_path / "agent_examples.txt"
    blocks = ["\n".join([label, *examples]) for label, examples in agent_examples.items()]
    path.write_text("\n\n".join(blocks) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def app_config(tmp_path: Path, store_path: Path, corpus_file: Path) -> AppConfig:
    config = AppConfig.default()
    config.vector_store.path = str(store_path)
    config.routing.corpus_path = str(corpus_file)
    config.evaluation.results_dir = str(tmp_path / "results")
    config.evaluation.dataset_path = str(tmp_path / "eval_queries.csv")
    return config
