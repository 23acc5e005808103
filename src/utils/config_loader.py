"""Configuration loader for router settings."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from shared.data_types import FALLBACK_LABEL
from shared.exceptions import ConfigError
from utils.logger import get_logger

SUPPORTED_EMBEDDING_TYPES = ("litellm", "openai", "huggingface")


@dataclass
class EmbeddingConfig:
    """Configuration for the embedding provider."""

    type: str = "litellm"  # "litellm", "openai" or "huggingface"
    model: str = "text-embedding-3-small"
    api_key_env: str | None = "OPENAI_API_KEY"
    api_base_env: str | None = "OPENAI_BASE_URL"
    timeout: float = 10.0
    track_usage: bool = True


@dataclass
class VectorStoreConfig:
    """Configuration for the local vector store."""

    path: str = "agent_embeddings.db"


@dataclass
class RoutingConfig:
    """Configuration for routing decisions."""

    threshold: float = 0.5
    top_k: int = 5
    fallback_label: str = FALLBACK_LABEL
    corpus_path: str = "data/agent_examples.txt"


@dataclass
class EvaluationConfig:
    """Configuration for labeled evaluation runs."""

    dataset_path: str = "data/eval_queries.csv"
    save_results: bool = True
    results_dir: str = "results/evaluation"


@dataclass
class LoggingConfig:
    """Configuration for console logging."""

    level: str = "INFO"


@dataclass
class AppConfig:
    """Complete router configuration."""

    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    vector_store: VectorStoreConfig = field(default_factory=VectorStoreConfig)
    routing: RoutingConfig = field(default_factory=RoutingConfig)
    evaluation: EvaluationConfig = field(default_factory=EvaluationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def default(cls) -> "AppConfig":
        """Configuration with every setting at its default."""
        return cls()


class ConfigLoader:
    """Utility for loading and validating router configuration."""

    def __init__(self, config_path: str | Path = "config/router_config.yaml"):
        """
        Initialize config loader.

        Args:
            config_path: Path to YAML configuration file
        """
        self.config_path = Path(config_path)
        self.logger = get_logger(f"{__name__}.ConfigLoader")
        self.raw_config: dict[str, Any] | None = None

    def load_config(self) -> AppConfig:
        """
        Load configuration from YAML file.

        Returns:
            AppConfig object with all settings

        Raises:
            ConfigError: If the file is missing, unparseable or malformed
        """
        if not self.config_path.exists():
            raise ConfigError(f"Config file not found: {self.config_path}")

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            self.logger.error(f"YAML parsing error: {e}")
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not isinstance(raw_config, dict):
            raise ConfigError(
                f"Config root must be a mapping, got {type(raw_config).__name__}"
            )

        self.logger.info(f"Loaded configuration from {self.config_path}")

        # Store raw config for reproducibility
        self.raw_config = raw_config

        try:
            config = self._parse_config(raw_config)
        except (TypeError, ValueError, AttributeError) as e:
            self.logger.error(f"Configuration loading failed: {e}")
            raise ConfigError(f"Malformed configuration: {e}") from e

        return config

    def _parse_config(self, raw_config: dict[str, Any]) -> AppConfig:
        """Parse raw configuration into structured dataclasses."""
        defaults = AppConfig.default()

        embedding_raw = raw_config.get("embedding") or {}
        embedding = EmbeddingConfig(
            type=str(embedding_raw.get("type", defaults.embedding.type)),
            model=str(embedding_raw.get("model", defaults.embedding.model)),
            api_key_env=embedding_raw.get("api_key_env", defaults.embedding.api_key_env),
            api_base_env=embedding_raw.get(
                "api_base_env", defaults.embedding.api_base_env
            ),
            timeout=float(embedding_raw.get("timeout", defaults.embedding.timeout)),
            track_usage=bool(
                embedding_raw.get("track_usage", defaults.embedding.track_usage)
            ),
        )

        store_raw = raw_config.get("vector_store") or {}
        vector_store = VectorStoreConfig(
            path=str(store_raw.get("path", defaults.vector_store.path)),
        )

        routing_raw = raw_config.get("routing") or {}
        routing = RoutingConfig(
            threshold=float(routing_raw.get("threshold", defaults.routing.threshold)),
            top_k=int(routing_raw.get("top_k", defaults.routing.top_k)),
            fallback_label=str(
                routing_raw.get("fallback_label", defaults.routing.fallback_label)
            ),
            corpus_path=str(
                routing_raw.get("corpus_path", defaults.routing.corpus_path)
            ),
        )

        evaluation_raw = raw_config.get("evaluation") or {}
        evaluation = EvaluationConfig(
            dataset_path=str(
                evaluation_raw.get("dataset_path", defaults.evaluation.dataset_path)
            ),
            save_results=bool(
                evaluation_raw.get("save_results", defaults.evaluation.save_results)
            ),
            results_dir=str(
                evaluation_raw.get("results_dir", defaults.evaluation.results_dir)
            ),
        )

        logging_raw = raw_config.get("logging") or {}
        logging_config = LoggingConfig(
            level=str(logging_raw.get("level", defaults.logging.level)),
        )

        return AppConfig(
            embedding=embedding,
            vector_store=vector_store,
            routing=routing,
            evaluation=evaluation,
            logging=logging_config,
        )

    def validate_config(self, config: AppConfig) -> bool:
        """
        Validate configuration settings.

        Args:
            config: Configuration to validate

        Returns:
            True if valid, False otherwise
        """
        if config.embedding.type.lower() not in SUPPORTED_EMBEDDING_TYPES:
            self.logger.error(
                f"embedding type '{config.embedding.type}' is not one of {SUPPORTED_EMBEDDING_TYPES}"
            )
            return False

        if config.embedding.timeout <= 0:
            self.logger.error(
                f"timeout set to {config.embedding.timeout}, must be positive"
            )
            return False

        if not (-1.0 <= config.routing.threshold <= 1.0):
            self.logger.error(
                f"threshold set to {config.routing.threshold}, must be between -1.0 and 1.0"
            )
            return False

        if config.routing.top_k <= 0:
            self.logger.error(
                f"top_k set to {config.routing.top_k}, must be positive"
            )
            return False

        if not config.routing.fallback_label.strip():
            self.logger.error("fallback_label must not be blank")
            return False

        self.logger.info("Configuration validation passed")
        return True
