"""Vector store initialization pipeline."""

from pathlib import Path
from typing import Any

from agent_router.builder import RouterBuilder
from shared.base_provider import EmbeddingProvider
from shared.data_types import RouterState
from shared.exceptions import StorageError
from utils.config_loader import AppConfig, ConfigLoader
from utils.logger import get_logger


def discard_store_file(store_path: str | Path) -> bool:
    """
    Delete the vector store file so it is re-populated on next start.

    Args:
        store_path: Path to the SQLite store

    Returns:
        True if a file was removed, False if none existed

    Raises:
        StorageError: If the file exists but cannot be removed
    """
    path = Path(store_path)
    if not path.exists():
        return False
    try:
        path.unlink()
    except OSError as e:
        raise StorageError(f"Cannot remove vector store {path}: {e}") from e
    return True


class StoreInitPipeline:
    """Pipeline for populating the vector store with agent examples."""

    def __init__(
        self,
        config_path: str = "config/router_config.yaml",
        config: AppConfig | None = None,
        provider: EmbeddingProvider | None = None,
    ):
        """
        Initialize store population pipeline.

        Args:
            config_path: Path to configuration file
            config: Already loaded configuration, skips reading config_path
            provider: Optional provider overriding the configured one
        """
        self.config = config or ConfigLoader(config_path).load_config()
        self.provider = provider
        self.logger = get_logger(f"{__name__}.StoreInitPipeline")

    def run(self, force: bool = False) -> dict[str, Any]:
        """
        Populate the vector store unless it already holds data.

        Args:
            force: Discard any existing store file first

        Returns:
            Initialization summary
        """
        self.logger.info("=== VECTOR STORE INITIALIZATION PIPELINE ===")

        builder = RouterBuilder(self.config, provider=self.provider)
        for key, value in builder.get_build_summary().items():
            self.logger.info(f"{key}: {value}")

        if force and discard_store_file(self.config.vector_store.path):
            self.logger.info(
                f"Discarded existing vector store {self.config.vector_store.path}"
            )

        router = builder.build()
        state = router.initialize()

        summary = router.get_router_info()
        summary["record_count"] = (
            router.vector_store.count() if state is RouterState.READY else None
        )

        if state is RouterState.DEGRADED:
            self.logger.error(f"Initialization degraded: {router.init_error}")
        else:
            self.logger.info("=== VECTOR STORE INITIALIZATION COMPLETED ===")
            self.logger.info(f"Labels: {summary['labels']}")
            self.logger.info(f"Records in store: {summary['record_count']}")
            provider_info = summary["provider"]
            if provider_info.get("total_cost"):
                self.logger.info(
                    f"Embedding cost: ${provider_info['total_cost']:.6f} "
                    f"({provider_info['total_tokens']} tokens)"
                )

        return summary
