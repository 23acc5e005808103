"""Labeled evaluation pipeline for the agent router."""

import time
from typing import Any

from agent_router.builder import RouterBuilder
from shared.base_provider import EmbeddingProvider
from shared.data_types import EvaluatedQuery
from shared.metrics import calculate_routing_metrics
from shared.results_storage import ResultsStorage
from utils.config_loader import AppConfig, ConfigLoader
from utils.data_loader import LabeledQueryLoader
from utils.logger import get_logger


class RoutingEvaluationPipeline:
    """Pipeline for measuring routing accuracy on labeled queries."""

    def __init__(
        self,
        config_path: str = "config/router_config.yaml",
        config: AppConfig | None = None,
        provider: EmbeddingProvider | None = None,
    ):
        """
        Initialize evaluation pipeline.

        Args:
            config_path: Path to configuration file
            config: Already loaded configuration, skips reading config_path
            provider: Optional provider overriding the configured one
        """
        self.config = config or ConfigLoader(config_path).load_config()
        self.provider = provider
        self.logger = get_logger(f"{__name__}.RoutingEvaluationPipeline")

    def run(
        self, dataset_path: str | None = None
    ) -> tuple[list[EvaluatedQuery], dict[str, Any]]:
        """
        Route every labeled query and compute metrics.

        Args:
            dataset_path: CSV of labeled queries (default from config)

        Returns:
            Tuple of (evaluated queries, metrics)
        """
        dataset_path = dataset_path or self.config.evaluation.dataset_path

        self.logger.info("=== ROUTER EVALUATION PIPELINE ===")
        self.logger.info(f"Dataset: {dataset_path}")
        self.logger.info(f"Threshold: {self.config.routing.threshold}")

        queries = LabeledQueryLoader(dataset_path).load()

        router = RouterBuilder(self.config, provider=self.provider).build()
        router.initialize()

        results = []
        for labeled_query in queries:
            start_time = time.perf_counter()
            decision = router.route_with_details(labeled_query.text)
            latency = time.perf_counter() - start_time
            results.append(
                EvaluatedQuery(query=labeled_query, decision=decision, latency=latency)
            )

        metrics = calculate_routing_metrics(results)
        metrics["pipeline_name"] = "router_evaluation"
        metrics["router_info"] = router.get_router_info()

        if self.config.evaluation.save_results:
            self._save_results(results, metrics)

        self.logger.info("=== ROUTER EVALUATION COMPLETED ===")
        return results, metrics

    def _save_results(
        self, results: list[EvaluatedQuery], metrics: dict[str, Any]
    ) -> None:
        """Persist decisions and metrics; failures are logged, not raised."""
        try:
            storage = ResultsStorage(self.config.evaluation.results_dir)
            run_id = storage.create_run_directory()
            storage.save_decisions(run_id, results)
            storage.save_metrics(
                run_id,
                {k: v for k, v in metrics.items() if k != "router_info"},
                metrics.get("router_info"),
            )
            metrics["run_id"] = run_id
            self.logger.info(f"Evaluation results saved to run: {run_id}")
        except OSError as e:
            self.logger.error(f"Failed to save evaluation results: {e}")

    def list_available_runs(self) -> list[str]:
        """List saved evaluation runs, newest first."""
        return ResultsStorage(self.config.evaluation.results_dir).list_runs()
