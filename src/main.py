"""Command line entry point for the agent router."""

import argparse
import sys
from typing import Any

from agent_router.vector_store import LocalVectorStore
from pipelines.evaluation_pipeline import RoutingEvaluationPipeline
from pipelines.route_pipeline import RoutingPipeline
from pipelines.store_init_pipeline import StoreInitPipeline, discard_store_file
from shared.data_types import RouteDecision
from shared.results_storage import ResultsStorage
from utils.config_loader import AppConfig, ConfigLoader
from utils.corpus_loader import ExampleCorpusLoader
from utils.logger import get_logger, log_metrics, set_log_level


def load_config(config_path: str) -> AppConfig:
    """Load, validate and apply logging settings from the config file."""
    loader = ConfigLoader(config_path)
    config = loader.load_config()
    if not loader.validate_config(config):
        raise ValueError(f"Invalid configuration in {config_path}")
    set_log_level(config.logging.level)
    return config


def route_queries(args: argparse.Namespace) -> list[RouteDecision]:
    """Route the queries given on the command line."""
    config = load_config(args.config)
    pipeline = RoutingPipeline(config=config)
    decisions = pipeline.run(args.queries)

    for query, decision in zip(args.queries, decisions):
        print(f"{decision.label}\t{decision.score:.4f}\t{query}")

    return decisions


def init_store(args: argparse.Namespace) -> dict[str, Any]:
    """Populate the vector store with agent examples."""
    logger = get_logger("init_store_cmd")
    config = load_config(args.config)

    summary = StoreInitPipeline(config=config).run(force=args.force)
    if summary["state"] != "ready":
        raise RuntimeError(f"Store initialization failed: {summary['init_error']}")

    logger.info("Vector store initialization completed successfully")
    return summary


def evaluate(args: argparse.Namespace) -> dict[str, Any]:
    """Evaluate routing accuracy on labeled queries."""
    logger = get_logger("evaluate_cmd")
    config = load_config(args.config)

    _, metrics = RoutingEvaluationPipeline(config=config).run(args.dataset)
    log_metrics(logger, metrics, "AGENT ROUTER")
    return metrics


def clear_store(args: argparse.Namespace) -> None:
    """Delete the vector store file."""
    logger = get_logger("clear_store_cmd")
    config = load_config(args.config)

    if discard_store_file(config.vector_store.path):
        logger.info(f"Removed vector store {config.vector_store.path}")
    else:
        logger.info(f"No vector store found at {config.vector_store.path}")


def get_status(args: argparse.Namespace) -> None:
    """Show store and corpus status without calling the embedding provider."""
    logger = get_logger("status_cmd")
    config = load_config(args.config)

    logger.info("=== SYSTEM STATUS ===")

    store = LocalVectorStore(config.vector_store.path)
    if store.db_path.exists():
        logger.info(f"Vector store: {store.db_path}")
        logger.info(f"   Records: {store.count()}")
        logger.info(f"   Dimension: {store.stored_dimension()}")
    else:
        logger.info(f"Vector store: not created ({store.db_path})")

    corpus = ExampleCorpusLoader(config.routing.corpus_path).load()
    if corpus:
        logger.info(f"Corpus labels: {sorted(corpus)}")
    else:
        logger.info("Corpus file unavailable, built-in examples will be used")

    logger.info(
        f"Embedding: {config.embedding.type} - {config.embedding.model} "
        f"(timeout: {config.embedding.timeout}s)"
    )
    logger.info(
        f"Routing: threshold {config.routing.threshold}, top_k {config.routing.top_k}"
    )

    storage = ResultsStorage(config.evaluation.results_dir)
    runs = storage.list_runs()
    logger.info(f"Evaluation runs: {len(runs)}")
    if runs:
        logger.info(f"   Latest: {runs[0]}")
        summary = storage.get_run_summary(runs[0]) or {}
        accuracy = summary.get("metrics", {}).get("accuracy")
        if accuracy is not None:
            logger.info(f"   Latest accuracy: {accuracy:.3f}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Embedding-similarity agent router",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
        Examples:
            python main.py status                      # Check store and corpus status
            python main.py init-store                  # Populate the vector store
            python main.py init-store --force          # Rebuild the vector store
            python main.py route "解析文档内容"         # Route one or more queries
            python main.py evaluate                    # Measure routing accuracy
            python main.py clear-store                 # Delete the vector store
        """,
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config/router_config.yaml",
        help="Path to configuration file",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    route_parser = subparsers.add_parser("route", help="Route queries to agents")
    route_parser.add_argument("queries", nargs="+", help="Queries to route")
    route_parser.set_defaults(handler=route_queries)

    init_parser = subparsers.add_parser("init-store", help="Populate the vector store")
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Discard the existing store before populating",
    )
    init_parser.set_defaults(handler=init_store)

    eval_parser = subparsers.add_parser("evaluate", help="Evaluate on labeled queries")
    eval_parser.add_argument(
        "--dataset",
        type=str,
        default=None,
        help="CSV with query,expected_label columns (default from config)",
    )
    eval_parser.set_defaults(handler=evaluate)

    clear_parser = subparsers.add_parser("clear-store", help="Delete the vector store")
    clear_parser.set_defaults(handler=clear_store)

    status_parser = subparsers.add_parser("status", help="Show system status")
    status_parser.set_defaults(handler=get_status)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        args.handler(args)
    except KeyboardInterrupt:
        logger = get_logger("main")
        logger.info("Interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger = get_logger("main")
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
