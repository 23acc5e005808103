"""Simple console logging for the router."""

import logging
import sys
from typing import Any

_LOG_LEVEL = logging.INFO
_LOGGER_NAMES: set[str] = set()


def set_log_level(level: int | str) -> None:
    """Set the level of loggers from get_logger, existing and future."""
    global _LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    _LOG_LEVEL = level

    for name in _LOGGER_NAMES:
        logging.getLogger(name).setLevel(level)


def get_logger(name: str = "agent_router") -> logging.Logger:
    """Get simple logger with basic console output."""
    # Clear any existing handlers to avoid duplicates
    logger = logging.getLogger(name)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(name)s | %(levelname)s | %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(_LOG_LEVEL)
    logger.propagate = False  # Prevent propagation to root logger
    _LOGGER_NAMES.add(name)

    return logger


def log_metrics(
    logger: logging.Logger, metrics: dict[str, Any], prefix: str = ""
) -> None:
    """Log key evaluation metrics."""
    if prefix:
        prefix = f"{prefix} - "

    logger.info(f"{prefix}=== METRICS ===")

    key_metrics = [
        "total_queries",
        "correct_predictions",
        "accuracy",
        "f1_macro",
        "fallback_rate",
        "avg_match_score",
        "total_latency",
        "avg_latency_per_query",
    ]

    for key in key_metrics:
        if key in metrics and metrics[key] is not None:
            value = metrics[key]
            if isinstance(value, float):
                if "latency" in key:
                    logger.info(f"{prefix}{key}: {value:.3f}s")
                else:
                    logger.info(f"{prefix}{key}: {value:.3f}")
            else:
                logger.info(f"{prefix}{key}: {value}")

    reasons = metrics.get("fallback_reasons") or {}
    for reason, count in reasons.items():
        logger.info(f"{prefix}fallback[{reason}]: {count}")


def log_route_decision(logger: logging.Logger, query: str, decision: Any) -> None:
    """Log a single routing decision."""
    preview = query if len(query) <= 50 else query[:50] + "..."
    if decision.matched:
        logger.info(f"'{preview}' -> {decision.label} (score: {decision.score:.3f})")
    else:
        reason = decision.reason.value if decision.reason else "unknown"
        logger.info(
            f"'{preview}' -> {decision.label} "
            f"(score: {decision.score:.3f}, reason: {reason})"
        )
