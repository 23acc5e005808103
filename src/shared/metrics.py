"""Shared metrics calculation utilities."""

from collections import Counter
from typing import Any

from sklearn.metrics import classification_report

from shared.data_types import EvaluatedQuery


def calculate_routing_metrics(results: list[EvaluatedQuery]) -> dict[str, Any]:
    """Calculate aggregate metrics from evaluated routing decisions."""
    if not results:
        return {}

    total_queries = len(results)
    correct = sum(1 for r in results if r.is_correct)

    fallbacks = [r for r in results if not r.decision.matched]
    matched = [r for r in results if r.decision.matched]
    fallback_reasons = Counter(
        r.decision.reason.value for r in fallbacks if r.decision.reason is not None
    )

    total_latency = sum(r.latency for r in results)

    y_true = [r.query.expected_label for r in results]
    y_pred = [r.decision.label for r in results]
    unique_labels = sorted(set(y_true + y_pred))

    try:
        report = classification_report(
            y_true, y_pred, labels=unique_labels, output_dict=True, zero_division=0
        )

        macro_avg = report.get("macro avg", {})
        weighted_avg = report.get("weighted avg", {})

        classification_metrics = {
            "precision_macro": macro_avg.get("precision", 0.0),
            "recall_macro": macro_avg.get("recall", 0.0),
            "f1_macro": macro_avg.get("f1-score", 0.0),
            "precision_weighted": weighted_avg.get("precision", 0.0),
            "recall_weighted": weighted_avg.get("recall", 0.0),
            "f1_weighted": weighted_avg.get("f1-score", 0.0),
            "classification_report": report,
        }
    except ValueError as e:
        classification_metrics = {
            "error": f"Could not calculate sklearn metrics: {str(e)}"
        }

    metrics = {
        "total_queries": total_queries,
        "correct_predictions": correct,
        "accuracy": correct / total_queries,
        "matched_queries": len(matched),
        "fallback_queries": len(fallbacks),
        "fallback_rate": len(fallbacks) / total_queries,
        "fallback_reasons": dict(fallback_reasons),
        "avg_match_score": sum(r.decision.score for r in matched) / len(matched)
        if matched
        else None,
        "total_latency": total_latency,
        "avg_latency_per_query": total_latency / total_queries,
        "latency_unit": "seconds",
    }
    metrics.update(classification_metrics)

    return metrics
