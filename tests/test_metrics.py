"""Tests for routing metrics and results storage."""

import csv
import json

import pytest

from shared.data_types import (
    EvaluatedQuery,
    FallbackReason,
    LabeledQuery,
    RouteDecision,
    ScoredMatch,
)
from shared.metrics import calculate_routing_metrics
from shared.results_storage import ResultsStorage


def evaluated(query_id, text, expected, decision, latency=0.01):
    return EvaluatedQuery(
        query=LabeledQuery(query_id=query_id, text=text, expected_label=expected),
        decision=decision,
        latency=latency,
    )


def matched(label, score):
    best = ScoredMatch(record_id=1, label=label, content="example", score=score)
    return RouteDecision.match(best, [best])


@pytest.fixture
def results():
    return [
        evaluated(1, "解析文档内容", "doc_analyzer", matched("doc_analyzer", 0.9)),
        evaluated(2, "查询专利", "patent_search", matched("doc_analyzer", 0.7)),
        evaluated(
            3,
            "随机无关内容12345",
            "fallback_agent",
            RouteDecision.fallback(FallbackReason.BELOW_THRESHOLD, score=0.2),
        ),
        evaluated(
            4,
            "智能问答",
            "tech_qa",
            RouteDecision.fallback(FallbackReason.PROVIDER_ERROR),
        ),
    ]


class TestCalculateRoutingMetrics:
    def test_empty_results(self):
        assert calculate_routing_metrics([]) == {}

    def test_counts_and_rates(self, results):
        metrics = calculate_routing_metrics(results)

        assert metrics["total_queries"] == 4
        assert metrics["correct_predictions"] == 2
        assert metrics["accuracy"] == pytest.approx(0.5)
        assert metrics["matched_queries"] == 2
        assert metrics["fallback_queries"] == 2
        assert metrics["fallback_rate"] == pytest.approx(0.5)
        assert metrics["fallback_reasons"] == {"below_threshold": 1, "provider_error": 1}
        assert metrics["avg_match_score"] == pytest.approx(0.8)
        assert metrics["total_latency"] == pytest.approx(0.04)
        assert metrics["latency_unit"] == "seconds"

    def test_classification_report_included(self, results):
        metrics = calculate_routing_metrics(results)

        report = metrics["classification_report"]
        assert "doc_analyzer" in report
        assert "fallback_agent" in report
        assert report["fallback_agent"]["recall"] == pytest.approx(1.0)
        assert 0.0 <= metrics["f1_macro"] <= 1.0
        assert 0.0 <= metrics["f1_weighted"] <= 1.0

    def test_no_matches_gives_no_average_score(self):
        only_fallbacks = [
            evaluated(1, "x", "fallback_agent", RouteDecision.fallback(FallbackReason.NO_RESULTS))
        ]

        metrics = calculate_routing_metrics(only_fallbacks)

        assert metrics["avg_match_score"] is None
        assert metrics["accuracy"] == 1.0


class TestResultsStorage:
    def test_save_and_summarize_run(self, tmp_path, results):
        storage = ResultsStorage(tmp_path / "runs")
        run_id = storage.create_run_directory()
        metrics = calculate_routing_metrics(results)

        storage.save_decisions(run_id, results)
        storage.save_metrics(run_id, metrics, {"state": "ready"})

        run_dir = tmp_path / "runs" / run_id
        with open(run_dir / "metrics.json", encoding="utf-8") as f:
            saved = json.load(f)
        assert saved["run_id"] == run_id
        assert saved["metrics"]["accuracy"] == 0.5

        with open(run_dir / "decisions.csv", newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert len(rows) == 4
        assert rows[0]["predicted_label"] == "doc_analyzer"
        assert rows[0]["correct"] == "True"
        assert rows[2]["fallback_reason"] == "below_threshold"
        assert rows[2]["query"] == "随机无关内容12345"

        summary = storage.get_run_summary(run_id)
        assert summary["has_decisions"] is True
        assert summary["run_info"]["router_info"] == {"state": "ready"}
        assert summary["metrics"]["total_queries"] == 4

    def test_long_query_truncated_in_csv(self, tmp_path):
        storage = ResultsStorage(tmp_path)
        long_text = "文" * 150
        storage.save_decisions(
            "run",
            [evaluated(1, long_text, "x", RouteDecision.fallback(FallbackReason.NO_RESULTS))],
        )

        with open(tmp_path / "run" / "decisions.csv", newline="", encoding="utf-8") as f:
            row = next(csv.DictReader(f))
        assert row["query"] == "文" * 100 + "..."

    def test_list_runs(self, tmp_path):
        storage = ResultsStorage(tmp_path / "runs")
        assert storage.list_runs() == []

        first = storage.create_run_directory("first")
        assert storage.list_runs() == [first]

    def test_missing_run_summary(self, tmp_path):
        assert ResultsStorage(tmp_path).get_run_summary("nope") is None

    def test_generated_run_ids_unique(self, tmp_path):
        storage = ResultsStorage(tmp_path)
        assert storage.generate_run_id() != storage.generate_run_id()
