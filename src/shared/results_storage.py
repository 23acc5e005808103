"""Results storage utility for saving evaluation outputs and metrics."""

import csv
import json
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

from shared.data_types import EvaluatedQuery
from utils.logger import get_logger


class ResultsStorage:
    """Utility class for saving evaluation runs to disk."""

    def __init__(self, base_dir: str | Path = "results/evaluation"):
        """
        Initialize results storage.

        Args:
            base_dir: Base directory for storing results
        """
        self.base_dir = Path(base_dir)
        self.logger = get_logger(f"{__name__}.ResultsStorage")

    def generate_run_id(self) -> str:
        """Generate unique run ID with timestamp and random suffix."""
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        return f"{timestamp}_{uuid.uuid4().hex[:8]}"

    def create_run_directory(self, run_id: str | None = None) -> str:
        """
        Create directory for an evaluation run.

        Args:
            run_id: Optional run ID. If None, generates one automatically.

        Returns:
            The run ID used
        """
        if run_id is None:
            run_id = self.generate_run_id()

        run_dir = self.base_dir / run_id
        run_dir.mkdir(parents=True, exist_ok=True)
        self.logger.info(f"Created run directory: {run_dir}")
        return run_id

    def save_metrics(
        self,
        run_id: str,
        metrics: dict[str, Any],
        router_info: dict[str, Any] | None = None,
    ) -> None:
        """
        Save metrics and run metadata to JSON files.

        Args:
            run_id: Run identifier
            metrics: Evaluation metrics dictionary
            router_info: Router configuration and state
        """
        run_dir = self.base_dir / run_id
        run_dir.mkdir(parents=True, exist_ok=True)

        metrics_data = {
            "timestamp": datetime.now().isoformat(),
            "run_id": run_id,
            "metrics": metrics,
        }
        with open(run_dir / "metrics.json", "w", encoding="utf-8") as f:
            json.dump(metrics_data, f, indent=2, ensure_ascii=False, default=str)

        run_info = {
            "run_id": run_id,
            "timestamp": datetime.now().isoformat(),
            "router_info": router_info or {},
            "files_generated": {
                "metrics": "metrics.json",
                "decisions": "decisions.csv",
                "run_info": "run_info.json",
            },
        }
        with open(run_dir / "run_info.json", "w", encoding="utf-8") as f:
            json.dump(run_info, f, indent=2, ensure_ascii=False, default=str)

        self.logger.info(f"Saved metrics to {run_dir / 'metrics.json'}")

    def save_decisions(self, run_id: str, results: list[EvaluatedQuery]) -> None:
        """
        Save query-level routing decisions to CSV.

        Args:
            run_id: Run identifier
            results: Evaluated queries
        """
        run_dir = self.base_dir / run_id
        run_dir.mkdir(parents=True, exist_ok=True)
        decisions_file = run_dir / "decisions.csv"

        fieldnames = [
            "query_id",
            "query",
            "expected_label",
            "predicted_label",
            "correct",
            "score",
            "fallback_reason",
            "latency",
        ]
        with open(decisions_file, "w", newline="", encoding="utf-8") as csvfile:
            writer = csv.DictWriter(csvfile, fieldnames=fieldnames)
            writer.writeheader()
            for result in results:
                text = result.query.text.replace("\n", " ").replace("\r", " ")
                writer.writerow(
                    {
                        "query_id": result.query.query_id,
                        "query": text[:100] + "..." if len(text) > 100 else text,
                        "expected_label": result.query.expected_label,
                        "predicted_label": result.decision.label,
                        "correct": result.is_correct,
                        "score": f"{result.decision.score:.4f}",
                        "fallback_reason": result.decision.reason.value
                        if result.decision.reason
                        else "",
                        "latency": f"{result.latency:.4f}",
                    }
                )

        self.logger.info(f"Saved decisions to {decisions_file}")

    def get_run_summary(self, run_id: str) -> dict[str, Any] | None:
        """
        Load and return summary of a completed run.

        Args:
            run_id: Run identifier

        Returns:
            Dictionary with run summary or None if not found
        """
        run_dir = self.base_dir / run_id

        if not run_dir.exists():
            self.logger.error(f"Run directory {run_dir} not found")
            return None

        summary: dict[str, Any] = {}

        run_info_file = run_dir / "run_info.json"
        if run_info_file.exists():
            with open(run_info_file, "r", encoding="utf-8") as f:
                summary["run_info"] = json.load(f)

        metrics_file = run_dir / "metrics.json"
        if metrics_file.exists():
            with open(metrics_file, "r", encoding="utf-8") as f:
                summary["metrics"] = json.load(f).get("metrics", {})

        decisions_file = run_dir / "decisions.csv"
        summary["has_decisions"] = decisions_file.exists()

        return summary

    def list_runs(self) -> list[str]:
        """
        List all available run IDs.

        Returns:
            List of run ID strings, newest first
        """
        if not self.base_dir.exists():
            return []

        run_dirs = [d for d in self.base_dir.iterdir() if d.is_dir()]
        run_dirs.sort(key=lambda x: x.stat().st_mtime, reverse=True)
        return [d.name for d in run_dirs]
