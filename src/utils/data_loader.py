"""Loader for labeled evaluation queries."""

from pathlib import Path

import pandas as pd

from shared.data_types import LabeledQuery
from shared.exceptions import ConfigError
from utils.logger import get_logger


class LabeledQueryLoader:
    """Loads (query, expected_label) pairs from a CSV file."""

    QUERY_COLUMN = "query"
    LABEL_COLUMN = "expected_label"
    ID_COLUMN = "query_id"

    def __init__(self, dataset_path: str | Path = "data/eval_queries.csv"):
        self.dataset_path = Path(dataset_path)
        self.logger = get_logger(f"{__name__}.LabeledQueryLoader")

    def load(self) -> list[LabeledQuery]:
        """
        Load labeled queries.

        Returns:
            List of LabeledQuery objects, in file order

        Raises:
            ConfigError: If the file is missing or lacks required columns
        """
        if not self.dataset_path.exists():
            raise ConfigError(f"Evaluation dataset not found: {self.dataset_path}")

        df = pd.read_csv(self.dataset_path, dtype=str, keep_default_na=False)

        missing = {self.QUERY_COLUMN, self.LABEL_COLUMN} - set(df.columns)
        if missing:
            raise ConfigError(
                f"Evaluation dataset {self.dataset_path} is missing columns: {sorted(missing)}"
            )

        has_ids = self.ID_COLUMN in df.columns
        queries = [
            LabeledQuery(
                query_id=row[self.ID_COLUMN] if has_ids else index,
                text=row[self.QUERY_COLUMN],
                expected_label=row[self.LABEL_COLUMN].strip(),
            )
            for index, row in df.iterrows()
        ]

        self.logger.info(f"Loaded {len(queries)} labeled queries from {self.dataset_path}")
        return queries
