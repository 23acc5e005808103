"""SQLite-backed local vector store with exhaustive cosine search."""

import json
import math
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Sequence

from agent_router.similarity import cosine_similarity
from shared.data_types import CorpusItem, ScoredMatch
from shared.exceptions import DimensionMismatchError, StorageError
from utils.logger import get_logger


class LocalVectorStore:
    """
    Durable storage of labeled example embeddings in a single SQLite file.

    Vectors are stored as JSON float arrays. Queries scan every record and
    score it with cosine similarity, so a query costs O(N * D) for N records
    of dimension D. Corpora here are tens to hundreds of examples.

    Records are append-only. A connection is opened per operation and the
    schema is created on first use, so constructing the store never touches
    the disk.
    """

    def __init__(self, db_path: str | Path = "agent_embeddings.db", timeout: float = 5.0):
        """
        Initialize the vector store.

        Args:
            db_path: Path to the SQLite database file
            timeout: Seconds to wait on a locked database
        """
        self.db_path = Path(db_path)
        self.timeout = timeout
        self.logger = get_logger(f"{__name__}.LocalVectorStore")

        self._schema_ready = False
        self._schema_lock = threading.Lock()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection with the schema in place, closing it afterwards."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path), timeout=self.timeout)
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Cannot open vector store {self.db_path}: {e}") from e

        try:
            self._ensure_schema(conn)
            yield conn
        except sqlite3.Error as e:
            raise StorageError(f"Vector store operation failed: {e}") from e
        finally:
            conn.close()

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        """Create the embeddings table once per store instance."""
        with self._schema_lock:
            if self._schema_ready:
                return
            conn.execute("""
                CREATE TABLE IF NOT EXISTS embeddings (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    content TEXT,
                    agent_code TEXT,
                    embedding TEXT
                )
            """)
            conn.commit()
            self._schema_ready = True
            self.logger.debug(f"Vector store schema ready at {self.db_path}")

    @staticmethod
    def _parse_vector(raw: str | None) -> list[float] | None:
        """Decode a stored embedding, or None if it is corrupt."""
        if raw is None:
            return None
        try:
            values = json.loads(raw)
        except (TypeError, ValueError):
            return None
        if not isinstance(values, list) or not values:
            return None
        vector = []
        for value in values:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return None
            if not math.isfinite(value):
                return None
            vector.append(float(value))
        return vector

    def _first_stored_dimension(self, conn: sqlite3.Connection) -> int | None:
        for (raw,) in conn.execute("SELECT embedding FROM embeddings ORDER BY id"):
            vector = self._parse_vector(raw)
            if vector is not None:
                return len(vector)
        return None

    def insert_batch(self, items: Sequence[CorpusItem]) -> list[int]:
        """
        Persist a batch of corpus items as one transaction.

        Args:
            items: Items to insert

        Returns:
            Assigned record ids, in item order

        Raises:
            DimensionMismatchError: If vectors disagree with each other or
                with vectors already stored
            StorageError: If the write fails; nothing from the batch is kept
        """
        if not items:
            return []

        dimensions = {len(item.vector) for item in items}
        if len(dimensions) > 1:
            raise DimensionMismatchError(
                f"Batch contains vectors of different dimensions: {sorted(dimensions)}"
            )
        batch_dimension = dimensions.pop()

        with self._connect() as conn:
            stored_dimension = self._first_stored_dimension(conn)
            if stored_dimension is not None and stored_dimension != batch_dimension:
                raise DimensionMismatchError(
                    f"Batch dimension {batch_dimension} does not match stored dimension {stored_dimension}"
                )

            record_ids = []
            try:
                with conn:
                    for item in items:
                        cursor = conn.execute(
                            "INSERT INTO embeddings (content, agent_code, embedding) VALUES (?, ?, ?)",
                            (
                                item.example_text,
                                item.label,
                                json.dumps(list(item.vector)),
                            ),
                        )
                        record_ids.append(cursor.lastrowid)
            except sqlite3.Error as e:
                self.logger.error(f"Batch insert of {len(items)} records failed: {e}")
                raise StorageError(f"Batch insert failed: {e}") from e

        self.logger.info(f"Inserted {len(record_ids)} records into {self.db_path}")
        return record_ids

    def has_data(self) -> bool:
        """True if at least one record exists."""
        with self._connect() as conn:
            row = conn.execute("SELECT EXISTS(SELECT 1 FROM embeddings)").fetchone()
            return bool(row[0])

    def count(self) -> int:
        """Number of stored records."""
        with self._connect() as conn:
            row = conn.execute("SELECT COUNT(*) FROM embeddings").fetchone()
            return int(row[0])

    def stored_dimension(self) -> int | None:
        """Dimension of stored vectors, or None if the store has none."""
        with self._connect() as conn:
            return self._first_stored_dimension(conn)

    def query_top_k(self, query: Sequence[float], k: int) -> list[ScoredMatch]:
        """
        Find the k stored examples most similar to a query vector.

        Every record is scored; corrupt records are skipped with a warning.

        Args:
            query: Query vector
            k: Maximum number of results, must be positive

        Returns:
            Up to k matches sorted by score descending, ties by ascending id

        Raises:
            ValueError: If k is not positive
            DimensionMismatchError: If stored vectors differ in dimension
                from the query
            StorageError: If the store cannot be read
        """
        if k <= 0:
            raise ValueError(f"k must be positive, got {k}")

        scored: list[ScoredMatch] = []
        skipped = 0

        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, content, agent_code, embedding FROM embeddings"
            )
            for record_id, content, label, raw_embedding in rows:
                vector = self._parse_vector(raw_embedding)
                if vector is None or not label or not str(label).strip():
                    skipped += 1
                    self.logger.warning(f"Skipping corrupt record {record_id}")
                    continue

                if len(vector) != len(query):
                    raise DimensionMismatchError(
                        f"Query dimension {len(query)} does not match record "
                        f"{record_id} dimension {len(vector)}"
                    )

                scored.append(
                    ScoredMatch(
                        record_id=record_id,
                        label=label,
                        content=content or "",
                        score=cosine_similarity(query, vector),
                    )
                )

        scored.sort(key=lambda match: (-match.score, match.record_id))

        if skipped:
            self.logger.warning(
                f"Skipped {skipped} corrupt records while scoring {len(scored)}"
            )

        return scored[:k]
