"""Process-wide memoization of text embeddings."""

import threading
from typing import Any, Callable, Sequence

Vector = tuple[float, ...]


class EmbeddingCache:
    """
    Thread-safe text -> vector cache keyed by exact text.

    Entries live until clear() is called; there is no eviction. Two threads
    missing on the same text may both run the compute function, the last
    write wins.
    """

    def __init__(self):
        self._entries: dict[str, Vector] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, text: str) -> Vector | None:
        """Return the cached vector for text, or None."""
        with self._lock:
            return self._entries.get(text)

    def put(self, text: str, vector: Sequence[float]) -> Vector:
        """Store a vector and return the stored (immutable) copy."""
        stored = tuple(float(x) for x in vector)
        with self._lock:
            self._entries[text] = stored
        return stored

    def get_or_compute(
        self, text: str, compute_fn: Callable[[str], Sequence[float]]
    ) -> Vector:
        """
        Return the cached vector for text, computing and storing it on a miss.

        Args:
            text: Exact text to look up
            compute_fn: Called with text on a miss

        Returns:
            Cached vector

        Raises:
            Whatever compute_fn raises; failures are not cached
        """
        with self._lock:
            cached = self._entries.get(text)
            if cached is not None:
                self.hits += 1
                return cached
            self.misses += 1

        # compute_fn runs without holding the lock
        vector = compute_fn(text)
        return self.put(text, vector)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            return {"size": len(self._entries), "hits": self.hits, "misses": self.misses}

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, text: object) -> bool:
        with self._lock:
            return text in self._entries
