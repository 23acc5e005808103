"""Vector similarity helpers."""

import math
from typing import Sequence

from shared.exceptions import DimensionMismatchError


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """
    Compute cosine similarity between two vectors.

    Args:
        vec_a: First vector
        vec_b: Second vector

    Returns:
        Cosine similarity score between -1 and 1; 0.0 if either vector has
        zero magnitude or holds non-finite values

    Raises:
        DimensionMismatchError: If vectors have different dimensions
    """
    if len(vec_a) != len(vec_b):
        raise DimensionMismatchError(
            f"Vector dimensions must match: {len(vec_a)} != {len(vec_b)}"
        )

    if not all(math.isfinite(x) for x in (*vec_a, *vec_b)):
        return 0.0

    scale_a = max((abs(a) for a in vec_a), default=0.0)
    scale_b = max((abs(b) for b in vec_b), default=0.0)
    if scale_a == 0 or scale_b == 0:
        return 0.0

    # Scaling to max-abs 1.0 keeps the sums of squares from overflowing
    unit_a = [a / scale_a for a in vec_a]
    unit_b = [b / scale_b for b in vec_b]

    dot_product = sum(a * b for a, b in zip(unit_a, unit_b))
    magnitude_a = math.sqrt(sum(a * a for a in unit_a))
    magnitude_b = math.sqrt(sum(b * b for b in unit_b))

    similarity = dot_product / (magnitude_a * magnitude_b)
    if not math.isfinite(similarity):
        return 0.0
    # Rounding can push identical vectors slightly past 1.0
    return max(-1.0, min(1.0, similarity))
