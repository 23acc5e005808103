"""Tests for cosine similarity."""

import math

import pytest

from agent_router.similarity import cosine_similarity
from shared.exceptions import DimensionMismatchError


class TestCosineSimilarity:
    def test_equal_vectors(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0, abs=1e-6)

    def test_scaled_vectors_are_identical_direction(self):
        assert cosine_similarity([1.0, 2.0], [10.0, 20.0]) == pytest.approx(1.0, abs=1e-6)

    def test_orthogonal_vectors(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0, abs=1e-9)

    def test_opposite_vectors(self):
        assert cosine_similarity([1.0, -2.0, 3.0], [-1.0, 2.0, -3.0]) == pytest.approx(-1.0, abs=1e-6)

    @pytest.mark.parametrize(
        "vec_a, vec_b",
        [
            ([0.0, 0.0, 0.0], [1.0, 0.0, 0.0]),
            ([1.0, 0.0, 0.0], [0.0, 0.0, 0.0]),
            ([0.0, 0.0], [0.0, 0.0]),
        ],
    )
    def test_zero_magnitude_is_zero_not_nan(self, vec_a, vec_b):
        result = cosine_similarity(vec_a, vec_b)
        assert result == 0.0
        assert not math.isnan(result)

    def test_dimension_mismatch_raises(self):
        with pytest.raises(DimensionMismatchError):
            cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0])

    def test_dimension_mismatch_is_value_error(self):
        with pytest.raises(ValueError):
            cosine_similarity([1.0], [1.0, 2.0])

    @pytest.mark.parametrize(
        "vec_a, vec_b",
        [
            ([float("nan"), 0.0], [1.0, 0.0]),
            ([1.0, 0.0], [1.0, float("nan")]),
            ([float("inf"), 0.0], [1.0, 0.0]),
            ([1.0, 1.0], [float("-inf"), 1.0]),
        ],
    )
    def test_non_finite_values_score_zero(self, vec_a, vec_b):
        assert cosine_similarity(vec_a, vec_b) == 0.0

    def test_huge_values_do_not_overflow(self):
        assert cosine_similarity([1e200, 1e200], [1e200, -1e200]) == pytest.approx(0.0, abs=1e-9)
        assert cosine_similarity([1e200, 1e200], [3e200, 3e200]) == pytest.approx(1.0, abs=1e-6)

    def test_tiny_values_keep_direction(self):
        assert cosine_similarity([1e-200, 0.0], [1e-200, 0.0]) == pytest.approx(1.0, abs=1e-6)

    def test_result_is_clamped(self):
        vec = [0.1] * 1536
        assert -1.0 <= cosine_similarity(vec, vec) <= 1.0
