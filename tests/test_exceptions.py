"""Tests for provider error classification."""

import pytest

from shared.exceptions import (
    AuthenticationError,
    BadRequestError,
    DimensionMismatchError,
    ProviderConnectionError,
    ProviderError,
    ProviderTimeoutError,
    RateLimitError,
    RouterError,
    ServerError,
    StorageError,
    classify_provider_error,
)


class APITimeoutError(Exception):
    pass


class APIConnectionError(Exception):
    pass


class TestClassifyProviderError:
    @pytest.mark.parametrize(
        "error, expected",
        [
            (Exception("Error code: 429 - Rate limit reached"), RateLimitError),
            (APITimeoutError("request took too long"), ProviderTimeoutError),
            (Exception("Read timed out"), ProviderTimeoutError),
            (APIConnectionError("refused"), ProviderConnectionError),
            (Exception("network is unreachable"), ProviderConnectionError),
            (Exception("Error code: 503 - overloaded"), ServerError),
            (Exception("Error code: 401 - invalid api key"), AuthenticationError),
            (Exception("Error code: 400 - input too long"), BadRequestError),
            (Exception("something odd"), ProviderError),
        ],
    )
    def test_classification(self, error, expected):
        classified = classify_provider_error(error)

        assert type(classified) is expected
        assert str(classified) == str(error)

    def test_already_classified_passes_through(self):
        error = RateLimitError("slow down")
        assert classify_provider_error(error) is error


class TestHierarchy:
    def test_all_errors_are_router_errors(self):
        for cls in (ProviderError, RateLimitError, StorageError, DimensionMismatchError):
            assert issubclass(cls, RouterError)

    def test_dimension_mismatch_is_value_error(self):
        assert issubclass(DimensionMismatchError, ValueError)
