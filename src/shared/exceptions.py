"""Custom exceptions for the agent routing system."""


class RouterError(Exception):
    """Base exception for routing errors."""

    pass


class ProviderError(RouterError):
    """Embedding provider call failed (network, auth, rate limit)."""

    pass


class RateLimitError(ProviderError):
    """Rate limiting error from the embedding API."""

    pass


class ProviderTimeoutError(ProviderError):
    """Timeout error from the embedding API or network."""

    pass


class ProviderConnectionError(ProviderError):
    """Network or connection error."""

    pass


class ServerError(ProviderError):
    """Server-side error (5xx status codes)."""

    pass


class AuthenticationError(ProviderError):
    """Authentication or authorization error."""

    pass


class BadRequestError(ProviderError):
    """Bad request error (4xx status codes)."""

    pass


class StorageError(RouterError):
    """I/O failure opening, reading or writing the vector store."""

    pass


class DimensionMismatchError(RouterError, ValueError):
    """Vectors of different dimensions were compared or stored together."""

    pass


class ConfigError(RouterError):
    """Missing or invalid configuration, corpus or credentials."""

    pass


def classify_provider_error(error: Exception) -> ProviderError:
    """
    Classify a raw client exception into the provider error hierarchy.

    Args:
        error: The original exception

    Returns:
        Classified ProviderError subclass
    """
    if isinstance(error, ProviderError):
        return error

    error_str = str(error).lower()
    error_type = type(error).__name__.lower()

    # Rate limiting
    if "rate limit" in error_str or "ratelimit" in error_type or "429" in error_str:
        return RateLimitError(str(error))

    # Timeout errors
    if "timeout" in error_type or "timeout" in error_str or "timed out" in error_str:
        return ProviderTimeoutError(str(error))

    # Connection errors
    if (
        "connection" in error_type
        or "connection" in error_str
        or "network" in error_str
    ):
        return ProviderConnectionError(str(error))

    # Server errors (5xx)
    if any(code in error_str for code in ["500", "502", "503", "504"]):
        return ServerError(str(error))

    # Authentication errors
    if "authentication" in error_type or any(
        code in error_str for code in ["401", "403"]
    ):
        return AuthenticationError(str(error))

    # Bad request errors
    if any(code in error_str for code in ["400", "404"]):
        return BadRequestError(str(error))

    return ProviderError(str(error))
