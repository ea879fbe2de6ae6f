"""HTTP client wrappers for the DEX REST API."""

from .client import (
    ApiUnreachableError,
    DexApiClient,
    DexApiError,
    NotFoundError,
    RateLimitedError,
    UnauthorizedError,
    default_client,
)

__all__ = [
    "DexApiClient",
    "DexApiError",
    "UnauthorizedError",
    "NotFoundError",
    "RateLimitedError",
    "ApiUnreachableError",
    "default_client",
]
