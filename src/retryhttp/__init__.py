"""Resilient HTTP client: retries, per-status backoff and bounded bodies."""

from retryhttp.client import (
    DEFAULT_BACKOFF_STRATEGY,
    BackoffKind,
    BoundedBodyReader,
    ClientConfig,
    ContextCancelledError,
    DeadlineExceededError,
    RequestContext,
    RetryHttpError,
    RetryingClient,
    attach_context,
)


__all__ = [
    "DEFAULT_BACKOFF_STRATEGY",
    "BackoffKind",
    "BoundedBodyReader",
    "ClientConfig",
    "ContextCancelledError",
    "DeadlineExceededError",
    "RequestContext",
    "RetryHttpError",
    "RetryingClient",
    "attach_context",
]

__version__ = "0.1.0"
