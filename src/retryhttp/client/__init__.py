"""Retrying HTTP client with per-status backoff and bounded bodies.

This module provides outbound HTTP requests with:
- Retries on transport errors and configured status codes
- Constant or exponential backoff per status code
- Cancellation through a request context or deadline
- Maximum response body size enforcement
- Metrics collection for observability
"""

from retryhttp.client.backoff import next_wait, wait_schedule
from retryhttp.client.body import BoundedBodyReader
from retryhttp.client.client import RetryingClient
from retryhttp.client.config import ClientConfig
from retryhttp.client.constants import (
    DEFAULT_MAX_RESPONSE_SIZE_BYTES,
    DEFAULT_RETRY_MAX,
    DEFAULT_RETRY_WAIT_MAX_SECONDS,
    DEFAULT_RETRY_WAIT_MIN_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    NO_STATUS,
)
from retryhttp.client.context import RequestContext, attach_context, context_of
from retryhttp.client.errors import (
    ContextCancelledError,
    DeadlineExceededError,
    RetryHttpError,
)
from retryhttp.client.metrics import ClientMetrics
from retryhttp.client.models import DEFAULT_BACKOFF_STRATEGY, BackoffKind
from retryhttp.client.state import RetryState


__all__ = [
    # Client
    "RetryingClient",
    "BoundedBodyReader",
    # Config
    "ClientConfig",
    "BackoffKind",
    "DEFAULT_BACKOFF_STRATEGY",
    # Backoff
    "RetryState",
    "next_wait",
    "wait_schedule",
    # Cancellation
    "RequestContext",
    "attach_context",
    "context_of",
    # Errors
    "RetryHttpError",
    "ContextCancelledError",
    "DeadlineExceededError",
    # Constants
    "DEFAULT_MAX_RESPONSE_SIZE_BYTES",
    "DEFAULT_RETRY_MAX",
    "DEFAULT_RETRY_WAIT_MAX_SECONDS",
    "DEFAULT_RETRY_WAIT_MIN_SECONDS",
    "DEFAULT_TIMEOUT_SECONDS",
    "NO_STATUS",
    # Metrics
    "ClientMetrics",
]
