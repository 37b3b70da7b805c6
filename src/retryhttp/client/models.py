"""Data models for the retrying HTTP client."""

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

from retryhttp.client.constants import (
    HTTP_STATUS_BAD_GATEWAY,
    HTTP_STATUS_GATEWAY_TIMEOUT,
    HTTP_STATUS_SERVICE_UNAVAILABLE,
    HTTP_STATUS_TOO_MANY_REQUESTS,
)


class BackoffKind(str, Enum):
    """Backoff strategy applied after a retriable outcome.

    - CONSTANT: every wait equals the configured minimum wait
    - EXPONENTIAL: the wait doubles after each retry, capped at the maximum
    """

    CONSTANT = "constant"
    EXPONENTIAL = "exponential"


# Process-wide default; merged into each ClientConfig, never mutated.
DEFAULT_BACKOFF_STRATEGY: Mapping[int, BackoffKind] = MappingProxyType(
    {
        HTTP_STATUS_TOO_MANY_REQUESTS: BackoffKind.EXPONENTIAL,
        HTTP_STATUS_BAD_GATEWAY: BackoffKind.CONSTANT,
        HTTP_STATUS_SERVICE_UNAVAILABLE: BackoffKind.CONSTANT,
        HTTP_STATUS_GATEWAY_TIMEOUT: BackoffKind.CONSTANT,
    }
)
