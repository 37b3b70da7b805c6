"""Observability module for logging, redaction and tracing."""

from retryhttp.observability.logging import (
    DEFAULT_COMPONENT,
    configure_logging,
    get_logger,
    redact_event,
    request_scope,
)
from retryhttp.observability.redact import (
    REDACTED_VALUE,
    is_sensitive_header,
    redact_headers,
    redact_url_credentials,
)
from retryhttp.observability.tracing import TracingTransport, get_tracer


__all__ = [
    # Logging
    "DEFAULT_COMPONENT",
    "configure_logging",
    "get_logger",
    "redact_event",
    "request_scope",
    # Redaction
    "REDACTED_VALUE",
    "is_sensitive_header",
    "redact_headers",
    "redact_url_credentials",
    # Tracing
    "TracingTransport",
    "get_tracer",
]
