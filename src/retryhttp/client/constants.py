"""Constants for the retrying HTTP client.

Centralizes defaults and status codes to avoid duplication across modules.
"""

# Timeouts and pool sizing
DEFAULT_TIMEOUT_SECONDS = 15.0
DEFAULT_IDLE_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_IDLE_CONNECTIONS = 5

# Retry budget and wait bounds
DEFAULT_RETRY_MAX = 3
DEFAULT_RETRY_WAIT_MIN_SECONDS = 1.0
DEFAULT_RETRY_WAIT_MAX_SECONDS = 15.0

# Response Size Limits
DEFAULT_MAX_RESPONSE_SIZE_BYTES = 1024 * 1024  # 1 MB

# HTTP Status Codes
HTTP_STATUS_MIN = 100
HTTP_STATUS_MAX = 599
HTTP_STATUS_TOO_MANY_REQUESTS = 429
HTTP_STATUS_BAD_GATEWAY = 502
HTTP_STATUS_SERVICE_UNAVAILABLE = 503
HTTP_STATUS_GATEWAY_TIMEOUT = 504

# Backoff map key used after a transport failure (no response received)
NO_STATUS = 0

# Key under which a RequestContext travels in httpx request extensions
CONTEXT_EXTENSION_KEY = "retryhttp.context"
