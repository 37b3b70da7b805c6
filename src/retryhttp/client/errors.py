"""Error types for the retrying HTTP client.

Transport failures are not wrapped: once retries are exhausted the original
``httpx.TransportError`` is raised unchanged. Non-success HTTP responses are
never turned into errors by this layer.
"""


class RetryHttpError(Exception):
    """Base exception for retryhttp errors."""

    def __init__(self, message: str) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_class": type(self).__name__,
            "message": self.message,
        }


class ContextCancelledError(RetryHttpError):
    """Raised when the request context was cancelled.

    No further attempts are made once this is raised.
    """

    def __init__(self, message: str = "request context cancelled") -> None:
        """Initialize the cancellation error.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message)


class DeadlineExceededError(ContextCancelledError):
    """Raised when the request context deadline passed."""

    def __init__(self, message: str = "request context deadline exceeded") -> None:
        """Initialize the deadline error.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message)
