"""Metrics collection for the retrying HTTP client."""

from dataclasses import dataclass, field
from threading import Lock
from typing import ClassVar


@dataclass
class ClientMetrics:
    """Metrics for retrying HTTP client operations.

    Singleton class that tracks attempts, retries, transport errors,
    cancellations, exhausted retry budgets and truncated bodies.
    """

    attempts_total: int = 0
    retries_total: int = 0
    responses_by_status: dict[int, int] = field(default_factory=dict)
    transport_errors_total: int = 0
    cancellations_total: int = 0
    exhausted_total: int = 0
    truncated_bodies_total: int = 0

    _instance: ClassVar["ClientMetrics | None"] = None
    _instance_lock: ClassVar[Lock] = Lock()
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    @classmethod
    def get_instance(cls) -> "ClientMetrics":
        """Get singleton metrics instance."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        with cls._instance_lock:
            cls._instance = None

    def record_attempt(self) -> None:
        """Record an outbound attempt."""
        with self._lock:
            self.attempts_total += 1

    def record_response(self, status_code: int) -> None:
        """Record a received response.

        Args:
            status_code: HTTP status code.
        """
        with self._lock:
            self.responses_by_status[status_code] = (
                self.responses_by_status.get(status_code, 0) + 1
            )

    def record_retry(self) -> None:
        """Record a scheduled retry."""
        with self._lock:
            self.retries_total += 1

    def record_transport_error(self) -> None:
        """Record a transport-level failure."""
        with self._lock:
            self.transport_errors_total += 1

    def record_cancellation(self) -> None:
        """Record a request abandoned because its context finished."""
        with self._lock:
            self.cancellations_total += 1

    def record_exhausted(self) -> None:
        """Record a request whose retry budget ran out."""
        with self._lock:
            self.exhausted_total += 1

    def record_truncation(self) -> None:
        """Record a response body cut at the size ceiling."""
        with self._lock:
            self.truncated_bodies_total += 1

    def to_dict(self) -> dict[str, int | dict[int, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        with self._lock:
            return {
                "attempts_total": self.attempts_total,
                "retries_total": self.retries_total,
                "responses_by_status": dict(self.responses_by_status),
                "transport_errors_total": self.transport_errors_total,
                "cancellations_total": self.cancellations_total,
                "exhausted_total": self.exhausted_total,
                "truncated_bodies_total": self.truncated_bodies_total,
            }
