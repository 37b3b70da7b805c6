"""Per-call retry state."""

from dataclasses import dataclass, field

from retryhttp.client.backoff import next_wait
from retryhttp.client.models import BackoffKind


@dataclass
class RetryState:
    """Mutable state for one ``RetryingClient.send`` call.

    Never shared between calls, so it needs no locking.

    Attributes:
        wait_min: Configured minimum wait in seconds.
        wait_max: Configured maximum wait in seconds.
        current_wait: Wait to apply before the next attempt.
        attempt: Zero-based index of the current attempt.
    """

    wait_min: float
    wait_max: float
    attempt: int = 0
    current_wait: float = field(init=False)

    def __post_init__(self) -> None:
        self.current_wait = self.wait_min

    @property
    def attempts_made(self) -> int:
        """Number of attempts issued so far, counting the current one."""
        return self.attempt + 1

    def schedule(self, kind: BackoffKind) -> float:
        """Take the current wait and compute the one after it.

        Args:
            kind: Backoff strategy of the outcome that triggered the retry.

        Returns:
            Wait in seconds to apply before the next attempt.
        """
        wait = self.current_wait
        self.current_wait = next_wait(kind, wait, self.wait_min, self.wait_max)
        return wait
