"""Wait-duration computation for retry backoff."""

from collections.abc import Iterator

from retryhttp.client.models import BackoffKind


def next_wait(
    kind: BackoffKind,
    current_wait: float,
    wait_min: float,
    wait_max: float,
) -> float:
    """Compute the wait that follows ``current_wait``.

    Args:
        kind: Backoff strategy for the outcome that triggered the retry.
        current_wait: Wait just consumed, in seconds.
        wait_min: Configured minimum wait, in seconds.
        wait_max: Configured maximum wait, in seconds.

    Returns:
        Next wait in seconds.
    """
    if kind is BackoffKind.EXPONENTIAL:
        return min(current_wait * 2, wait_max)
    return wait_min


def wait_schedule(
    kind: BackoffKind,
    wait_min: float,
    wait_max: float,
    count: int,
) -> Iterator[float]:
    """Yield the first ``count`` waits of a retry sequence.

    The first wait is always ``wait_min``.

    Args:
        kind: Backoff strategy applied between waits.
        wait_min: Configured minimum wait, in seconds.
        wait_max: Configured maximum wait, in seconds.
        count: Number of waits to yield.

    Yields:
        Successive wait durations in seconds.
    """
    wait = wait_min
    for _ in range(count):
        yield wait
        wait = next_wait(kind, wait, wait_min, wait_max)
