"""Unit tests for backoff wait computation."""

import pytest

from retryhttp.client.backoff import next_wait, wait_schedule
from retryhttp.client.models import BackoffKind
from retryhttp.client.state import RetryState


class TestNextWait:
    """Tests for next_wait."""

    def test_constant_resets_to_minimum(self) -> None:
        """Constant backoff always returns the minimum wait."""
        assert next_wait(BackoffKind.CONSTANT, 8.0, 1.0, 10.0) == 1.0
        assert next_wait(BackoffKind.CONSTANT, 1.0, 1.0, 10.0) == 1.0

    def test_exponential_doubles(self) -> None:
        """Exponential backoff doubles the current wait."""
        assert next_wait(BackoffKind.EXPONENTIAL, 1.0, 1.0, 10.0) == 2.0
        assert next_wait(BackoffKind.EXPONENTIAL, 4.0, 1.0, 10.0) == 8.0

    def test_exponential_capped_at_maximum(self) -> None:
        """Exponential backoff never exceeds the maximum wait."""
        assert next_wait(BackoffKind.EXPONENTIAL, 8.0, 1.0, 10.0) == 10.0
        assert next_wait(BackoffKind.EXPONENTIAL, 10.0, 1.0, 10.0) == 10.0


class TestWaitSchedule:
    """Tests for wait_schedule."""

    def test_exponential_sequence(self) -> None:
        """Exponential waits run 1, 2, 4, 8 then stay at the cap."""
        waits = list(wait_schedule(BackoffKind.EXPONENTIAL, 1.0, 10.0, 7))

        assert waits == [1.0, 2.0, 4.0, 8.0, 10.0, 10.0, 10.0]

    def test_constant_sequence(self) -> None:
        """Constant waits all equal the minimum."""
        waits = list(wait_schedule(BackoffKind.CONSTANT, 1.5, 10.0, 5))

        assert waits == [1.5] * 5

    def test_zero_count(self) -> None:
        """No waits are produced for a zero count."""
        assert list(wait_schedule(BackoffKind.EXPONENTIAL, 1.0, 10.0, 0)) == []


class TestRetryState:
    """Tests for per-call retry state."""

    def test_starts_at_minimum(self) -> None:
        """The first wait is the configured minimum."""
        state = RetryState(wait_min=0.5, wait_max=4.0)

        assert state.current_wait == 0.5
        assert state.attempt == 0
        assert state.attempts_made == 1

    @pytest.mark.parametrize(
        ("kind", "expected"),
        [
            (BackoffKind.EXPONENTIAL, [0.5, 1.0, 2.0, 4.0, 4.0]),
            (BackoffKind.CONSTANT, [0.5, 0.5, 0.5, 0.5, 0.5]),
        ],
    )
    def test_schedule_matches_wait_schedule(
        self, kind: BackoffKind, expected: list[float]
    ) -> None:
        """Scheduling consumes waits in the documented order."""
        state = RetryState(wait_min=0.5, wait_max=4.0)

        waits = [state.schedule(kind) for _ in range(5)]

        assert waits == expected
        assert waits == list(wait_schedule(kind, 0.5, 4.0, 5))

    def test_mixed_triggers(self) -> None:
        """A constant trigger resets a growing exponential wait."""
        state = RetryState(wait_min=1.0, wait_max=10.0)

        assert state.schedule(BackoffKind.EXPONENTIAL) == 1.0
        assert state.schedule(BackoffKind.EXPONENTIAL) == 2.0
        assert state.schedule(BackoffKind.CONSTANT) == 4.0
        assert state.schedule(BackoffKind.EXPONENTIAL) == 1.0
