"""Unit tests for client metrics."""

import threading

from retryhttp.client.metrics import ClientMetrics


class TestClientMetrics:
    """Tests for the ClientMetrics singleton."""

    def setup_method(self) -> None:
        """Reset the singleton before each test."""
        ClientMetrics.reset()

    def test_singleton(self) -> None:
        """get_instance returns the same object until reset."""
        first = ClientMetrics.get_instance()

        assert ClientMetrics.get_instance() is first
        ClientMetrics.reset()
        assert ClientMetrics.get_instance() is not first

    def test_to_dict(self) -> None:
        """All counters appear in the dictionary form."""
        metrics = ClientMetrics.get_instance()
        metrics.record_attempt()
        metrics.record_response(503)
        metrics.record_response(503)
        metrics.record_retry()
        metrics.record_transport_error()
        metrics.record_cancellation()
        metrics.record_exhausted()
        metrics.record_truncation()

        assert metrics.to_dict() == {
            "attempts_total": 1,
            "retries_total": 1,
            "responses_by_status": {503: 2},
            "transport_errors_total": 1,
            "cancellations_total": 1,
            "exhausted_total": 1,
            "truncated_bodies_total": 1,
        }

    def test_concurrent_updates(self) -> None:
        """Counters stay exact under concurrent updates."""
        metrics = ClientMetrics.get_instance()

        def work() -> None:
            for _ in range(1000):
                metrics.record_attempt()
                metrics.record_response(200)

        threads = [threading.Thread(target=work) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert metrics.attempts_total == 8000
        assert metrics.responses_by_status == {200: 8000}
