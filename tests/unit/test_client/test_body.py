"""Unit tests for the bounded response body reader."""

import httpx
import pytest

from retryhttp.client.body import BoundedBodyReader
from retryhttp.client.metrics import ClientMetrics
from tests.helpers.transports import TrackingStream


@pytest.fixture(autouse=True)
def reset_metrics() -> None:
    """Start each test with fresh metrics."""
    ClientMetrics.reset()


class TestBoundedRead:
    """Tests for size-limited reads."""

    def test_truncates_at_limit(self) -> None:
        """A body larger than the ceiling yields exactly max_size bytes."""
        stream = TrackingStream([b"abc", b"defg", b"hij"])
        reader = BoundedBodyReader(stream, max_size=5)

        data = reader.read()

        assert data == b"abcde"
        assert reader.truncated is True
        assert reader.bytes_read == 5
        assert reader.read() == b""

    def test_iteration_truncates(self) -> None:
        """Iteration slices the chunk that crosses the ceiling."""
        reader = BoundedBodyReader(TrackingStream([b"abc", b"defg", b"hij"]), 5)

        assert list(reader) == [b"abc", b"de"]

    def test_body_within_limit(self) -> None:
        """A body smaller than the ceiling is delivered whole."""
        reader = BoundedBodyReader(TrackingStream([b"hello", b" world"]), 1024)

        assert reader.read() == b"hello world"
        assert reader.truncated is False

    def test_body_exactly_at_limit(self) -> None:
        """A body equal to the ceiling is delivered whole."""
        reader = BoundedBodyReader(TrackingStream([b"12345"]), 5)

        assert reader.read() == b"12345"
        assert reader.truncated is False

    def test_zero_limit_reads_nothing(self) -> None:
        """A zero ceiling means no data."""
        stream = TrackingStream([b"payload"])
        reader = BoundedBodyReader(stream, 0)

        assert reader.read() == b""
        assert stream.chunks_served == 0

    def test_sized_reads(self) -> None:
        """read(size) returns at most size bytes until the ceiling."""
        reader = BoundedBodyReader(TrackingStream([b"abcdef", b"ghij"]), 8)

        assert reader.read(3) == b"abc"
        assert reader.read(3) == b"def"
        assert reader.read(3) == b"gh"
        assert reader.read(3) == b""

    def test_empty_chunks_skipped(self) -> None:
        """Empty chunks from the underlying stream are ignored."""
        reader = BoundedBodyReader(TrackingStream([b"", b"ab", b"", b"c"]), 10)

        assert list(reader) == [b"ab", b"c"]

    def test_truncation_recorded(self) -> None:
        """Truncated bodies are counted in metrics."""
        reader = BoundedBodyReader(TrackingStream([b"abcdef"]), 2)

        reader.read()

        assert ClientMetrics.get_instance().truncated_bodies_total == 1


class TestBoundedClose:
    """Tests for closing the underlying resource."""

    def test_close_after_truncation(self) -> None:
        """Close still closes the underlying stream after truncation."""
        stream = TrackingStream([b"abcdef"])
        reader = BoundedBodyReader(stream, 3)
        reader.read()

        reader.close()

        assert stream.close_count == 1
        assert reader.closed is True

    def test_close_without_reading(self) -> None:
        """Close works on an unread body."""
        stream = TrackingStream([b"abcdef"])
        reader = BoundedBodyReader(stream, 3)

        reader.close()

        assert stream.close_count == 1

    def test_double_close_releases_once(self) -> None:
        """Closing twice neither errors nor closes the stream twice."""
        stream = TrackingStream([b"abc"])
        reader = BoundedBodyReader(stream, 10)
        assert reader.read() == b"abc"

        reader.close()
        reader.close()

        assert stream.close_count == 1

    def test_read_after_close_returns_eof(self) -> None:
        """Reads after close report end of stream."""
        reader = BoundedBodyReader(TrackingStream([b"abc"]), 10)
        reader.close()

        assert reader.read() == b""

    def test_close_tolerates_streams_without_close(self) -> None:
        """Plain iterables can be wrapped too."""
        reader = BoundedBodyReader([b"abc", b"def"], 4)

        assert reader.read() == b"abcd"
        reader.close()


class TestReadErrors:
    """Tests for underlying read failures."""

    def test_read_error_passes_through(self) -> None:
        """A mid-body transport error is raised unchanged."""
        stream = TrackingStream([b"abc", b"def"], fail_after=1)
        reader = BoundedBodyReader(stream, 100)

        with pytest.raises(httpx.ReadError, match="connection reset"):
            reader.read()

        reader.close()
        assert stream.close_count == 1

    def test_error_beyond_limit_not_reached(self) -> None:
        """Data past the ceiling is never pulled, so later errors never surface."""
        stream = TrackingStream([b"abc", b"def"], fail_after=1)
        reader = BoundedBodyReader(stream, 3)

        assert reader.read() == b"abc"
        assert stream.chunks_served == 1


class TestResponseIntegration:
    """Tests for use as an httpx response stream."""

    def test_response_read_is_bounded(self) -> None:
        """response.read() honours the ceiling and closes the stream."""
        stream = TrackingStream([b"x" * 100])
        response = httpx.Response(
            200,
            stream=BoundedBodyReader(stream, 10),
            request=httpx.Request("GET", "https://example.com/"),
        )

        assert response.read() == b"x" * 10
        assert response.is_closed is True
        assert stream.close_count == 1

        response.close()
        assert stream.close_count == 1
