"""Size-limited view over a response body stream."""

from collections.abc import Iterable, Iterator

import httpx

from retryhttp.client.metrics import ClientMetrics
from retryhttp.observability.logging import get_logger


logger = get_logger()


class BoundedBodyReader(httpx.SyncByteStream):
    """Response body stream truncated at a byte ceiling.

    Once ``max_size`` bytes have been delivered the stream reports
    end-of-stream even if the underlying body has more data; truncation is
    silent. Errors raised by the underlying stream pass through unchanged.

    ``close()`` always closes the underlying stream, exactly once, however
    much was read.
    """

    def __init__(self, stream: Iterable[bytes], max_size: int) -> None:
        """Wrap a body stream.

        Args:
            stream: Underlying byte stream, usually ``response.stream``.
            max_size: Maximum number of bytes to deliver.
        """
        self._stream = stream
        self._remaining = max(0, max_size)
        self._max_size = max(0, max_size)
        self._iterator: Iterator[bytes] | None = None
        self._pending = b""
        self._exhausted = False
        self._truncated = False
        self._closed = False

    @property
    def max_size(self) -> int:
        """Configured byte ceiling."""
        return self._max_size

    @property
    def bytes_read(self) -> int:
        """Number of bytes delivered so far."""
        return self._max_size - self._remaining

    @property
    def truncated(self) -> bool:
        """Whether a chunk was cut short at the ceiling."""
        return self._truncated

    @property
    def closed(self) -> bool:
        """Whether the underlying stream has been closed."""
        return self._closed

    def __iter__(self) -> Iterator[bytes]:
        """Yield body chunks up to the byte ceiling."""
        if self._pending:
            chunk, self._pending = self._pending, b""
            yield chunk
        while True:
            chunk = self._next_chunk()
            if not chunk:
                return
            yield chunk

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes, or everything left if ``size`` < 0.

        Args:
            size: Maximum number of bytes to return.

        Returns:
            Body bytes; ``b""`` at end of stream.
        """
        if size < 0:
            parts = [self._pending]
            self._pending = b""
            while chunk := self._next_chunk():
                parts.append(chunk)
            return b"".join(parts)

        while len(self._pending) < size:
            chunk = self._next_chunk()
            if not chunk:
                break
            self._pending += chunk
        data, self._pending = self._pending[:size], self._pending[size:]
        return data

    def close(self) -> None:
        """Close the underlying stream. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        close = getattr(self._stream, "close", None)
        if close is not None:
            close()

    def _next_chunk(self) -> bytes:
        """Pull the next non-empty chunk within the ceiling, or ``b""``."""
        if self._exhausted or self._closed:
            return b""
        if self._remaining == 0:
            self._exhausted = True
            return b""

        if self._iterator is None:
            self._iterator = iter(self._stream)

        for chunk in self._iterator:
            if not chunk:
                continue
            if len(chunk) > self._remaining:
                chunk = chunk[: self._remaining]
                self._truncated = True
                self._record_truncation()
            self._remaining -= len(chunk)
            return chunk

        self._exhausted = True
        return b""

    def _record_truncation(self) -> None:
        ClientMetrics.get_instance().record_truncation()
        logger.debug("response_body_truncated", max_size=self._max_size)
