"""OpenTelemetry pass-through around the HTTP transport."""

import httpx
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from retryhttp.observability.redact import redact_url_credentials


TRACER_NAME = "retryhttp"


def get_tracer() -> trace.Tracer:
    """Return the tracer used by the client.

    Without an SDK tracer provider installed this is a no-op tracer.
    """
    return trace.get_tracer(TRACER_NAME)


class TracingTransport(httpx.BaseTransport):
    """Transport decorator that records one span per attempt.

    Requests and responses pass through untouched.
    """

    def __init__(self, transport: httpx.BaseTransport) -> None:
        """Wrap a transport.

        Args:
            transport: Transport doing the actual I/O.
        """
        self._transport = transport

    @property
    def wrapped(self) -> httpx.BaseTransport:
        """The decorated transport."""
        return self._transport

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        """Send the request inside an ``HTTP <method>`` span."""
        with get_tracer().start_as_current_span(
            f"HTTP {request.method}",
            kind=trace.SpanKind.CLIENT,
            record_exception=True,
        ) as span:
            span.set_attribute("http.request.method", request.method)
            span.set_attribute("url.full", redact_url_credentials(request.url))
            response = self._transport.handle_request(request)
            span.set_attribute("http.response.status_code", response.status_code)
            if response.status_code >= 500:
                span.set_status(Status(StatusCode.ERROR))
            return response

    def close(self) -> None:
        """Close the wrapped transport."""
        self._transport.close()
