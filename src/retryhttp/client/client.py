"""HTTP client with per-status retries, backoff and bounded bodies."""

import time
from collections.abc import Iterable
from types import MappingProxyType
from typing import Any

import httpx
import structlog

from retryhttp.client.body import BoundedBodyReader
from retryhttp.client.config import ClientConfig
from retryhttp.client.constants import NO_STATUS
from retryhttp.client.context import RequestContext, attach_context, context_of
from retryhttp.client.errors import ContextCancelledError
from retryhttp.client.metrics import ClientMetrics
from retryhttp.client.models import BackoffKind
from retryhttp.client.state import RetryState
from retryhttp.observability.logging import get_logger
from retryhttp.observability.redact import redact_headers, redact_url_credentials
from retryhttp.observability.tracing import TracingTransport, get_tracer


logger = get_logger()


class RetryingClient:
    """HTTP client that retries transient failures.

    Provides:
    - Retries on transport errors and on status codes listed in the
      configured backoff map, with constant or exponential backoff
    - Cancellation through a RequestContext (cancel signal or deadline)
    - A byte ceiling on every response body returned to the caller
    - Connection pooling delegated to the httpx transport

    Attempts within one ``send`` are strictly sequential. Concurrent calls
    on the same instance are independent; the configuration is read-only.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Client configuration; defaults apply when omitted.
            transport: Transport to send requests through. Defaults to a
                pooled ``httpx.HTTPTransport`` sized from the config.
        """
        self._config = config or ClientConfig()
        self._backoff = MappingProxyType(dict(self._config.backoff_strategy))
        self._metrics = ClientMetrics.get_instance()
        self._log = logger

        if transport is None:
            transport = httpx.HTTPTransport(
                limits=httpx.Limits(
                    max_keepalive_connections=self._config.max_idle_connections,
                    keepalive_expiry=self._config.idle_timeout_seconds,
                ),
            )
        self._client = httpx.Client(
            transport=TracingTransport(transport),
            timeout=self._config.timeout_seconds,
            trust_env=self._config.trust_env,
        )

    @property
    def config(self) -> ClientConfig:
        """The client's configuration."""
        return self._config

    def __enter__(self) -> "RetryingClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release pooled connections."""
        self._client.close()

    def request(
        self,
        method: str,
        url: str | httpx.URL,
        *,
        context: RequestContext | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Build a request and send it with retries.

        Args:
            method: HTTP method.
            url: Target URL.
            context: Optional cancellation context.
            **kwargs: Passed to ``httpx.Client.build_request``.

        Returns:
            Response whose body is bounded; the caller must close it.
        """
        request = self._client.build_request(method, url, **kwargs)
        return self.send(request, context=context)

    def get(
        self,
        url: str | httpx.URL,
        *,
        context: RequestContext | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a GET request with retries."""
        return self.request("GET", url, context=context, **kwargs)

    def send(
        self,
        request: httpx.Request,
        *,
        context: RequestContext | None = None,
    ) -> httpx.Response:
        """Send a request, retrying according to the backoff map.

        The context may be passed explicitly or attached to the request
        with ``attach_context``.

        Args:
            request: Fully-formed outbound request.
            context: Optional cancellation context.

        Returns:
            The accepted response with its body wrapped in a
            BoundedBodyReader. Non-success statuses are returned as-is,
            including a retriable status that outlived the retry budget.

        Raises:
            httpx.TransportError: Last transport error once retries are exhausted.
            ContextCancelledError: If the context was cancelled.
            DeadlineExceededError: If the context deadline passed.
        """
        if context is None:
            context = context_of(request) or RequestContext()
        else:
            attach_context(request, context)

        state = RetryState(
            wait_min=self._config.retry_wait_min_seconds,
            wait_max=self._config.retry_wait_max_seconds,
        )
        log = self._log.bind(
            method=request.method,
            url=redact_url_credentials(request.url),
        )
        start_time_ns = time.perf_counter_ns()

        with get_tracer().start_as_current_span("retryhttp.send") as span:
            while True:
                self._check_context(context, state, log)
                self._apply_attempt_timeout(request, context)
                self._metrics.record_attempt()

                try:
                    response = self._client.send(request, stream=True)
                except httpx.TransportError as e:
                    self._metrics.record_transport_error()
                    cancelled = context.error()
                    if cancelled is not None:
                        self._record_cancellation(cancelled, state, log)
                        raise cancelled from e
                    if state.attempt >= self._config.retry_max:
                        self._metrics.record_exhausted()
                        span.set_attribute("retryhttp.attempts", state.attempts_made)
                        log.warning(
                            "retries_exhausted",
                            attempts=state.attempts_made,
                            error_type=type(e).__name__,
                            error=str(e),
                            headers=redact_headers(request.headers),
                        )
                        raise
                    log.warning(
                        "transport_error",
                        attempt=state.attempt,
                        error_type=type(e).__name__,
                        error=str(e),
                        headers=redact_headers(request.headers),
                    )
                    self._wait(state, NO_STATUS, context, log)
                    continue

                self._metrics.record_response(response.status_code)
                kind = self._backoff.get(response.status_code)

                if kind is not None and state.attempt < self._config.retry_max:
                    # Discarded; release the connection before waiting.
                    response.close()
                    self._wait(state, response.status_code, context, log)
                    continue

                if kind is not None:
                    self._metrics.record_exhausted()
                    log.warning(
                        "retries_exhausted",
                        attempts=state.attempts_made,
                        status_code=response.status_code,
                    )

                span.set_attribute("retryhttp.attempts", state.attempts_made)
                span.set_attribute("http.response.status_code", response.status_code)
                duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
                log.info(
                    "request_complete",
                    status_code=response.status_code,
                    attempts=state.attempts_made,
                    duration_ms=round(duration_ms, 2),
                )
                return self._bound_body(response)

    def limited_reader(self, stream: Iterable[bytes]) -> BoundedBodyReader:
        """Wrap a body stream with the configured size limit.

        Args:
            stream: Byte stream to bound, e.g. a response body.

        Returns:
            BoundedBodyReader that closes ``stream`` when closed.
        """
        return BoundedBodyReader(stream, self._config.max_response_size_bytes)

    def _bound_body(self, response: httpx.Response) -> httpx.Response:
        """Put the accepted response's body behind the size limit.

        Transports such as ``httpx.MockTransport`` may hand back a response
        whose content was loaded at construction. Its cached content would
        bypass any stream wrapper, so it is rebuilt over a bounded stream.

        Args:
            response: Accepted response, body not yet read by the client.

        Returns:
            Response whose stream is a BoundedBodyReader.
        """
        reader = self.limited_reader(response.stream)
        if not response.is_stream_consumed:
            response.stream = reader
            return response

        bounded = httpx.Response(
            response.status_code,
            headers=response.headers,
            stream=reader,
            request=response.request,
            extensions=response.extensions,
            history=response.history,
            default_encoding=response.default_encoding,
        )
        bounded.next_request = response.next_request
        return bounded

    def _check_context(
        self,
        context: RequestContext,
        state: RetryState,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        """Raise the context's error if it is done."""
        try:
            context.raise_if_done()
        except ContextCancelledError as e:
            self._record_cancellation(e, state, log)
            raise

    def _wait(
        self,
        state: RetryState,
        trigger: int,
        context: RequestContext,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        """Block before the next attempt, unless the context ends first.

        Args:
            state: Retry state of the current call.
            trigger: Status code that caused the retry, or NO_STATUS.
            context: Cancellation context.
            log: Bound logger.
        """
        kind = self._backoff.get(trigger, BackoffKind.CONSTANT)
        wait = state.schedule(kind)
        self._metrics.record_retry()
        log.debug(
            "retry_scheduled",
            attempt=state.attempt,
            trigger=trigger,
            backoff=kind.value,
            wait_seconds=wait,
            max_retries=self._config.retry_max,
        )

        try:
            context.sleep(wait)
        except ContextCancelledError as e:
            self._record_cancellation(e, state, log)
            raise
        state.attempt += 1

    def _apply_attempt_timeout(
        self,
        request: httpx.Request,
        context: RequestContext,
    ) -> None:
        """Bound the next attempt by the config timeout and the deadline."""
        timeout = self._config.timeout_seconds
        remaining = context.remaining()
        if remaining is not None:
            timeout = min(timeout, remaining)
        request.extensions["timeout"] = httpx.Timeout(timeout).as_dict()

    def _record_cancellation(
        self,
        error: ContextCancelledError,
        state: RetryState,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        self._metrics.record_cancellation()
        log.warning(
            "request_cancelled",
            attempt=state.attempt,
            error_class=type(error).__name__,
        )
