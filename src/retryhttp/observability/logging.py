"""Structured logging for the retrying HTTP client.

Client modules log through ``get_logger``, which tags every event with the
component that emitted it. ``configure_logging`` renders those events and
scrubs credentials from ``url`` and ``headers`` fields before output.
"""

import logging
import sys
from collections.abc import Iterator, Mapping, MutableMapping
from contextlib import contextmanager
from typing import Any, TextIO

import structlog

from retryhttp.observability.redact import redact_headers, redact_url_credentials


DEFAULT_COMPONENT = "httpclient"

# Standard-library loggers of the transport stack
TRANSPORT_LOGGERS = ("httpx", "httpcore")


def redact_event(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Processor removing credentials from request fields of an event."""
    url = event_dict.get("url")
    if url is not None:
        event_dict["url"] = redact_url_credentials(url)
    headers = event_dict.get("headers")
    if isinstance(headers, Mapping):
        event_dict["headers"] = redact_headers(headers)
    return event_dict


def configure_logging(
    level: int = logging.INFO,
    output: TextIO = sys.stderr,
    json_format: bool = True,
    transport_level: int = logging.WARNING,
) -> None:
    """Configure structured logging for client events.

    Args:
        level: Minimum level of client events (default: INFO).
        output: Output stream (default: stderr).
        json_format: Render JSON lines instead of console output.
        transport_level: Level for the httpx/httpcore loggers, which
            otherwise report every attempt a second time.
    """
    renderer: structlog.types.Processor
    if json_format:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_event,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )

    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)


def get_logger(
    component: str = DEFAULT_COMPONENT, **initial_values: Any
) -> structlog.stdlib.BoundLogger:
    """Get a logger tagged with its component.

    Binding is lazy and loggers are not cached, so module-level loggers
    pick up every later ``configure_logging``.

    Args:
        component: Value of the ``component`` field on every event.
        **initial_values: Further fields bound to every event.

    Returns:
        Bound logger instance.
    """
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(
        component=component, **initial_values
    )
    return logger


@contextmanager
def request_scope(request_id: str, **values: Any) -> Iterator[None]:
    """Tag every client event inside the block with a caller request id.

    Args:
        request_id: Identifier of the caller's logical operation.
        **values: Further fields to bind for the duration of the block.
    """
    with structlog.contextvars.bound_contextvars(request_id=request_id, **values):
        yield
