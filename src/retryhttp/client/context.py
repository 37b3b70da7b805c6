"""Cancellation context carried by outbound requests.

A RequestContext combines a cancel signal with an optional deadline. The
retry loop consults it before every attempt and races it against every
backoff wait; whichever fires first wins.
"""

import threading
import time
import weakref

import httpx

from retryhttp.client.constants import CONTEXT_EXTENSION_KEY
from retryhttp.client.errors import ContextCancelledError, DeadlineExceededError


class RequestContext:
    """Cancel signal and optional deadline for one or more requests.

    Safe to share between threads: ``cancel()`` may be called from any
    thread while another thread is blocked in ``sleep()``.
    """

    def __init__(
        self,
        deadline: float | None = None,
        parent: "RequestContext | None" = None,
    ) -> None:
        """Initialize the context.

        Args:
            deadline: Absolute deadline on the ``time.monotonic()`` clock.
            parent: Context whose cancellation and deadline also apply here.
        """
        self._event = threading.Event()
        self._lock = threading.Lock()
        # Dropped children are released while the parent lives on
        self._children: weakref.WeakSet[RequestContext] = weakref.WeakSet()
        self._cancelled = False
        self._parent = parent

        if parent is not None and parent.deadline is not None:
            deadline = (
                parent.deadline if deadline is None else min(deadline, parent.deadline)
            )
        self._deadline = deadline

        if parent is not None:
            parent._register_child(self)

    @classmethod
    def with_timeout(
        cls,
        seconds: float,
        parent: "RequestContext | None" = None,
    ) -> "RequestContext":
        """Create a context that expires ``seconds`` from now.

        Args:
            seconds: Time budget in seconds.
            parent: Optional parent context.

        Returns:
            New context with a deadline.
        """
        return cls(deadline=time.monotonic() + seconds, parent=parent)

    @property
    def deadline(self) -> float | None:
        """Absolute monotonic deadline, if any."""
        return self._deadline

    @property
    def cancelled(self) -> bool:
        """Whether ``cancel()`` was called on this context or a parent."""
        return self._cancelled

    @property
    def expired(self) -> bool:
        """Whether the deadline has passed."""
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def done(self) -> bool:
        """Whether the context is cancelled or expired."""
        return self._cancelled or self.expired

    def cancel(self) -> None:
        """Cancel this context and every child context."""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            children = list(self._children)
        self._event.set()
        for child in children:
            child.cancel()

    def remaining(self) -> float | None:
        """Seconds until the deadline, or None without a deadline.

        Returns:
            Remaining time, never negative.
        """
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def error(self) -> ContextCancelledError | None:
        """Return the error this context stands for, if it is done.

        Cancellation takes precedence over expiry.

        Returns:
            ContextCancelledError, DeadlineExceededError, or None.
        """
        if self._cancelled:
            return ContextCancelledError()
        if self.expired:
            return DeadlineExceededError()
        return None

    def raise_if_done(self) -> None:
        """Raise the context's error if it is cancelled or expired.

        Raises:
            ContextCancelledError: If cancelled.
            DeadlineExceededError: If the deadline passed.
        """
        err = self.error()
        if err is not None:
            raise err

    def sleep(self, seconds: float) -> None:
        """Block for ``seconds`` unless the context finishes first.

        Args:
            seconds: Wait duration in seconds.

        Raises:
            ContextCancelledError: If cancelled before the wait elapsed.
            DeadlineExceededError: If the deadline passed before the wait elapsed.
        """
        self.raise_if_done()
        remaining = self.remaining()
        if remaining is not None and remaining < seconds:
            self._event.wait(remaining)
            # Deadline reached before the wait would have finished.
            if self._cancelled:
                raise ContextCancelledError()
            raise DeadlineExceededError()
        if self._event.wait(seconds):
            raise ContextCancelledError()

    def _register_child(self, child: "RequestContext") -> None:
        with self._lock:
            already_cancelled = self._cancelled
            if not already_cancelled:
                self._children.add(child)
        if already_cancelled:
            child.cancel()


def attach_context(request: httpx.Request, context: RequestContext) -> httpx.Request:
    """Attach a context to a request so the retry loop can find it.

    Args:
        request: Outbound request.
        context: Context to carry.

    Returns:
        The same request, for chaining.
    """
    request.extensions[CONTEXT_EXTENSION_KEY] = context
    return request


def context_of(request: httpx.Request) -> RequestContext | None:
    """Return the context attached to a request, if any.

    Args:
        request: Outbound request.

    Returns:
        Attached context or None.
    """
    context = request.extensions.get(CONTEXT_EXTENSION_KEY)
    if isinstance(context, RequestContext):
        return context
    return None
