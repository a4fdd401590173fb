"""Cancellation contexts for auth service requests.

A :class:`Context` is the cancellation signal handed to every client
operation. It fires either when :meth:`Context.cancel` is called or when its
deadline passes, and it records which of the two happened so callers can
check for cancellation explicitly rather than by inspecting error text.
"""

import asyncio
import threading
import time

CANCELLED = "cancelled"
DEADLINE_EXCEEDED = "deadline exceeded"


class Context:
    """Cooperative cancellation signal with an optional deadline.

    Deadlines are measured on the :func:`time.monotonic` clock. The context
    binds to the event loop of the first task that waits on it; :meth:`cancel`
    may be called from that loop or from any other thread.
    """

    def __init__(self, deadline: float | None = None):
        """Initialize the context.

        Args:
            deadline: Absolute :func:`time.monotonic` time after which the
                context fires, or None for no deadline.
        """
        self._deadline = deadline
        self._reason: str | None = None
        self._event = asyncio.Event()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._lock = threading.Lock()

    @classmethod
    def background(cls) -> "Context":
        """Return a context that only fires when cancelled explicitly."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "Context":
        """Return a context whose deadline is ``seconds`` from now."""
        if seconds < 0:
            msg = "timeout must not be negative"
            raise ValueError(msg)
        return cls(deadline=time.monotonic() + seconds)

    @property
    def deadline(self) -> float | None:
        return self._deadline

    @property
    def reason(self) -> str | None:
        """Why the context fired, or None while it is still live."""
        self.done()
        return self._reason

    def cancel(self) -> None:
        """Fire the context. Calling it again has no effect."""
        self._fire(CANCELLED)

    def done(self) -> bool:
        """Check whether the context has fired, noting an expired deadline."""
        if self._reason is None and self._deadline is not None:
            if time.monotonic() >= self._deadline:
                self._fire(DEADLINE_EXCEEDED)
        return self._reason is not None

    def remaining(self) -> float | None:
        """Seconds until the deadline (never negative), or None without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    async def wait(self) -> None:
        """Block until :meth:`cancel` is called.

        Deadlines are not observed here; pass :meth:`remaining` as the
        timeout of whatever is raced against this wait.
        """
        with self._lock:
            self._loop = asyncio.get_running_loop()
            if self._reason is not None:
                return
        await self._event.wait()

    def _fire(self, reason: str) -> None:
        with self._lock:
            if self._reason is not None:
                return
            self._reason = reason
            loop = self._loop

        # asyncio.Event is not thread-safe; wake a waiting loop through its queue
        if loop is None or loop.is_closed() or _running_loop() is loop:
            self._event.set()
        else:
            loop.call_soon_threadsafe(self._event.set)


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
