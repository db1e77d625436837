"""Cooperative cancellation for generation requests."""

import threading
from typing import Callable


class CancellationRegistration:
    """Handle returned by CancellationToken.on_cancel.

    Calling dispose() unsubscribes the callback. Disposing twice is a no-op.
    """

    def __init__(self, token: "CancellationToken", callback: Callable[[], None]):
        self._token = token
        self._callback = callback

    def dispose(self) -> None:
        if self._token is not None:
            self._token._unregister(self._callback)
            self._token = None


class CancellationToken:
    """Signal that a caller no longer wants the result of a request.

    cancel() may be called from any thread or from a signal handler, including
    one that interrupts this token while it holds its own lock.
    Callbacks run synchronously in the cancelling thread, so they must only
    hand work off (e.g. loop.call_soon_threadsafe).
    """

    def __init__(self):
        self._cancelled = False
        self._callbacks: list[Callable[[], None]] = []
        self._lock = threading.RLock()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Request cancellation and notify subscribers once."""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            callbacks = list(self._callbacks)
            self._callbacks.clear()
        for callback in callbacks:
            callback()

    def on_cancel(self, callback: Callable[[], None]) -> CancellationRegistration:
        """Subscribe to cancellation.

        If the token is already cancelled, the callback runs immediately.

        Args:
            callback: Zero-argument function to call on cancellation.

        Returns:
            A registration whose dispose() unsubscribes the callback.
        """
        with self._lock:
            already_cancelled = self._cancelled
            if not already_cancelled:
                self._callbacks.append(callback)
        if not already_cancelled and self._cancelled:
            # cancel() ran while the callback was being added
            with self._lock:
                already_cancelled = callback in self._callbacks
                if already_cancelled:
                    self._callbacks.remove(callback)
        if already_cancelled:
            callback()
        return CancellationRegistration(self, callback)

    def _unregister(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)
