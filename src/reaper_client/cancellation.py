"""Cancellation signal shared between a caller and in-flight requests.

A signal is created by the caller, handed to any number of client
operations, and fired at most once with a reason. Requests that are
waiting on the network when it fires fail with ReaperCancelledError
carrying that reason. An optional timeout turns the signal into a
deadline.
"""

from __future__ import annotations

import asyncio
import time

from reaper_client.errors import ReaperCancelledError

CANCELLED = "operation cancelled"
DEADLINE_EXCEEDED = "deadline exceeded"


class CancellationSignal:
    """One-shot cancellation signal with an optional deadline.

    Usage:
        signal = CancellationSignal(timeout=10.0)
        clusters = await client.get_clusters_sync(signal)
        # or, from another task:
        signal.cancel("shutting down")
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self, reason: str = CANCELLED) -> None:
        """Fire the signal. Only the first reason is kept."""
        if self._reason is None:
            self._reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """True once the signal has fired or its deadline has passed."""
        self._check_deadline()
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        """The reason given when the signal fired, or None."""
        self._check_deadline()
        return self._reason

    def raise_if_cancelled(self) -> None:
        """Raise ReaperCancelledError if the signal has fired."""
        if self.cancelled:
            raise ReaperCancelledError(self._reason or CANCELLED)

    async def wait(self) -> str:
        """Wait until the signal fires and return its reason."""
        if self._deadline is None:
            await self._event.wait()
        else:
            remaining = self._deadline - time.monotonic()
            try:
                await asyncio.wait_for(self._event.wait(), timeout=max(remaining, 0))
            except asyncio.TimeoutError:
                self.cancel(DEADLINE_EXCEEDED)
        return self._reason or CANCELLED

    def _check_deadline(self) -> None:
        if self._deadline is not None and not self._event.is_set():
            if time.monotonic() >= self._deadline:
                self.cancel(DEADLINE_EXCEEDED)
