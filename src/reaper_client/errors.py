"""Exceptions raised by the Reaper client."""

from __future__ import annotations


class ReaperError(Exception):
    """Base exception for Reaper client errors."""

    pass


class ReaperTransportError(ReaperError):
    """The request never produced a response (connection refused, DNS, timeout)."""

    pass


class ReaperCancelledError(ReaperError):
    """The caller's cancellation signal fired before or during a request."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class ReaperDecodeError(ReaperError):
    """The response body did not match the expected JSON shape."""

    pass


class ReaperStatusError(ReaperError):
    """The service answered with a 4xx/5xx status code."""

    def __init__(self, status_code: int, method: str, url: str) -> None:
        self.status_code = status_code
        super().__init__(f"{method} {url} returned HTTP {status_code}")


class ReaperOperationError(ReaperError):
    """A client operation failed.

    The low-level failure is chained as ``__cause__`` and repeated in the
    message so that ``str(error)`` identifies both the operation and why
    it failed.
    """

    def __init__(self, message: str, cause: BaseException, cluster: str | None = None) -> None:
        self.cluster = cluster
        super().__init__(f"{message}: {cause}")
        self.__cause__ = cause
