"""HTTP transport for the Reaper REST API.

Wraps a single long-lived httpx.AsyncClient. Each call to execute() is
one request/response round trip against the configured base URL; the
response is always closed before execute() returns or raises.
"""

from __future__ import annotations

import asyncio
import logging
from functools import lru_cache
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from reaper_client.cancellation import CancellationSignal
from reaper_client.config import ReaperConfig
from reaper_client.errors import (
    ReaperCancelledError,
    ReaperDecodeError,
    ReaperStatusError,
    ReaperTransportError,
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


class ReaperTransport:
    """Issues requests against the Reaper service.

    The underlying connection pool and configuration are never mutated
    after construction, so one transport can serve any number of
    concurrent requests.
    """

    def __init__(
        self,
        config: ReaperConfig,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout,
            headers={
                "Accept": "application/json",
                "User-Agent": config.user_agent,
            },
            transport=http_transport,
        )

    @property
    def config(self) -> ReaperConfig:
        return self._config

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def execute(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        decode_into: Any = None,
        signal: CancellationSignal | None = None,
    ) -> Any:
        """Execute one request and optionally decode its JSON body.

        Args:
            method: HTTP method.
            path: Path relative to the configured base URL.
            params: Query parameters.
            decode_into: Type to validate the JSON body into. Skipped when
                None or when the body is empty.
            signal: Cancellation signal raced against the request.

        Returns:
            The decoded body, or None if nothing was decoded.

        Raises:
            ReaperCancelledError: If the signal fired before or during the call.
            ReaperTransportError: If no response was received.
            ReaperStatusError: If check_status is enabled and the status is 4xx/5xx.
            ReaperDecodeError: If the body does not match decode_into.
        """
        logger.debug(f"{method} {path} params={params}")

        if signal is None:
            response = await self._send(method, path, params)
        else:
            response = await self._send_cancellable(method, path, params, signal)

        if self._config.check_status and response.is_error:
            raise ReaperStatusError(response.status_code, method, str(response.url))

        if decode_into is None or not response.content:
            return None

        try:
            return _adapter(decode_into).validate_json(response.content)
        except ValidationError as e:
            raise ReaperDecodeError(f"Failed to decode response from {method} {path}: {e}") from e

    async def _send_cancellable(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None,
        signal: CancellationSignal,
    ) -> httpx.Response:
        signal.raise_if_cancelled()

        request_task = asyncio.ensure_future(self._send(method, path, params))
        signal_task = asyncio.ensure_future(signal.wait())
        try:
            await asyncio.wait({request_task, signal_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (request_task, signal_task):
                if not task.done():
                    task.cancel()
            # Cancelling the request task unwinds its stream context, closing the response.
            await asyncio.gather(request_task, signal_task, return_exceptions=True)

        if (
            request_task.done()
            and not request_task.cancelled()
            and request_task.exception() is None
        ):
            return request_task.result()

        if signal.cancelled:
            raise ReaperCancelledError(signal.reason or "operation cancelled")

        # The request failed on its own; re-raise its ReaperTransportError.
        return request_task.result()

    async def _send(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None,
    ) -> httpx.Response:
        try:
            async with self._client.stream(method, path, params=params) as response:
                await response.aread()
                return response
        except httpx.HTTPError as e:
            raise ReaperTransportError(f"{method} {path} failed: {e}") from e
