"""Async client for the Reaper cluster REST API."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import aclosing
from typing import Any, cast
from urllib.parse import quote

import httpx

from reaper_client.cancellation import CancellationSignal
from reaper_client.config import ReaperConfig
from reaper_client.errors import ReaperCancelledError, ReaperError, ReaperOperationError
from reaper_client.fanout import concurrency_width, fan_out
from reaper_client.models import Cluster, FetchResult
from reaper_client.topology import build_cluster
from reaper_client.transport import ReaperTransport
from reaper_client.wire import ClusterStatus

logger = logging.getLogger(__name__)


def _cluster_path(name: str) -> str:
    return f"/cluster/{quote(name, safe='')}"


class ReaperClient:
    """Client for Reaper cluster operations.

    Usage:
        async with ReaperClient.from_url("http://reaper:8080") as client:
            names = await client.get_cluster_names()
            async for result in client.get_clusters():
                ...

    Every operation accepts an optional CancellationSignal. Cancellation
    is raised as ReaperCancelledError; every other failure is wrapped in
    ReaperOperationError naming the operation and cluster.
    """

    def __init__(
        self,
        config: ReaperConfig | None = None,
        *,
        transport: ReaperTransport | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if transport is not None:
            self._transport = transport
            self._owns_transport = False
        else:
            self._transport = ReaperTransport(config or ReaperConfig(), http_transport)
            self._owns_transport = True
        self._config = self._transport.config

    @classmethod
    def from_url(cls, base_url: str, **settings: Any) -> ReaperClient:
        """Create a client for the Reaper service at ``base_url``."""
        return cls(ReaperConfig(base_url=base_url, **settings))

    async def __aenter__(self) -> ReaperClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            await self._transport.aclose()

    async def get_cluster_names(self, signal: CancellationSignal | None = None) -> list[str]:
        """List the names of all registered clusters, in service order."""
        try:
            names = await self._transport.execute(
                "GET", "/cluster", decode_into=list[str], signal=signal
            )
        except ReaperCancelledError:
            raise
        except ReaperError as e:
            raise ReaperOperationError("failed to get cluster names", e) from e
        return names or []

    async def get_cluster(self, name: str, signal: CancellationSignal | None = None) -> Cluster:
        """Fetch one cluster's status and translate it into a Cluster."""
        try:
            status = await self._transport.execute(
                "GET", _cluster_path(name), decode_into=ClusterStatus, signal=signal
            )
        except ReaperCancelledError:
            raise
        except ReaperError as e:
            raise ReaperOperationError(f"failed to get cluster ({name})", e, cluster=name) from e
        return build_cluster(status or ClusterStatus())

    async def add_cluster(
        self, name: str, seed: str, signal: CancellationSignal | None = None
    ) -> None:
        """Register a cluster with Reaper using ``seed`` as its seed host.

        The seed is sent as given; an empty seed still issues the request.
        """
        try:
            await self._transport.execute(
                "PUT", _cluster_path(name), params={"seedHost": seed}, signal=signal
            )
        except ReaperCancelledError:
            raise
        except ReaperError as e:
            raise ReaperOperationError(f"failed to add cluster ({name})", e, cluster=name) from e
        logger.info(f"Added cluster {name} with seed host {seed!r}")

    async def delete_cluster(self, name: str, signal: CancellationSignal | None = None) -> None:
        """Remove a cluster from Reaper."""
        try:
            await self._transport.execute("DELETE", _cluster_path(name), signal=signal)
        except ReaperCancelledError:
            raise
        except ReaperError as e:
            raise ReaperOperationError(
                f"failed to delete cluster ({name})", e, cluster=name
            ) from e
        logger.info(f"Deleted cluster {name}")

    async def get_clusters(
        self,
        signal: CancellationSignal | None = None,
        *,
        surface_listing_error: bool = False,
    ) -> AsyncIterator[FetchResult]:
        """Fetch every registered cluster concurrently, yielding results as they complete.

        At most min(max_concurrency, available CPUs) fetches run at once. A failed
        fetch is yielded as a FetchResult carrying the error and does not
        affect the others. Results arrive in completion order.

        Args:
            signal: Cancellation signal shared by every fetch.
            surface_listing_error: If listing cluster names fails, yield a
                single FetchResult with ``cluster_name=None`` carrying the
                error. By default the stream is simply empty.

        Yields:
            One FetchResult per cluster name.
        """
        try:
            names = await self.get_cluster_names(signal)
        except ReaperError as e:
            if surface_listing_error:
                yield FetchResult(cluster_name=None, error=e)
            else:
                logger.warning(f"Cannot fetch clusters, listing names failed: {e}")
            return

        async with aclosing(self._fetch_each(names, signal)) as results:
            async for result in results:
                yield result

    async def get_clusters_sync(self, signal: CancellationSignal | None = None) -> list[Cluster]:
        """Fetch every registered cluster, failing on the first error.

        Returns:
            All clusters in completion order. Callers needing a stable order
            must sort the result.

        Raises:
            ReaperError: The listing failure, or the first per-cluster failure
                observed. Clusters fetched so far are discarded.
        """
        names = await self.get_cluster_names(signal)

        clusters: list[Cluster] = []
        async with aclosing(self._fetch_each(names, signal)) as results:
            async for result in results:
                if result.error is not None:
                    raise result.error
                clusters.append(cast(Cluster, result.cluster))
        return clusters

    def _fetch_each(
        self, names: list[str], signal: CancellationSignal | None
    ) -> AsyncIterator[FetchResult]:
        width = concurrency_width(self._config.max_concurrency)
        logger.info(f"Fetching {len(names)} clusters with concurrency {width}")

        async def _fetch(name: str) -> FetchResult:
            try:
                return FetchResult(cluster_name=name, cluster=await self.get_cluster(name, signal))
            except ReaperError as e:
                logger.warning(f"Fetching cluster {name} failed: {e}")
                return FetchResult(cluster_name=name, error=e)

        return fan_out(names, _fetch, width)
