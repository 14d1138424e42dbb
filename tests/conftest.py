"""Shared fixtures for reaper_client tests."""

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from reaper_client.client import ReaperClient
from reaper_client.config import ReaperConfig

BASE_URL = "http://reaper.test:8080"


def make_endpoint(address: str, dc: str, rack: str, **overrides: Any) -> dict[str, Any]:
    """Build one raw endpoint entry as the service reports it."""
    endpoint = {
        "endpoint": address,
        "dc": dc,
        "rack": rack,
        "hostId": f"host-{address}",
        "status": "NORMAL",
        "severity": 0.0,
        "releaseVersion": "4.0.11",
        "tokens": "-9223372036854775808",
        "load": 1024.5,
    }
    endpoint.update(overrides)
    return endpoint


def make_cluster_status(
    name: str,
    source_nodes: int = 1,
    data_centers: tuple[str, ...] = ("dc1", "dc2"),
    endpoints_per_rack: int = 2,
) -> dict[str, Any]:
    """Build a raw cluster status payload with one rack per datacenter."""
    endpoint_states = []
    for n in range(source_nodes):
        endpoints = {
            dc: {
                "rack1": [
                    make_endpoint(f"10.{d}.0.{i}", dc, "rack1")
                    for i in range(endpoints_per_rack)
                ]
            }
            for d, dc in enumerate(data_centers)
        }
        endpoint_states.append(
            {
                "sourceNode": f"10.0.0.{n}",
                "endpointNames": [
                    ep["endpoint"] for racks in endpoints.values() for ep in racks["rack1"]
                ],
                "totalLoad": 2049.0,
                "endpoints": endpoints,
            }
        )

    return {
        "name": name,
        "jmx_username": "cassandra",
        "jmx_password_is_set": True,
        "seed_hosts": ["10.0.0.0", "10.1.0.0"],
        "nodes_status": {"endpointStates": endpoint_states},
    }


@pytest.fixture
def cluster_status() -> dict[str, Any]:
    """Sample status payload with two source nodes."""
    return make_cluster_status("prod", source_nodes=2)


@pytest.fixture
def make_client() -> Callable[..., ReaperClient]:
    """Factory for a ReaperClient backed by an httpx.MockTransport handler."""

    def _make(handler: Callable[[httpx.Request], Any], **settings: Any) -> ReaperClient:
        config = ReaperConfig(base_url=BASE_URL, **settings)
        return ReaperClient(config, http_transport=httpx.MockTransport(handler))

    return _make


def cluster_api(
    names: list[str],
    failing: set[str] | None = None,
) -> Callable[[httpx.Request], httpx.Response]:
    """Handler serving GET /cluster and GET /cluster/{name}.

    Clusters in ``failing`` raise a connection error.
    """
    failing = failing or set()

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/cluster":
            return httpx.Response(200, json=names)
        name = path.removeprefix("/cluster/")
        if name in failing:
            raise httpx.ConnectError("Connection refused", request=request)
        return httpx.Response(200, json=make_cluster_status(name))

    return handler
