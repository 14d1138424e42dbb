"""Async client for the Cassandra Reaper repair management service.

Exports:
    Clients:
        - ReaperClient: List, fetch, add and delete clusters; fetch all
          clusters concurrently as a stream or as a fail-fast batch
        - ReaperTransport: Single-request HTTP transport

    Models:
        - Cluster, NodeState, GossipState, DataCenterState, RackState,
          EndpointState: Cluster topology
        - FetchResult: One outcome of a concurrent fetch

    Configuration:
        - ReaperConfig: Client settings (REAPER_CLIENT_ environment prefix)
        - CancellationSignal: Caller-controlled cancellation and deadlines

    Errors:
        - ReaperError: Base exception
        - ReaperTransportError, ReaperCancelledError, ReaperDecodeError,
          ReaperStatusError, ReaperOperationError
"""

from reaper_client.cancellation import CancellationSignal
from reaper_client.client import ReaperClient
from reaper_client.config import ReaperConfig
from reaper_client.errors import (
    ReaperCancelledError,
    ReaperDecodeError,
    ReaperError,
    ReaperOperationError,
    ReaperStatusError,
    ReaperTransportError,
)
from reaper_client.models import (
    Cluster,
    DataCenterState,
    EndpointState,
    FetchResult,
    GossipState,
    NodeState,
    RackState,
)
from reaper_client.topology import build_cluster
from reaper_client.transport import ReaperTransport

__all__ = [
    # Clients
    "ReaperClient",
    "ReaperTransport",
    # Models
    "Cluster",
    "NodeState",
    "GossipState",
    "DataCenterState",
    "RackState",
    "EndpointState",
    "FetchResult",
    "build_cluster",
    # Configuration
    "ReaperConfig",
    "CancellationSignal",
    # Errors
    "ReaperError",
    "ReaperTransportError",
    "ReaperCancelledError",
    "ReaperDecodeError",
    "ReaperStatusError",
    "ReaperOperationError",
]
