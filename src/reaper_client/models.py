"""Pydantic models for Reaper clusters and their gossip topology.

All models are frozen and their sequences and mappings are read-only
(tuples and MappingProxyType): once the translator hands a Cluster to a
caller it is never modified, so it can be shared freely between readers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator

from reaper_client.errors import ReaperError


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class EndpointState(_Frozen):
    """A single node as observed by a source node."""

    endpoint: str = Field("", description="Endpoint address")
    data_center: str = Field("", description="Datacenter the endpoint belongs to")
    rack: str = Field("", description="Rack the endpoint belongs to")
    host_id: str = Field("", description="Cassandra host ID")
    status: str = Field("", description="Gossip status (e.g., NORMAL, LEAVING)")
    severity: float = Field(0.0, description="Dynamic snitch severity")
    release_version: str = Field("", description="Cassandra release version")
    tokens: str = Field("", description="Token ring position, free-form")
    load: float = Field(0.0, description="Reported load")


class RackState(_Frozen):
    """Endpoints of one rack, in the order the service reported them."""

    name: str = Field(..., description="Rack name")
    endpoints: tuple[EndpointState, ...] = Field(default=(), description="Endpoints in the rack")


class DataCenterState(_Frozen):
    """Racks of one datacenter keyed by rack name."""

    name: str = Field(..., description="Datacenter name")
    racks: Mapping[str, RackState] = Field(
        default_factory=dict, validate_default=True, description="Racks by name"
    )

    @field_validator("racks")
    @classmethod
    def freeze_racks(cls, value: Mapping[str, RackState]) -> Mapping[str, RackState]:
        return MappingProxyType(dict(value))


class GossipState(_Frozen):
    """What one source node reports about the cluster."""

    source_node: str = Field("", description="Node that produced this view")
    endpoint_names: tuple[str, ...] = Field(default=(), description="Endpoints the node knows")
    total_load: float = Field(0.0, description="Aggregate load")
    data_centers: Mapping[str, DataCenterState] = Field(
        default_factory=dict, validate_default=True, description="Datacenters by name"
    )

    @field_validator("data_centers")
    @classmethod
    def freeze_data_centers(
        cls, value: Mapping[str, DataCenterState]
    ) -> Mapping[str, DataCenterState]:
        return MappingProxyType(dict(value))


class NodeState(_Frozen):
    """One GossipState per reporting source node."""

    gossip_states: tuple[GossipState, ...] = Field(default=())


class Cluster(_Frozen):
    """A cluster managed by Reaper.

    Only whether a JMX password is set is exposed, never the password.
    """

    name: str = Field(..., description="Cluster name")
    jmx_username: str = Field("", description="JMX username")
    jmx_password_set: bool = Field(False, description="Whether a JMX password is configured")
    seeds: tuple[str, ...] = Field(default=(), description="Configured seed hosts")
    node_state: NodeState = Field(default_factory=NodeState)

    @property
    def data_center_names(self) -> set[str]:
        """Datacenter names seen by any source node."""
        return {dc for gs in self.node_state.gossip_states for dc in gs.data_centers}


@dataclass(frozen=True)
class FetchResult:
    """Outcome of fetching one cluster during a fan-out.

    Exactly one of ``cluster`` and ``error`` is set. ``cluster_name`` is
    None only for a failure to list cluster names.
    """

    cluster_name: str | None
    cluster: Cluster | None = None
    error: ReaperError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        if self.error is not None:
            return f"{self.cluster_name}: failed ({self.error})"
        return f"{self.cluster_name}: ok"
