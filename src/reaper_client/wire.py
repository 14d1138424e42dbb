"""Pydantic models for the raw JSON returned by GET /cluster/{name}.

These mirror the service's payload field for field and are only used as
a decode target; callers receive the normalized models from
reaper_client.models instead. Missing or null leaf fields fall back to
their zero value, matching how permissive the service's output is.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        # null means "absent" on the wire; let the field default apply.
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class EndpointStatus(_WireModel):
    """One endpoint as reported by a source node."""

    endpoint: str = ""
    dc: str = ""
    rack: str = ""
    host_id: str = Field("", alias="hostId")
    status: str = ""
    severity: float = 0.0
    release_version: str = Field("", alias="releaseVersion")
    tokens: str = ""
    load: float = 0.0


class GossipStatus(_WireModel):
    """Gossip view of the cluster from one source node.

    ``endpoints`` maps datacenter -> rack -> endpoints.
    """

    source_node: str = Field("", alias="sourceNode")
    endpoint_names: list[str] = Field(default_factory=list, alias="endpointNames")
    total_load: float = Field(0.0, alias="totalLoad")
    endpoints: dict[str, dict[str, list[EndpointStatus]]] = Field(default_factory=dict)

    @field_validator("endpoints", mode="before")
    @classmethod
    def empty_nested_nulls(cls, value: Any) -> Any:
        # A null datacenter is a datacenter without racks, a null rack has no
        # endpoints, and a null endpoint is an endpoint with all fields unset.
        if not isinstance(value, dict):
            return value
        return {dc: _rack_map(racks) for dc, racks in value.items()}


def _rack_map(racks: Any) -> Any:
    if racks is None:
        return {}
    if not isinstance(racks, dict):
        return racks
    return {rack: _endpoint_list(eps) for rack, eps in racks.items()}


def _endpoint_list(eps: Any) -> Any:
    if eps is None:
        return []
    if not isinstance(eps, list):
        return eps
    return [ep if ep is not None else {} for ep in eps]


class NodesStatus(_WireModel):
    endpoint_states: list[GossipStatus] = Field(default_factory=list, alias="endpointStates")


class ClusterStatus(_WireModel):
    """Top-level cluster status payload."""

    name: str = ""
    jmx_username: str = ""
    jmx_password_is_set: bool = False
    seed_hosts: list[str] = Field(default_factory=list)
    nodes_status: NodesStatus = Field(default_factory=NodesStatus)
