"""Translate raw cluster status payloads into Cluster models."""

from reaper_client.models import (
    Cluster,
    DataCenterState,
    EndpointState,
    GossipState,
    NodeState,
    RackState,
)
from reaper_client.wire import ClusterStatus, EndpointStatus, GossipStatus


def build_cluster(status: ClusterStatus) -> Cluster:
    """Build a Cluster from a decoded status payload.

    One GossipState is produced per source node, in payload order. Within
    a rack, endpoint order is preserved.
    """
    return Cluster(
        name=status.name,
        jmx_username=status.jmx_username,
        jmx_password_set=status.jmx_password_is_set,
        seeds=tuple(status.seed_hosts),
        node_state=NodeState(
            gossip_states=tuple(_gossip_state(gs) for gs in status.nodes_status.endpoint_states)
        ),
    )


def _gossip_state(gs: GossipStatus) -> GossipState:
    data_centers = {}
    for dc, racks in gs.endpoints.items():
        data_centers[dc] = DataCenterState(
            name=dc,
            racks={
                rack: RackState(name=rack, endpoints=tuple(_endpoint_state(ep) for ep in eps))
                for rack, eps in racks.items()
            },
        )

    return GossipState(
        source_node=gs.source_node,
        endpoint_names=tuple(gs.endpoint_names),
        total_load=gs.total_load,
        data_centers=data_centers,
    )


def _endpoint_state(ep: EndpointStatus) -> EndpointState:
    return EndpointState(
        endpoint=ep.endpoint,
        data_center=ep.dc,
        rack=ep.rack,
        host_id=ep.host_id,
        status=ep.status,
        severity=ep.severity,
        release_version=ep.release_version,
        tokens=ep.tokens,
        load=ep.load,
    )
