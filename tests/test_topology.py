"""Tests for translating cluster status payloads."""

from typing import Any

import pytest
from conftest import make_cluster_status, make_endpoint
from pydantic import ValidationError

from reaper_client.models import Cluster
from reaper_client.topology import build_cluster
from reaper_client.wire import ClusterStatus


def _translate(payload: dict[str, Any]) -> Cluster:
    return build_cluster(ClusterStatus.model_validate(payload))


class TestBuildCluster:
    """Test build_cluster translation."""

    def test_cluster_fields(self, cluster_status: dict[str, Any]) -> None:
        """Test top-level fields map onto the Cluster."""
        cluster = _translate(cluster_status)

        assert cluster.name == "prod"
        assert cluster.jmx_username == "cassandra"
        assert cluster.jmx_password_set is True
        assert cluster.seeds == ("10.0.0.0", "10.1.0.0")

    @pytest.mark.parametrize("source_nodes", [1, 3])
    @pytest.mark.parametrize("endpoints_per_rack", [1, 4])
    def test_structure_preserved(self, source_nodes: int, endpoints_per_rack: int) -> None:
        """Test K source nodes with {dc1, dc2} and M endpoints per rack."""
        payload = make_cluster_status(
            "c1", source_nodes=source_nodes, endpoints_per_rack=endpoints_per_rack
        )

        cluster = _translate(payload)

        assert len(cluster.node_state.gossip_states) == source_nodes
        for gossip, raw in zip(
            cluster.node_state.gossip_states, payload["nodes_status"]["endpointStates"]
        ):
            assert gossip.source_node == raw["sourceNode"]
            assert set(gossip.data_centers) == {"dc1", "dc2"}
            for dc_name, dc in gossip.data_centers.items():
                assert dc.name == dc_name
                assert set(dc.racks) == {"rack1"}
                rack = dc.racks["rack1"]
                assert rack.name == "rack1"
                assert [ep.endpoint for ep in rack.endpoints] == [
                    ep["endpoint"] for ep in raw["endpoints"][dc_name]["rack1"]
                ]

    def test_endpoint_order_preserved(self) -> None:
        """Test endpoints keep the order the service reported them in."""
        addresses = ["10.0.0.9", "10.0.0.1", "10.0.0.5"]
        payload = {
            "name": "c1",
            "nodes_status": {
                "endpointStates": [
                    {
                        "sourceNode": "10.0.0.1",
                        "endpoints": {
                            "dc1": {"r1": [make_endpoint(a, "dc1", "r1") for a in addresses]}
                        },
                    }
                ]
            },
        }

        cluster = _translate(payload)

        rack = cluster.node_state.gossip_states[0].data_centers["dc1"].racks["r1"]
        assert [ep.endpoint for ep in rack.endpoints] == addresses

    def test_endpoint_fields(self) -> None:
        """Test every endpoint field is carried over."""
        payload = make_cluster_status("c1", data_centers=("dc1",), endpoints_per_rack=1)
        payload["nodes_status"]["endpointStates"][0]["endpoints"]["dc1"]["rack1"][0].update(
            {"status": "LEAVING", "severity": 1.5, "load": 99.0}
        )

        cluster = _translate(payload)

        gossip = cluster.node_state.gossip_states[0]
        endpoint = gossip.data_centers["dc1"].racks["rack1"].endpoints[0]
        assert endpoint.endpoint == "10.0.0.0"
        assert endpoint.data_center == "dc1"
        assert endpoint.rack == "rack1"
        assert endpoint.host_id == "host-10.0.0.0"
        assert endpoint.status == "LEAVING"
        assert endpoint.severity == 1.5
        assert endpoint.release_version == "4.0.11"
        assert endpoint.tokens == "-9223372036854775808"
        assert endpoint.load == 99.0

    def test_gossip_fields(self, cluster_status: dict[str, Any]) -> None:
        """Test gossip-level fields are carried over."""
        cluster = _translate(cluster_status)

        gossip = cluster.node_state.gossip_states[1]
        assert gossip.source_node == "10.0.0.1"
        assert gossip.total_load == 2049.0
        assert gossip.endpoint_names == ("10.0.0.0", "10.0.0.1", "10.1.0.0", "10.1.0.1")
        assert cluster.data_center_names == {"dc1", "dc2"}

    def test_missing_fields_default_to_zero_values(self) -> None:
        """Test absent and null leaf fields fall back to empty values."""
        payload = {
            "name": "sparse",
            "jmx_username": None,
            "nodes_status": {
                "endpointStates": [
                    {
                        "sourceNode": "10.0.0.1",
                        "endpointNames": None,
                        "endpoints": {"dc1": {"r1": [{"endpoint": "10.0.0.1"}]}},
                    }
                ]
            },
        }

        cluster = _translate(payload)

        assert cluster.jmx_username == ""
        assert cluster.jmx_password_set is False
        assert cluster.seeds == ()
        gossip = cluster.node_state.gossip_states[0]
        assert gossip.endpoint_names == ()
        assert gossip.total_load == 0.0
        endpoint = gossip.data_centers["dc1"].racks["r1"].endpoints[0]
        assert endpoint.status == ""
        assert endpoint.severity == 0.0
        assert endpoint.host_id == ""

    def test_no_node_status(self) -> None:
        """Test a payload without nodes_status yields no gossip states."""
        cluster = _translate({"name": "empty"})

        assert cluster.name == "empty"
        assert cluster.node_state.gossip_states == ()

    def test_cluster_is_frozen(self, cluster_status: dict[str, Any]) -> None:
        """Test translated clusters cannot be modified."""
        cluster = _translate(cluster_status)

        with pytest.raises(ValidationError):
            cluster.name = "other"  # type: ignore[misc]

    def test_topology_maps_are_read_only(self, cluster_status: dict[str, Any]) -> None:
        """Test datacenter and rack mappings of a translated cluster cannot be changed."""
        cluster = _translate(cluster_status)
        gossip = cluster.node_state.gossip_states[0]
        data_center = gossip.data_centers["dc1"]

        with pytest.raises(TypeError):
            gossip.data_centers["dc3"] = data_center  # type: ignore[index]
        with pytest.raises(TypeError):
            data_center.racks["rack9"] = data_center.racks["rack1"]  # type: ignore[index]
        with pytest.raises(AttributeError):
            gossip.data_centers.clear()  # type: ignore[attr-defined]
        assert set(gossip.data_centers) == {"dc1", "dc2"}
        assert set(data_center.racks) == {"rack1"}

    def test_nested_nulls_are_empty(self) -> None:
        """Test null datacenters, racks and endpoints translate to empty values."""
        payload = {
            "name": "holes",
            "nodes_status": {
                "endpointStates": [
                    {
                        "sourceNode": "10.0.0.1",
                        "endpoints": {"dc1": None, "dc2": {"r1": None, "r2": [None]}},
                    }
                ]
            },
        }

        cluster = _translate(payload)

        data_centers = cluster.node_state.gossip_states[0].data_centers
        assert data_centers["dc1"].racks == {}
        assert data_centers["dc2"].racks["r1"].endpoints == ()
        (endpoint,) = data_centers["dc2"].racks["r2"].endpoints
        assert endpoint.endpoint == ""
        assert endpoint.data_center == ""
        assert endpoint.host_id == ""

    def test_malformed_topology_rejected(self) -> None:
        """Test a rack map of the wrong shape is a validation error."""
        payload = {
            "name": "bad",
            "nodes_status": {"endpointStates": [{"endpoints": {"dc1": ["10.0.0.1"]}}]},
        }

        with pytest.raises(ValidationError):
            ClusterStatus.model_validate(payload)
