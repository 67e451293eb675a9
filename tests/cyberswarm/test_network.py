"""
Unit tests for cyberswarm/network.py

Tests the graph model and the topology provider.
"""

import math
import pytest
import numpy as np
import networkx as nx
from cyberswarm.network import (
    Network, NetworkNode, NetworkEdge, generate_network, generate_links,
)
from cyberswarm.config import NetworkConfig, NodeState


class TestNetworkEdge:
    """Tests for NetworkEdge dataclass"""

    def test_other_endpoint(self):
        edge = NetworkEdge(source=2, target=5, index=0)
        assert edge.other(2) == 5
        assert edge.other(5) == 2


class TestNetworkConstruction:
    """Tests for Network construction and validation"""

    def test_from_links(self, star_network):
        assert star_network.n_nodes == 4
        assert star_network.n_edges == 3
        assert sorted(star_network.neighbors(0)) == [1, 2, 3]
        assert star_network.neighbors(1) == [0]

        for node in star_network.nodes:
            assert node.state == NodeState.NORMAL
            assert node.health == 100.0

    def test_adjacency_symmetric(self, path_network):
        for node in path_network.nodes:
            for neighbor_id in node.connections:
                assert node.id in path_network.neighbors(neighbor_id)

    def test_edge_indices_stable(self, path_network):
        for i, edge in enumerate(path_network.edges):
            assert edge.index == i

    def test_self_link_rejected(self):
        with pytest.raises(ValueError):
            Network.from_links([(0, 0), (10, 0)], [(1, 1)])

    def test_duplicate_link_rejected(self):
        with pytest.raises(ValueError):
            Network.from_links([(0, 0), (10, 0)], [(0, 1), (1, 0)])

    def test_unknown_node_rejected(self):
        with pytest.raises(ValueError):
            Network.from_links([(0, 0), (10, 0)], [(0, 7)])

    def test_non_contiguous_ids_rejected(self):
        nodes = [NetworkNode(id=0, x=0, y=0), NetworkNode(id=2, x=1, y=1)]
        with pytest.raises(ValueError):
            Network(nodes, [])

    def test_mismatched_connections_rejected(self):
        nodes = [NetworkNode(id=0, x=0, y=0, connections=[1]),
                 NetworkNode(id=1, x=1, y=1)]
        with pytest.raises(ValueError):
            Network(nodes, [])

    def test_empty_network(self):
        network = Network([], [])
        assert network.n_nodes == 0
        assert network.all_normal()


class TestNetworkLookup:
    """Tests for lookups that must degrade instead of raising"""

    def test_find_edge_either_direction(self, star_network):
        forward = star_network.find_edge(0, 2)
        backward = star_network.find_edge(2, 0)
        assert forward is not None
        assert forward is backward

    def test_find_edge_missing(self, star_network):
        assert star_network.find_edge(1, 2) is None
        assert star_network.find_edge(0, 42) is None

    def test_get_node_invalid(self, star_network):
        assert star_network.get_node(-1) is None
        assert star_network.get_node(4) is None
        assert star_network.get_node(None) is None

    def test_neighbors_invalid(self, star_network):
        assert star_network.neighbors(99) == []

    def test_incident_edges(self, star_network):
        assert len(star_network.incident_edges(0)) == 3
        assert len(star_network.incident_edges(1)) == 1
        assert star_network.incident_edges(99) == []

    def test_distance(self, pair_network):
        assert pair_network.distance(0, 1) == pytest.approx(100.0)
        assert pair_network.distance(1, 0) == pytest.approx(100.0)
        assert math.isinf(pair_network.distance(0, 5))

    def test_count_states(self, star_network):
        star_network.nodes[1].state = NodeState.INFECTED
        star_network.nodes[2].state = NodeState.SUSPICIOUS
        counts = star_network.count_states()
        assert counts[NodeState.NORMAL] == 2
        assert counts[NodeState.SUSPICIOUS] == 1
        assert counts[NodeState.INFECTED] == 1
        assert not star_network.all_normal()

    def test_to_networkx(self, star_network):
        graph = star_network.to_networkx()
        assert graph.number_of_nodes() == 4
        assert graph.number_of_edges() == 3
        assert graph.nodes[0]["state"] == "normal"


class TestGenerateNetwork:
    """Tests for the topology provider"""

    def test_spanning_tree_links(self, rng):
        links = generate_links(20, 0.0, rng)
        assert len(links) == 19
        for i, (a, b) in enumerate(links, start=1):
            assert a == i
            assert b < i

    def test_extra_links_no_duplicates(self, rng):
        links = generate_links(30, 2.0, rng)
        keys = [tuple(sorted(link)) for link in links]
        assert len(keys) == len(set(keys))
        assert all(a != b for a, b in links)
        assert len(links) >= 29

    def test_generated_network_shape(self, rng):
        config = NetworkConfig(n_nodes=25)
        network = generate_network(config, rng)

        assert network.n_nodes == 25
        assert [node.id for node in network.nodes] == list(range(25))
        assert nx.is_connected(network.to_networkx())

    def test_positions_within_bounds(self, rng):
        config = NetworkConfig(n_nodes=30, width=400, height=300, padding=20)
        network = generate_network(config, rng)

        for node in network.nodes:
            assert config.padding <= node.x <= config.width - config.padding
            assert config.padding <= node.y <= config.height - config.padding
            assert np.isfinite(node.x) and np.isfinite(node.y)

    def test_deterministic_with_seed(self):
        config = NetworkConfig(n_nodes=15)
        a = generate_network(config, np.random.default_rng(7))
        b = generate_network(config, np.random.default_rng(7))

        assert [(e.source, e.target) for e in a.edges] == [(e.source, e.target) for e in b.edges]
        for node_a, node_b in zip(a.nodes, b.nodes):
            assert node_a.x == pytest.approx(node_b.x)
            assert node_a.y == pytest.approx(node_b.y)

    def test_tiny_networks(self, rng):
        assert generate_network(NetworkConfig(n_nodes=0), rng).n_nodes == 0

        single = generate_network(NetworkConfig(n_nodes=1), rng)
        assert single.n_nodes == 1
        assert single.n_edges == 0
