"""
CyberSwarm Network Model
========================
Static graph topology with mutable per-node classification and health.

- Nodes carry a fixed layout position, a NodeState and a health value
- Edges are undirected, one per unordered pair, looked up in either direction
- Each edge carries a stable index into the pheromone vector
- Topology is fixed once constructed

generate_network() is the topology provider: random spanning tree plus
extra links, laid out with a force-directed spring layout.
"""

import logging
import math
import numpy as np
import networkx as nx
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from dataclasses import dataclass, field

from .config import NetworkConfig, NodeState

logger = logging.getLogger(__name__)


@dataclass
class NetworkNode:
    """Host in the simulated network"""
    id: int
    x: float
    y: float
    state: NodeState = NodeState.NORMAL
    health: float = 100.0
    connections: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class NetworkEdge:
    """Undirected link between two hosts"""
    source: int
    target: int
    index: int  # Position in the pheromone vector

    def other(self, node_id: int) -> int:
        """Endpoint opposite to node_id"""
        return self.target if node_id == self.source else self.source


def _edge_key(a: int, b: int) -> Tuple[int, int]:
    return (a, b) if a <= b else (b, a)


class Network:
    """
    Undirected host graph.

    Construction is the only place topology is validated; afterwards every
    lookup degrades to None / empty results instead of raising.
    """

    def __init__(self, nodes: List[NetworkNode], edges: List[NetworkEdge]):
        for expected, node in enumerate(nodes):
            if node.id != expected:
                raise ValueError(f"Node ids must be contiguous from 0, got {node.id} at {expected}")

        self.nodes = nodes
        self.edges = edges

        self._edge_lookup: Dict[Tuple[int, int], NetworkEdge] = {}
        self._incident: Dict[int, List[NetworkEdge]] = {node.id: [] for node in nodes}

        for i, edge in enumerate(edges):
            if edge.index != i:
                raise ValueError(f"Edge index {edge.index} does not match position {i}")
            if edge.source == edge.target:
                raise ValueError(f"Self link on node {edge.source}")
            if edge.source not in self._incident or edge.target not in self._incident:
                raise ValueError(f"Edge ({edge.source}, {edge.target}) references unknown node")

            key = _edge_key(edge.source, edge.target)
            if key in self._edge_lookup:
                raise ValueError(f"Duplicate edge {key}")

            self._edge_lookup[key] = edge
            self._incident[edge.source].append(edge)
            self._incident[edge.target].append(edge)

        # Adjacency must mirror the edge set
        for node in nodes:
            expected = [edge.other(node.id) for edge in self._incident[node.id]]
            if sorted(node.connections) != sorted(expected):
                raise ValueError(f"Connections of node {node.id} do not match its edges")

    @classmethod
    def from_links(cls, positions: Sequence[Tuple[float, float]],
                   links: Iterable[Tuple[int, int]]) -> "Network":
        """
        Build a network from node positions and undirected links.

        Args:
            positions: (x, y) per node; index is the node id
            links: (a, b) node id pairs

        Returns:
            Network with every node NORMAL at full health
        """
        nodes = [NetworkNode(id=i, x=float(x), y=float(y)) for i, (x, y) in enumerate(positions)]
        edges: List[NetworkEdge] = []

        for a, b in links:
            a, b = int(a), int(b)
            edges.append(NetworkEdge(source=a, target=b, index=len(edges)))
            if 0 <= a < len(nodes) and 0 <= b < len(nodes) and a != b:
                nodes[a].connections.append(b)
                nodes[b].connections.append(a)

        return cls(nodes, edges)

    @property
    def n_nodes(self) -> int:
        return len(self.nodes)

    @property
    def n_edges(self) -> int:
        return len(self.edges)

    def get_node(self, node_id: Optional[int]) -> Optional[NetworkNode]:
        """Node by id, or None when the id does not resolve"""
        if node_id is None or not (0 <= node_id < len(self.nodes)):
            return None
        return self.nodes[node_id]

    def neighbors(self, node_id: int) -> List[int]:
        node = self.get_node(node_id)
        if node is None:
            return []
        return node.connections

    def find_edge(self, a: int, b: int) -> Optional[NetworkEdge]:
        """Edge joining a and b in either direction"""
        return self._edge_lookup.get(_edge_key(a, b))

    def incident_edges(self, node_id: int) -> List[NetworkEdge]:
        return self._incident.get(node_id, [])

    def distance(self, a: int, b: int) -> float:
        """Euclidean distance between two nodes, inf if either is missing"""
        node_a = self.get_node(a)
        node_b = self.get_node(b)
        if node_a is None or node_b is None:
            return math.inf
        return math.hypot(node_b.x - node_a.x, node_b.y - node_a.y)

    def count_states(self) -> Dict[NodeState, int]:
        counts = {state: 0 for state in NodeState}
        for node in self.nodes:
            counts[node.state] += 1
        return counts

    def all_normal(self) -> bool:
        return all(node.state == NodeState.NORMAL for node in self.nodes)

    def to_networkx(self) -> nx.Graph:
        """Export topology and node attributes as a networkx graph"""
        graph = nx.Graph()
        for node in self.nodes:
            graph.add_node(node.id, pos=(node.x, node.y), state=node.state.value, health=node.health)
        graph.add_edges_from((edge.source, edge.target) for edge in self.edges)
        return graph


def generate_links(n_nodes: int, extra_link_ratio: float,
                   rng: np.random.Generator) -> List[Tuple[int, int]]:
    """
    Random connected topology.

    Node i links to a uniformly random earlier node (spanning tree), then
    about extra_link_ratio * n_nodes random pairs are tried as extra links.
    Self links and duplicates are skipped.
    """
    links: List[Tuple[int, int]] = []
    seen = set()

    for i in range(1, n_nodes):
        j = int(rng.integers(0, i))
        links.append((i, j))
        seen.add(_edge_key(i, j))

    if n_nodes < 2:
        return links

    n_attempts = int(math.ceil(n_nodes * extra_link_ratio))
    for _ in range(n_attempts):
        a = int(rng.integers(0, n_nodes))
        b = int(rng.integers(0, n_nodes))
        key = _edge_key(a, b)
        if a != b and key not in seen:
            links.append((a, b))
            seen.add(key)

    return links


def layout_positions(n_nodes: int, links: List[Tuple[int, int]],
                     config: NetworkConfig,
                     rng: np.random.Generator) -> List[Tuple[float, float]]:
    """
    Force-directed layout centred in the canvas and clamped to the padded bounds.
    """
    if n_nodes == 0:
        return []

    graph = nx.Graph()
    graph.add_nodes_from(range(n_nodes))
    graph.add_edges_from(links)

    half_extent = max(1.0, min(config.width, config.height) / 2 - config.padding)
    center = (config.width / 2, config.height / 2)

    # spring_layout works in unit space; express link distance relative to it
    k = config.link_distance / half_extent if n_nodes > 1 else None

    pos = nx.spring_layout(
        graph,
        k=k,
        iterations=config.layout_iterations,
        scale=half_extent,
        center=center,
        seed=int(rng.integers(0, 2**31 - 1)),
    )

    positions = []
    for i in range(n_nodes):
        x, y = pos[i]
        x = float(np.clip(x, config.padding, config.width - config.padding))
        y = float(np.clip(y, config.padding, config.height - config.padding))
        positions.append((x, y))

    return positions


def generate_network(config: Optional[NetworkConfig] = None,
                     rng: Optional[np.random.Generator] = None) -> Network:
    """
    Generate a laid-out random network.

    Args:
        config: Topology and layout configuration
        rng: Random generator (fresh unseeded generator if None)

    Returns:
        Network with all nodes NORMAL at full health
    """
    config = config or NetworkConfig()
    rng = rng if rng is not None else np.random.default_rng()

    links = generate_links(config.n_nodes, config.extra_link_ratio, rng)
    positions = layout_positions(config.n_nodes, links, config, rng)

    network = Network.from_links(positions, links)
    logger.info(f"Generated network: {network.n_nodes} nodes, {network.n_edges} edges")
    return network
