"""
CyberSwarm Infection Propagation
================================
Malware spreading as discrete waves travelling along network edges.

Node classification only moves forward through wave arrivals:

    NORMAL -> SUSPICIOUS -> INFECTED

one step per arrival. Remediation is the only way back.

- Seeding: a fully clean network is re-infected at rate 0.15 per second
- Emission: each infected node emits at rate malware_spread_rate * 6 per
  second toward every non-infected neighbor
- At most one wave is in flight per directed (source, target) pair
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import List, Set, Tuple

from .config import InfectionConfig, NodeState
from .network import Network
from .pheromone import PheromoneField

logger = logging.getLogger(__name__)


@dataclass
class InfectionWave:
    """Infection attempt in flight along one edge"""
    id: int
    source_id: int
    target_id: int
    progress: float = 0.0


class InfectionPropagation:
    """
    Wave arena plus the seeding and emission processes.

    Waves are kept in a plain list; each advance() builds the list of
    surviving waves and swaps it in, so nothing is removed mid-iteration.
    """

    def __init__(self, config: InfectionConfig, network: Network,
                 pheromones: PheromoneField, rng: np.random.Generator,
                 min_edge_distance: float = 1.0):
        self.config = config
        self.network = network
        self.pheromones = pheromones
        self.rng = rng
        self.min_edge_distance = min_edge_distance

        self.waves: List[InfectionWave] = []
        self.pending_pairs: Set[Tuple[int, int]] = set()
        self.next_wave_id = 0

    def __len__(self) -> int:
        return len(self.waves)

    def infect(self, node_id: int) -> bool:
        """
        Force a node straight to INFECTED.

        Returns:
            False if the node does not exist
        """
        node = self.network.get_node(node_id)
        if node is None:
            return False
        node.state = NodeState.INFECTED
        node.health = self.config.infected_health
        return True

    def seed_if_idle(self, dt: float) -> bool:
        """
        Re-infect a random node when the whole network is clean.

        Returns:
            True if a node was infected this call
        """
        if self.network.n_nodes == 0 or not self.network.all_normal():
            return False
        if self.rng.random() >= self.config.spontaneous_rate * dt:
            return False

        node_id = int(self.rng.integers(0, self.network.n_nodes))
        self.infect(node_id)
        logger.debug(f"Spontaneous infection seeded at node {node_id}")
        return True

    def launch(self, source_id: int, target_id: int) -> bool:
        """
        Start a wave from source to target unless that pair is already pending.
        """
        key = (source_id, target_id)
        if key in self.pending_pairs:
            return False

        self.pending_pairs.add(key)
        self.waves.append(InfectionWave(
            id=self.next_wave_id,
            source_id=source_id,
            target_id=target_id,
        ))
        self.next_wave_id += 1
        return True

    def emit(self, dt: float) -> int:
        """
        Let every infected node attempt to emit waves.

        Returns:
            Number of waves launched
        """
        emit_chance = self.config.malware_spread_rate * dt * self.config.emission_scale
        launched = 0

        for node in self.network.nodes:
            if node.state != NodeState.INFECTED:
                continue
            if self.rng.random() >= emit_chance:
                continue

            for neighbor_id in node.connections:
                neighbor = self.network.get_node(neighbor_id)
                if neighbor is not None and neighbor.state != NodeState.INFECTED:
                    if self.launch(node.id, neighbor_id):
                        launched += 1

        return launched

    def _resolve_arrival(self, wave: InfectionWave) -> bool:
        """Apply a wave's arrival; returns True on a state change"""
        target = self.network.get_node(wave.target_id)

        if target.state == NodeState.NORMAL:
            target.state = NodeState.SUSPICIOUS
            target.health = self.config.suspicious_health
            spike = self.config.spike_suspicious
        elif target.state == NodeState.SUSPICIOUS:
            target.state = NodeState.INFECTED
            target.health = self.config.infected_health
            spike = self.config.spike_infected
        else:
            return False

        self.pheromones.spike_incident(target.id, spike)
        return True

    def advance(self, dt: float) -> int:
        """
        Move every wave forward and resolve arrivals.

        Returns:
            Number of arrivals that changed a node's state
        """
        survivors: List[InfectionWave] = []
        infections = 0

        for wave in self.waves:
            key = (wave.source_id, wave.target_id)
            dist = self.network.distance(wave.source_id, wave.target_id)

            if not np.isfinite(dist) or dist < self.min_edge_distance:
                logger.debug(f"Discarding wave {wave.id} on degenerate edge {key}")
                self.pending_pairs.discard(key)
                continue

            wave.progress += self.config.wave_speed * dt / dist

            if wave.progress >= 1:
                if self._resolve_arrival(wave):
                    infections += 1
                self.pending_pairs.discard(key)
                continue

            survivors.append(wave)

        self.waves = survivors
        return infections

    def clear(self):
        """Drop every wave in flight"""
        self.waves = []
        self.pending_pairs.clear()
