"""
CyberSwarm Remediation
======================
Antivirus healing driven by the swarm's aggregated pheromone.

A compromised node whose incident pheromone load exceeds the threshold
heals at load * repair_gain health per second. Above recovery_health it
is clean again; otherwise any positive health leaves it SUSPICIOUS.
"""

import logging

from .config import RemediationConfig, NodeState
from .network import Network
from .pheromone import PheromoneField

logger = logging.getLogger(__name__)


class RemediationEngine:
    """Per-node pheromone-driven health recovery"""

    def __init__(self, config: RemediationConfig, network: Network,
                 pheromones: PheromoneField):
        self.config = config
        self.network = network
        self.pheromones = pheromones

        self.total_neutralized = 0

    def apply(self, dt: float) -> int:
        """
        Heal every compromised node under enough pheromone load.

        Returns:
            Number of nodes restored to NORMAL this call
        """
        neutralized = 0

        for node in self.network.nodes:
            if node.state == NodeState.NORMAL:
                continue

            load = self.pheromones.load(node.id)
            if load <= self.config.load_threshold:
                continue

            node.health = min(self.config.max_health,
                              node.health + load * self.config.repair_gain * dt)

            if node.health > self.config.recovery_health:
                node.state = NodeState.NORMAL
                neutralized += 1
                logger.debug(f"Node {node.id} neutralized (load={load:.1f})")
            elif node.health > 0:
                node.state = NodeState.SUSPICIOUS

        self.total_neutralized += neutralized
        return neutralized
