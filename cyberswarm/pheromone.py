"""
CyberSwarm Pheromone Field
==========================
Ant Colony Optimization pheromone stored per network edge.

- Edge-based pheromone storage τ_e, aligned with network.edges
- Evaporation: τ_e(t+dt) = τ_e(t) * exp(-ρ * dt)  (frame-rate independent)
- Deposition: τ_e += δ
- Every value is clamped to [min_pheromone, max_pheromone]; a non-finite
  value collapses to min_pheromone instead of entering the field
"""

import logging
import numpy as np
from typing import Dict

from .config import PheromoneConfig
from .network import Network

logger = logging.getLogger(__name__)


class PheromoneField:
    """
    Edge pheromone levels for one network.

    Key operations:
    1. Evaporation: global exponential decay
    2. Deposition: agents reinforce traversed edges
    3. Spikes: infection arrivals raise every edge around a host
    4. Load: total pheromone around a host, used by remediation
    """

    def __init__(self, config: PheromoneConfig, network: Network):
        self.config = config
        self.network = network

        self.levels = self._clamp(
            np.full(network.n_edges, config.initial_pheromone, dtype=float)
        )

        self.total_pheromone = float(np.sum(self.levels))
        self.total_depositions = 0
        self.step_count = 0

    def _clamp(self, values: np.ndarray) -> np.ndarray:
        clipped = np.clip(values, self.config.min_pheromone, self.config.max_pheromone)
        return np.where(np.isfinite(values), clipped, self.config.min_pheromone)

    def _clamp_scalar(self, value: float) -> float:
        if not np.isfinite(value):
            return self.config.min_pheromone
        return float(min(self.config.max_pheromone, max(self.config.min_pheromone, value)))

    def evaporate(self, dt: float) -> float:
        """
        Apply exponential evaporation to every edge.

        Args:
            dt: Elapsed simulated time

        Returns:
            Sum of pheromone over all edges after evaporation
        """
        decay_factor = np.exp(-self.config.evaporation_rate * dt)
        self.levels = self._clamp(self.levels * decay_factor)

        self.total_pheromone = float(np.sum(self.levels))
        self.step_count += 1
        return self.total_pheromone

    def deposit(self, edge_index: int, amount: float) -> float:
        """
        Add pheromone to one edge.

        Returns:
            New (clamped) level of the edge
        """
        value = self._clamp_scalar(self.levels[edge_index] + amount)
        self.levels[edge_index] = value
        self.total_depositions += 1
        return value

    def deposit_between(self, a: int, b: int, amount: float) -> bool:
        """
        Deposit on the edge joining a and b.

        Returns:
            False if no such edge exists
        """
        edge = self.network.find_edge(a, b)
        if edge is None:
            logger.debug(f"Deposit skipped: no edge between {a} and {b}")
            return False
        self.deposit(edge.index, amount)
        return True

    def spike_incident(self, node_id: int, amount: float) -> int:
        """
        Deposit on every edge incident to a node.

        Returns:
            Number of edges reinforced
        """
        edges = self.network.incident_edges(node_id)
        for edge in edges:
            self.deposit(edge.index, amount)
        return len(edges)

    def get(self, a: int, b: int) -> float:
        """Pheromone on the edge joining a and b (0.0 if absent)"""
        edge = self.network.find_edge(a, b)
        if edge is None:
            return 0.0
        return float(self.levels[edge.index])

    def load(self, node_id: int) -> float:
        """Total pheromone on edges incident to a node"""
        return float(sum(self.levels[edge.index] for edge in self.network.incident_edges(node_id)))

    def total(self) -> float:
        return float(np.sum(self.levels))

    def get_statistics(self) -> Dict[str, float]:
        """Get statistics about the pheromone field"""
        if self.levels.size == 0:
            return {
                "mean_pheromone": 0.0,
                "max_pheromone": 0.0,
                "min_pheromone": 0.0,
                "total_pheromone": 0.0,
                "total_depositions": self.total_depositions,
                "steps": self.step_count,
            }
        return {
            "mean_pheromone": float(np.mean(self.levels)),
            "max_pheromone": float(np.max(self.levels)),
            "min_pheromone": float(np.min(self.levels)),
            "total_pheromone": self.total(),
            "total_depositions": self.total_depositions,
            "steps": self.step_count,
        }

    def reset(self):
        """Reset every edge to the neutral baseline"""
        self.levels = self._clamp(
            np.full(self.network.n_edges, self.config.initial_pheromone, dtype=float)
        )
        self.total_pheromone = float(np.sum(self.levels))
        self.total_depositions = 0
        self.step_count = 0
