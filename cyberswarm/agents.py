"""
CyberSwarm Agent Pool
=====================
Ant agents that patrol the network and reinforce paths toward threats.

Each ant is either at rest on a node (target_node is None) and must pick a
neighbor, or travelling along an edge at constant speed. Decisions follow
the ACO rule

    p(j) ∝ (τ_ij + 0.1)^α * (η_j + 0.1)^β

where η_j is the anomaly score of neighbor j. Recently visited neighbors
are penalised but never forbidden. On arrival the ant deposits pheromone
keyed to the arrival node's state, so threat evidence dominates the field.
"""

import logging
import numpy as np
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Sequence

from .config import AgentConfig, PheromoneConfig, NodeState
from .network import Network
from .pheromone import PheromoneField

logger = logging.getLogger(__name__)


@dataclass
class Ant:
    """Mobile defense agent"""
    id: int
    x: float
    y: float
    current_node: int
    target_node: Optional[int] = None
    progress: float = 0.0
    path_history: Deque[int] = field(
        default_factory=lambda: deque(maxlen=AgentConfig.history_length))
    decision_timer: float = 0.0

    @property
    def traveling(self) -> bool:
        return self.target_node is not None


def roulette_select(candidates: Sequence[int], scores: Sequence[float], r: float) -> int:
    """
    Roulette-wheel selection.

    Subtracts each score from r in order and returns the first candidate
    at which the remainder drops to zero or below. Float residue past the
    last candidate falls back to the first one.

    Args:
        candidates: Neighbor ids in enumeration order
        scores: Non-negative score per candidate
        r: Draw in [0, sum(scores))
    """
    for candidate, score in zip(candidates, scores):
        r -= score
        if r <= 0:
            return candidate
    return candidates[0]


class AgentPool:
    """
    Collection of ants sharing one network and pheromone field.

    Tracks lifetime move and detection counters for the efficiency
    statistic. Counters survive population changes.
    """

    def __init__(self, config: AgentConfig, pheromone_config: PheromoneConfig,
                 network: Network, pheromones: PheromoneField,
                 rng: np.random.Generator):
        self.config = config
        self.pheromone_config = pheromone_config
        self.network = network
        self.pheromones = pheromones
        self.rng = rng

        self.ants: List[Ant] = []
        self.next_ant_id = 0

        # Lifetime counters
        self.total_moves = 0
        self.detections = 0

    def __len__(self) -> int:
        return len(self.ants)

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def spawn(self, count: int) -> List[Ant]:
        """Create ants on uniformly random nodes and add them to the pool"""
        if count <= 0 or self.network.n_nodes == 0:
            return []

        new_ants = []
        for _ in range(count):
            node = self.network.nodes[int(self.rng.integers(0, self.network.n_nodes))]
            ant = Ant(
                id=self.next_ant_id,
                x=node.x,
                y=node.y,
                current_node=node.id,
                path_history=deque(maxlen=self.config.history_length),
            )
            self.next_ant_id += 1
            new_ants.append(ant)

        self.ants.extend(new_ants)
        return new_ants

    def set_population(self, count: int):
        """
        Grow or shrink the pool to exactly count ants.

        Shrinking truncates: ants past index count are discarded.
        """
        current = len(self.ants)
        if count > current:
            self.spawn(count - current)
        elif count < current:
            del self.ants[max(0, count):]

        if len(self.ants) != count:
            logger.debug(f"Population request {count} settled at {len(self.ants)}")

    # ------------------------------------------------------------------
    # Decision making
    # ------------------------------------------------------------------

    def anomaly(self, state: NodeState) -> float:
        """Heuristic desirability of a node"""
        if state == NodeState.INFECTED:
            return self.config.anomaly_infected
        if state == NodeState.SUSPICIOUS:
            return self.config.anomaly_suspicious
        return self.config.anomaly_normal

    def score_neighbors(self, ant: Ant, neighbors: Sequence[int]) -> np.ndarray:
        """
        ACO score for each neighbor of the ant's current node.

        Missing edges or nodes score 0. Non-finite scores are zeroed.
        """
        offset = self.pheromone_config.influence_offset
        pheromone = np.zeros(len(neighbors))
        anomaly = np.zeros(len(neighbors))
        valid = np.zeros(len(neighbors), dtype=bool)

        for i, neighbor_id in enumerate(neighbors):
            edge = self.network.find_edge(ant.current_node, neighbor_id)
            neighbor = self.network.get_node(neighbor_id)
            if edge is None or neighbor is None:
                continue
            pheromone[i] = self.pheromones.levels[edge.index]
            anomaly[i] = self.anomaly(neighbor.state)
            valid[i] = True

        with np.errstate(over="ignore", invalid="ignore"):
            pheromone_influence = np.power(pheromone + offset, self.pheromone_config.pheromone_alpha)
            heuristic_influence = np.power(anomaly + offset, self.pheromone_config.heuristic_beta)
            scores = pheromone_influence * heuristic_influence

        scores = np.where(valid & np.isfinite(scores), scores, 0.0)

        # Soft backtrack discouragement
        for i, neighbor_id in enumerate(neighbors):
            if neighbor_id in ant.path_history:
                scores[i] *= self.config.backtrack_penalty

        return scores

    def choose_next_node(self, ant: Ant) -> Optional[int]:
        """
        Pick the next node for an ant at rest.

        Returns:
            Neighbor id, or None if the current node is unknown or isolated
        """
        neighbors = self.network.neighbors(ant.current_node)
        if not neighbors:
            return None

        scores = self.score_neighbors(ant, neighbors)
        total = float(np.sum(scores))

        if total == 0 or not np.isfinite(total):
            # Pure exploration
            choice = neighbors[int(self.rng.integers(0, len(neighbors)))]
        else:
            r = float(self.rng.random()) * total
            choice = roulette_select(neighbors, scores, r)

        ant.decision_timer = self.config.decision_highlight_duration
        return choice

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------

    def deposit_amount(self, state: NodeState) -> float:
        if state == NodeState.INFECTED:
            return self.pheromone_config.deposit_infected
        if state == NodeState.SUSPICIOUS:
            return self.pheromone_config.deposit_suspicious
        return self.pheromone_config.deposit_normal

    def _arrive(self, ant: Ant):
        target = self.network.get_node(ant.target_node)
        edge = self.network.find_edge(ant.current_node, ant.target_node)

        if edge is not None:
            if target.state != NodeState.NORMAL:
                self.detections += 1
            self.pheromones.deposit(edge.index, self.deposit_amount(target.state))

        ant.path_history.append(ant.current_node)
        ant.current_node = target.id
        ant.target_node = None
        ant.progress = 0.0
        ant.x = target.x
        ant.y = target.y

    def step_ant(self, ant: Ant, dt: float):
        """Advance one ant by dt"""
        if ant.decision_timer > 0:
            ant.decision_timer = max(0.0, ant.decision_timer - dt)

        if ant.target_node is None:
            next_node = self.choose_next_node(ant)
            if next_node is not None:
                ant.target_node = next_node
                ant.progress = 0.0
                self.total_moves += 1
            return

        source = self.network.get_node(ant.current_node)
        target = self.network.get_node(ant.target_node)
        if source is None or target is None:
            logger.debug(f"Ant {ant.id} lost its edge ({ant.current_node} -> {ant.target_node})")
            ant.target_node = None
            return

        dx = target.x - source.x
        dy = target.y - source.y
        dist = float(np.hypot(dx, dy))

        if dist < self.config.min_edge_distance:
            ant.progress = 1.0
        else:
            ant.progress += self.config.base_speed * dt / dist

        clamped = min(1.0, ant.progress)
        ant.x = source.x + dx * clamped
        ant.y = source.y + dy * clamped

        if ant.progress >= 1:
            self._arrive(ant)

    def step(self, dt: float):
        """Advance every ant by dt"""
        for ant in self.ants:
            self.step_ant(ant, dt)

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    @property
    def efficiency(self) -> float:
        """Detections per move, as a percentage"""
        if self.total_moves == 0:
            return 0.0
        return self.detections / self.total_moves * 100

    def reset_counters(self):
        self.total_moves = 0
        self.detections = 0
