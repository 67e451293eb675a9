"""
CyberSwarm Simulation Orchestrator
==================================
Owns the network, pheromone field, agent pool and infection waves for one
run and advances them in a fixed order every tick:

    evaporate -> move agents -> advance waves -> seed/emit infection
              -> remediate -> recompute statistics

Evaporating first means agents decide on this tick's decayed field. Waves
are advanced before new ones are emitted, so a node infected this tick
only starts emitting on the next one.

The driver calls update(dt) once per frame with real elapsed time. The
simulation does no scheduling of its own; stop by not calling update,
reset by building a new simulation on a fresh network.
"""

import copy
import logging
import math
import numpy as np
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from .config import SimulationConfig, NodeState, create_default_config
from .network import Network, generate_network
from .pheromone import PheromoneField
from .agents import Ant, AgentPool
from .infection import InfectionWave, InfectionPropagation
from .remediation import RemediationEngine

logger = logging.getLogger(__name__)


# Hot-reloadable parameters: name -> (config section, attribute)
TUNABLE_PARAMETERS = {
    "alpha": ("pheromone", "pheromone_alpha"),
    "beta": ("pheromone", "heuristic_beta"),
    "rho": ("pheromone", "evaporation_rate"),
    "simulation_speed": (None, "simulation_speed"),
    "malware_spread_rate": ("infection", "malware_spread_rate"),
    "population": ("agents", "n_agents"),
}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class SimulationStats:
    """Aggregate statistics recomputed every tick"""
    infected_nodes: int = 0  # Suspicious + infected
    total_pheromones: float = 0.0
    system_health: int = 100
    infection_rate: int = 0
    agent_efficiency: int = 0


@dataclass(frozen=True)
class CycleReport:
    """Infection vs. remediation totals since the last engage()"""
    total_infections: int
    threats_neutralized: int
    efficiency: float


@dataclass
class SimulationState:
    """
    Read-only snapshot handed to consumers.

    pheromone[i] is the level of network.edges[i].
    """
    network: Network
    pheromone: np.ndarray
    ants: List[Ant]
    infection_waves: List[InfectionWave]
    stats: SimulationStats

    def edge_pheromone(self, a: int, b: int) -> float:
        edge = self.network.find_edge(a, b)
        if edge is None:
            return 0.0
        return float(self.pheromone[edge.index])

    def to_dict(self) -> Dict[str, Any]:
        """Plain-python representation, suitable for JSON"""
        return {
            "nodes": [
                {
                    "id": node.id,
                    "x": node.x,
                    "y": node.y,
                    "state": node.state.value,
                    "health": node.health,
                    "connections": list(node.connections),
                }
                for node in self.network.nodes
            ],
            "edges": [
                {
                    "source": edge.source,
                    "target": edge.target,
                    "pheromone": float(self.pheromone[edge.index]),
                }
                for edge in self.network.edges
            ],
            "ants": [
                {
                    "id": ant.id,
                    "x": ant.x,
                    "y": ant.y,
                    "current_node": ant.current_node,
                    "target_node": ant.target_node,
                    "progress": ant.progress,
                    "path_history": list(ant.path_history),
                    "decision_timer": ant.decision_timer,
                }
                for ant in self.ants
            ],
            "infection_waves": [asdict(wave) for wave in self.infection_waves],
            "stats": asdict(self.stats),
        }


class ACOSimulation:
    """
    Ant colony cyber-defense simulation.

    Example:
        >>> sim = ACOSimulation.from_config(create_default_config())
        >>> sim.engage()
        >>> for _ in range(600):
        ...     sim.update(1 / 60)
        >>> sim.stats.system_health
    """

    def __init__(self, network: Network, config: Optional[SimulationConfig] = None,
                 rng: Optional[np.random.Generator] = None):
        self.config = config or create_default_config()
        self.config.validate()

        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.network = network

        self.pheromones = PheromoneField(self.config.pheromone, network)
        self.agents = AgentPool(
            self.config.agents, self.config.pheromone, network, self.pheromones, self.rng
        )
        self.infection = InfectionPropagation(
            self.config.infection, network, self.pheromones, self.rng,
            min_edge_distance=self.config.agents.min_edge_distance,
        )
        self.remediation = RemediationEngine(self.config.remediation, network, self.pheromones)

        self.agents.spawn(self.config.agents.n_agents)

        self.stats = SimulationStats(total_pheromones=self.pheromones.total())
        self.tick_count = 0
        self.elapsed = 0.0

        # Cycle analytics window, reset by engage()
        self.cycle_infection_events = 0
        self.cycle_threats_neutralized = 0

        logger.info(
            f"Simulation ready: {network.n_nodes} nodes, {network.n_edges} edges, "
            f"{len(self.agents)} agents"
        )

    @classmethod
    def from_config(cls, config: Optional[SimulationConfig] = None) -> "ACOSimulation":
        """Generate a network from config.network and build a simulation on it"""
        config = config or create_default_config()
        config.validate()
        rng = np.random.default_rng(config.seed)
        network = generate_network(config.network, rng)
        return cls(network, config, rng)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def update(self, dt: float) -> bool:
        """
        Advance the simulation by one frame.

        Args:
            dt: Real elapsed time in seconds; clamped to [0, max_dt] and
                scaled by simulation_speed

        Returns:
            False if the tick was skipped for a degenerate dt
        """
        clamped_dt = max(0.0, min(dt, self.config.max_dt))
        adjusted_dt = clamped_dt * self.config.simulation_speed

        if not math.isfinite(adjusted_dt) or adjusted_dt <= 0:
            return False

        self.stats.total_pheromones = self.pheromones.evaporate(adjusted_dt)
        self.agents.step(adjusted_dt)
        self.cycle_infection_events += self.infection.advance(adjusted_dt)
        self._spread_malware(adjusted_dt)
        self.cycle_threats_neutralized += self.remediation.apply(adjusted_dt)
        self._update_stats()

        self.tick_count += 1
        self.elapsed += adjusted_dt
        return True

    def _spread_malware(self, dt: float):
        if self.infection.seed_if_idle(dt):
            self.cycle_infection_events += 1
        self.infection.emit(dt)

    def _update_stats(self):
        counts = self.network.count_states()
        total_nodes = self.network.n_nodes
        infected = counts[NodeState.INFECTED]
        suspicious = counts[NodeState.SUSPICIOUS]

        self.stats.infected_nodes = infected + suspicious
        if total_nodes > 0:
            self.stats.system_health = round_half_up((1 - infected / total_nodes) * 100)
            self.stats.infection_rate = round_half_up((infected + suspicious) / total_nodes * 100)
        else:
            self.stats.system_health = 100
            self.stats.infection_rate = 0
        self.stats.agent_efficiency = round_half_up(self.agents.efficiency)

    # ------------------------------------------------------------------
    # Control surface
    # ------------------------------------------------------------------

    def set_population(self, count: int):
        """Grow or truncate the agent pool to count ants"""
        self.configure(population=count)

    def configure(self, **params):
        """
        Hot-reload tuning parameters between ticks.

        Accepts alpha, beta, rho, simulation_speed, malware_spread_rate and
        population. The whole update is validated before anything is applied.

        Raises:
            ValueError: unknown parameter or out-of-range value
        """
        unknown = set(params) - set(TUNABLE_PARAMETERS)
        if unknown:
            raise ValueError(f"Unknown parameters: {sorted(unknown)}")

        candidate = copy.deepcopy(self.config)
        for name, value in params.items():
            section, attr = TUNABLE_PARAMETERS[name]
            target = candidate if section is None else getattr(candidate, section)
            setattr(target, attr, value)
        candidate.validate()

        # Subsystems hold references to the live sections; mutate them in place
        for name, value in params.items():
            section, attr = TUNABLE_PARAMETERS[name]
            target = self.config if section is None else getattr(self.config, section)
            setattr(target, attr, value)

        if "population" in params:
            self.agents.set_population(self.config.agents.n_agents)

        logger.debug(f"Configuration updated: {params}")

    # ------------------------------------------------------------------
    # Cycle analytics
    # ------------------------------------------------------------------

    def reset_cycle_analytics(self):
        self.cycle_infection_events = 0
        self.cycle_threats_neutralized = 0

    def engage(self):
        """Start a new analytics cycle"""
        self.reset_cycle_analytics()
        logger.info("Defense cycle engaged")

    def get_cycle_analytics(self) -> CycleReport:
        efficiency = 0.0
        if self.cycle_infection_events > 0:
            efficiency = self.cycle_threats_neutralized / self.cycle_infection_events * 100
        return CycleReport(
            total_infections=self.cycle_infection_events,
            threats_neutralized=self.cycle_threats_neutralized,
            efficiency=efficiency,
        )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def snapshot(self) -> SimulationState:
        """Deep copy of the current state for rendering or analysis"""
        return SimulationState(
            network=copy.deepcopy(self.network),
            pheromone=self.pheromones.levels.copy(),
            ants=copy.deepcopy(self.agents.ants),
            infection_waves=copy.deepcopy(self.infection.waves),
            stats=copy.deepcopy(self.stats),
        )
