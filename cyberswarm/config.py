"""
CyberSwarm Configuration
========================
Configuration dataclasses for the network, pheromone field, agents,
infection process and remediation engine.

All tuning parameters live here. The simulation holds one SimulationConfig
and hands the relevant sub-config to each subsystem, so hot-reloaded values
are seen on the next tick.
"""

import math
import numbers
from dataclasses import dataclass, field
from typing import Optional
from enum import Enum


class NodeState(Enum):
    """Node classification states"""
    NORMAL = "normal"
    SUSPICIOUS = "suspicious"
    INFECTED = "infected"


def _non_negative(value) -> bool:
    return math.isfinite(value) and value >= 0


def _positive(value) -> bool:
    return math.isfinite(value) and value > 0


def _is_count(value) -> bool:
    return (isinstance(value, numbers.Integral) and not isinstance(value, bool)
            and value >= 0)


@dataclass
class NetworkConfig:
    """Topology generation and layout configuration"""
    n_nodes: int = 40

    # Canvas bounds for the layout
    width: float = 800.0
    height: float = 600.0
    padding: float = 60.0

    # Random links added on top of the spanning tree, as a fraction of n_nodes
    extra_link_ratio: float = 0.5

    # Force-directed layout
    link_distance: float = 100.0
    layout_iterations: int = 300


@dataclass
class PheromoneConfig:
    """Edge pheromone configuration"""
    # Evaporation
    evaporation_rate: float = 0.1  # ρ, continuous-time decay rate

    # Routing influence
    pheromone_alpha: float = 1.0  # α - pheromone influence exponent
    heuristic_beta: float = 2.0  # β - heuristic influence exponent
    influence_offset: float = 0.1  # added to pheromone and anomaly before exponentiation

    # Clipping
    initial_pheromone: float = 1.0
    min_pheromone: float = 0.1
    max_pheromone: float = 100.0

    # Deposit on edge completion, keyed by arrival node state
    deposit_infected: float = 8.0
    deposit_suspicious: float = 4.0
    deposit_normal: float = 0.15


@dataclass
class AgentConfig:
    """Ant agent configuration"""
    n_agents: int = 50

    # Movement
    base_speed: float = 160.0  # distance units per second
    min_edge_distance: float = 1.0  # shorter edges are traversed instantly

    # Decision making
    history_length: int = 8
    backtrack_penalty: float = 0.1
    decision_highlight_duration: float = 0.5

    # Anomaly heuristic per node state
    anomaly_infected: float = 10.0
    anomaly_suspicious: float = 4.0
    anomaly_normal: float = 0.5


@dataclass
class InfectionConfig:
    """Malware propagation configuration"""
    malware_spread_rate: float = 0.05
    emission_scale: float = 6.0  # emission probability = rate * dt * scale
    wave_speed: float = 180.0

    # Seeding when the whole network is clean
    spontaneous_rate: float = 0.15

    # Health assigned on state transitions
    suspicious_health: float = 60.0
    infected_health: float = 0.0

    # Pheromone spike on incident edges after a transition
    spike_infected: float = 6.0
    spike_suspicious: float = 3.0


@dataclass
class RemediationConfig:
    """Antivirus configuration"""
    load_threshold: float = 15.0  # incident pheromone needed to start repair
    repair_gain: float = 2.0  # health per unit load per second
    recovery_health: float = 95.0  # above this the node is clean again
    max_health: float = 100.0


@dataclass
class SimulationConfig:
    """Master configuration combining all subsystems"""
    network: NetworkConfig = field(default_factory=NetworkConfig)
    pheromone: PheromoneConfig = field(default_factory=PheromoneConfig)
    agents: AgentConfig = field(default_factory=AgentConfig)
    infection: InfectionConfig = field(default_factory=InfectionConfig)
    remediation: RemediationConfig = field(default_factory=RemediationConfig)

    # Time
    simulation_speed: float = 1.0  # multiplier on real elapsed time
    max_dt: float = 0.1  # largest real time step accepted per tick

    # Randomness
    seed: Optional[int] = None

    # Scenario
    scenario_name: str = "default"

    def validate(self):
        """
        Validate configuration consistency.

        Every numeric value must be finite; counts must be integers.

        Raises:
            ValueError: on the first out-of-range value
        """
        checks = [
            (_is_count(self.network.n_nodes), "n_nodes must be a non-negative integer"),
            (_positive(self.network.width) and _positive(self.network.height),
             "Canvas bounds must be positive"),
            (_non_negative(self.network.extra_link_ratio), "extra_link_ratio must be non-negative"),
            (_non_negative(self.pheromone.pheromone_alpha), "alpha must be non-negative"),
            (_non_negative(self.pheromone.heuristic_beta), "beta must be non-negative"),
            (_positive(self.pheromone.evaporation_rate), "Evaporation rate (rho) must be positive"),
            (_positive(self.pheromone.min_pheromone)
             and _positive(self.pheromone.max_pheromone)
             and self.pheromone.min_pheromone <= self.pheromone.max_pheromone,
             "Pheromone bounds must satisfy 0 < min <= max"),
            (_is_count(self.agents.n_agents), "Agent population must be a non-negative integer"),
            (_positive(self.agents.base_speed), "base_speed must be positive"),
            (_is_count(self.agents.history_length), "history_length must be a non-negative integer"),
            (_non_negative(self.infection.malware_spread_rate),
             "malware_spread_rate must be non-negative"),
            (_positive(self.infection.wave_speed), "wave_speed must be positive"),
            (_non_negative(self.remediation.recovery_health)
             and _positive(self.remediation.max_health)
             and self.remediation.recovery_health <= self.remediation.max_health,
             "recovery_health must lie in [0, max_health]"),
            (_positive(self.simulation_speed), "simulation_speed must be positive"),
            (_positive(self.max_dt), "max_dt must be positive"),
        ]
        for ok, message in checks:
            if not ok:
                raise ValueError(message)

        return True


def create_default_config() -> SimulationConfig:
    """Create default configuration"""
    return SimulationConfig()


def create_small_test_config() -> SimulationConfig:
    """Create small configuration for testing"""
    config = SimulationConfig()
    config.network.n_nodes = 12
    config.agents.n_agents = 5
    config.seed = 42
    return config
