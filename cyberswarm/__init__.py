"""
CyberSwarm Simulator
====================
Ant colony optimization over a spreading-infection network, used to
visualize swarm-based cyber defense.

Inspired by:
- Ant colony pheromone routing (ACO)
- Epidemic spread on contact graphs
- Stigmergic, feedback-driven remediation

Modules:
--------
- config: Configuration dataclasses and defaults
- network: Graph model and topology/layout provider
- pheromone: Edge pheromone field with evaporation and deposit
- agents: Ant agents and their decision rule
- infection: Infection waves and node classification
- remediation: Pheromone-driven antivirus
- simulation: Orchestrator, statistics and snapshots
- metrics: Per-tick history for headless runs
- main: CLI and simulation runner

Example Usage:
--------------
>>> from cyberswarm import create_default_config, ACOSimulation
>>> sim = ACOSimulation.from_config(create_default_config())
>>> sim.engage()
>>> for _ in range(600):
...     sim.update(1 / 60)
>>> state = sim.snapshot()
"""

__version__ = "1.0.0"

# Configuration
from .config import (
    SimulationConfig,
    NetworkConfig,
    PheromoneConfig,
    AgentConfig,
    InfectionConfig,
    RemediationConfig,
    NodeState,
    create_default_config,
    create_small_test_config,
)

# Graph model
from .network import (
    Network,
    NetworkNode,
    NetworkEdge,
    generate_network,
)

# Subsystems
from .pheromone import PheromoneField
from .agents import Ant, AgentPool
from .infection import InfectionWave, InfectionPropagation
from .remediation import RemediationEngine

# Orchestrator
from .simulation import (
    ACOSimulation,
    SimulationState,
    SimulationStats,
    CycleReport,
)

from .metrics import MetricsCollector, StepMetrics

# Runner
from .main import (
    run_simulation,
    create_benchmark_config,
    visualize_simulation,
    print_config_summary,
)

__all__ = [
    "SimulationConfig",
    "NetworkConfig",
    "PheromoneConfig",
    "AgentConfig",
    "InfectionConfig",
    "RemediationConfig",
    "NodeState",
    "create_default_config",
    "create_small_test_config",
    "Network",
    "NetworkNode",
    "NetworkEdge",
    "generate_network",
    "PheromoneField",
    "Ant",
    "AgentPool",
    "InfectionWave",
    "InfectionPropagation",
    "RemediationEngine",
    "ACOSimulation",
    "SimulationState",
    "SimulationStats",
    "CycleReport",
    "MetricsCollector",
    "StepMetrics",
    "run_simulation",
    "create_benchmark_config",
    "visualize_simulation",
    "print_config_summary",
]
