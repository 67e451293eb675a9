"""
Metrics Collection
==================
Per-tick history of simulation statistics for headless runs.

Collects:
- The stats snapshot (health, infection rate, efficiency, pheromone)
- Node state counts
- Waves in flight and agent population
"""

import json
import numpy as np
import pandas as pd
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, List, Union

from .config import NodeState
from .simulation import ACOSimulation


@dataclass
class StepMetrics:
    """Metrics collected at each simulation tick"""
    tick: int
    time: float

    # Stats snapshot
    system_health: int
    infection_rate: int
    agent_efficiency: int
    total_pheromones: float

    # Node states
    n_infected: int
    n_suspicious: int

    # Activity
    n_waves: int
    n_agents: int


class MetricsCollector:
    """Accumulates StepMetrics from a running simulation"""

    def __init__(self):
        self.history: List[StepMetrics] = []

    def __len__(self) -> int:
        return len(self.history)

    def record(self, sim: ACOSimulation) -> StepMetrics:
        counts = sim.network.count_states()
        metrics = StepMetrics(
            tick=sim.tick_count,
            time=sim.elapsed,
            system_health=sim.stats.system_health,
            infection_rate=sim.stats.infection_rate,
            agent_efficiency=sim.stats.agent_efficiency,
            total_pheromones=sim.stats.total_pheromones,
            n_infected=counts[NodeState.INFECTED],
            n_suspicious=counts[NodeState.SUSPICIOUS],
            n_waves=len(sim.infection),
            n_agents=len(sim.agents),
        )
        self.history.append(metrics)
        return metrics

    def series(self, name: str) -> np.ndarray:
        return np.array([getattr(m, name) for m in self.history], dtype=float)

    def summary(self) -> Dict[str, Dict[str, float]]:
        """Mean, min, max and final value of the key series"""
        if not self.history:
            return {}

        summary = {}
        for name in ("system_health", "infection_rate", "agent_efficiency",
                     "total_pheromones", "n_waves"):
            values = self.series(name)
            summary[name] = {
                "mean": float(np.mean(values)),
                "min": float(np.min(values)),
                "max": float(np.max(values)),
                "final": float(values[-1]),
            }
        return summary

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([asdict(m) for m in self.history])

    def save(self, path: Union[str, Path]):
        """Write history and summary as JSON"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump({
                "history": [asdict(m) for m in self.history],
                "summary": self.summary(),
            }, f, indent=2)
