"""
Unit tests for cyberswarm/metrics.py
"""

import json
import pytest
import pandas as pd
from cyberswarm.metrics import MetricsCollector, StepMetrics
from cyberswarm.simulation import ACOSimulation


@pytest.fixture
def recorded(simulation_config):
    """Collector holding 30 ticks of a small run"""
    sim = ACOSimulation.from_config(simulation_config)
    collector = MetricsCollector()
    for _ in range(30):
        sim.update(1 / 30)
        collector.record(sim)
    return sim, collector


class TestMetricsCollector:
    """Tests for MetricsCollector class"""

    def test_record(self, recorded):
        sim, collector = recorded
        assert len(collector) == 30

        last = collector.history[-1]
        assert isinstance(last, StepMetrics)
        assert last.tick == sim.tick_count
        assert last.n_agents == len(sim.agents)
        assert last.system_health == sim.stats.system_health
        assert last.time == pytest.approx(sim.elapsed)

    def test_ticks_increase(self, recorded):
        _, collector = recorded
        ticks = collector.series("tick")
        assert list(ticks) == list(range(1, 31))

    def test_summary(self, recorded):
        _, collector = recorded
        summary = collector.summary()

        health = summary["system_health"]
        assert health["min"] <= health["mean"] <= health["max"]
        assert health["final"] == collector.history[-1].system_health
        assert set(summary) == {
            "system_health", "infection_rate", "agent_efficiency",
            "total_pheromones", "n_waves",
        }

    def test_empty_summary(self):
        assert MetricsCollector().summary() == {}

    def test_to_dataframe(self, recorded):
        _, collector = recorded
        df = collector.to_dataframe()

        assert isinstance(df, pd.DataFrame)
        assert len(df) == 30
        assert "infection_rate" in df.columns
        assert df["tick"].is_monotonic_increasing

    def test_save(self, recorded, tmp_path):
        _, collector = recorded
        path = tmp_path / "out" / "metrics.json"

        collector.save(path)

        with open(path) as f:
            data = json.load(f)
        assert len(data["history"]) == 30
        assert "system_health" in data["summary"]
