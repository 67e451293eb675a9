"""
Pytest configuration and shared fixtures for CyberSwarm tests.
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


class StubRng:
    """
    Deterministic stand-in for numpy's Generator.

    random() always returns `value`; integers() always returns `index`
    (clipped into range). Calls are recorded for assertions.
    """

    def __init__(self, value: float = 0.0, index: int = 0):
        self.value = value
        self.index = index
        self.random_calls = 0
        self.integers_calls = 0

    def random(self):
        self.random_calls += 1
        return self.value

    def integers(self, low, high=None):
        self.integers_calls += 1
        if high is None:
            low, high = 0, low
        return min(max(low, self.index), high - 1)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests"""
    return np.random.default_rng(42)


@pytest.fixture
def stub_rng_factory():
    """Build StubRng instances"""
    return StubRng


# CyberSwarm specific fixtures

@pytest.fixture
def simulation_config():
    """Small, seeded simulation configuration"""
    from cyberswarm.config import create_small_test_config
    return create_small_test_config()


@pytest.fixture
def pheromone_config():
    """Default pheromone configuration"""
    from cyberswarm.config import PheromoneConfig
    return PheromoneConfig()


@pytest.fixture
def agent_config():
    """Default agent configuration"""
    from cyberswarm.config import AgentConfig
    return AgentConfig()


@pytest.fixture
def infection_config():
    """Default infection configuration"""
    from cyberswarm.config import InfectionConfig
    return InfectionConfig()


@pytest.fixture
def remediation_config():
    """Default remediation configuration"""
    from cyberswarm.config import RemediationConfig
    return RemediationConfig()


@pytest.fixture
def pair_network():
    """Two nodes 100 units apart joined by one edge"""
    from cyberswarm.network import Network
    return Network.from_links([(0.0, 0.0), (100.0, 0.0)], [(0, 1)])


@pytest.fixture
def star_network():
    """Hub 0 linked to leaves 1, 2, 3, each 100 units away"""
    from cyberswarm.network import Network
    positions = [(200.0, 200.0), (300.0, 200.0), (200.0, 300.0), (100.0, 200.0)]
    return Network.from_links(positions, [(0, 1), (0, 2), (0, 3)])


@pytest.fixture
def path_network():
    """Chain 0 - 1 - 2 - 3 with 100 unit spacing"""
    from cyberswarm.network import Network
    positions = [(0.0, 0.0), (100.0, 0.0), (200.0, 0.0), (300.0, 0.0)]
    return Network.from_links(positions, [(0, 1), (1, 2), (2, 3)])


@pytest.fixture
def star_field(pheromone_config, star_network):
    """Pheromone field on the star network"""
    from cyberswarm.pheromone import PheromoneField
    return PheromoneField(pheromone_config, star_network)


@pytest.fixture
def pair_field(pheromone_config, pair_network):
    """Pheromone field on the two-node network"""
    from cyberswarm.pheromone import PheromoneField
    return PheromoneField(pheromone_config, pair_network)
