import numpy as np
import pytest

from meadow.agents import RabbitPopulation
from meadow.config import SimulationConfig
from meadow.ground import GroundField
from meadow.simulation import Simulation


@pytest.fixture
def config():
    """Default parameters on a small grid."""
    return SimulationConfig.from_mapping({'WIDTH': 10, 'HEIGHT': 8, 'INIT_NUM_RABBITS': 12})


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def sim(config):
    s = Simulation(config, seed=7)
    s.setup()
    return s


def make_world(width, height, ground_value, rabbits, **params):
    """Build a hand-placed simulation.

    rabbits: iterable of (x, y, life) or (x, y, life, last_moved).
    Returns the Simulation with ground filled with ``ground_value``.
    """
    cfg = SimulationConfig.from_mapping({'WIDTH': width, 'HEIGHT': height,
                                         'INIT_NUM_RABBITS': 0, **params})
    s = Simulation(cfg, seed=0)
    s.setup()
    s.ground = GroundField.filled(width, height, ground_value)
    s.population = RabbitPopulation(width, height)
    for spec in rabbits:
        s.population.add(*spec)
    return s


@pytest.fixture
def world():
    return make_world
