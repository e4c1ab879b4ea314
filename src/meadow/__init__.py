"""Ground/rabbit ecology simulation on a bounded 2D grid."""
from meadow.config import ConfigurationError, SimulationConfig
from meadow.simulation import Simulation, TickReport

__all__ = ['ConfigurationError', 'Simulation', 'SimulationConfig', 'TickReport']
__version__ = '0.1.0'
