# -*- coding: utf-8 -*-

"""
meadow/config.py

Central configuration for the meadow ground/rabbit model. All tunable
constants live here so the ground growth rule, the rabbit behaviour rule
and the headless runner read the same values.

Contents:
---------
1. GROUND_GROWTH:
   - Self and neighbour growth factors plus the per-second growth cap.

2. RABBIT_BEHAVIOUR:
   - Starting energy, decision interval, starvation rate and feeding amounts.

3. WORLD:
   - Grid dimensions, initial population and the ground update mode. These
     only take effect at the next ``Simulation.setup()``.

Parameters are addressed by their upper-case names, e.g.:

    from meadow.config import SimulationConfig

    cfg = SimulationConfig()
    cfg.update({'RABBIT_EAT_INTERVAL': 0.2, 'INIT_NUM_RABBITS': 50})
    cfg.get('RABBIT_EAT_INTERVAL')   # -> 0.2

Updates are validated at the boundary and applied atomically: a mapping with
a single bad entry leaves the configuration untouched.
"""
import logging
import math
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping

log = logging.getLogger(__name__)

# ───────────────────────────────────────────────────────────────────────────────
# 1) GROUND GROWTH (life units are dimensionless in [0, 1], time in seconds)
# ───────────────────────────────────────────────────────────────────────────────
GROUND_GROWTH = {
    'MIN_SELF_GROW_FACTOR': 0.5,    # floor on a cell's own life when computing self growth
    'SELF_GROW_FACTOR': 0.05,       # self growth per unit life per second
    'ADJACENT_GROW_FACTOR': 0.25,   # growth per unit of summed neighbour life per second
    'MAX_GROW_FACTOR': 0.1,         # cap on growth per second
}

# ───────────────────────────────────────────────────────────────────────────────
# 2) RABBIT BEHAVIOUR
# ───────────────────────────────────────────────────────────────────────────────
RABBIT_BEHAVIOUR = {
    'RABBIT_FULL_LIFE': 1.0,          # life of rabbits placed at setup
    'RABBIT_MOVE_INTERVAL': 0.1,      # seconds between successive decisions
    'RABBIT_LIFE_INTERVAL': 0.75,     # life lost per second
    'RABBIT_EAT_INTERVAL': 0.1,       # ground life eaten per meal
    'MIN_RABBIT_EAT_INTERVAL': 0.05,  # ground at or below this is not worth eating
}

# ───────────────────────────────────────────────────────────────────────────────
# 3) WORLD (read at setup)
# ───────────────────────────────────────────────────────────────────────────────
WORLD = {
    'INIT_NUM_RABBITS': 100,
    'WIDTH': 100,
    'HEIGHT': 100,
    'GROUND_UPDATE': 'snapshot',
}

DEFAULT_PARAMETERS: Dict[str, Any] = {**GROUND_GROWTH, **RABBIT_BEHAVIOUR, **WORLD}

# Fixed rule constants, not exposed for editing
BREED_LIFE_THRESHOLD = 0.9
NEWBORN_LIFE = 0.5

GROUND_UPDATE_MODES = ('snapshot', 'raster')
_INTEGER_PARAMETERS = ('INIT_NUM_RABBITS', 'WIDTH', 'HEIGHT')
_POSITIVE_PARAMETERS = ('WIDTH', 'HEIGHT')


class ConfigurationError(ValueError):
    """Raised when a parameter update is rejected at the boundary."""


@dataclass
class SimulationConfig:
    """Live parameter set read by the ground and rabbit rules every tick.

    Field names are the lower-case forms of the public parameter names.
    """
    min_self_grow_factor: float = GROUND_GROWTH['MIN_SELF_GROW_FACTOR']
    self_grow_factor: float = GROUND_GROWTH['SELF_GROW_FACTOR']
    adjacent_grow_factor: float = GROUND_GROWTH['ADJACENT_GROW_FACTOR']
    max_grow_factor: float = GROUND_GROWTH['MAX_GROW_FACTOR']
    rabbit_full_life: float = RABBIT_BEHAVIOUR['RABBIT_FULL_LIFE']
    rabbit_move_interval: float = RABBIT_BEHAVIOUR['RABBIT_MOVE_INTERVAL']
    rabbit_life_interval: float = RABBIT_BEHAVIOUR['RABBIT_LIFE_INTERVAL']
    rabbit_eat_interval: float = RABBIT_BEHAVIOUR['RABBIT_EAT_INTERVAL']
    min_rabbit_eat_interval: float = RABBIT_BEHAVIOUR['MIN_RABBIT_EAT_INTERVAL']
    init_num_rabbits: int = WORLD['INIT_NUM_RABBITS']
    width: int = WORLD['WIDTH']
    height: int = WORLD['HEIGHT']
    ground_update: str = WORLD['GROUND_UPDATE']

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any]) -> 'SimulationConfig':
        cfg = cls()
        cfg.update(params)
        return cfg

    @staticmethod
    def names():
        """Public (upper-case) parameter names in declaration order."""
        return [f.name.upper() for f in fields(SimulationConfig)]

    def get(self, name: str, default=None):
        if name.upper() not in DEFAULT_PARAMETERS:
            return default
        return getattr(self, name.lower())

    def as_dict(self) -> Dict[str, Any]:
        """Return ``{NAME: value}`` for every parameter, for editing UIs."""
        return {f.name.upper(): getattr(self, f.name) for f in fields(self)}

    def update(self, params: Mapping[str, Any]) -> None:
        """Validate ``params`` and apply them all, or none of them.

        Raises ConfigurationError for unknown names or unusable values.
        """
        parsed = {}
        for name, value in params.items():
            try:
                parsed[name.upper()] = _parse_parameter(name, value)
            except ConfigurationError:
                log.warning('rejected configuration update %r=%r', name, value)
                raise
        for name, value in parsed.items():
            setattr(self, name.lower(), value)
        if parsed:
            log.debug('configuration updated: %s', parsed)


def _parse_parameter(name: Any, value: Any):
    """Coerce one public parameter to its stored type."""
    if not isinstance(name, str) or name.upper() not in DEFAULT_PARAMETERS:
        raise ConfigurationError(f'unknown parameter {name!r}')
    key = name.upper()

    if key == 'GROUND_UPDATE':
        if value not in GROUND_UPDATE_MODES:
            raise ConfigurationError(
                f'GROUND_UPDATE must be one of {GROUND_UPDATE_MODES}, got {value!r}')
        return value

    # bool is an int subclass but never a meaningful rate or count
    if isinstance(value, bool):
        raise ConfigurationError(f'{key} must be numeric, got {value!r}')
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f'{key} must be numeric, got {value!r}') from None
    if not math.isfinite(number):
        raise ConfigurationError(f'{key} must be finite, got {value!r}')
    if number < 0.0:
        raise ConfigurationError(f'{key} must be non-negative, got {value!r}')

    if key in _INTEGER_PARAMETERS:
        if not number.is_integer():
            raise ConfigurationError(f'{key} must be a whole number, got {value!r}')
        number = int(number)
        if key in _POSITIVE_PARAMETERS and number == 0:
            raise ConfigurationError(f'{key} must be positive')
    return number
