"""
agents.py

Rabbit records, the population that owns them, and the per-tick behaviour
rule.

The population keeps two structures in step: an insertion-ordered mapping of
rabbit id -> Rabbit (the owner) and a coordinate index (x, y) -> Rabbit used
for occupancy lookups. Every add, move and remove goes through
`RabbitPopulation` so the two never disagree.

Behaviour (`cycle_rabbit`), once per tick per rabbit:
1. starve: ``life -= RABBIT_LIFE_INTERVAL * dt``; a rabbit at or below zero
   does nothing else.
2. wait until more than ``RABBIT_MOVE_INTERVAL`` has accumulated, then act:
   breed if ``life > 0.9``, else eat the ground underfoot if there is enough,
   else step to the richest free neighbouring cell.
"""
import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from meadow.config import BREED_LIFE_THRESHOLD, NEWBORN_LIFE, SimulationConfig
from meadow.grid import Cell, in_bounds, neighbors
from meadow.ground import GroundField

log = logging.getLogger(__name__)


class Action(enum.Enum):
    """Outcome of one rabbit cycle."""
    DEAD = 'dead'
    IDLE = 'idle'
    BRED = 'bred'
    BREED_BLOCKED = 'breed_blocked'
    ATE = 'ate'
    MOVED = 'moved'
    STUCK = 'stuck'


@dataclass(eq=False)
class Rabbit:
    """One rabbit. ``x``/``y`` are written only by `RabbitPopulation`."""
    life: float
    x: int
    y: int
    last_moved: float = 0.0
    rabbit_id: int = field(default=-1, compare=False)

    @property
    def position(self) -> Cell:
        return (self.x, self.y)

    def __str__(self):
        return f'Rabbit#{self.rabbit_id} at {self.position} life={self.life:.3f}'


class RabbitPopulation:
    """Owning collection of rabbits plus the (x, y) -> Rabbit index."""

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self._rabbits: Dict[int, Rabbit] = {}
        self._index: Dict[Cell, Rabbit] = {}
        self._next_id = 0

    def __len__(self):
        return len(self._rabbits)

    def __iter__(self) -> Iterator[Rabbit]:
        return iter(list(self._rabbits.values()))

    def __contains__(self, rabbit):
        return self._rabbits.get(getattr(rabbit, 'rabbit_id', None)) is rabbit

    # ------------------------------------------------------------------
    # occupancy
    # ------------------------------------------------------------------
    def at(self, x: int, y: int) -> Optional[Rabbit]:
        return self._index.get((x, y))

    def is_occupied(self, x: int, y: int) -> bool:
        return (x, y) in self._index

    def occupied_neighbors(self, x: int, y: int) -> List[Cell]:
        return [c for c in neighbors(x, y, self.width, self.height) if c in self._index]

    def free_neighbors(self, x: int, y: int) -> List[Cell]:
        return [c for c in neighbors(x, y, self.width, self.height) if c not in self._index]

    # ------------------------------------------------------------------
    # mutation
    # ------------------------------------------------------------------
    def add(self, x: int, y: int, life: float, last_moved: float = 0.0) -> Rabbit:
        """Create a rabbit at (x, y). The cell must be on the grid and free."""
        if not in_bounds(x, y, self.width, self.height):
            raise ValueError(f'cell ({x}, {y}) outside {self.width}x{self.height} grid')
        if (x, y) in self._index:
            raise ValueError(f'cell ({x}, {y}) already occupied by {self._index[(x, y)]}')
        rabbit = Rabbit(life=float(life), x=int(x), y=int(y),
                        last_moved=float(last_moved), rabbit_id=self._next_id)
        self._next_id += 1
        self._rabbits[rabbit.rabbit_id] = rabbit
        self._index[(rabbit.x, rabbit.y)] = rabbit
        return rabbit

    def remove(self, rabbit: Rabbit) -> None:
        if rabbit not in self:
            raise ValueError(f'{rabbit} is not part of this population')
        del self._rabbits[rabbit.rabbit_id]
        assert self._index.get(rabbit.position) is rabbit, 'coordinate index out of sync'
        del self._index[rabbit.position]

    def move(self, rabbit: Rabbit, x: int, y: int) -> None:
        if rabbit not in self:
            raise ValueError(f'{rabbit} is not part of this population')
        if not in_bounds(x, y, self.width, self.height):
            raise ValueError(f'cell ({x}, {y}) outside {self.width}x{self.height} grid')
        if (x, y) in self._index:
            raise ValueError(f'cell ({x}, {y}) already occupied')
        del self._index[rabbit.position]
        rabbit.x, rabbit.y = int(x), int(y)
        self._index[(rabbit.x, rabbit.y)] = rabbit

    # ------------------------------------------------------------------
    # iteration helpers
    # ------------------------------------------------------------------
    def snapshot(self) -> List[Rabbit]:
        """Rabbits alive now, in raster order of their current cells."""
        return sorted(self._rabbits.values(), key=lambda r: (r.y, r.x))

    def check_consistency(self) -> None:
        """Assert that the owner and the coordinate index agree."""
        assert len(self._index) == len(self._rabbits), 'index and population sizes differ'
        for rabbit in self._rabbits.values():
            assert self._index.get(rabbit.position) is rabbit, f'{rabbit} missing from index'

    def place_randomly(self, count: int, life: float, rng: np.random.Generator) -> List[Rabbit]:
        """Place ``count`` rabbits on distinct uniformly random free cells."""
        free = self.width * self.height - len(self)
        if count > free:
            raise ValueError(f'cannot place {count} rabbits on {free} free cells')
        placed = []
        # rejection sampling, like the legacy loop; fine while the grid is sparse
        while len(placed) < count:
            x = int(rng.integers(self.width))
            y = int(rng.integers(self.height))
            if not self.is_occupied(x, y):
                placed.append(self.add(x, y, life))
        return placed


# ----------------------------------------------------------------------
# behaviour
# ----------------------------------------------------------------------
def cycle_rabbit(rabbit: Rabbit, dt: float, ground: GroundField,
                 population: RabbitPopulation, config: SimulationConfig,
                 rng: np.random.Generator) -> Action:
    """Advance one rabbit by ``dt`` seconds and return what it did.

    A rabbit left with ``life <= 0`` is not removed here; the caller owns
    removal.
    """
    rabbit.last_moved += dt
    rabbit.life -= config.rabbit_life_interval * dt
    if rabbit.life <= 0.0:
        return Action.DEAD

    if rabbit.last_moved <= config.rabbit_move_interval:
        return Action.IDLE
    rabbit.last_moved = 0.0

    if rabbit.life > BREED_LIFE_THRESHOLD:
        return breed(rabbit, population, rng)
    if ground.life_at(rabbit.x, rabbit.y) > config.min_rabbit_eat_interval:
        forage(rabbit, ground, config)
        return Action.ATE
    return relocate(rabbit, ground, population)


def breed(rabbit: Rabbit, population: RabbitPopulation,
          rng: np.random.Generator) -> Action:
    """Spawn a newborn on a random free neighbour if a mate is adjacent."""
    if not population.occupied_neighbors(rabbit.x, rabbit.y):
        return Action.BREED_BLOCKED
    spots = population.free_neighbors(rabbit.x, rabbit.y)
    if not spots:
        return Action.BREED_BLOCKED
    x, y = spots[int(rng.integers(len(spots)))]
    child = population.add(x, y, NEWBORN_LIFE)
    log.debug('%s bred %s', rabbit, child)
    return Action.BRED


def forage(rabbit: Rabbit, ground: GroundField, config: SimulationConfig) -> float:
    """Eat from the current cell; rabbit life is not capped."""
    eaten = ground.consume(rabbit.x, rabbit.y, config.rabbit_eat_interval)
    rabbit.life += eaten
    return eaten


def best_free_neighbor(rabbit: Rabbit, ground: GroundField,
                       population: RabbitPopulation) -> Optional[Tuple[int, int]]:
    """Free neighbour with the most ground life; first one wins ties."""
    best = None
    best_life = None
    for x, y in population.free_neighbors(rabbit.x, rabbit.y):
        life = ground.life[y, x]
        if best is None or best_life < life:
            best, best_life = (x, y), life
    return best


def relocate(rabbit: Rabbit, ground: GroundField, population: RabbitPopulation) -> Action:
    target = best_free_neighbor(rabbit, ground, population)
    if target is None:
        return Action.STUCK
    population.move(rabbit, *target)
    return Action.MOVED
