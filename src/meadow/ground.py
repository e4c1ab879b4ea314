"""Ground field: a dense grid of regrowing resource values in [0, 1].

Each cell grows from its own life and the summed life of its neighbours,
capped per unit time. Two update modes are supported by `GroundField.grow`:

- ``'snapshot'``: every cell reads its neighbours' pre-tick values, so the
  result does not depend on update order. Vectorised with scipy.ndimage.
- ``'raster'``: cells are swept in place in raster order (y outer, x inner);
  later cells see neighbours that were already updated this tick.
"""
from typing import Optional

import numpy as np
from scipy import ndimage

from meadow.config import GROUND_UPDATE_MODES, SimulationConfig
from meadow.grid import in_bounds, neighbor_kernel, neighbors


_KERNEL = neighbor_kernel()


class GroundField:
    """Ground life for a ``width x height`` grid, stored as ``life[y, x]``."""

    def __init__(self, width: int, height: int, life: Optional[np.ndarray] = None):
        assert width > 0 and height > 0, 'grid dimensions must be positive'
        self.width = int(width)
        self.height = int(height)
        if life is None:
            self.life = np.zeros((self.height, self.width), dtype=float)
        else:
            arr = np.array(life, dtype=float)
            if arr.shape != (self.height, self.width):
                raise ValueError(f'life shape {arr.shape} does not match grid ({self.height}, {self.width})')
            if np.any(arr < 0.0) or np.any(arr > 1.0):
                raise ValueError('ground life must lie in [0, 1]')
            self.life = arr

    @classmethod
    def random(cls, width: int, height: int, rng: np.random.Generator) -> 'GroundField':
        """Independent uniform [0, 1) value per cell."""
        return cls(width, height, rng.random((height, width)))

    @classmethod
    def filled(cls, width: int, height: int, value: float) -> 'GroundField':
        return cls(width, height, np.full((height, width), value, dtype=float))

    # ------------------------------------------------------------------
    # accessors
    # ------------------------------------------------------------------
    def life_at(self, x: int, y: int) -> float:
        self._check(x, y)
        return float(self.life[y, x])

    def set_life(self, x: int, y: int, value: float) -> None:
        self._check(x, y)
        if not 0.0 <= value <= 1.0:
            raise ValueError(f'ground life must lie in [0, 1], got {value}')
        self.life[y, x] = value

    def view(self) -> np.ndarray:
        """Read-only view of the life array."""
        v = self.life.view()
        v.flags.writeable = False
        return v

    def _check(self, x, y):
        if not in_bounds(x, y, self.width, self.height):
            raise ValueError(f'cell ({x}, {y}) outside {self.width}x{self.height} grid')

    # ------------------------------------------------------------------
    # growth
    # ------------------------------------------------------------------
    def cycle(self, x: int, y: int, dt: float, config: SimulationConfig,
              snapshot: Optional[np.ndarray] = None) -> float:
        """Apply the growth rule to one cell and return its new life.

        Neighbour life is read from ``snapshot`` when given, otherwise from
        the live field. Only cell (x, y) is written.
        """
        source = self.life if snapshot is None else snapshot
        adjacent_life = 0.0
        for ax, ay in neighbors(x, y, self.width, self.height):
            adjacent_life += source[ay, ax]
        life = self.life[y, x]
        growth = config.adjacent_grow_factor * adjacent_life * dt
        growth += config.self_grow_factor * max(config.min_self_grow_factor, life) * dt
        growth = min(growth, config.max_grow_factor * dt)
        life = min(life + growth, 1.0)
        self.life[y, x] = life
        return float(life)

    def grow(self, dt: float, config: SimulationConfig, mode: str = 'snapshot') -> None:
        """Advance every cell by ``dt`` seconds."""
        if mode == 'snapshot':
            self._grow_snapshot(dt, config)
        elif mode == 'raster':
            for y in range(self.height):
                for x in range(self.width):
                    self.cycle(x, y, dt, config)
        else:
            raise ValueError(f'unknown ground update mode {mode!r}; expected one of {GROUND_UPDATE_MODES}')

    def _grow_snapshot(self, dt, config):
        old = self.life
        # zero padding outside the grid = no wraparound
        adjacent = ndimage.convolve(old, _KERNEL, mode='constant', cval=0.0)
        growth = config.adjacent_grow_factor * adjacent * dt
        growth += config.self_grow_factor * np.maximum(config.min_self_grow_factor, old) * dt
        growth = np.minimum(growth, config.max_grow_factor * dt)
        # right-hand side is fully evaluated before the in-place write
        np.minimum(old + growth, 1.0, out=self.life)

    # ------------------------------------------------------------------
    # foraging
    # ------------------------------------------------------------------
    def consume(self, x: int, y: int, amount: float) -> float:
        """Remove up to ``amount`` from cell (x, y); return what was removed."""
        self._check(x, y)
        assert amount >= 0.0, 'amount must be non-negative'
        available = self.life[y, x]
        taken = min(available, amount)
        remaining = available - taken
        if remaining <= 0.0:
            remaining = 0.0
        self.life[y, x] = remaining
        return float(taken)
