"""
grid.py

Bounded grid topology helpers. Cells are addressed as ``(x, y)`` with
``0 <= x < width`` and ``0 <= y < height``; arrays are indexed ``[y, x]``.
There is no wraparound: edge cells have 5 neighbours and corners 3.

Public functions:
- `in_bounds(x, y, width, height)` -> bool
- `neighbors(x, y, width, height)` -> list of (x, y)
- `neighbor_kernel()` -> 3x3 summing kernel with a zero centre
"""
from typing import List, Tuple
import numpy as np

Cell = Tuple[int, int]


def in_bounds(x: int, y: int, width: int, height: int) -> bool:
    return 0 <= x < width and 0 <= y < height


def neighbors(x: int, y: int, width: int, height: int) -> List[Cell]:
    """Return the cells of the 3x3 block around (x, y), centre excluded.

    Order is row-major: y ascending, then x ascending within a row.
    Raises ValueError if (x, y) lies outside the grid.
    """
    if not in_bounds(x, y, width, height):
        raise ValueError(f'cell ({x}, {y}) outside {width}x{height} grid')
    y0, y1 = max(y - 1, 0), min(y + 1, height - 1)
    x0, x1 = max(x - 1, 0), min(x + 1, width - 1)
    return [(ax, ay)
            for ay in range(y0, y1 + 1)
            for ax in range(x0, x1 + 1)
            if ax != x or ay != y]


def neighbor_kernel() -> np.ndarray:
    """Kernel that sums the 8 surrounding cells when convolved."""
    k = np.ones((3, 3), dtype=float)
    k[1, 1] = 0.0
    return k
