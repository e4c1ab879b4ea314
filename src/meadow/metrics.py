"""Population and ground summaries for a running simulation.

`summarize` returns a flat dict of statistics for the current tick;
`RunHistory` accumulates them and exposes a pandas DataFrame.
"""
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

COLUMNS = ['tick', 'elapsed', 'rabbits', 'births', 'deaths', 'moves', 'meals',
           'mean_rabbit_life', 'max_rabbit_life', 'ground_total', 'ground_mean']


def summarize(sim) -> Dict[str, float]:
    """Return summary statistics for the simulation's current state.

    Empty populations report 0.0 for the rabbit life statistics.
    """
    ground = sim.ground_view()
    lives = np.array([r.life for r in sim.rabbits], dtype=float)
    return {
        'tick': sim.tick,
        'elapsed': float(sim.elapsed),
        'rabbits': int(lives.size),
        'mean_rabbit_life': float(lives.mean()) if lives.size else 0.0,
        'max_rabbit_life': float(lives.max()) if lives.size else 0.0,
        'ground_total': float(ground.sum()),
        'ground_mean': float(ground.mean()),
    }


class RunHistory:
    """Per-tick summary rows collected over a run."""

    def __init__(self):
        self.rows: List[Dict[str, Any]] = []

    def __len__(self):
        return len(self.rows)

    def record(self, sim, report: Optional[Any] = None) -> Dict[str, Any]:
        row = summarize(sim)
        for key in ('births', 'deaths', 'moves', 'meals'):
            row[key] = getattr(report, key, 0) if report is not None else 0
        self.rows.append(row)
        return row

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows, columns=COLUMNS)

    def to_csv(self, path: str) -> None:
        self.to_frame().to_csv(path, index=False)
