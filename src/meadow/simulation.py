# -*- coding: utf-8 -*-

"""
meadow/simulation.py

High-level orchestration of the ground/rabbit model: setup, one tick of the
update protocol, the frame-driven lifecycle and read-only accessors for
whatever renders or inspects the run.

Usage:
------
    from meadow.simulation import Simulation

    sim = Simulation(seed=42)
    sim.configure({'INIT_NUM_RABBITS': 50})
    sim.setup()
    for _ in range(100):
        sim.step(1.0 / 60.0)

    sim.ground_life_at(10, 10), sim.agent_at(3, 4), sim.dimensions

Notes:
------
- All state lives on the `Simulation` instance; several can coexist.
- A tick grows the whole ground field first, then cycles the rabbits alive
  at the start of the tick. Rabbits born during a tick are first cycled on
  the next one.
- Randomness comes from a single `numpy.random.Generator` owned by the
  instance (seeded, or injected by the caller).
"""
import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Tuple

import numpy as np

from meadow.agents import Action, Rabbit, RabbitPopulation, cycle_rabbit
from meadow.config import SimulationConfig
from meadow.ground import GroundField

log = logging.getLogger(__name__)


@dataclass
class TickReport:
    """Counts of what happened during one tick."""
    tick: int
    dt: float
    births: int = 0
    deaths: int = 0
    moves: int = 0
    meals: int = 0
    population: int = 0


class Simulation:
    """Caller-owned simulation context.

    Parameters
    ----------
    config : SimulationConfig or mapping, optional
        Initial parameters; defaults from `meadow.config`.
    seed : int, optional
        Seed for the internal random generator. Ignored if ``rng`` is given.
    rng : numpy.random.Generator, optional
        Random source used for ground initialisation, placement and breeding.
    """

    def __init__(self, config: Optional[Any] = None, seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None):
        if config is None:
            config = SimulationConfig()
        elif not isinstance(config, SimulationConfig):
            config = SimulationConfig.from_mapping(config)
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.ground: Optional[GroundField] = None
        self.population: Optional[RabbitPopulation] = None
        self.tick = 0
        self.elapsed = 0.0
        self._paused = False
        self._prev_timestamp: Optional[float] = None
        self._extinct_logged = False
        self._ground_mode = self.config.ground_update

    # ------------------------------------------------------------------
    # configuration
    # ------------------------------------------------------------------
    def configure(self, params: Mapping[str, Any]) -> None:
        """Apply a live parameter update; the next tick uses the new values.

        Grid size, initial population and ground update mode are read at
        `setup`.
        """
        self.config.update(params)

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    def setup(self) -> None:
        """(Re)build the ground field and the initial rabbit population."""
        cfg = self.config
        total_cells = cfg.width * cfg.height
        if cfg.init_num_rabbits > total_cells:
            raise ValueError(f'INIT_NUM_RABBITS={cfg.init_num_rabbits} exceeds '
                             f'{total_cells} grid cells')
        self.ground = GroundField.random(cfg.width, cfg.height, self.rng)
        self.population = RabbitPopulation(cfg.width, cfg.height)
        self.population.place_randomly(cfg.init_num_rabbits, cfg.rabbit_full_life, self.rng)
        self._ground_mode = cfg.ground_update
        self.tick = 0
        self.elapsed = 0.0
        self._prev_timestamp = None
        self._extinct_logged = False
        log.info('setup %dx%d grid with %d rabbits (ground update: %s)',
                 cfg.width, cfg.height, len(self.population), self._ground_mode)

    def step(self, dt: float) -> TickReport:
        """Advance the whole simulation by ``dt`` seconds."""
        if self.ground is None or self.population is None:
            raise RuntimeError('Simulation.setup() must be called before step()')
        dt = float(dt)
        if not math.isfinite(dt) or dt < 0.0:
            raise ValueError(f'dt must be a finite, non-negative number of seconds, got {dt}')

        cfg = self.config
        report = TickReport(tick=self.tick + 1, dt=dt)

        # ground first; the whole field is written before any rabbit reads it
        self.ground.grow(dt, cfg, mode=self._ground_mode)

        # newborns are added to the population but not to this list
        for rabbit in self.population.snapshot():
            action = cycle_rabbit(rabbit, dt, self.ground, self.population, cfg, self.rng)
            if action is Action.BRED:
                report.births += 1
            elif action is Action.ATE:
                report.meals += 1
            elif action is Action.MOVED:
                report.moves += 1
            if rabbit.life <= 0.0:
                self.population.remove(rabbit)
                report.deaths += 1

        self.tick += 1
        self.elapsed += dt
        report.population = len(self.population)
        log.debug('tick %d dt=%.4f births=%d deaths=%d moves=%d meals=%d population=%d',
                  report.tick, dt, report.births, report.deaths, report.moves,
                  report.meals, report.population)
        if report.population == 0 and not self._extinct_logged:
            log.info('rabbits extinct at tick %d (t=%.2fs)', self.tick, self.elapsed)
            self._extinct_logged = True
        return report

    @property
    def paused(self) -> bool:
        return self._paused

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        """Unpause; the next frame is measured from scratch (dt = 0)."""
        self._paused = False
        self._prev_timestamp = None

    def frame(self, timestamp: float) -> Optional[TickReport]:
        """Driver callback taking a clock reading in seconds.

        The first frame after setup or resume steps with ``dt = 0``. Returns
        None while paused.
        """
        if self._paused:
            return None
        if self._prev_timestamp is None:
            self._prev_timestamp = timestamp
        dt = max(timestamp - self._prev_timestamp, 0.0)
        self._prev_timestamp = timestamp
        return self.step(dt)

    def run(self, ticks: int, frame_interval: float = 1.0 / 60.0,
            clock: Callable[[], float] = time.perf_counter,
            sleep: Callable[[float], None] = time.sleep,
            stop_when_extinct: bool = False) -> int:
        """Drive up to ``ticks`` frames from ``clock``; return frames run.

        Stops early when paused (e.g. by another caller between frames) or,
        with ``stop_when_extinct``, once no rabbits remain.
        """
        done = 0
        while done < ticks and not self._paused:
            self.frame(clock())
            done += 1
            if stop_when_extinct and not len(self.population):
                break
            if frame_interval > 0.0:
                sleep(frame_interval)
        return done

    # ------------------------------------------------------------------
    # read-only accessors
    # ------------------------------------------------------------------
    @property
    def dimensions(self) -> Tuple[int, int]:
        if self.ground is None:
            return (self.config.width, self.config.height)
        return (self.ground.width, self.ground.height)

    def ground_life_at(self, x: int, y: int) -> float:
        self._require_setup()
        return self.ground.life_at(x, y)

    def agent_at(self, x: int, y: int) -> Optional[Rabbit]:
        """Rabbit at (x, y), or None.

        The record is live and owned by the population: read it, never
        assign to it. Position changes must go through
        `RabbitPopulation.move` or the coordinate index goes stale.
        """
        self._require_setup()
        return self.population.at(x, y)

    def ground_view(self) -> np.ndarray:
        self._require_setup()
        return self.ground.view()

    @property
    def rabbits(self) -> Tuple[Rabbit, ...]:
        """Live rabbit records at call time; same read-only rule as `agent_at`."""
        self._require_setup()
        return tuple(self.population)

    def _require_setup(self):
        if self.ground is None:
            raise RuntimeError('Simulation.setup() has not been called')
