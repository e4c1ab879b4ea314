import numpy as np
import pytest

from meadow.config import SimulationConfig
from meadow.ground import GroundField


def test_cycle_is_capped_by_max_growth():
    cfg = SimulationConfig()
    g = GroundField.filled(3, 3, 0.2)
    # uncapped growth would be 0.25 * 1.6 + 0.05 * 0.5 = 0.425
    assert g.cycle(1, 1, 1.0, cfg) == pytest.approx(0.3)
    assert g.life_at(1, 1) == pytest.approx(0.3)
    # only the target cell changes
    assert g.life_at(0, 0) == pytest.approx(0.2)


def test_cycle_self_growth_uses_min_factor():
    cfg = SimulationConfig()
    g = GroundField.filled(3, 3, 0.0)
    assert g.cycle(0, 0, 1.0, cfg) == pytest.approx(0.025)


def test_cycle_clamps_at_one():
    cfg = SimulationConfig()
    g = GroundField.filled(3, 3, 1.0)
    g.set_life(1, 1, 0.95)
    assert g.cycle(1, 1, 1.0, cfg) == 1.0


def test_grow_respects_bounds_and_cap():
    cfg = SimulationConfig()
    rng = np.random.default_rng(3)
    g = GroundField.random(12, 9, rng)
    for dt in (0.0, 0.016, 0.3, 2.0):
        before = g.life.copy()
        g.grow(dt, cfg)
        assert np.all(g.life >= 0.0) and np.all(g.life <= 1.0)
        assert np.all(g.life - before <= cfg.max_grow_factor * dt + 1e-12)
        assert np.all(g.life >= before)


def test_snapshot_grow_matches_per_cell_cycle():
    cfg = SimulationConfig()
    rng = np.random.default_rng(11)
    g = GroundField.random(7, 5, rng)
    expected = GroundField(7, 5, g.life.copy())
    snapshot = expected.life.copy()
    for y in range(5):
        for x in range(7):
            expected.cycle(x, y, 0.05, cfg, snapshot=snapshot)
    g.grow(0.05, cfg, mode='snapshot')
    assert np.allclose(g.life, expected.life)


def test_snapshot_and_raster_semantics_differ():
    cfg = SimulationConfig.from_mapping({
        'SELF_GROW_FACTOR': 0.0, 'ADJACENT_GROW_FACTOR': 1.0, 'MAX_GROW_FACTOR': 10.0})
    snap = GroundField(3, 1, [[0.5, 0.0, 0.0]])
    raster = GroundField(3, 1, [[0.5, 0.0, 0.0]])
    snap.grow(1.0, cfg, mode='snapshot')
    raster.grow(1.0, cfg, mode='raster')
    # the last cell only sees its neighbour's new value in a raster sweep
    assert np.allclose(snap.life, [[0.5, 0.5, 0.0]])
    assert np.allclose(raster.life, [[0.5, 0.5, 0.5]])


def test_grow_rejects_unknown_mode():
    g = GroundField.filled(2, 2, 0.1)
    with pytest.raises(ValueError):
        g.grow(0.1, SimulationConfig(), mode='diagonal')


def test_consume_floors_at_zero():
    g = GroundField.filled(2, 2, 0.5)
    assert g.consume(0, 0, 0.1) == pytest.approx(0.1)
    assert g.life_at(0, 0) == pytest.approx(0.4)
    g.set_life(1, 1, 0.03)
    assert g.consume(1, 1, 0.1) == pytest.approx(0.03)
    assert g.life_at(1, 1) == 0.0


def test_random_field_in_unit_interval():
    g = GroundField.random(20, 10, np.random.default_rng(0))
    assert g.life.shape == (10, 20)
    assert np.all(g.life >= 0.0) and np.all(g.life < 1.0)


def test_view_is_read_only():
    g = GroundField.filled(2, 2, 0.5)
    v = g.view()
    with pytest.raises(ValueError):
        v[0, 0] = 1.0
    g.grow(1.0, SimulationConfig())
    # the view follows in-place growth
    assert v[0, 0] == g.life[0, 0]


def test_invalid_construction():
    with pytest.raises(ValueError):
        GroundField(2, 2, np.full((3, 2), 0.5))
    with pytest.raises(ValueError):
        GroundField(2, 2, np.full((2, 2), 1.5))
    with pytest.raises(ValueError):
        GroundField.filled(2, 2, 0.5).life_at(2, 0)
