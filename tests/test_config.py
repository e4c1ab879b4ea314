import math

import pytest

from meadow.config import DEFAULT_PARAMETERS, ConfigurationError, SimulationConfig


def test_defaults_match_legacy_values():
    cfg = SimulationConfig()
    assert cfg.as_dict() == DEFAULT_PARAMETERS
    assert cfg.get('MIN_SELF_GROW_FACTOR') == 0.5
    assert cfg.get('RABBIT_LIFE_INTERVAL') == 0.75
    assert cfg.get('INIT_NUM_RABBITS') == 100
    assert cfg.get('nonexistent', 'x') == 'x'


def test_names_cover_every_parameter():
    assert SimulationConfig.names() == list(SimulationConfig().as_dict())
    assert set(SimulationConfig.names()) == set(DEFAULT_PARAMETERS)


def test_update_accepts_numbers_and_numeric_strings():
    cfg = SimulationConfig()
    cfg.update({'RABBIT_EAT_INTERVAL': '0.2', 'self_grow_factor': 0.07, 'WIDTH': 20.0})
    assert cfg.rabbit_eat_interval == 0.2
    assert cfg.self_grow_factor == 0.07
    assert cfg.width == 20 and isinstance(cfg.width, int)


def test_configuration_error_is_a_value_error():
    assert issubclass(ConfigurationError, ValueError)


@pytest.mark.parametrize('params', [
    {'NOT_A_PARAMETER': 1.0},
    {'SELF_GROW_FACTOR': 'fast'},
    {'SELF_GROW_FACTOR': None},
    {'SELF_GROW_FACTOR': True},
    {'SELF_GROW_FACTOR': math.nan},
    {'MAX_GROW_FACTOR': math.inf},
    {'RABBIT_EAT_INTERVAL': -0.1},
    {'INIT_NUM_RABBITS': 2.5},
    {'WIDTH': 0},
    {'GROUND_UPDATE': 'sideways'},
])
def test_update_rejects_bad_values(params):
    cfg = SimulationConfig()
    with pytest.raises(ConfigurationError):
        cfg.update(params)
    assert cfg.as_dict() == DEFAULT_PARAMETERS


def test_update_is_atomic():
    cfg = SimulationConfig()
    with pytest.raises(ConfigurationError):
        cfg.update({'SELF_GROW_FACTOR': 0.3, 'MAX_GROW_FACTOR': 'lots'})
    assert cfg.self_grow_factor == 0.05


def test_from_mapping():
    cfg = SimulationConfig.from_mapping({'GROUND_UPDATE': 'raster', 'HEIGHT': 7})
    assert cfg.ground_update == 'raster'
    assert cfg.height == 7
    assert cfg.width == 100


def test_get_ignores_non_parameter_attributes():
    cfg = SimulationConfig()
    assert cfg.get('UPDATE') is None
    assert cfg.get('as_dict', 3) == 3
    assert cfg.get('width') == 100
