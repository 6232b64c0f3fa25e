# tests/test_config.py
import dataclasses
import math

import numpy as np
import pytest

from point_sampler import MonteCarloThDesign
from point_sampler.config import DesignConfig, DesignConfigError, MAX_RAND_POINTS, resolve_rng

# ----------------------------------------------------------------------------
# 1. Defaults
# ----------------------------------------------------------------------------

def test_defaults():
    cfg = DesignConfig.create(dims=3)
    assert cfg.n_points == 300
    np.testing.assert_array_equal(cfg.lb, np.zeros(3))
    np.testing.assert_array_equal(cfg.ub, np.ones(3))
    assert cfg.seeds == ()
    assert cfg.clean_seeds is True
    assert cfg.spawn_factor == 100
    assert cfg.max_rand_points == MAX_RAND_POINTS
    assert cfg.p_dist_th_factor == 0.5
    assert cfg.is_bounded
    assert not cfg.needs_scaling

def test_unbounded_and_scaling_flags():
    cfg = DesignConfig.create(dims=2, n_points=math.inf, lb=[0, 0], ub=[2, 1])
    assert not cfg.is_bounded
    assert cfg.needs_scaling

def test_integer_bounds_are_promoted_to_float():
    cfg = DesignConfig.create(dims=2, lb=[0, 1], ub=[3, 4], seeds=[[1, 2]])
    assert cfg.lb.dtype == np.float64
    assert cfg.seeds[0].dtype == np.float64

# ----------------------------------------------------------------------------
# 2. Immutability
# ----------------------------------------------------------------------------

def test_config_is_frozen():
    cfg = DesignConfig.create(dims=2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.dims = 3
    with pytest.raises(ValueError):
        cfg.lb[0] = 0.5

def test_seeds_are_copied():
    seeds = [[0.1, 0.2], [0.3, 0.4]]
    cfg = DesignConfig.create(dims=2, seeds=seeds)
    seeds[0][0] = 99.0
    assert cfg.seeds[0][0] == 0.1
    with pytest.raises(ValueError):
        cfg.seeds[1][0] = 0.0

# ----------------------------------------------------------------------------
# 3. Validation errors
# ----------------------------------------------------------------------------

@pytest.mark.parametrize("kwargs", [
    dict(dims=0),
    dict(dims=-1),
    dict(dims=1.5),
    dict(dims=2, n_points=-1),
    dict(dims=2, n_points=2.5),
    dict(dims=2, n_points=-math.inf),
    dict(dims=2, lb=[0.0]),
    dict(dims=2, ub=[1.0, 1.0, 1.0]),
    dict(dims=2, lb=[0.0, -np.inf]),
    dict(dims=2, ub=[1.0, np.nan]),
    dict(dims=2, lb=[0.0, 2.0], ub=[1.0, 1.0]),
    dict(dims=2, lb=[0.0, 1.0], ub=[1.0, 1.0]),
    dict(dims=2, seeds=[[0.1, 0.2], [0.3]]),
    dict(dims=2, seeds=[[0.1, np.nan]]),
    dict(dims=2, spawn_factor=0),
    dict(dims=2, spawn_factor=2.5),
    dict(dims=2, max_rand_points=0),
    dict(dims=2, p_dist_th_factor=-0.1),
    dict(dims=2, p_dist_th_factor=np.inf),
])
def test_invalid_options_raise(kwargs):
    with pytest.raises(DesignConfigError):
        DesignConfig.create(**kwargs)

def test_design_construction_fails_fast():
    with pytest.raises(DesignConfigError):
        MonteCarloThDesign(dims=2, lb=[0.0, 0.0], ub=[1.0, 0.0])

def test_config_error_is_value_error():
    assert issubclass(DesignConfigError, ValueError)

def test_zero_points_is_valid():
    assert DesignConfig.create(dims=1, n_points=0).n_points == 0

# ----------------------------------------------------------------------------
# 4. RNG resolution
# ----------------------------------------------------------------------------

def test_resolve_rng_int_gives_fresh_identical_streams():
    a, b = resolve_rng(5), resolve_rng(5)
    np.testing.assert_array_equal(a.random(4), b.random(4))

def test_resolve_rng_none_is_seed_zero():
    np.testing.assert_array_equal(resolve_rng(None).random(3), np.random.default_rng(0).random(3))

def test_resolve_rng_passes_generator_through():
    g = np.random.default_rng(1)
    assert resolve_rng(g) is g

def test_resolve_rng_rejects_other_objects():
    with pytest.raises(TypeError):
        resolve_rng("seed")
    with pytest.raises(TypeError):
        MonteCarloThDesign(dims=1, rng=1.5)
