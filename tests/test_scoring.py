# tests/test_scoring.py
import numpy as np
import pytest

from point_sampler import scoring
from point_sampler.scoring import score_factors, score_point, score_candidates, select_best


def test_score_factors_first_step():
    intersite, pdist, th = score_factors(N=1, d=2, p_dist_th_factor=0.5)
    assert intersite == pytest.approx((np.sqrt(2.0) - 1) / 2)
    assert pdist == pytest.approx(1.0)
    assert th == pytest.approx(1.0)

def test_score_factors_threshold_shrinks_with_n():
    _, _, th = score_factors(N=8, d=3, p_dist_th_factor=0.5)
    assert th == pytest.approx(0.125)

def test_score_factors_needs_points():
    with pytest.raises(ValueError):
        score_factors(N=0, d=2, p_dist_th_factor=0.5)

def test_score_point_clamps_close_projections():
    points = np.array([[0.0, 0.0]])
    p = np.array([0.9, 0.05])
    intersite, _, _ = score_factors(1, 2, 0.5)
    # threshold 1.0 removes the projected-distance term entirely
    assert score_point(p, points, 0.5) == pytest.approx(intersite * np.hypot(0.9, 0.05))

def test_score_point_without_threshold():
    points = np.array([[0.0, 0.0]])
    p = np.array([0.9, 0.05])
    intersite, pdist, _ = score_factors(1, 2, 0.0)
    expected = intersite * np.hypot(0.9, 0.05) + pdist * 0.05
    assert score_point(p, points, 0.0) == pytest.approx(expected)

def test_clamping_is_per_neighbour():
    # pd to first point is 0.3 (kept), to second 0.01 (clamped) -> min is 0
    points = np.array([[0.2, 0.2], [0.51, 0.9]])
    p = np.array([0.5, 0.5])
    _, _, th = score_factors(2, 2, 0.1)
    assert th == pytest.approx(0.1)
    intersite, _, _ = score_factors(2, 2, 0.1)
    idist = min(np.hypot(0.3, 0.3), np.hypot(0.01, 0.4))
    assert score_point(p, points, 0.1) == pytest.approx(intersite * idist)

def test_score_candidates_matches_single_scores(rng):
    points = rng.random((7, 3))
    candidates = rng.random((40, 3))
    batch = score_candidates(candidates, points, 0.5)
    single = [score_point(c, points, 0.5) for c in candidates]
    np.testing.assert_allclose(batch, single, rtol=1e-12)

def test_score_candidates_chunking(monkeypatch, rng):
    points = rng.random((5, 2))
    candidates = rng.random((33, 2))
    full = score_candidates(candidates, points, 0.2)
    monkeypatch.setattr(scoring, "CHUNK_ELEMENTS", 7)
    np.testing.assert_allclose(score_candidates(candidates, points, 0.2), full, rtol=1e-12)

def test_select_best_prefers_far_candidate():
    points = np.array([[0.0, 0.0]])
    candidates = np.array([[0.1, 0.1], [0.9, 0.8], [0.5, 0.5]])
    idx, score = select_best(candidates, points, 0.5)
    assert idx == 1
    assert score == pytest.approx(score_point(candidates[1], points, 0.5))

def test_select_best_ties_go_to_first():
    points = np.array([[0.0, 0.0]])
    candidates = np.array([[0.1, 0.1], [0.7, 0.7], [0.7, 0.7]])
    idx, _ = select_best(candidates, points, 0.5)
    assert idx == 1
