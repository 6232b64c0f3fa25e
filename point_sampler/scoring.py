"""
Candidate scoring for the Monte Carlo thresholded design.

For N accepted points (N >= 1) in the unit hypercube [0, 1]^d, a candidate
p is scored as

    score(p) = (((N+1)^(1/d) - 1) / 2) * min_j ||p - x_j||
             + ((N+1) / 2) * min_j pd_th(p, x_j)

where pd_th is the projected distance with every value below the threshold
tau = 2 * p_dist_th_factor / N clamped to zero. The clamping is applied per
neighbour, before the minimum is taken.

Reference:
    Crombecq, K. (2011). Surrogate Modelling of Computer Experiments with
    Sequential Experimental Design.
"""

import numpy as np
from typing import Tuple

from .utils import distance_vector, projected_distance_thresholded

# Upper bound on the number of entries of the (candidates, points, d)
# difference array built per chunk.
CHUNK_ELEMENTS = 2**22


def score_factors(N: int, d: int, p_dist_th_factor: float) -> Tuple[float, float, float]:
    """
    Compute the weights and threshold of the score for N accepted points.

    Parameters
    ----------
    N : int
        Number of accepted points, N >= 1.
    d : int
        Dimension.
    p_dist_th_factor : float
        Threshold factor.

    Returns
    -------
    intersite_factor : float
        ((N+1)^(1/d) - 1) / 2
    pdist_factor : float
        (N+1) / 2
    threshold : float
        2 * p_dist_th_factor / N
    """
    if N < 1:
        raise ValueError("Scoring needs at least one accepted point.")
    intersite_factor = ((N + 1) ** (1.0 / d) - 1) / 2
    pdist_factor = (N + 1) / 2
    threshold = 2 * p_dist_th_factor / N
    return intersite_factor, pdist_factor, threshold


def score_point(p: np.ndarray, points: np.ndarray, p_dist_th_factor: float) -> float:
    """Score a single candidate `p` against the accepted `points` of shape (N, d)."""
    points = np.atleast_2d(points)
    N, d = points.shape
    intersite_factor, pdist_factor, th = score_factors(N, d, p_dist_th_factor)
    return float(
        intersite_factor * np.min(distance_vector(p, points))
        + pdist_factor * np.min(projected_distance_thresholded(p, points, th))
    )


def score_candidates(
    candidates: np.ndarray,
    points: np.ndarray,
    p_dist_th_factor: float
) -> np.ndarray:
    """
    Score a batch of candidates against the accepted points.

    Vectorized equivalent of `score_point` for every row of `candidates`.
    Candidates are processed in chunks so that the pairwise difference
    array never exceeds `CHUNK_ELEMENTS` entries.

    Parameters
    ----------
    candidates : np.ndarray
        Candidate set of shape (m, d).
    points : np.ndarray
        Accepted points of shape (N, d), N >= 1.
    p_dist_th_factor : float
        Threshold factor.

    Returns
    -------
    np.ndarray
        Scores of shape (m,).
    """
    points = np.atleast_2d(points)
    N, d = points.shape
    intersite_factor, pdist_factor, th = score_factors(N, d, p_dist_th_factor)

    m = candidates.shape[0]
    scores = np.empty(m, dtype=np.float64)
    chunk = max(1, CHUNK_ELEMENTS // (N * d))

    for start in range(0, m, chunk):
        block = candidates[start:start + chunk]
        diff = np.abs(block[:, np.newaxis, :] - points[np.newaxis, :, :])

        idist = np.sqrt(np.min(np.sum(diff**2, axis=2), axis=1))

        pdist = np.min(diff, axis=2)
        pdist[pdist < th] = 0.0
        pdist = np.min(pdist, axis=1)

        scores[start:start + chunk] = intersite_factor * idist + pdist_factor * pdist

    return scores


def select_best(
    candidates: np.ndarray,
    points: np.ndarray,
    p_dist_th_factor: float
) -> Tuple[int, float]:
    """
    Pick the candidate with the maximal score.

    Ties go to the candidate that comes first in `candidates`.

    Returns
    -------
    best_index : int
        Row of the best candidate.
    best_score : float
        Its score.
    """
    scores = score_candidates(candidates, points, p_dist_th_factor)
    best_index = int(np.argmax(scores))
    return best_index, float(scores[best_index])
