"""
Utility functions for sequential space-filling designs.

Distance primitives used to score candidate points, scaling between a
hyper-rectangle and the unit hypercube, and a few diagnostics for finished
point sets.
"""

import numpy as np
from typing import Sequence, Union

ArrayLike = Union[np.ndarray, Sequence[float]]


def distance(p: ArrayLike, q: ArrayLike) -> float:
    """
    Compute the Euclidean distance between two points.

    Parameters
    ----------
    p, q : array_like
        Points of shape (d,).

    Returns
    -------
    float
        ||p - q||_2.
    """
    return float(np.linalg.norm(np.asarray(p, dtype=np.float64) - np.asarray(q, dtype=np.float64)))


def distance_vector(p: ArrayLike, points: ArrayLike) -> np.ndarray:
    """
    Compute the Euclidean distance from `p` to every point in `points`.

    Parameters
    ----------
    p : array_like
        Point of shape (d,).
    points : array_like
        Point set of shape (n, d).

    Returns
    -------
    np.ndarray
        Distances of shape (n,), in the order of `points`.
    """
    P = np.atleast_2d(np.asarray(points, dtype=np.float64))
    return np.linalg.norm(P - np.asarray(p, dtype=np.float64), axis=1)


def projected_distance(p: ArrayLike, q: ArrayLike) -> float:
    """
    Compute the projected distance between two points.

    The projected distance is the smallest separation along a single axis:
        pd(p, q) = min_i |p_i - q_i|

    Parameters
    ----------
    p, q : array_like
        Points of shape (d,).

    Returns
    -------
    float
        Minimum absolute coordinate difference.
    """
    return float(np.min(np.abs(np.asarray(p, dtype=np.float64) - np.asarray(q, dtype=np.float64))))


def projected_distance_vector(p: ArrayLike, points: ArrayLike) -> np.ndarray:
    """Projected distance from `p` to every point in `points`, shape (n,)."""
    P = np.atleast_2d(np.asarray(points, dtype=np.float64))
    return np.min(np.abs(P - np.asarray(p, dtype=np.float64)), axis=1)


def projected_distance_thresholded(
    p: ArrayLike,
    points: ArrayLike,
    threshold: float = 0.1
) -> np.ndarray:
    """
    Projected distances from `p` to `points` with small values clamped.

    Every projected distance strictly below `threshold` is set to 0.0, so a
    candidate that nearly shares a coordinate with any accepted point gets no
    projected-distance credit for that neighbour.

    Parameters
    ----------
    p : array_like
        Point of shape (d,).
    points : array_like
        Point set of shape (n, d).
    threshold : float, optional
        Clamping threshold (default: 0.1).

    Returns
    -------
    np.ndarray
        Thresholded projected distances of shape (n,).
    """
    pdist = projected_distance_vector(p, points)
    pdist[pdist < threshold] = 0.0
    return pdist


def box_width(lb: ArrayLike, ub: ArrayLike) -> np.ndarray:
    """
    Compute the width ub - lb of a finite, non-degenerate box.

    Raises
    ------
    ValueError
        If the bounds have different lengths, are not finite, or some
        axis has non-positive width.
    """
    lb = np.asarray(lb, dtype=np.float64)
    ub = np.asarray(ub, dtype=np.float64)
    if lb.shape != ub.shape:
        raise ValueError(f"lb and ub must have the same shape, got {lb.shape} and {ub.shape}")
    if not (np.all(np.isfinite(lb)) and np.all(np.isfinite(ub))):
        raise ValueError("All bounds must be finite.")
    w = ub - lb
    if np.any(w <= 0):
        raise ValueError(f"Box must have positive width along every axis, got widths {w}")
    return w


def scale_to_unit_square(p: ArrayLike, lb: ArrayLike, ub: ArrayLike) -> np.ndarray:
    """
    Map points from the box [lb, ub] to the unit hypercube [0, 1]^d.

    Parameters
    ----------
    p : array_like
        A point of shape (d,) or a batch of shape (n, d).
    lb, ub : array_like
        Box bounds of shape (d,).

    Returns
    -------
    np.ndarray
        (p - lb) / (ub - lb), same shape as `p`.
    """
    w = box_width(lb, ub)
    return (np.asarray(p, dtype=np.float64) - np.asarray(lb, dtype=np.float64)) / w


def unscale_from_unit_square(p: ArrayLike, lb: ArrayLike, ub: ArrayLike) -> np.ndarray:
    """
    Map points from the unit hypercube back to the box [lb, ub].

    Inverse of `scale_to_unit_square`: lb + (ub - lb) * p, same shape as `p`.
    """
    w = box_width(lb, ub)
    return np.asarray(lb, dtype=np.float64) + w * np.asarray(p, dtype=np.float64)


def bad_indices(points: ArrayLike, lb: ArrayLike, ub: ArrayLike) -> np.ndarray:
    """Boolean mask of the points in `points` violating lb <= x <= ub."""
    P = np.asarray(points, dtype=np.float64)
    if P.size == 0:
        return np.zeros(len(P), dtype=bool)
    P = np.atleast_2d(P)
    return np.any(P < np.asarray(lb), axis=1) | np.any(P > np.asarray(ub), axis=1)


def good_indices(points: ArrayLike, lb: ArrayLike, ub: ArrayLike) -> np.ndarray:
    """Boolean mask of the points in `points` satisfying lb <= x <= ub."""
    return ~bad_indices(points, lb, ub)


def compute_separation_radius(points: np.ndarray) -> float:
    """
    Compute the separation radius (half of the minimum pairwise distance).

    The separation radius is defined as:
        q(P) = (1/2) * min_{i != j} ||x_i - x_j||

    Parameters
    ----------
    points : np.ndarray
        Point set of shape (n, d).

    Returns
    -------
    float
        Separation radius of the point set, inf for fewer than two points.

    Notes
    -----
    Time complexity: O(n^2 * d). Sets larger than 5000 points are handled
    row by row to keep memory linear in n.
    """
    points = np.asarray(points, dtype=np.float64)
    n = points.shape[0]
    if n < 2:
        return np.inf

    if n > 5000:
        min_dist = np.inf
        for i in range(n - 1):
            min_dist = min(min_dist, np.min(distance_vector(points[i], points[i + 1:])))
        return 0.5 * float(min_dist)

    diff = points[:, np.newaxis, :] - points[np.newaxis, :, :]
    dist_sq = np.sum(diff**2, axis=2)

    # Set diagonal to inf to exclude self-distances
    np.fill_diagonal(dist_sq, np.inf)

    return 0.5 * float(np.sqrt(np.min(dist_sq)))


def compute_min_projected_distance(points: np.ndarray) -> float:
    """
    Compute the minimum pairwise projected distance of a point set.

    Returns inf for fewer than two points.
    """
    points = np.asarray(points, dtype=np.float64)
    n = points.shape[0]
    if n < 2:
        return np.inf

    min_pdist = np.inf
    for i in range(n - 1):
        min_pdist = min(min_pdist, np.min(projected_distance_vector(points[i], points[i + 1:])))
    return float(min_pdist)
