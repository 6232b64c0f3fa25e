"""
Sequential Monte Carlo Design with Projected-Distance Threshold
===============================================================

This module implements the greedy space-filling design of Crombecq (2011).
Points are added one at a time inside a hyper-rectangle [lb, ub]:

    1. Caller-supplied seeds come first, in their original order.
    2. Without seeds the design starts at lb.
    3. Every further point is the best of min(N * spawn_factor, max_rand_points)
       uniform random candidates, ranked by a blend of intersite distance and
       thresholded projected distance (see `scoring.py`).

All scoring happens in the unit hypercube, so the design is invariant to the
scale of the box. The configuration is frozen in a `DesignConfig`; the points
accepted so far are threaded through an explicit, append-only
`GenerationState`, so one design object can be iterated any number of times
and from several threads.

References
----------
[1] Crombecq, K. (2011). Surrogate Modelling of Computer Experiments with
    Sequential Experimental Design. PhD thesis, Ghent University.
"""

from dataclasses import dataclass
from functools import cached_property
from numbers import Integral
from typing import Iterator, Optional, Sequence, Tuple, Union

import numpy as np

from .config import (
    DEFAULT_P_DIST_TH_FACTOR,
    DEFAULT_SPAWN_FACTOR,
    MAX_RAND_POINTS,
    DesignConfig,
    DesignConfigError,
    RngLike,
    resolve_rng,
)
from .scoring import select_best
from .seeds import prepare_seeds
from .utils import (
    compute_min_projected_distance,
    compute_separation_radius,
    unscale_from_unit_square,
)


@dataclass(frozen=True, eq=False)
class GenerationState:
    """
    Points accepted so far, in unit-cube coordinates.

    The state is append-only: `append` returns a new state and leaves the
    current one untouched.
    """

    points: Tuple[np.ndarray, ...] = ()

    def __len__(self) -> int:
        return len(self.points)

    def append(self, point: np.ndarray) -> "GenerationState":
        point = np.array(point, dtype=np.float64)
        point.setflags(write=False)
        return GenerationState(self.points + (point,))

    def as_array(self) -> np.ndarray:
        """Accepted points stacked into an array of shape (N, d)."""
        return np.stack(self.points)


class MonteCarloThDesign:
    """
    Iterable space-filling design inside a hyper-rectangle.

    Parameters
    ----------
    dims : int
        Dimension of the design space.
    n_points : int or float, optional
        Number of points to generate. Defaults to 100 * dims; pass
        `math.inf` for an unbounded design.
    lb, ub : array_like, optional
        Finite bounds of the hyper-rectangle (default: unit hypercube).
    seeds : sequence of array_like, optional
        Initial points of the design. They are copied and never modified.
    clean_seeds : bool, optional
        Throw away seeds that violate the box constraints (default: True).
    spawn_factor : int, optional
        In each iteration N * spawn_factor random candidates are drawn,
        N being the number of points so far (default: 100).
    max_rand_points : int, optional
        Upper bound on the number of random candidates per iteration.
    p_dist_th_factor : float, optional
        Candidates get no projected-distance credit for neighbours closer
        than 2 * p_dist_th_factor / N along some axis (default: 0.5).
    rng : int, np.random.Generator or None, optional
        Source of randomness. An integer (or None, meaning 0) seeds a fresh
        generator on every iteration, so repeated iteration gives the same
        design. A Generator is used as is and advanced by each iteration.
    verbose : bool, optional
        If True, print progress information (default: False).

    Raises
    ------
    DesignConfigError
        If the options are inconsistent.

    Attributes
    ----------
    config : DesignConfig
        Validated, immutable options.
    points : np.ndarray
        The design, shape (n_points, dims), generated on first access.

    Examples
    --------
    >>> design = MonteCarloThDesign(dims=2, n_points=20, lb=[-1, 0], ub=[1, 5], rng=7)
    >>> for x in design:
    ...     print(x)
    >>> X = design.collect()
    >>> X.shape
    (20, 2)
    """

    def __init__(
        self,
        dims: int,
        n_points: Optional[Union[int, float]] = None,
        lb: Optional[Sequence[float]] = None,
        ub: Optional[Sequence[float]] = None,
        seeds: Sequence[Sequence[float]] = (),
        clean_seeds: bool = True,
        spawn_factor: int = DEFAULT_SPAWN_FACTOR,
        max_rand_points: int = MAX_RAND_POINTS,
        p_dist_th_factor: float = DEFAULT_P_DIST_TH_FACTOR,
        rng: RngLike = None,
        verbose: bool = False
    ):
        self.config = DesignConfig.create(
            dims=dims,
            n_points=n_points,
            lb=lb,
            ub=ub,
            seeds=seeds,
            clean_seeds=clean_seeds,
            spawn_factor=spawn_factor,
            max_rand_points=max_rand_points,
            p_dist_th_factor=p_dist_th_factor,
        )
        # Fail here rather than on first iteration
        resolve_rng(rng)
        self.rng = rng
        self.verbose = verbose
        self._points = None

    @property
    def dims(self) -> int:
        return self.config.dims

    @property
    def n_points(self) -> Union[int, float]:
        return self.config.n_points

    @cached_property
    def prepared_seeds(self) -> Tuple[Tuple[np.ndarray, ...], Tuple[np.ndarray, ...]]:
        """Cleaned seeds as (original, unit) tuples, computed on first use."""
        return prepare_seeds(self.config, verbose=self.verbose)

    def _unscale(self, unit_point: np.ndarray) -> np.ndarray:
        if not self.config.needs_scaling:
            return np.array(unit_point)
        x = unscale_from_unit_square(unit_point, self.config.lb, self.config.ub)
        # lb + w * p can overshoot ub by one ulp
        return np.clip(x, self.config.lb, self.config.ub)

    def start(self) -> Optional[Tuple[np.ndarray, GenerationState]]:
        """
        Produce the first point of the design.

        Returns
        -------
        (point, state) or None
            The first point in original coordinates and the state holding
            its unit-cube image, or None if the design has no points.
        """
        if self.config.n_points == 0:
            return None

        original, unit = self.prepared_seeds
        if original:
            point, unit_point = np.array(original[0]), unit[0]
        else:
            unit_point = np.zeros(self.config.dims)
            point = np.array(self.config.lb)

        return point, GenerationState().append(unit_point)

    def step(
        self,
        state: GenerationState,
        rng: np.random.Generator
    ) -> Optional[Tuple[np.ndarray, GenerationState]]:
        """
        Produce the point following the ones recorded in `state`.

        Parameters
        ----------
        state : GenerationState
            Points accepted so far (at least one, see `start`).
        rng : np.random.Generator
            Source of the random candidates.

        Returns
        -------
        (point, new_state) or None
            The next point in original coordinates and the extended state,
            or None once `n_points` points have been produced.
        """
        cfg = self.config
        N = len(state)
        if N >= cfg.n_points:
            return None

        original, unit = self.prepared_seeds
        if N < len(unit):
            return np.array(original[N]), state.append(unit[N])

        num_candidates = min(N * cfg.spawn_factor, cfg.max_rand_points)
        candidates = rng.random((num_candidates, cfg.dims))
        best_index, best_score = select_best(candidates, state.as_array(), cfg.p_dist_th_factor)
        unit_point = candidates[best_index]

        if self.verbose and (N + 1) % 10 == 0:
            print(f"  Generated {N + 1}/{cfg.n_points} points, "
                  f"best score = {best_score:.6f} among {num_candidates} candidates")

        return self._unscale(unit_point), state.append(unit_point)

    def __iter__(self) -> Iterator[np.ndarray]:
        rng = resolve_rng(self.rng)
        result = self.start()
        while result is not None:
            point, state = result
            yield point
            result = self.step(state, rng)

        if self.verbose:
            print(f"Design complete: {self.config.n_points} points in {self.config.dims} dimensions.")

    def __len__(self) -> int:
        if not self.config.is_bounded:
            raise TypeError("Unbounded design has no length.")
        return self.config.n_points

    def collect(self) -> np.ndarray:
        """
        Generate the whole design.

        Returns
        -------
        np.ndarray
            Point set of shape (n_points, dims) in original coordinates.

        Raises
        ------
        ValueError
            If the design is unbounded.
        """
        if not self.config.is_bounded:
            raise ValueError("Cannot collect an unbounded design; iterate and stop explicitly.")
        pts = list(self)
        if not pts:
            return np.empty((0, self.config.dims))
        return np.stack(pts)

    @property
    def points(self) -> np.ndarray:
        """
        Generate the design point set.

        Returns
        -------
        np.ndarray
            Point set of shape (n_points, dims) in [lb, ub].
        """
        if self._points is None:
            self._points = self.collect()
        return self._points

    def separation_radius(self) -> float:
        """Compute the separation radius of the design in unit-cube coordinates."""
        return compute_separation_radius(self._unit_points())

    def min_projected_distance(self) -> float:
        """Compute the minimal pairwise projected distance in unit-cube coordinates."""
        return compute_min_projected_distance(self._unit_points())

    def _unit_points(self) -> np.ndarray:
        cfg = self.config
        return (self.points - cfg.lb) / (cfg.ub - cfg.lb)

    def info(self) -> dict:
        """Return a dictionary with design information."""
        cfg = self.config
        info = {
            "type": "MonteCarloTh",
            "dimension": cfg.dims,
            "num_points": cfg.n_points,
            "lb": cfg.lb.tolist(),
            "ub": cfg.ub.tolist(),
            "num_seeds": len(cfg.seeds),
            "num_seeds_used": len(self.prepared_seeds[0]),
            "spawn_factor": cfg.spawn_factor,
            "p_dist_th_factor": cfg.p_dist_th_factor,
        }
        if cfg.is_bounded:
            info["separation_radius"] = self.separation_radius()
            info["min_projected_distance"] = self.min_projected_distance()
        return info

    def __repr__(self) -> str:
        return (f"MonteCarloThDesign(dims={self.config.dims}, n_points={self.config.n_points}, "
                f"spawn_factor={self.config.spawn_factor}, "
                f"p_dist_th_factor={self.config.p_dist_th_factor})")


def monte_carlo_th(
    n_points: int,
    dims_or_lb: Union[int, Sequence[float]] = 2,
    ub: Optional[Sequence[float]] = None,
    *,
    seeds: Sequence[Sequence[float]] = (),
    spawn_factor: int = DEFAULT_SPAWN_FACTOR,
    pdist_threshold_tolerance: float = DEFAULT_P_DIST_TH_FACTOR,
    clean_seeds: bool = True,
    rng: RngLike = None
) -> np.ndarray:
    """
    Generate a Monte Carlo thresholded design in one call.

    Parameters
    ----------
    n_points : int
        Number of points.
    dims_or_lb : int or array_like, optional
        Either the dimension (the design then fills the unit hypercube) or
        the lower bounds of the box, in which case `ub` is required
        (default: 2).
    ub : array_like, optional
        Upper bounds, only together with lower bounds.
    seeds : sequence of array_like, optional
        Points the design starts from. Empty by default, in which case the
        design starts at the lower bounds.
    spawn_factor : int, optional
        Random candidates per accepted point (default: 100).
    pdist_threshold_tolerance : float, optional
        Projected-distance threshold factor (default: 0.5).
    clean_seeds : bool, optional
        Throw away seeds outside the box (default: True).
    rng : int, np.random.Generator or None, optional
        Source of randomness.

    Returns
    -------
    np.ndarray
        Point set of shape (n_points, d).

    Examples
    --------
    >>> X = monte_carlo_th(10, 1)
    >>> X[0]
    array([0.])
    >>> Y = monte_carlo_th(20, [0.45, 0.45], [0.55, 0.55], rng=1)
    """
    if isinstance(dims_or_lb, Integral) and not isinstance(dims_or_lb, bool):
        if ub is not None:
            raise DesignConfigError("`ub` can only be given together with lower bounds.")
        dims, lb = int(dims_or_lb), None
    else:
        if ub is None:
            raise DesignConfigError("Upper bounds `ub` are required when lower bounds are given.")
        lb = np.asarray(dims_or_lb, dtype=np.float64).reshape(-1)
        dims = len(lb)

    design = MonteCarloThDesign(
        dims=dims,
        n_points=n_points,
        lb=lb,
        ub=ub,
        seeds=seeds,
        clean_seeds=clean_seeds,
        spawn_factor=spawn_factor,
        p_dist_th_factor=pdist_threshold_tolerance,
        rng=rng,
    )
    return design.collect()
