"""
Configuration of a sequential Monte Carlo design.

`DesignConfig` gathers every option of a design in one frozen object. It is
validated once, on construction through `DesignConfig.create`, and never
mutated afterwards; the points generated so far live in a separate
`GenerationState` (see `monte_carlo.py`).
"""

import math
from dataclasses import dataclass
from numbers import Integral, Real
from typing import Optional, Sequence, Tuple, Union

import numpy as np

RngLike = Union[None, int, np.random.Generator]

DEFAULT_SPAWN_FACTOR = 100
DEFAULT_P_DIST_TH_FACTOR = 0.5
MAX_RAND_POINTS = int(np.iinfo(np.int64).max)


class DesignConfigError(ValueError):
    """Raised when the options of a design are inconsistent or out of range."""


def _readonly(x: np.ndarray) -> np.ndarray:
    x.setflags(write=False)
    return x


def _as_vector(name: str, value, dims: int) -> np.ndarray:
    try:
        vec = np.array(value, dtype=np.float64).reshape(-1)
    except (TypeError, ValueError) as err:
        raise DesignConfigError(f"`{name}` must be a real vector, got {value!r}") from err
    if len(vec) != dims:
        raise DesignConfigError(
            f"`dims` and length of `{name}` must be the same, got {dims} and {len(vec)}."
        )
    return vec


@dataclass(frozen=True, eq=False)
class DesignConfig:
    """
    Immutable options of a sequential Monte Carlo design.

    Attributes
    ----------
    dims : int
        Dimension of the design space.
    n_points : int or float
        Number of points to generate, `math.inf` for an unbounded design.
    lb, ub : np.ndarray
        Lower and upper bounds of the hyper-rectangle, shape (dims,).
    seeds : tuple of np.ndarray
        Initial points, each of shape (dims,), in original space.
    clean_seeds : bool
        Discard seeds that violate the box constraints.
    spawn_factor : int
        Random candidates per accepted point in each iteration.
    max_rand_points : int
        Upper bound on the number of random candidates per iteration.
    p_dist_th_factor : float
        Projected distances below `2 * p_dist_th_factor / N` get no credit.
    """

    dims: int
    n_points: Union[int, float]
    lb: np.ndarray
    ub: np.ndarray
    seeds: Tuple[np.ndarray, ...]
    clean_seeds: bool
    spawn_factor: int
    max_rand_points: int
    p_dist_th_factor: float

    @classmethod
    def create(
        cls,
        dims: int,
        n_points: Optional[Union[int, float]] = None,
        lb: Optional[Sequence[float]] = None,
        ub: Optional[Sequence[float]] = None,
        seeds: Optional[Sequence[Sequence[float]]] = (),
        clean_seeds: bool = True,
        spawn_factor: int = DEFAULT_SPAWN_FACTOR,
        max_rand_points: int = MAX_RAND_POINTS,
        p_dist_th_factor: float = DEFAULT_P_DIST_TH_FACTOR,
    ) -> "DesignConfig":
        """
        Apply defaults, copy the inputs and validate them.

        `n_points=None` selects the default `100 * dims`; pass `math.inf`
        for an unbounded design. Missing bounds default to the unit cube.

        Raises
        ------
        DesignConfigError
            If any option is out of range (see `validate`).
        """
        if isinstance(dims, bool) or not isinstance(dims, Integral):
            raise DesignConfigError(f"`dims` must be an integer, got {dims!r}")
        dims = int(dims)
        if dims <= 0:
            raise DesignConfigError("`dims` must be positive.")

        if n_points is None:
            n_points = 100 * dims
        elif isinstance(n_points, Real) and math.isinf(n_points) and n_points > 0:
            n_points = math.inf
        elif isinstance(n_points, Integral) and not isinstance(n_points, bool):
            n_points = int(n_points)
        else:
            raise DesignConfigError(f"`n_points` must be an integer or math.inf, got {n_points!r}")

        lb_vec = np.zeros(dims) if lb is None else _as_vector("lb", lb, dims)
        ub_vec = np.ones(dims) if ub is None else _as_vector("ub", ub, dims)

        seeds = () if seeds is None else seeds
        seed_vecs = tuple(
            _readonly(_as_vector(f"seeds[{i}]", s, dims)) for i, s in enumerate(seeds)
        )

        config = cls(
            dims=dims,
            n_points=n_points,
            lb=_readonly(lb_vec),
            ub=_readonly(ub_vec),
            seeds=seed_vecs,
            clean_seeds=bool(clean_seeds),
            spawn_factor=spawn_factor,
            max_rand_points=max_rand_points,
            p_dist_th_factor=p_dist_th_factor,
        )
        config.validate()
        return config

    def validate(self) -> None:
        """
        Check all invariants of the configuration.

        Raises
        ------
        DesignConfigError
            On non-positive `dims`, negative `n_points`, bounds of the wrong
            length, non-finite bounds, `lb_i > ub_i`, zero-width axes,
            malformed seeds, non-positive `spawn_factor` or
            `max_rand_points`, or a negative `p_dist_th_factor`.
        """
        if self.dims <= 0:
            raise DesignConfigError("`dims` must be positive.")
        if self.n_points < 0:
            raise DesignConfigError("`n_points` must be non-negative.")
        if len(self.lb) != self.dims or len(self.ub) != self.dims:
            raise DesignConfigError("`dims` and length of variable bounds must be the same.")
        if not np.all(np.isfinite(self.lb)):
            raise DesignConfigError("All lower bounds `lb` must be finite.")
        if not np.all(np.isfinite(self.ub)):
            raise DesignConfigError("All upper bounds `ub` must be finite.")
        if np.any(self.lb > self.ub):
            raise DesignConfigError("Lower bounds `lb` must not exceed upper bounds `ub`.")
        if np.any(self.lb == self.ub):
            axes = np.flatnonzero(self.lb == self.ub).tolist()
            raise DesignConfigError(f"Box has zero width along axes {axes}.")
        for i, s in enumerate(self.seeds):
            if len(s) != self.dims:
                raise DesignConfigError(f"`seeds[{i}]` must have length {self.dims}.")
            if not np.all(np.isfinite(s)):
                raise DesignConfigError(f"`seeds[{i}]` must be finite.")
        for name in ("spawn_factor", "max_rand_points"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Integral) or value <= 0:
                raise DesignConfigError(f"`{name}` must be a positive integer, got {value!r}")
        th = self.p_dist_th_factor
        if isinstance(th, bool) or not isinstance(th, Real) or not math.isfinite(th) or th < 0:
            raise DesignConfigError(
                f"`p_dist_th_factor` must be a non-negative real number, got {th!r}"
            )

    @property
    def is_bounded(self) -> bool:
        """True if the design stops after `n_points` points."""
        return not math.isinf(self.n_points)

    @property
    def needs_scaling(self) -> bool:
        """False if the box already is the unit hypercube."""
        return not (np.all(self.lb == 0) and np.all(self.ub == 1))


def resolve_rng(rng: RngLike = None) -> np.random.Generator:
    """
    Turn `rng` into a `numpy.random.Generator`.

    * `None`  -> seed 0
    * `int`   -> `np.random.default_rng(rng)`, a fresh stream on every call
    * `np.random.Generator` -> returned as is, the caller's stream is shared

    Raises
    ------
    TypeError
        For any other object.
    """
    if rng is None or (isinstance(rng, Integral) and not isinstance(rng, bool)):
        return np.random.default_rng(int(rng or 0))
    if isinstance(rng, np.random.Generator):
        return rng
    raise TypeError("rng must be int | numpy.random.Generator | None")
