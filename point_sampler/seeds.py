"""
Seed handling for sequential designs.

Seeds are caller-supplied points that enter the design, in their original
order, before any random candidate is considered.
"""

import numpy as np
from typing import Sequence, Tuple

from .config import DesignConfig
from .utils import good_indices, scale_to_unit_square


def clean_seeds(
    seeds: Sequence[np.ndarray],
    lb: np.ndarray,
    ub: np.ndarray,
    clean: bool = True
) -> Tuple[np.ndarray, ...]:
    """
    Drop the seeds that violate the box constraints lb <= s <= ub.

    Parameters
    ----------
    seeds : sequence of np.ndarray
        Seed points of shape (d,).
    lb, ub : np.ndarray
        Box bounds of shape (d,).
    clean : bool, optional
        If False, return all seeds unchanged (default: True).

    Returns
    -------
    tuple of np.ndarray
        The kept seeds, in their original order.
    """
    seeds = tuple(seeds)
    if not clean or not seeds:
        return seeds
    mask = good_indices(np.stack(seeds), lb, ub)
    return tuple(s for s, keep in zip(seeds, mask) if keep)


def prepare_seeds(
    config: DesignConfig,
    verbose: bool = False
) -> Tuple[Tuple[np.ndarray, ...], Tuple[np.ndarray, ...]]:
    """
    Clean the seeds of `config` and map them into the unit hypercube.

    Parameters
    ----------
    config : DesignConfig
        Validated design configuration.
    verbose : bool, optional
        If True, report discarded seeds (default: False).

    Returns
    -------
    original : tuple of np.ndarray
        Kept seeds in original coordinates, emitted as they are.
    unit : tuple of np.ndarray
        The same seeds in unit-cube coordinates, used for scoring.
    """
    original = clean_seeds(config.seeds, config.lb, config.ub, clean=config.clean_seeds)

    if verbose and len(original) < len(config.seeds):
        print(f"Discarded {len(config.seeds) - len(original)} of {len(config.seeds)} "
              f"seeds violating the box constraints.")

    if not original:
        return (), ()
    if config.needs_scaling:
        unit = tuple(scale_to_unit_square(np.stack(original), config.lb, config.ub))
    else:
        unit = tuple(np.array(s) for s in original)
    return original, unit
