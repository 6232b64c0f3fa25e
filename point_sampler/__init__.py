"""
Sequential Space-Filling Designs for Surrogate Modelling
========================================================

This package generates space-filling point sets inside a hyper-rectangle,
intended as initial samples for surrogate-model-based optimization.

Main classes:
- MonteCarloThDesign: greedy sequential design maximizing a blend of
  intersite distance and thresholded projected distance
- DesignConfig: validated, immutable design options

Reference:
    Crombecq, K. (2011). Surrogate Modelling of Computer Experiments with
    Sequential Experimental Design.

License: MIT
"""

from .config import DesignConfig, DesignConfigError, resolve_rng
from .monte_carlo import GenerationState, MonteCarloThDesign, monte_carlo_th
from .scoring import score_candidates, select_best
from .seeds import clean_seeds, prepare_seeds
from .utils import (
    distance,
    distance_vector,
    projected_distance,
    projected_distance_vector,
    projected_distance_thresholded,
    scale_to_unit_square,
    unscale_from_unit_square,
    compute_separation_radius,
    compute_min_projected_distance,
)

__version__ = "1.0.0"
__all__ = [
    "MonteCarloThDesign",
    "GenerationState",
    "DesignConfig",
    "DesignConfigError",
    "monte_carlo_th",
    "resolve_rng",
    "score_candidates",
    "select_best",
    "clean_seeds",
    "prepare_seeds",
    "distance",
    "distance_vector",
    "projected_distance",
    "projected_distance_vector",
    "projected_distance_thresholded",
    "scale_to_unit_square",
    "unscale_from_unit_square",
    "compute_separation_radius",
    "compute_min_projected_distance",
]
