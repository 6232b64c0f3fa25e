# tests/conftest.py
"""
Shared fixtures.
"""

from __future__ import annotations

import numpy as np
import pytest


@pytest.fixture
def rng() -> np.random.Generator:
    """Reproducible generator for test data (not for the designs themselves)."""
    return np.random.default_rng(2024)


@pytest.fixture
def unit_seeds_3d(rng) -> list:
    """Ten seeds in [0, 1]^3 as plain Python lists."""
    return [list(row) for row in rng.random((10, 3))]
