"""Observation likelihoods over a measurement residual."""

from __future__ import annotations

import math
from typing import Protocol

import numpy as np

ArrayLike = float | np.ndarray


class Likelihood(Protocol):
    def __call__(
        self,
        dx: ArrayLike,
        dy: ArrayLike,
        measured_x: float,
        measured_y: float,
        sigma: float,
    ) -> ArrayLike:
        """Density of measuring ``(measured_x, measured_y)`` given true ``(dx, dy)``."""
        ...


def gaussian_density(
    dx: ArrayLike,
    dy: ArrayLike,
    measured_x: float,
    measured_y: float,
    sigma: float,
) -> ArrayLike:
    """Isotropic 2-D normal density, vectorized over ``dx``/``dy``.

    Far residuals underflow to exactly 0.0; the observe step treats an
    all-zero posterior as degenerate and recovers from it.
    """
    if sigma <= 0.0:
        raise ValueError("sigma must be > 0")
    rx = np.asarray(dx, dtype=np.float64) - measured_x
    ry = np.asarray(dy, dtype=np.float64) - measured_y
    norm = 1.0 / (2.0 * math.pi * sigma * sigma)
    return norm * np.exp(-(rx * rx + ry * ry) / (2.0 * sigma * sigma))
