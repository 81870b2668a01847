"""Bayesian observe step: posterior belief grids from noisy measurements."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from pacman_belief.domain.grid import BeliefGrid
from pacman_belief.domain.likelihood import Likelihood, gaussian_density
from pacman_belief.domain.topology import GridTopology


@dataclass(frozen=True)
class ObservationResult:
    """Posterior grid and whether it had to be rebuilt as uniform."""

    belief: BeliefGrid
    degenerate: bool


def _cell_coordinates(topology: GridTopology, flat: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    return flat % topology.width, flat // topology.width


def normalize_or_uniform(
    values: np.ndarray, topology: GridTopology
) -> tuple[BeliefGrid, bool]:
    """Normalize ``values`` over traversable cells.

    An all-zero (or non-finite) total is degenerate: every traversable cell
    gets ``1 / |traversable|`` and the second element of the result is True.
    """
    wall = topology.wall_mask
    values = np.where(wall, 0.0, values)
    total = values.sum()
    if total > 0.0 and np.isfinite(total):
        return BeliefGrid(topology.width, topology.height, values / total), False
    return BeliefGrid.uniform(topology), True


def observe_direct(
    prior: BeliefGrid,
    topology: GridTopology,
    measured_x: float,
    measured_y: float,
    sigma: float,
    likelihood: Likelihood = gaussian_density,
) -> ObservationResult:
    """``new[c] = L(m | c) * old[c]`` on traversable cells, then normalize."""
    flat = np.flatnonzero(~topology.wall_mask)
    xs, ys = _cell_coordinates(topology, flat)
    posterior = np.zeros(topology.cell_count)
    posterior[flat] = likelihood(xs, ys, measured_x, measured_y, sigma) * prior.values[flat]
    belief, degenerate = normalize_or_uniform(posterior, topology)
    return ObservationResult(belief=belief, degenerate=degenerate)


def observe_relative(
    prior: BeliefGrid,
    evader: BeliefGrid,
    topology: GridTopology,
    measured_dx: float,
    measured_dy: float,
    sigma: float,
    likelihood: Likelihood = gaussian_density,
) -> ObservationResult:
    """Update a ghost grid from a ghost-minus-pacman displacement measurement.

    The unknown pacman position is marginalized out:
    ``new[c] = old[c] * sum_p L(m | c - p) * evader[p]``. Builds a V x V
    likelihood matrix, so cost and memory are quadratic in traversable cells.
    """
    flat = np.flatnonzero(~topology.wall_mask)
    xs, ys = _cell_coordinates(topology, flat)
    # rows: candidate ghost cell c, columns: candidate pacman cell p
    dx = xs[:, None] - xs[None, :]
    dy = ys[:, None] - ys[None, :]
    weights = likelihood(dx, dy, measured_dx, measured_dy, sigma)
    marginal = weights @ evader.values[flat]
    posterior = np.zeros(topology.cell_count)
    posterior[flat] = prior.values[flat] * marginal
    belief, degenerate = normalize_or_uniform(posterior, topology)
    return ObservationResult(belief=belief, degenerate=degenerate)
