"""Tactical queries over the belief grids, ground truth and distance oracle.

All functions are read-only. Some use the filtered belief (most probable
poses), others the simulator's exact poses; which source each query reads is
part of its contract and is stated in its docstring.
"""

from __future__ import annotations

import numpy as np

from pacman_belief.config.constants import NO_PATH, UNREACHABLE
from pacman_belief.domain.actions import Action, next_cell
from pacman_belief.domain.grid import BeliefGrid
from pacman_belief.domain.topology import Cell, CellKind
from pacman_belief.estimation.game_state import BayesianGameState


def most_probable_pose(grid: BeliefGrid) -> Cell:
    """Argmax cell; ties go to the first maximum in row-major order."""
    idx = int(np.argmax(grid.values))
    return idx % grid.width, idx // grid.width


def most_probable_ghost_poses(state: BayesianGameState) -> list[Cell]:
    return [most_probable_pose(belief) for belief in state.ghost_beliefs]


def max_food_probability(state: BayesianGameState) -> float:
    """Largest food-presence probability over traversable cells (0.0 if none)."""
    traversable = ~state.topology.wall_mask
    if not traversable.any():
        return 0.0
    return float(state.food_belief.values[traversable].max())


def closest_food_distance(state: BayesianGameState) -> int | float:
    """Belief-based: hops from pacman's most probable cell to the nearest likely food.

    A cell counts as likely food when its probability is positive and at
    least half of the current maximum. Returns ``UNREACHABLE`` if no such
    cell can be reached.
    """
    pacman = most_probable_pose(state.pacman_belief)
    food = state.food_belief.values
    threshold = max_food_probability(state) / 2.0
    candidates = ~state.topology.wall_mask & (food > 0.0) & (food >= threshold)
    row = state.oracle.row(pacman)
    reachable = candidates & (row != NO_PATH)
    if not reachable.any():
        return UNREACHABLE
    return int(row[reachable].min())


def closest_ghost_distance(state: BayesianGameState) -> int | float:
    """Ground-truth: hops from pacman's exact cell to the nearest exact ghost.

    A distance of 0 is reported as 1 so the value is safe to invert.
    """
    pacman = state.pacman_pose
    if pacman is None:
        return UNREACHABLE
    min_dist: int | float = UNREACHABLE
    for ghost in state.ghost_poses:
        if ghost is None:
            continue
        min_dist = min(min_dist, state.oracle.distance(pacman, ghost))
    if min_dist == 0:
        min_dist = 1
    return min_dist


def _true_next_pose(state: BayesianGameState, action: Action | None) -> Cell | None:
    pose = state.pacman_pose
    if pose is None or action is None:
        return pose
    return next_cell(state.topology, pose, action)


def dies(state: BayesianGameState, action: Action | None = None) -> bool:
    """Ground-truth: pacman's next exact cell coincides with an exact ghost cell."""
    pose = _true_next_pose(state, action)
    if pose is None:
        return False
    return any(ghost == pose for ghost in state.ghost_poses)


def eats_food(state: BayesianGameState, action: Action | None = None) -> bool:
    """Ground-truth kind check at pacman's most probable (next) cell."""
    cell = most_probable_pose(state.pacman_belief)
    if action is not None:
        cell = next_cell(state.topology, cell, action)
    return state.truth_kind(*cell) == CellKind.FOOD


def ghosts_within_one_step(state: BayesianGameState, action: Action | None = None) -> int:
    """Ground-truth: ghosts at Manhattan distance <= 1 from pacman's next exact cell."""
    pose = _true_next_pose(state, action)
    if pose is None:
        return 0
    x, y = pose
    return sum(
        1
        for ghost in state.ghost_poses
        if ghost is not None and abs(x - ghost[0]) + abs(y - ghost[1]) <= 1
    )


def ghosts_within_n_steps(state: BayesianGameState, n: int) -> int:
    """Belief-based: most probable ghosts within ``n`` maze hops of most probable pacman."""
    pacman = most_probable_pose(state.pacman_belief)
    return sum(
        1 for ghost in most_probable_ghost_poses(state) if state.oracle.distance(pacman, ghost) <= n
    )


def has_ghost_within_n_steps(state: BayesianGameState, n: int) -> bool:
    return ghosts_within_n_steps(state, n) > 0


def probability_ghost_within_n_steps(state: BayesianGameState, n: int) -> float:
    """Expected number of ghosts strictly closer than ``n`` hops, over both beliefs.

    ``sum_c pacman[c] * sum_{g: dist(c, g) < n} sum_k ghost_k[g]``; with a
    single ghost this is a probability. O(V^2 * N).
    """
    if state.num_ghosts == 0:
        return 0.0
    table = state.oracle.table
    close = ((table != NO_PATH) & (table < n)).astype(np.float64)
    ghost_mass = np.sum([belief.values for belief in state.ghost_beliefs], axis=0)
    return float(state.pacman_belief.values @ (close @ ghost_mass))
