"""Transition (predict) step: push belief grids through the motion models."""

from __future__ import annotations

import numpy as np

from pacman_belief.domain.actions import Action, ActionModel
from pacman_belief.domain.grid import BeliefGrid
from pacman_belief.domain.topology import GridTopology


def predict_evader(
    prior: BeliefGrid,
    topology: GridTopology,
    action_model: ActionModel,
    action: Action,
) -> BeliefGrid:
    """Push-forward of pacman's grid: ``new[dest] += p(dest | c, action) * old[c]``."""
    new_values = np.zeros(topology.cell_count)
    for x, y in topology.traversable_cells:
        mass = prior.values[topology.index(x, y)]
        if mass == 0.0:
            continue
        for probability, (dest_x, dest_y) in action_model.transitions(x, y, action):
            if topology.is_wall(dest_x, dest_y):
                raise ValueError(
                    f"action model sent mass from ({x}, {y}) into wall ({dest_x}, {dest_y})"
                )
            new_values[topology.index(dest_x, dest_y)] += probability * mass
    return BeliefGrid(topology.width, topology.height, new_values)


def decay_food(food: BeliefGrid, evader: BeliefGrid) -> BeliefGrid:
    """Expected consumption: ``food[c] * (1 - evader[c])``."""
    decayed = food.values * (1.0 - np.clip(evader.values, 0.0, 1.0))
    return BeliefGrid(food.width, food.height, decayed)


def predict_pursuer(
    prior: BeliefGrid,
    topology: GridTopology,
    stop_probability: float,
) -> BeliefGrid:
    """Fixed ghost policy: stay with ``stop_probability``, else a uniform legal move.

    A cell without legal neighbours keeps all of its mass.
    """
    new_values = np.zeros(topology.cell_count)
    for x, y in topology.traversable_cells:
        idx = topology.index(x, y)
        mass = prior.values[idx]
        if mass == 0.0:
            continue
        neighbors = topology.legal_neighbors(x, y)
        if not neighbors:
            new_values[idx] += mass
            continue
        new_values[idx] += stop_probability * mass
        move_probability = (1.0 - stop_probability) / len(neighbors)
        for nx_, ny_ in neighbors:
            new_values[topology.index(nx_, ny_)] += move_probability * mass
    return BeliefGrid(topology.width, topology.height, new_values)
