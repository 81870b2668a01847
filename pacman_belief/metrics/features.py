"""Feature vector handed to the linear Q-learning agent."""

from __future__ import annotations

import math

import numpy as np

from pacman_belief.config.constants import FEATURE_SCALE
from pacman_belief.domain.actions import Action
from pacman_belief.estimation.game_state import BayesianGameState
from pacman_belief.metrics.tactical import (
    closest_food_distance,
    closest_ghost_distance,
    dies,
    eats_food,
    ghosts_within_one_step,
)

FEATURE_NAMES: tuple[str, ...] = (
    "bias",
    "eats_food",
    "closest_food_distance",
    "ghosts_within_one_step",
    "closest_ghost_distance",
    "dies",
)


def _capped(distance: int | float, cap: int) -> float:
    return float(cap) if math.isinf(distance) else float(distance)


def extract_features(state: BayesianGameState, action: Action) -> np.ndarray:
    """Scaled features for taking ``action`` in the current state.

    Count and distance features are divided by ``FEATURE_SCALE``; an
    unreachable distance is first capped at the board's cell count. The
    ``dies`` flag is left unscaled.
    """
    cap = state.topology.cell_count
    return np.array(
        [
            1.0,
            float(eats_food(state, action)) / FEATURE_SCALE,
            _capped(closest_food_distance(state), cap) / FEATURE_SCALE,
            ghosts_within_one_step(state, action) / FEATURE_SCALE,
            _capped(closest_ghost_distance(state), cap) / FEATURE_SCALE,
            float(dies(state, action)),
        ],
        dtype=np.float64,
    )
