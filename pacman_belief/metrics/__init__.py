"""Tactical queries and learner features derived from the filtered belief."""

from pacman_belief.metrics.features import FEATURE_NAMES, extract_features
from pacman_belief.metrics.tactical import (
    closest_food_distance,
    closest_ghost_distance,
    dies,
    eats_food,
    ghosts_within_n_steps,
    ghosts_within_one_step,
    has_ghost_within_n_steps,
    max_food_probability,
    most_probable_ghost_poses,
    most_probable_pose,
    probability_ghost_within_n_steps,
)

__all__ = [
    "FEATURE_NAMES",
    "closest_food_distance",
    "closest_ghost_distance",
    "dies",
    "eats_food",
    "extract_features",
    "ghosts_within_n_steps",
    "ghosts_within_one_step",
    "has_ghost_within_n_steps",
    "max_food_probability",
    "most_probable_ghost_poses",
    "most_probable_pose",
    "probability_ghost_within_n_steps",
]
