"""Configuration layer: constants and typed config dataclasses."""

from pacman_belief.config.constants import (
    ACTION_SUCCESS_PROBABILITY,
    FEATURE_SCALE,
    FLUSH_THRESHOLD,
    GHOST_PROXIMITY_STEPS,
    NO_PATH,
    SD_GHOST_DIST_MEASUREMENT,
    SD_PACMAN_MEASUREMENT,
    STOP_PROBABILITY,
    UNREACHABLE,
    WARNING_INTERVAL_SECONDS,
)
from pacman_belief.config.types import FilterConfig, ReplayConfig

__all__ = [
    "ACTION_SUCCESS_PROBABILITY",
    "FEATURE_SCALE",
    "FLUSH_THRESHOLD",
    "FilterConfig",
    "GHOST_PROXIMITY_STEPS",
    "NO_PATH",
    "ReplayConfig",
    "SD_GHOST_DIST_MEASUREMENT",
    "SD_PACMAN_MEASUREMENT",
    "STOP_PROBABILITY",
    "UNREACHABLE",
    "WARNING_INTERVAL_SECONDS",
]
