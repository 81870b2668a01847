"""Configuration dataclasses for the belief filter and episode replays."""

from __future__ import annotations

from dataclasses import dataclass

from pacman_belief.config.constants import (
    ACTION_SUCCESS_PROBABILITY,
    FLUSH_THRESHOLD,
    GHOST_PROXIMITY_STEPS,
    SD_GHOST_DIST_MEASUREMENT,
    SD_PACMAN_MEASUREMENT,
    STOP_PROBABILITY,
    WARNING_INTERVAL_SECONDS,
)

__all__ = [
    "FilterConfig",
    "ReplayConfig",
]


@dataclass(frozen=True)
class FilterConfig:
    """Fixed parameters of the observation and motion models.

    One instance is built per episode and handed to every component that
    needs it; nothing here changes while the episode runs.
    """

    num_ghosts: int = 1
    pacman_measurement_sd: float = SD_PACMAN_MEASUREMENT
    ghost_distance_measurement_sd: float = SD_GHOST_DIST_MEASUREMENT
    stop_probability: float = STOP_PROBABILITY
    action_success_probability: float = ACTION_SUCCESS_PROBABILITY
    warning_interval_seconds: float = WARNING_INTERVAL_SECONDS

    def __post_init__(self) -> None:
        if self.num_ghosts < 0:
            raise ValueError("num_ghosts must be >= 0")
        if self.pacman_measurement_sd <= 0.0:
            raise ValueError("pacman_measurement_sd must be > 0")
        if self.ghost_distance_measurement_sd <= 0.0:
            raise ValueError("ghost_distance_measurement_sd must be > 0")
        if not 0.0 <= self.stop_probability <= 1.0:
            raise ValueError("stop_probability must be in [0.0, 1.0]")
        if not 0.0 <= self.action_success_probability <= 1.0:
            raise ValueError("action_success_probability must be in [0.0, 1.0]")
        if self.warning_interval_seconds < 0.0:
            raise ValueError("warning_interval_seconds must be >= 0")


@dataclass(frozen=True)
class ReplayConfig:
    """Knobs for replaying a scripted episode into a trace log."""

    ghost_proximity_steps: int = GHOST_PROXIMITY_STEPS
    flush_threshold: int = FLUSH_THRESHOLD
    uniform_start: bool = False

    def __post_init__(self) -> None:
        if self.ghost_proximity_steps < 1:
            raise ValueError("ghost_proximity_steps must be >= 1")
        if self.flush_threshold < 1:
            raise ValueError("flush_threshold must be >= 1")
