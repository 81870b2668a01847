"""Episode replay through the observation service, with Parquet trace logging."""

from pacman_belief.simulation.replay import (
    EpisodeScript,
    ReplayResult,
    replay_state,
    run_replay,
)

__all__ = [
    "EpisodeScript",
    "ReplayResult",
    "replay_state",
    "run_replay",
]
