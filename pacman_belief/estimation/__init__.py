"""Sequential Bayesian filter: observe/predict steps and the episode belief store."""

from pacman_belief.estimation.game_state import (
    PACMAN_AGENT_ID,
    BayesianGameState,
    round_half_away,
)
from pacman_belief.estimation.observe import (
    ObservationResult,
    normalize_or_uniform,
    observe_direct,
    observe_relative,
)
from pacman_belief.estimation.predict import decay_food, predict_evader, predict_pursuer
from pacman_belief.estimation.throttle import WarningThrottle

__all__ = [
    "BayesianGameState",
    "ObservationResult",
    "PACMAN_AGENT_ID",
    "WarningThrottle",
    "decay_food",
    "normalize_or_uniform",
    "observe_direct",
    "observe_relative",
    "predict_evader",
    "predict_pursuer",
    "round_half_away",
]
