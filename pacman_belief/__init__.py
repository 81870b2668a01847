"""Bayesian belief filter for partially observable Pacman."""

from pacman_belief.config.types import FilterConfig
from pacman_belief.domain.actions import Action
from pacman_belief.domain.distances import DistanceOracle
from pacman_belief.domain.topology import CellKind, GridTopology
from pacman_belief.estimation.game_state import BayesianGameState
from pacman_belief.service import AgentPoseRequest, AgentPoseResponse, ObservationService

__all__ = [
    "Action",
    "AgentPoseRequest",
    "AgentPoseResponse",
    "BayesianGameState",
    "CellKind",
    "DistanceOracle",
    "FilterConfig",
    "GridTopology",
    "ObservationService",
]
