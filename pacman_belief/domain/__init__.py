"""Domain layer: topology, actions, likelihoods, grids and the distance oracle."""

from pacman_belief.domain.actions import Action, ActionModel, SlipActionModel, next_cell
from pacman_belief.domain.distances import DistanceOracle
from pacman_belief.domain.grid import BeliefGrid
from pacman_belief.domain.likelihood import Likelihood, gaussian_density
from pacman_belief.domain.topology import Cell, CellKind, GridTopology

__all__ = [
    "Action",
    "ActionModel",
    "BeliefGrid",
    "Cell",
    "CellKind",
    "DistanceOracle",
    "GridTopology",
    "Likelihood",
    "SlipActionModel",
    "gaussian_density",
    "next_cell",
]
