"""Tests for pacman_belief.metrics.tactical module."""

from __future__ import annotations

import numpy as np
import pytest

from pacman_belief.config.constants import UNREACHABLE
from pacman_belief.config.types import FilterConfig
from pacman_belief.domain.actions import Action
from pacman_belief.domain.grid import BeliefGrid
from pacman_belief.domain.topology import GridTopology
from pacman_belief.estimation.game_state import BayesianGameState
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

LAYOUT = [
    "%%%%%%",
    "%P..G%",
    "%.%% %",
    "%%%%%%",
]


@pytest.fixture
def state() -> BayesianGameState:
    return BayesianGameState(GridTopology.from_layout(LAYOUT))


class TestMostProbablePose:
    def test_argmax(self) -> None:
        grid = BeliefGrid(3, 2, np.array([0.1, 0.0, 0.2, 0.0, 0.7, 0.0]))
        assert most_probable_pose(grid) == (1, 1)

    def test_tie_goes_to_first_row_major_cell(self) -> None:
        topology = GridTopology.from_layout(LAYOUT)
        assert most_probable_pose(BeliefGrid.uniform(topology)) == (1, 1)

    def test_ghost_poses(self, state: BayesianGameState) -> None:
        assert most_probable_ghost_poses(state) == [(4, 1)]


class TestFood:
    def test_max_food_probability(self, state: BayesianGameState) -> None:
        assert max_food_probability(state) == 1.0

    def test_closest_food_from_start(self, state: BayesianGameState) -> None:
        assert closest_food_distance(state) == 1

    def test_faint_food_is_ignored(self) -> None:
        topology = GridTopology.from_layout(["P    "])
        state = BayesianGameState(topology)
        state.seed(food=BeliefGrid(5, 1, np.array([0.0, 0.3, 0.0, 0.0, 0.8])))
        assert closest_food_distance(state) == 4

    def test_no_food_is_unreachable(self) -> None:
        state = BayesianGameState(GridTopology.from_layout(["P  "]))
        assert closest_food_distance(state) == UNREACHABLE
        assert max_food_probability(state) == 0.0

    def test_eats_food_after_action(self, state: BayesianGameState) -> None:
        assert eats_food(state, Action.EAST)
        assert not eats_food(state, Action.STOP)
        assert not eats_food(state)


class TestGroundTruthGhosts:
    def test_closest_ghost_distance(self, state: BayesianGameState) -> None:
        assert closest_ghost_distance(state) == 3

    def test_collocated_ghost_reports_one(self, state: BayesianGameState) -> None:
        state.set_true_poses((4, 1), [(4, 1)])
        assert closest_ghost_distance(state) == 1

    def test_unknown_pacman_pose(self, state: BayesianGameState) -> None:
        state.set_true_poses(None, [(4, 1)])
        assert closest_ghost_distance(state) == UNREACHABLE
        assert not dies(state, Action.EAST)
        assert ghosts_within_one_step(state) == 0

    def test_dies(self, state: BayesianGameState) -> None:
        assert not dies(state, Action.EAST)
        state.set_true_poses((3, 1), [(4, 1)])
        assert dies(state, Action.EAST)
        assert not dies(state, Action.WEST)

    def test_ghosts_within_one_step(self, state: BayesianGameState) -> None:
        state.set_true_poses((3, 1), [(4, 1)])
        assert ghosts_within_one_step(state) == 1
        assert ghosts_within_one_step(state, Action.WEST) == 0


class TestBeliefGhosts:
    def test_ghosts_within_n_steps(self, state: BayesianGameState) -> None:
        assert ghosts_within_n_steps(state, 3) == 1
        assert ghosts_within_n_steps(state, 2) == 0
        assert has_ghost_within_n_steps(state, 3)
        assert not has_ghost_within_n_steps(state, 2)

    def test_probability_uses_strict_threshold(self, state: BayesianGameState) -> None:
        assert probability_ghost_within_n_steps(state, 3) == 0.0
        assert probability_ghost_within_n_steps(state, 4) == pytest.approx(1.0)

    def test_probability_sums_over_ghosts(self) -> None:
        topology = GridTopology.from_layout(LAYOUT)
        state = BayesianGameState(topology, FilterConfig(num_ghosts=2))
        assert probability_ghost_within_n_steps(state, 3) == pytest.approx(4 / 6)

    def test_probability_without_ghosts(self) -> None:
        state = BayesianGameState(GridTopology.from_layout(["P  "]))
        assert probability_ghost_within_n_steps(state, 5) == 0.0
