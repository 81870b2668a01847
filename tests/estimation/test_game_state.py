"""Tests for pacman_belief.estimation.game_state module."""

from __future__ import annotations

import logging
import math

import numpy as np
import pytest

from pacman_belief.config.types import FilterConfig
from pacman_belief.domain.actions import Action
from pacman_belief.domain.distances import DistanceOracle
from pacman_belief.domain.grid import BeliefGrid
from pacman_belief.domain.topology import CellKind, GridTopology
from pacman_belief.estimation.game_state import BayesianGameState, round_half_away

LAYOUT = [
    "%%%%%%",
    "%P..G%",
    "%.%% %",
    "%%%%%%",
]


@pytest.fixture
def topology() -> GridTopology:
    return GridTopology.from_layout(LAYOUT)


@pytest.fixture
def state(topology: GridTopology) -> BayesianGameState:
    return BayesianGameState(topology)


class TestRoundHalfAway:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.5, 1), (1.5, 2), (2.5, 3), (-0.5, -1), (-1.5, -2), (1.49, 1), (-0.4, 0)],
    )
    def test_rounding(self, value: float, expected: int) -> None:
        assert round_half_away(value) == expected


class TestInitialization:
    def test_point_masses_at_starts(self, state: BayesianGameState) -> None:
        assert state.num_ghosts == 1
        assert state.pacman_belief[(1, 1)] == 1.0
        assert state.ghost_belief(0)[(4, 1)] == 1.0
        assert state.pacman_pose == (1, 1)
        assert state.ghost_poses == ((4, 1),)
        assert not state.is_finished

    def test_uniform_start(self, topology: GridTopology) -> None:
        state = BayesianGameState(topology, uniform_start=True)
        assert state.pacman_belief[(1, 1)] == pytest.approx(1 / 6)
        assert state.ghost_belief(0).is_normalized(topology.wall_mask)

    def test_food_belief_from_layout(self, state: BayesianGameState) -> None:
        food = state.food_belief
        assert food[(2, 1)] == 1.0
        assert food[(1, 2)] == 1.0
        assert food[(4, 2)] == 0.0
        assert food[(0, 0)] == 0.0

    def test_extra_ghosts_start_uniform(self, topology: GridTopology) -> None:
        state = BayesianGameState(topology, FilterConfig(num_ghosts=2))
        assert state.ghost_belief(0)[(4, 1)] == 1.0
        assert state.ghost_belief(1)[(2, 1)] == pytest.approx(1 / 6)
        assert state.ghost_poses == ((4, 1), None)

    def test_shared_oracle_must_match_topology(self, topology: GridTopology) -> None:
        other = GridTopology.from_layout(LAYOUT)
        with pytest.raises(ValueError, match="different topology"):
            BayesianGameState(topology, oracle=DistanceOracle.build(other))

    def test_shared_oracle_is_reused(self, topology: GridTopology) -> None:
        oracle = DistanceOracle.build(topology)
        assert BayesianGameState(topology, oracle=oracle).oracle is oracle

    def test_bad_ghost_index(self, state: BayesianGameState) -> None:
        with pytest.raises(IndexError):
            state.ghost_belief(1)


class TestSeed:
    def test_seed_renormalizes(self, state: BayesianGameState, topology: GridTopology) -> None:
        values = np.zeros(topology.cell_count)
        values[topology.index(2, 1)] = 2.0
        values[topology.index(3, 1)] = 2.0
        state.seed(pacman=BeliefGrid(6, 4, values))
        assert state.pacman_belief[(2, 1)] == pytest.approx(0.5)
        assert state.pacman_belief.is_normalized(topology.wall_mask)

    def test_seed_food_zeroes_walls(self, state: BayesianGameState) -> None:
        state.seed(food=BeliefGrid(6, 4, np.full(24, 0.5)))
        assert state.food_belief[(0, 0)] == 0.0
        assert state.food_belief[(4, 2)] == 0.5

    def test_seed_all_zero_pacman_becomes_uniform(
        self, state: BayesianGameState, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            state.seed(pacman=BeliefGrid(6, 4, np.zeros(24)))
        assert state.pacman_belief[(1, 1)] == pytest.approx(1 / 6)
        assert "no mass" in caplog.text

    def test_seed_dimension_mismatch(self, state: BayesianGameState) -> None:
        with pytest.raises(ValueError, match="dimensions"):
            state.seed(pacman=BeliefGrid(3, 1, np.ones(3)))

    def test_seed_ghost_count_mismatch(
        self, state: BayesianGameState, topology: GridTopology
    ) -> None:
        with pytest.raises(ValueError, match="ghost grids"):
            state.seed(ghosts=[BeliefGrid.uniform(topology)] * 2)

    def test_set_true_poses_checks_length(self, state: BayesianGameState) -> None:
        with pytest.raises(ValueError):
            state.set_true_poses((1, 1), [])
        state.set_true_poses((2, 1), [(3, 1)])
        assert state.pacman_pose == (2, 1)
        assert state.ghost_poses == ((3, 1),)

    @pytest.mark.parametrize(
        ("pacman", "ghost"),
        [((-1, 1), (4, 1)), ((1, 1), (9, 9)), ((0, 0), (4, 1)), ((1, 1), (2, 2))],
    )
    def test_set_true_poses_rejects_off_map_and_walls(
        self, state: BayesianGameState, pacman: tuple[int, int], ghost: tuple[int, int]
    ) -> None:
        with pytest.raises(ValueError, match="off the map or on a wall"):
            state.set_true_poses(pacman, [ghost])
        assert state.pacman_pose == (1, 1)
        assert state.ghost_poses == ((4, 1),)

    def test_mark_finished(self, state: BayesianGameState) -> None:
        state.mark_finished()
        assert state.is_finished
        state.mark_finished(False)
        assert not state.is_finished


class TestObserve:
    def test_observe_pacman_reveals_empty_cell(self, state: BayesianGameState) -> None:
        assert state.truth_kind(2, 1) == CellKind.FOOD
        state.observe_pacman(2.4, 0.6)
        assert state.truth_kind(2, 1) == CellKind.EMPTY
        assert state.truth_kind(3, 1) == CellKind.FOOD

    def test_off_map_measurement_leaves_truth(self, state: BayesianGameState) -> None:
        before = state.truth_kinds()
        state.observe_pacman(-3.0, 9.0)
        assert np.array_equal(state.truth_kinds(), before)

    @pytest.mark.parametrize(
        "pose", [(math.nan, 1.0), (2.0, math.inf), (-math.inf, math.nan)]
    )
    def test_non_finite_measurement_is_absorbed(
        self, state: BayesianGameState, topology: GridTopology, pose: tuple[float, float]
    ) -> None:
        before = state.truth_kinds()
        assert state.observe_agent(0, pose, False)
        assert np.array_equal(state.truth_kinds(), before)
        assert state.pacman_belief.is_normalized(topology.wall_mask)

    def test_observe_pacman_keeps_normalization(
        self, state: BayesianGameState, topology: GridTopology
    ) -> None:
        state.seed(pacman=BeliefGrid.uniform(topology))
        state.observe_pacman(3.0, 1.0)
        belief = state.pacman_belief
        assert belief.is_normalized(topology.wall_mask)
        assert belief[(3, 1)] == max(belief.values)

    def test_degenerate_pacman_warning_is_throttled(
        self, topology: GridTopology, caplog: pytest.LogCaptureFixture
    ) -> None:
        config = FilterConfig(pacman_measurement_sd=1e-3, warning_interval_seconds=3600.0)
        state = BayesianGameState(topology, config)
        with caplog.at_level(logging.WARNING):
            state.observe_pacman(50.0, 50.0)
            state.observe_pacman(50.0, 50.0)
        messages = [r.getMessage() for r in caplog.records]
        assert messages.count("Probability 0 for pacman, redistributing") == 1
        assert state.pacman_belief[(1, 1)] == pytest.approx(1 / 6)

    def test_observe_ghost_uses_relative_displacement(
        self, state: BayesianGameState, topology: GridTopology
    ) -> None:
        state.seed(ghosts=[BeliefGrid.uniform(topology)])
        state.observe_ghost(2.0, 0.0, 0)
        ghost = state.ghost_belief(0)
        assert ghost[(3, 1)] == max(ghost.values)
        assert ghost.is_normalized(topology.wall_mask)

    def test_observe_ghost_bad_index(self, state: BayesianGameState) -> None:
        with pytest.raises(IndexError):
            state.observe_ghost(0.0, 0.0, 3)

    def test_observe_agent_routes_by_id(
        self, state: BayesianGameState, topology: GridTopology
    ) -> None:
        state.seed(pacman=BeliefGrid.uniform(topology), ghosts=[BeliefGrid.uniform(topology)])
        assert state.observe_agent(0, (2.0, 1.0), False)
        assert state.pacman_belief[(2, 1)] == max(state.pacman_belief.values)
        assert state.observe_agent(1, (2.0, 0.0), True)
        assert state.is_finished
        assert state.ghost_belief(0)[(4, 1)] == max(state.ghost_belief(0).values)


class TestPredict:
    def test_pacman_move_decays_food(self, state: BayesianGameState) -> None:
        state.predict_pacman_move(Action.EAST)
        assert state.pacman_belief[(2, 1)] == 1.0
        assert state.food_belief[(2, 1)] == 0.0
        assert state.food_belief[(3, 1)] == 1.0

    def test_ghost_move_spreads_mass(self, state: BayesianGameState) -> None:
        state.predict_ghost_move(0)
        ghost = state.ghost_belief(0)
        assert ghost[(4, 1)] == pytest.approx(0.2)
        assert ghost[(3, 1)] == pytest.approx(0.4)
        assert ghost[(4, 2)] == pytest.approx(0.4)

    def test_full_tick_keeps_every_grid_normalized(
        self, state: BayesianGameState, topology: GridTopology
    ) -> None:
        for action in (Action.EAST, Action.EAST, Action.SOUTH, Action.WEST):
            state.observe_agent(0, (2.0, 1.0), False)
            state.observe_agent(1, (1.0, 0.0), False)
            state.predict_agents_moves(action)
            assert state.pacman_belief.is_normalized(topology.wall_mask)
            assert state.ghost_belief(0).is_normalized(topology.wall_mask)
            assert np.all(state.food_belief.values <= 1.0)
