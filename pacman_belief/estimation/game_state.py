"""Belief store for one episode: pacman, ghost and food grids plus ground truth.

The state is single-owner and not re-entrant. Every observe/predict call
replaces the affected grids wholesale before returning; callers that share a
state between threads go through :class:`pacman_belief.service.ObservationService`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np

from pacman_belief.config.types import FilterConfig
from pacman_belief.domain.actions import Action, ActionModel, SlipActionModel
from pacman_belief.domain.distances import DistanceOracle
from pacman_belief.domain.grid import BeliefGrid
from pacman_belief.domain.likelihood import Likelihood, gaussian_density
from pacman_belief.domain.topology import Cell, CellKind, GridTopology
from pacman_belief.estimation.observe import (
    normalize_or_uniform,
    observe_direct,
    observe_relative,
)
from pacman_belief.estimation.predict import decay_food, predict_evader, predict_pursuer
from pacman_belief.estimation.throttle import WarningThrottle

logger = logging.getLogger(__name__)

PACMAN_AGENT_ID = 0
"""Agent id of pacman in measurements; ghost ``k`` has id ``k + 1``."""


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _food_from_topology(topology: GridTopology) -> BeliefGrid:
    values = (topology.kinds == CellKind.FOOD).astype(np.float64)
    return BeliefGrid.from_array(values)


class BayesianGameState:
    """Owns every belief grid and the ground-truth map of one episode."""

    def __init__(
        self,
        topology: GridTopology,
        config: FilterConfig | None = None,
        action_model: ActionModel | None = None,
        likelihood: Likelihood = gaussian_density,
        oracle: DistanceOracle | None = None,
        uniform_start: bool = False,
    ) -> None:
        self.topology = topology
        self.config = config or FilterConfig(num_ghosts=len(topology.ghost_starts))
        self.action_model = action_model or SlipActionModel(
            topology, self.config.action_success_probability
        )
        self.likelihood = likelihood
        if oracle is None:
            logger.debug(
                "Pre-calculating all distances for %dx%d grid", topology.width, topology.height
            )
            oracle = DistanceOracle.build(topology)
        elif oracle.topology is not topology:
            raise ValueError("oracle was built for a different topology")
        self.oracle = oracle

        num_ghosts = self.config.num_ghosts
        ghost_starts: list[Cell | None] = list(topology.ghost_starts[:num_ghosts])
        ghost_starts += [None] * (num_ghosts - len(ghost_starts))

        self._pacman_belief = self._initial_belief(topology.pacman_start, uniform_start)
        self._ghost_beliefs = [self._initial_belief(s, uniform_start) for s in ghost_starts]
        self._food_belief = _food_from_topology(topology)
        self._truth_kinds = np.array(topology.kinds, dtype=np.int8)
        self._pacman_pose: Cell | None = topology.pacman_start
        self._ghost_poses: list[Cell | None] = ghost_starts
        self._finished = False
        self._throttle = WarningThrottle(logger, self.config.warning_interval_seconds)
        logger.debug("Bayesian game state initialized with %d ghosts", num_ghosts)

    def _initial_belief(self, start: Cell | None, uniform_start: bool) -> BeliefGrid:
        if start is None or uniform_start:
            return BeliefGrid.uniform(self.topology)
        return BeliefGrid.point_mass(self.topology, start)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def num_ghosts(self) -> int:
        return self.config.num_ghosts

    @property
    def pacman_belief(self) -> BeliefGrid:
        return self._pacman_belief

    @property
    def ghost_beliefs(self) -> tuple[BeliefGrid, ...]:
        return tuple(self._ghost_beliefs)

    def ghost_belief(self, ghost_index: int) -> BeliefGrid:
        return self._ghost_beliefs[self._check_ghost_index(ghost_index)]

    @property
    def food_belief(self) -> BeliefGrid:
        return self._food_belief

    @property
    def pacman_pose(self) -> Cell | None:
        """True pacman cell as last reported by the simulator."""
        return self._pacman_pose

    @property
    def ghost_poses(self) -> tuple[Cell | None, ...]:
        return tuple(self._ghost_poses)

    @property
    def is_finished(self) -> bool:
        return self._finished

    def truth_kind(self, x: int, y: int) -> CellKind:
        """Ground-truth kind of ``(x, y)``, including revealed consumption."""
        if not self.topology.in_bounds(x, y):
            raise IndexError(f"cell ({x}, {y}) outside grid")
        return CellKind(int(self._truth_kinds[y, x]))

    def truth_kinds(self) -> np.ndarray:
        """Copy of the ground-truth kind grid."""
        return self._truth_kinds.copy()

    # ------------------------------------------------------------------
    # Seeding and ground truth
    # ------------------------------------------------------------------

    def seed(
        self,
        pacman: BeliefGrid | None = None,
        ghosts: Sequence[BeliefGrid] | None = None,
        food: BeliefGrid | None = None,
    ) -> None:
        """Replace initial grids with externally supplied ones.

        Pacman and ghost grids are renormalized over traversable cells; the
        food grid is taken as-is apart from zeroing walls.
        """
        wall = self.topology.wall_mask
        for grid in [pacman, food, *(ghosts or [])]:
            if grid is not None and (grid.width, grid.height) != (
                self.topology.width,
                self.topology.height,
            ):
                raise ValueError("seeded grid does not match the topology dimensions")
        if ghosts is not None and len(ghosts) != self.num_ghosts:
            raise ValueError(f"expected {self.num_ghosts} ghost grids, got {len(ghosts)}")
        if pacman is not None:
            self._pacman_belief = self._seeded(pacman, "pacman")
        if ghosts is not None:
            self._ghost_beliefs = [self._seeded(g, f"ghost {i}") for i, g in enumerate(ghosts)]
        if food is not None:
            values = np.where(wall, 0.0, food.values)
            self._food_belief = BeliefGrid(food.width, food.height, values)

    def _seeded(self, grid: BeliefGrid, name: str) -> BeliefGrid:
        belief, degenerate = normalize_or_uniform(grid.values, self.topology)
        if degenerate:
            logger.warning("Seeded %s belief has no mass on the map, using uniform", name)
        return belief

    def set_true_poses(self, pacman: Cell | None, ghosts: Sequence[Cell | None]) -> None:
        """Record the simulator's exact poses, used by the collision predicates."""
        if len(ghosts) != self.num_ghosts:
            raise ValueError(f"expected {self.num_ghosts} ghost poses, got {len(ghosts)}")
        for pose in [pacman, *ghosts]:
            if pose is not None and self.topology.is_wall(*pose):
                raise ValueError(f"true pose {pose} is off the map or on a wall")
        self._pacman_pose = pacman
        self._ghost_poses = list(ghosts)

    def mark_finished(self, finished: bool = True) -> None:
        self._finished = finished

    def _reveal_empty(self, measured_x: float, measured_y: float) -> None:
        finite = math.isfinite(measured_x) and math.isfinite(measured_y)
        if finite:
            x, y = round_half_away(measured_x), round_half_away(measured_y)
        if not finite or self.topology.is_wall(x, y):
            logger.debug(
                "Measurement (%.2f, %.2f) off the map, ground truth untouched",
                measured_x,
                measured_y,
            )
            return
        self._truth_kinds[y, x] = CellKind.EMPTY

    # ------------------------------------------------------------------
    # Observe
    # ------------------------------------------------------------------

    def _check_ghost_index(self, ghost_index: int) -> int:
        if not 0 <= ghost_index < self.num_ghosts:
            raise IndexError(f"ghost index {ghost_index} out of range for {self.num_ghosts} ghosts")
        return ghost_index

    def observe_pacman(self, measured_x: float, measured_y: float) -> None:
        """Absolute pacman position measurement."""
        result = observe_direct(
            self._pacman_belief,
            self.topology,
            measured_x,
            measured_y,
            self.config.pacman_measurement_sd,
            self.likelihood,
        )
        if result.degenerate:
            self._throttle.warning("pacman", "Probability 0 for pacman, redistributing")
        self._pacman_belief = result.belief
        self._reveal_empty(measured_x, measured_y)

    def observe_ghost(self, measured_dx: float, measured_dy: float, ghost_index: int) -> None:
        """Ghost-minus-pacman displacement measurement for one ghost."""
        ghost_index = self._check_ghost_index(ghost_index)
        result = observe_relative(
            self._ghost_beliefs[ghost_index],
            self._pacman_belief,
            self.topology,
            measured_dx,
            measured_dy,
            self.config.ghost_distance_measurement_sd,
            self.likelihood,
        )
        if result.degenerate:
            self._throttle.warning(
                f"ghost-{ghost_index}", "Probability 0 for ghost %d, redistributing", ghost_index
            )
        self._ghost_beliefs[ghost_index] = result.belief

    def observe_agent(self, agent_id: int, pose: tuple[float, float], is_finished: bool) -> bool:
        """Route one measurement by agent id; always acknowledges."""
        self.mark_finished(bool(is_finished))
        measured_x, measured_y = pose
        if agent_id == PACMAN_AGENT_ID:
            logger.debug("Observe pacman")
            self.observe_pacman(measured_x, measured_y)
        else:
            logger.debug("Observe ghost %d", agent_id - 1)
            self.observe_ghost(measured_x, measured_y, agent_id - 1)
        return True

    # ------------------------------------------------------------------
    # Predict
    # ------------------------------------------------------------------

    def predict_pacman_move(self, action: Action) -> None:
        """Push pacman's grid through the action model, then decay food."""
        logger.debug("Predict pacman %s", action.name)
        new_pacman = predict_evader(self._pacman_belief, self.topology, self.action_model, action)
        self._food_belief = decay_food(self._food_belief, new_pacman)
        self._pacman_belief = new_pacman

    def predict_ghost_move(self, ghost_index: int) -> None:
        ghost_index = self._check_ghost_index(ghost_index)
        logger.debug("Predict ghost %d", ghost_index)
        self._ghost_beliefs[ghost_index] = predict_pursuer(
            self._ghost_beliefs[ghost_index], self.topology, self.config.stop_probability
        )

    def predict_ghosts_moves(self) -> None:
        for ghost_index in range(self.num_ghosts):
            self.predict_ghost_move(ghost_index)

    def predict_agents_moves(self, action: Action) -> None:
        """One full tick: pacman first, then every ghost independently."""
        self.predict_pacman_move(action)
        self.predict_ghosts_moves()
