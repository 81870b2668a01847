"""Tests for pacman_belief.service module."""

from __future__ import annotations

import logging
import math
import threading

import pytest

from pacman_belief.domain.actions import Action
from pacman_belief.domain.topology import GridTopology
from pacman_belief.estimation.game_state import BayesianGameState
from pacman_belief.service import (
    GHOST_DISTANCE_CHANNEL,
    PACMAN_POSE_CHANNEL,
    AgentPoseRequest,
    ObservationService,
)

LAYOUT = [
    "%%%%%%",
    "%P..G%",
    "%.%% %",
    "%%%%%%",
]


@pytest.fixture
def service() -> ObservationService:
    return ObservationService(BayesianGameState(GridTopology.from_layout(LAYOUT)))


def test_both_channels_are_registered(service: ObservationService) -> None:
    assert set(service.channels) == {PACMAN_POSE_CHANNEL, GHOST_DISTANCE_CHANNEL}


def test_unknown_channel_raises(service: ObservationService) -> None:
    with pytest.raises(KeyError, match="Unknown channel"):
        service.handle("/pacman/other", AgentPoseRequest(0, (1.0, 1.0)))


def test_pacman_measurement_is_acknowledged(service: ObservationService) -> None:
    response = service.handle(PACMAN_POSE_CHANNEL, AgentPoseRequest(0, (2.0, 1.0)))
    assert response.observed
    with service.exclusive() as state:
        assert state.pacman_belief.total() == pytest.approx(1.0)


def test_channels_route_identically(service: ObservationService) -> None:
    # A ghost measurement on the pacman channel is still routed by agent id.
    response = service.handle(PACMAN_POSE_CHANNEL, AgentPoseRequest(1, (3.0, 0.0)))
    assert response.observed
    with service.exclusive() as state:
        assert state.ghost_belief(0)[(4, 1)] == max(state.ghost_belief(0).values)


def test_non_finite_pacman_measurement_is_acknowledged(service: ObservationService) -> None:
    response = service.handle(PACMAN_POSE_CHANNEL, AgentPoseRequest(0, (math.nan, 1.0)))
    assert response.observed
    with service.exclusive() as state:
        assert state.pacman_belief.is_normalized(state.topology.wall_mask)


def test_finished_flag_is_forwarded(service: ObservationService) -> None:
    service.handle(GHOST_DISTANCE_CHANNEL, AgentPoseRequest(1, (3.0, 0.0), is_finished=True))
    with service.exclusive() as state:
        assert state.is_finished


@pytest.mark.parametrize("agent_id", [-1, 2, 7])
def test_unknown_agent_is_rejected(
    service: ObservationService, agent_id: int, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING):
        response = service.handle(GHOST_DISTANCE_CHANNEL, AgentPoseRequest(agent_id, (0.0, 0.0)))
    assert not response.observed
    assert "unknown agent" in caplog.text


def test_concurrent_measurements_keep_grids_normalized(service: ObservationService) -> None:
    def worker(agent_id: int) -> None:
        pose = (2.0, 1.0) if agent_id == 0 else (1.0, 0.0)
        for _ in range(20):
            service.observe_agent(AgentPoseRequest(agent_id, pose))
            with service.exclusive() as state:
                state.predict_ghost_move(0)

    threads = [threading.Thread(target=worker, args=(i,)) for i in (0, 1, 0, 1)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    with service.exclusive() as state:
        wall = state.topology.wall_mask
        assert state.pacman_belief.is_normalized(wall)
        assert state.ghost_belief(0).is_normalized(wall)
        state.predict_agents_moves(Action.EAST)
        assert state.pacman_belief.is_normalized(wall)
