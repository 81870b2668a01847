"""In-process dispatcher between a measurement transport and the game state.

The transport owns the wire format and calls :meth:`ObservationService.handle`
with a decoded request. Both named channels route to the same observe logic;
they stay separate so deployments can monitor them independently.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from pacman_belief.estimation.game_state import PACMAN_AGENT_ID, BayesianGameState

logger = logging.getLogger(__name__)

PACMAN_POSE_CHANNEL = "/pacman/pacman_pose/error"
GHOST_DISTANCE_CHANNEL = "/pacman/ghost_distance/error"


@dataclass(frozen=True)
class AgentPoseRequest:
    """One measurement: pacman's position, or a ghost's offset from pacman."""

    agent_id: int
    pose: tuple[float, float]
    is_finished: bool = False


@dataclass(frozen=True)
class AgentPoseResponse:
    observed: bool


Handler = Callable[[AgentPoseRequest], AgentPoseResponse]


class ObservationService:
    """Single owner of a :class:`BayesianGameState` behind a lock."""

    def __init__(self, state: BayesianGameState) -> None:
        self._state = state
        self._lock = threading.Lock()
        self._handlers: dict[str, Handler] = {
            PACMAN_POSE_CHANNEL: self.observe_agent,
            GHOST_DISTANCE_CHANNEL: self.observe_agent,
        }

    @property
    def channels(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    def handle(self, channel: str, request: AgentPoseRequest) -> AgentPoseResponse:
        """Dispatch ``request`` arriving on ``channel``.

        Raises :exc:`KeyError` for an unknown channel.
        """
        handler = self._handlers.get(channel)
        if handler is None:
            raise KeyError(f"Unknown channel: {channel}")
        return handler(request)

    def observe_agent(self, request: AgentPoseRequest) -> AgentPoseResponse:
        with self._lock:
            if not PACMAN_AGENT_ID <= request.agent_id <= self._state.num_ghosts:
                logger.warning(
                    "Ignoring measurement for unknown agent %d (%d ghosts)",
                    request.agent_id,
                    self._state.num_ghosts,
                )
                return AgentPoseResponse(observed=False)
            observed = self._state.observe_agent(
                request.agent_id, request.pose, request.is_finished
            )
        return AgentPoseResponse(observed=observed)

    @contextmanager
    def exclusive(self) -> Iterator[BayesianGameState]:
        """Hold the state lock for predictions and feature queries."""
        with self._lock:
            yield self._state
