"""Replay a scripted episode through the observation service.

An episode script is JSON with a layout and an ordered list of events::

    {
      "layout": ["%%%%%", "%P.G%", "%%%%%"],
      "events": [
        {"type": "observe", "agent_id": 0, "pose": [1.0, 1.0]},
        {"type": "truth", "pacman": [1, 1], "ghosts": [[3, 1]]},
        {"type": "predict", "action": "EAST"}
      ]
    }

Each ``predict`` event is one tick. The learner's view (features for the
chosen action) is recorded just before the tick is applied.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pyarrow.parquet as pq

from pacman_belief.config.types import FilterConfig, ReplayConfig
from pacman_belief.domain.actions import Action
from pacman_belief.domain.topology import Cell, GridTopology
from pacman_belief.estimation.game_state import PACMAN_AGENT_ID, BayesianGameState
from pacman_belief.io.paths import trace_log_path
from pacman_belief.io.schemas import TRACE_SCHEMA
from pacman_belief.metrics.features import FEATURE_NAMES, extract_features
from pacman_belief.metrics.tactical import (
    ghosts_within_n_steps,
    most_probable_pose,
    probability_ghost_within_n_steps,
)
from pacman_belief.service import (
    GHOST_DISTANCE_CHANNEL,
    PACMAN_POSE_CHANNEL,
    AgentPoseRequest,
    ObservationService,
)
from pacman_belief.simulation.persistence import flush_trace_columns, new_trace_columns

logger = logging.getLogger(__name__)

EVENT_TYPES = frozenset({"observe", "truth", "predict"})


def _pair(value: Any, what: str) -> tuple[Any, Any]:
    if not isinstance(value, Sequence) or isinstance(value, str) or len(value) != 2:
        raise ValueError(f"{what} must be a two-element [x, y] list, got {value!r}")
    return value[0], value[1]


def _cell(value: Any, what: str, topology: GridTopology) -> Cell:
    """Integer map cell; integral floats such as ``2.0`` are accepted."""
    coords = []
    for coord in _pair(value, what):
        if isinstance(coord, float) and coord.is_integer():
            coord = int(coord)
        if isinstance(coord, bool) or not isinstance(coord, int):
            raise ValueError(f"{what} must have integer coordinates, got {value!r}")
        coords.append(coord)
    cell = (coords[0], coords[1])
    if topology.is_wall(*cell):
        raise ValueError(f"{what} {cell} is off the map or on a wall")
    return cell


def _validate_event(index: int, event: Any, topology: GridTopology) -> dict[str, Any]:
    if not isinstance(event, Mapping):
        raise ValueError(f"event {index} must be an object")
    kind = event.get("type")
    if kind not in EVENT_TYPES:
        raise ValueError(f"event {index} has unknown type {kind!r}")
    validated = dict(event)
    if kind == "observe":
        if not isinstance(event.get("agent_id"), int):
            raise ValueError(f"event {index}: observe needs an integer agent_id")
        _pair(event.get("pose"), f"event {index} pose")
    elif kind == "predict":
        Action.parse(str(event.get("action", "")))
    elif kind == "truth":
        if event.get("pacman") is not None:
            validated["pacman"] = _cell(event["pacman"], f"event {index} pacman", topology)
        validated["ghosts"] = [
            _cell(ghost, f"event {index} ghost", topology) if ghost is not None else None
            for ghost in event.get("ghosts", [])
        ]
    return validated


@dataclass(frozen=True)
class EpisodeScript:
    """Parsed episode: layout rows plus validated events."""

    layout: tuple[str, ...]
    events: tuple[dict[str, Any], ...]
    num_ghosts: int | None = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> EpisodeScript:
        layout = payload.get("layout")
        if not isinstance(layout, list) or not all(isinstance(r, str) for r in layout):
            raise ValueError("layout must be a list of row strings")
        topology = GridTopology.from_layout(layout)
        events = payload.get("events", [])
        if not isinstance(events, list):
            raise ValueError("events must be a list")
        num_ghosts = payload.get("num_ghosts")
        if num_ghosts is not None and (not isinstance(num_ghosts, int) or num_ghosts < 0):
            raise ValueError("num_ghosts must be a non-negative integer")
        return cls(
            layout=tuple(layout),
            events=tuple(_validate_event(i, e, topology) for i, e in enumerate(events)),
            num_ghosts=num_ghosts,
        )

    @classmethod
    def load(cls, path: Path) -> EpisodeScript:
        return cls.from_dict(json.loads(Path(path).read_text()))


@dataclass(frozen=True)
class ReplayResult:
    """Summary of one replayed episode."""

    episode_id: str
    ticks: int
    observations: int
    rejected_observations: int
    finished: bool
    trace_path: Path


def _build_state(
    script: EpisodeScript, filter_config: FilterConfig | None, replay_config: ReplayConfig
) -> BayesianGameState:
    topology = GridTopology.from_layout(script.layout)
    if filter_config is None:
        num_ghosts = (
            script.num_ghosts if script.num_ghosts is not None else len(topology.ghost_starts)
        )
        filter_config = FilterConfig(num_ghosts=num_ghosts)
    return BayesianGameState(
        topology, config=filter_config, uniform_start=replay_config.uniform_start
    )


TickCallback = Callable[[BayesianGameState, Action], None]


def _apply_event(
    service: ObservationService,
    event: Mapping[str, Any],
    before_tick: TickCallback | None = None,
) -> bool | None:
    """Apply one event; returns the acknowledgement for observe events, else None."""
    kind = event["type"]
    if kind == "observe":
        agent_id = event["agent_id"]
        channel = PACMAN_POSE_CHANNEL if agent_id == PACMAN_AGENT_ID else GHOST_DISTANCE_CHANNEL
        x, y = _pair(event["pose"], "pose")
        request = AgentPoseRequest(
            agent_id=agent_id,
            pose=(float(x), float(y)),
            is_finished=bool(event.get("is_finished", False)),
        )
        return service.handle(channel, request).observed
    if kind == "truth":
        pacman = event.get("pacman")
        ghosts = [tuple(g) if g is not None else None for g in event.get("ghosts", [])]
        with service.exclusive() as state:
            state.set_true_poses(tuple(pacman) if pacman is not None else None, ghosts)
        return None
    action = Action.parse(event["action"])
    with service.exclusive() as state:
        if before_tick is not None:
            before_tick(state, action)
        state.predict_agents_moves(action)
    return None


def run_replay(
    script: EpisodeScript,
    out_dir: Path,
    episode_id: str = "episode",
    filter_config: FilterConfig | None = None,
    replay_config: ReplayConfig | None = None,
) -> ReplayResult:
    """Feed ``script`` through an :class:`ObservationService` and log a trace."""
    replay_config = replay_config or ReplayConfig()
    state = _build_state(script, filter_config, replay_config)
    service = ObservationService(state)
    n = replay_config.ghost_proximity_steps

    out_dir = Path(out_dir)
    path = trace_log_path(out_dir)
    path.parent.mkdir(parents=True, exist_ok=True)

    columns = new_trace_columns()
    ticks = 0

    def record(s: BayesianGameState, action: Action) -> None:
        features = extract_features(s, action)
        pacman_x, pacman_y = most_probable_pose(s.pacman_belief)
        columns["episode_id"].append(episode_id)
        columns["tick"].append(ticks)
        columns["action"].append(action.name)
        columns["pacman_x"].append(pacman_x)
        columns["pacman_y"].append(pacman_y)
        for name, value in zip(FEATURE_NAMES, features, strict=True):
            columns[name].append(float(value))
        columns["ghosts_within_n"].append(ghosts_within_n_steps(s, n))
        columns["probability_ghost_within_n"].append(probability_ghost_within_n_steps(s, n))
        columns["is_finished"].append(s.is_finished)

    writer: pq.ParquetWriter | None = None
    observations = rejected = 0
    try:
        for event in script.events:
            observed = _apply_event(service, event, before_tick=record)
            if observed is True:
                observations += 1
            elif observed is False:
                rejected += 1
            elif event["type"] == "predict":
                ticks += 1
                if len(columns["tick"]) >= replay_config.flush_threshold:
                    writer = flush_trace_columns(columns, path, writer)
        writer = flush_trace_columns(columns, path, writer)
        if writer is None:
            pq.write_table(TRACE_SCHEMA.empty_table(), path)
    finally:
        if writer is not None:
            writer.close()

    logger.info(
        "Replayed %s: %d ticks, %d observations (%d rejected)",
        episode_id,
        ticks,
        observations,
        rejected,
    )
    return ReplayResult(
        episode_id=episode_id,
        ticks=ticks,
        observations=observations,
        rejected_observations=rejected,
        finished=state.is_finished,
        trace_path=path,
    )


def replay_state(
    script: EpisodeScript, replay_config: ReplayConfig | None = None
) -> BayesianGameState:
    """Apply ``script`` to a fresh state without writing a trace."""
    state = _build_state(script, None, replay_config or ReplayConfig())
    service = ObservationService(state)
    for event in script.events:
        _apply_event(service, event)
    return state
