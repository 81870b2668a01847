"""Pacman actions and the stochastic action model used by the predict step."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from pacman_belief.config.constants import ACTION_SUCCESS_PROBABILITY
from pacman_belief.domain.topology import Cell, GridTopology


class Action(Enum):
    """Pacman moves; the value is the ``(dx, dy)`` step."""

    NORTH = (0, -1)
    SOUTH = (0, 1)
    EAST = (1, 0)
    WEST = (-1, 0)
    STOP = (0, 0)

    @classmethod
    def parse(cls, name: str) -> Action:
        """Look up an action by case-insensitive name."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown action: {name!r}") from None


Transition = tuple[float, Cell]
"""``(probability, destination)`` pair."""


class ActionModel(Protocol):
    def transitions(self, x: int, y: int, action: Action) -> list[Transition]:
        """Distribution over destinations of ``(x, y)`` under ``action``; sums to 1."""
        ...


def next_cell(topology: GridTopology, cell: Cell, action: Action) -> Cell:
    """Deterministic destination: the stepped cell if legal, else ``cell``."""
    dx, dy = action.value
    target = (cell[0] + dx, cell[1] + dy)
    if topology.is_wall(*target):
        return cell
    return target


@dataclass(frozen=True)
class SlipActionModel:
    """Executes the intended move with ``success_probability``, otherwise stops.

    Moves into walls degrade to STOP. Zero-probability entries are dropped so
    callers only see destinations that can actually receive mass.
    """

    topology: GridTopology
    success_probability: float = ACTION_SUCCESS_PROBABILITY

    def __post_init__(self) -> None:
        if not 0.0 <= self.success_probability <= 1.0:
            raise ValueError("success_probability must be in [0.0, 1.0]")

    def transitions(self, x: int, y: int, action: Action) -> list[Transition]:
        target = next_cell(self.topology, (x, y), action)
        if target == (x, y):
            return [(1.0, (x, y))]
        result: list[Transition] = []
        if self.success_probability > 0.0:
            result.append((self.success_probability, target))
        if self.success_probability < 1.0:
            result.append((1.0 - self.success_probability, (x, y)))
        return result
