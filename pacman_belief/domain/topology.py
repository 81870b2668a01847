"""Static grid topology: cell kinds, wall tests and legal moves.

Layouts use the classic Pacman text format, one string per row with row 0 at
the top. ``y`` is the row index and ``x`` the column index, so a cell
``(x, y)`` lives at flat index ``y * width + x`` in every grid of the
package.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import TypeAlias

import networkx as nx
import numpy as np

Cell: TypeAlias = tuple[int, int]
"""Integer ``(x, y)`` grid coordinate."""


class CellKind(IntEnum):
    """What occupies a cell of the map."""

    EMPTY = 0
    FOOD = 1
    WALL = 2


# North is towards row 0.
NEIGHBOR_OFFSETS: tuple[Cell, ...] = ((0, -1), (0, 1), (1, 0), (-1, 0))

LAYOUT_SYMBOLS: dict[str, CellKind] = {
    "%": CellKind.WALL,
    ".": CellKind.FOOD,
    "o": CellKind.FOOD,
    " ": CellKind.EMPTY,
    "P": CellKind.EMPTY,
    "G": CellKind.EMPTY,
}


@dataclass(frozen=True, eq=False)
class GridTopology:
    """Immutable width x height map of cell kinds."""

    width: int
    height: int
    kinds: np.ndarray  # (height, width) int8 of CellKind values
    pacman_start: Cell | None = None
    ghost_starts: tuple[Cell, ...] = ()
    _traversable: tuple[Cell, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError("grid must be at least 1x1")
        if self.kinds.shape != (self.height, self.width):
            raise ValueError(
                f"kinds shape {self.kinds.shape} does not match {self.height}x{self.width}"
            )
        kinds = np.array(self.kinds, dtype=np.int8)
        kinds.flags.writeable = False
        object.__setattr__(self, "kinds", kinds)
        traversable = tuple(
            (x, y)
            for y in range(self.height)
            for x in range(self.width)
            if kinds[y, x] != CellKind.WALL
        )
        object.__setattr__(self, "_traversable", traversable)

    @classmethod
    def from_layout(cls, rows: Sequence[str]) -> GridTopology:
        """Parse layout text rows; all rows must have the same width."""
        if not rows:
            raise ValueError("layout must contain at least one row")
        width = len(rows[0])
        kinds = np.zeros((len(rows), width), dtype=np.int8)
        pacman_start: Cell | None = None
        ghost_starts: list[Cell] = []
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"layout row {y} has width {len(row)}, expected {width}")
            for x, symbol in enumerate(row):
                if symbol not in LAYOUT_SYMBOLS:
                    raise ValueError(f"Unknown layout symbol {symbol!r} at ({x}, {y})")
                kinds[y, x] = LAYOUT_SYMBOLS[symbol]
                if symbol == "P":
                    if pacman_start is not None:
                        raise ValueError("layout defines more than one pacman start")
                    pacman_start = (x, y)
                elif symbol == "G":
                    ghost_starts.append((x, y))
        return cls(
            width=width,
            height=len(rows),
            kinds=kinds,
            pacman_start=pacman_start,
            ghost_starts=tuple(ghost_starts),
        )

    @classmethod
    def from_file(cls, path: Path) -> GridTopology:
        """Read a ``.lay`` file; trailing blank lines are ignored."""
        lines = Path(path).read_text().splitlines()
        while lines and not lines[-1].strip():
            lines.pop()
        return cls.from_layout(lines)

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    @property
    def traversable_cells(self) -> tuple[Cell, ...]:
        """Non-WALL cells in row-major order."""
        return self._traversable

    @property
    def wall_mask(self) -> np.ndarray:
        """Flat boolean mask, True on WALL cells."""
        return (self.kinds == CellKind.WALL).ravel()

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def index(self, x: int, y: int) -> int:
        """Flat row-major index of ``(x, y)``."""
        if not self.in_bounds(x, y):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} grid")
        return y * self.width + x

    def cell_at(self, index: int) -> Cell:
        if not 0 <= index < self.cell_count:
            raise IndexError(f"flat index {index} outside grid of {self.cell_count} cells")
        return index % self.width, index // self.width

    def kind(self, x: int, y: int) -> CellKind:
        if not self.in_bounds(x, y):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} grid")
        return CellKind(int(self.kinds[y, x]))

    def is_wall(self, x: int, y: int) -> bool:
        """Out-of-bounds cells count as walls."""
        return not self.in_bounds(x, y) or self.kinds[y, x] == CellKind.WALL

    def legal_neighbors(self, x: int, y: int) -> list[Cell]:
        """4-connected non-WALL neighbours, in north/south/east/west order."""
        return [
            (x + dx, y + dy) for dx, dy in NEIGHBOR_OFFSETS if not self.is_wall(x + dx, y + dy)
        ]

    def to_graph(self) -> nx.Graph:
        """Undirected graph of traversable cells with legal-move edges.

        Each node carries a ``kind`` attribute with its :class:`CellKind`.
        """
        g = nx.Graph()
        for x, y in self._traversable:
            g.add_node((x, y), kind=self.kind(x, y))
        for x, y in self._traversable:
            for neighbor in self.legal_neighbors(x, y):
                g.add_edge((x, y), neighbor)
        return g
