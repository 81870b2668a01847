"""All-pairs shortest-path oracle over the traversable cells of a topology.

The table is a dense ``(W*H, W*H)`` int32 array indexed by flat source and
destination indices, filled by one breadth-first search per traversable
cell. That is O(V * (V + E)) time and O(V^2) memory for V traversable cells,
which only works because Pacman boards are small and fixed for an episode.
Boards much larger than a few thousand cells need a different oracle.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

import numpy as np

from pacman_belief.config.constants import NO_PATH, UNREACHABLE
from pacman_belief.domain.topology import Cell, GridTopology


def _bfs_row(topology: GridTopology, source: Cell) -> np.ndarray:
    """Hop counts from ``source`` to every cell, ``NO_PATH`` where unreachable."""
    row = np.full(topology.cell_count, NO_PATH, dtype=np.int32)
    row[topology.index(*source)] = 0
    queue: deque[Cell] = deque([source])
    while queue:
        current = queue.popleft()
        next_distance = row[topology.index(*current)] + 1
        for neighbor in topology.legal_neighbors(*current):
            idx = topology.index(*neighbor)
            if row[idx] == NO_PATH:
                row[idx] = next_distance
                queue.append(neighbor)
    return row


@dataclass(frozen=True, eq=False)
class DistanceOracle:
    """Read-only table of BFS hop counts between traversable cells."""

    topology: GridTopology
    table: np.ndarray  # (W*H, W*H) int32, NO_PATH for unreachable pairs

    @classmethod
    def build(cls, topology: GridTopology) -> DistanceOracle:
        table = np.full((topology.cell_count, topology.cell_count), NO_PATH, dtype=np.int32)
        for source in topology.traversable_cells:
            table[topology.index(*source)] = _bfs_row(topology, source)
        table.flags.writeable = False
        return cls(topology=topology, table=table)

    @property
    def cell_count(self) -> int:
        return self.topology.cell_count

    def _flat(self, cell: Cell) -> int | None:
        if self.topology.is_wall(*cell):
            return None
        return self.topology.index(*cell)

    def distance(self, a: Cell, b: Cell) -> int | float:
        """Hop count from ``a`` to ``b``, or ``UNREACHABLE``."""
        ia, ib = self._flat(a), self._flat(b)
        if ia is None or ib is None:
            return UNREACHABLE
        hops = int(self.table[ia, ib])
        return UNREACHABLE if hops == NO_PATH else hops

    def row(self, cell: Cell) -> np.ndarray:
        """Read-only row of hop counts from ``cell``; all ``NO_PATH`` for walls."""
        idx = self._flat(cell)
        if idx is None:
            return np.full(self.topology.cell_count, NO_PATH, dtype=np.int32)
        return self.table[idx]

    def distances_from(self, cell: Cell) -> dict[Cell, int]:
        """Mapping of every reachable destination to its hop count."""
        row = self.row(cell)
        return {
            self.topology.cell_at(int(idx)): int(row[idx]) for idx in np.flatnonzero(row != NO_PATH)
        }

    def within(self, cell: Cell, n: int | float, inclusive: bool = True) -> np.ndarray:
        """Flat boolean mask of cells reachable from ``cell`` in ``<= n`` (or ``< n``) hops."""
        row = self.row(cell)
        reachable = row != NO_PATH
        close = row <= n if inclusive else row < n
        return reachable & close
