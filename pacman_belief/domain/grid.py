"""Owned, bounds-checked probability grids.

A :class:`BeliefGrid` never changes after construction. Updates build a new
buffer and the owner swaps the reference, so a computation never reads a
value it has already overwritten.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from pacman_belief.domain.topology import Cell, GridTopology

# Tolerance for the sum-to-one check on normalized grids.
NORMALIZATION_TOLERANCE = 1e-9


@dataclass(frozen=True, eq=False)
class BeliefGrid:
    """Row-major flat float64 array plus its width and height."""

    width: int
    height: int
    values: np.ndarray

    def __post_init__(self) -> None:
        values = np.array(self.values, dtype=np.float64).ravel()
        if values.size != self.width * self.height:
            raise ValueError(
                f"expected {self.width * self.height} values, got {values.size}"
            )
        if np.any(values < 0.0) or not np.all(np.isfinite(values)):
            raise ValueError("belief values must be finite and non-negative")
        values.flags.writeable = False
        object.__setattr__(self, "values", values)

    @classmethod
    def zeros(cls, topology: GridTopology) -> BeliefGrid:
        return cls(topology.width, topology.height, np.zeros(topology.cell_count))

    @classmethod
    def uniform(cls, topology: GridTopology) -> BeliefGrid:
        """Equal mass on every traversable cell, zero on walls."""
        values = np.where(topology.wall_mask, 0.0, 1.0)
        total = values.sum()
        if total > 0.0:
            values /= total
        return cls(topology.width, topology.height, values)

    @classmethod
    def point_mass(cls, topology: GridTopology, cell: Cell) -> BeliefGrid:
        """All mass on ``cell``, which must be traversable."""
        if topology.is_wall(*cell):
            raise ValueError(f"cannot place point mass on wall or out-of-bounds cell {cell}")
        values = np.zeros(topology.cell_count)
        values[topology.index(*cell)] = 1.0
        return cls(topology.width, topology.height, values)

    @classmethod
    def from_array(cls, array: np.ndarray) -> BeliefGrid:
        """Wrap a ``(height, width)`` array."""
        array = np.asarray(array, dtype=np.float64)
        if array.ndim != 2:
            raise ValueError("from_array expects a 2-D (height, width) array")
        height, width = array.shape
        return cls(width, height, array)

    def __getitem__(self, cell: Cell) -> float:
        x, y = cell
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} grid")
        return float(self.values[y * self.width + x])

    def as_array(self) -> np.ndarray:
        """Writable ``(height, width)`` copy."""
        return self.values.reshape(self.height, self.width).copy()

    def total(self, mask: np.ndarray | None = None) -> float:
        """Sum of the grid, optionally restricted to ``mask``."""
        if mask is None:
            return float(self.values.sum())
        return float(self.values[mask].sum())

    def is_normalized(self, wall_mask: np.ndarray) -> bool:
        """True if walls hold exactly 0 and the rest sums to 1."""
        if np.any(self.values[wall_mask] != 0.0):
            return False
        return abs(self.total(~wall_mask) - 1.0) <= NORMALIZATION_TOLERANCE
