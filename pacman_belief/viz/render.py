"""Text dumps and matplotlib heatmaps of belief grids."""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import ListedColormap

from pacman_belief.domain.grid import BeliefGrid
from pacman_belief.domain.topology import CellKind, GridTopology
from pacman_belief.estimation.game_state import BayesianGameState
from pacman_belief.metrics.tactical import most_probable_ghost_poses, most_probable_pose
from pacman_belief.viz.theme import DEFAULT_THEME, Theme

TRUTH_SYMBOLS: dict[CellKind, str] = {
    CellKind.WALL: "%",
    CellKind.FOOD: ".",
    CellKind.EMPTY: " ",
}


def format_belief(grid: BeliefGrid, topology: GridTopology, precision: int = 2) -> str:
    """One line per row; walls print as ``%`` padded to the column width."""
    width = precision + 3
    lines = []
    for y in range(topology.height):
        cells = []
        for x in range(topology.width):
            if topology.is_wall(x, y):
                cells.append("%".rjust(width))
            else:
                cells.append(f"{grid[x, y]:{width}.{precision}f}")
        lines.append(" ".join(cells))
    return "\n".join(lines)


def format_truth_map(state: BayesianGameState) -> str:
    """Ground-truth kinds with exact pacman (``P``) and ghost (``G``) poses overlaid."""
    rows = [
        [TRUTH_SYMBOLS[state.truth_kind(x, y)] for x in range(state.topology.width)]
        for y in range(state.topology.height)
    ]
    for ghost in state.ghost_poses:
        if ghost is not None:
            rows[ghost[1]][ghost[0]] = "G"
    if state.pacman_pose is not None:
        x, y = state.pacman_pose
        rows[y][x] = "P"
    return "\n".join("".join(row) for row in rows)


def _draw_belief(
    ax: plt.Axes,
    grid: BeliefGrid,
    topology: GridTopology,
    cmap: str,
    title: str,
    theme: Theme,
) -> None:
    values = np.ma.masked_array(
        grid.as_array(), mask=topology.wall_mask.reshape(topology.height, topology.width)
    )
    ax.imshow(
        topology.wall_mask.reshape(topology.height, topology.width),
        cmap=ListedColormap(["#FFFFFF", theme.wall_color]),
        origin="upper",
        aspect="equal",
    )
    img = ax.imshow(values, cmap=cmap, origin="upper", aspect="equal", vmin=0.0)
    for x in range(topology.width + 1):
        ax.axvline(x - 0.5, color=theme.grid_line_color, linewidth=0.3)
    for y in range(topology.height + 1):
        ax.axhline(y - 0.5, color=theme.grid_line_color, linewidth=0.3)
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_title(title, fontsize=9)
    ax.figure.colorbar(img, ax=ax, fraction=0.046, pad=0.04)


def render_belief_heatmap(
    grid: BeliefGrid,
    topology: GridTopology,
    output_path: Path,
    title: str = "belief",
    theme: Theme = DEFAULT_THEME,
) -> Path:
    """Save a single belief grid as a heatmap image."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    figsize = (max(3.0, topology.width * 0.35), max(3.0, topology.height * 0.35))
    fig, ax = plt.subplots(figsize=figsize)
    _draw_belief(ax, grid, topology, theme.belief_cmap, title, theme)
    fig.tight_layout()
    fig.savefig(output_path, dpi=theme.dpi)
    plt.close(fig)
    return output_path


def render_state(
    state: BayesianGameState,
    output_path: Path,
    theme: Theme = DEFAULT_THEME,
) -> Path:
    """Pacman, every ghost, and food beliefs side by side, argmax cells marked."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    topology = state.topology
    panels: list[tuple[str, BeliefGrid, str]] = [
        ("pacman", state.pacman_belief, theme.belief_cmap)
    ]
    panels += [
        (f"ghost {i}", belief, theme.belief_cmap) for i, belief in enumerate(state.ghost_beliefs)
    ]
    panels.append(("food", state.food_belief, theme.food_cmap))

    fig, axes = plt.subplots(
        1,
        len(panels),
        figsize=(len(panels) * max(3.0, topology.width * 0.3), max(3.0, topology.height * 0.3)),
        squeeze=False,
    )
    for ax, (title, grid, cmap) in zip(axes[0], panels, strict=True):
        _draw_belief(ax, grid, topology, cmap, title, theme)

    px, py = most_probable_pose(state.pacman_belief)
    axes[0][0].scatter([px], [py], marker="o", s=40, c=theme.pacman_marker_color)
    for i, (gx, gy) in enumerate(most_probable_ghost_poses(state)):
        axes[0][i + 1].scatter([gx], [gy], marker="^", s=40, c=theme.ghost_marker_color)

    fig.tight_layout()
    fig.savefig(output_path, dpi=theme.dpi)
    plt.close(fig)
    return output_path
