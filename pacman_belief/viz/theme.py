"""Visualization theme presets for belief renderers.

Themes are frozen dataclasses grouping the styling constants so the CLI can
swap palettes with ``--theme``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    """Complete collection of visualization style tokens."""

    belief_cmap: str = "viridis"
    food_cmap: str = "YlOrBr"
    wall_color: str = "#404040"
    grid_line_color: str = "#CCCCCC"
    pacman_marker_color: str = "#FFEB3B"
    ghost_marker_color: str = "#F44336"
    dpi: int = 150


DEFAULT_THEME = Theme()

PAPER_THEME = Theme(
    belief_cmap="Greys",
    food_cmap="Greys",
    wall_color="#000000",
    grid_line_color="#999999",
    pacman_marker_color="#1565C0",
    ghost_marker_color="#B71C1C",
    dpi=300,
)

REGISTERED_THEMES: dict[str, Theme] = {
    "default": DEFAULT_THEME,
    "paper": PAPER_THEME,
}


def get_theme(name: str) -> Theme:
    """Look up a registered theme by name."""
    try:
        return REGISTERED_THEMES[name]
    except KeyError:
        available = ", ".join(sorted(REGISTERED_THEMES))
        raise ValueError(f"Unknown theme {name!r}; available: {available}") from None
