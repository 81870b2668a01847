"""Visualization layer: themes, renderers and CLI."""

from pacman_belief.viz.cli import main
from pacman_belief.viz.render import (
    format_belief,
    format_truth_map,
    render_belief_heatmap,
    render_state,
)
from pacman_belief.viz.theme import (
    DEFAULT_THEME,
    PAPER_THEME,
    REGISTERED_THEMES,
    Theme,
    get_theme,
)

__all__ = [
    "DEFAULT_THEME",
    "PAPER_THEME",
    "REGISTERED_THEMES",
    "Theme",
    "format_belief",
    "format_truth_map",
    "get_theme",
    "main",
    "render_belief_heatmap",
    "render_state",
]
