"""Centralized domain constants for the belief filter.

Fixed model parameters that are shared by several modules live here. Values
that a caller may want to tune per episode are mirrored as defaults on
:class:`pacman_belief.config.types.FilterConfig`.
"""

from __future__ import annotations

import math

STOP_PROBABILITY = 0.2
"""Probability that a ghost stays in place during one tick."""

SD_PACMAN_MEASUREMENT = 0.5
"""Noise scale (cells) of the absolute pacman position measurement."""

SD_GHOST_DIST_MEASUREMENT = 0.5
"""Noise scale (cells) of the ghost-minus-pacman displacement measurement."""

ACTION_SUCCESS_PROBABILITY = 1.0
"""Probability that pacman's chosen move is executed instead of stopping."""

WARNING_INTERVAL_SECONDS = 1.0
"""Minimum spacing between repeated degenerate-belief warnings."""

UNREACHABLE = math.inf
"""Distance reported for unreachable, wall, or out-of-bounds cell pairs."""

NO_PATH = -1
"""Entry stored in the dense distance table for an unreachable pair."""

FEATURE_SCALE = 10.0
"""Divisor applied to count/distance features before they reach the learner."""

GHOST_PROXIMITY_STEPS = 2
"""Default step horizon for the soft ghost-proximity feature."""

FLUSH_THRESHOLD = 4_096
"""Flush trace rows to Parquet once this in-memory row count is reached."""
