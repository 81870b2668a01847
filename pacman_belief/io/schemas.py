"""Parquet schema definitions for replay artifacts.

Every module that writes or reads a trace log works against the column
contract defined here.
"""

from __future__ import annotations

import pyarrow as pa

from pacman_belief.metrics.features import FEATURE_NAMES

TRACE_SCHEMA_VERSION = 1

# One row per predict tick, recorded just before the tick is applied.
TRACE_SCHEMA = pa.schema(
    [
        ("episode_id", pa.string()),
        ("tick", pa.int64()),
        ("action", pa.string()),
        ("pacman_x", pa.int64()),
        ("pacman_y", pa.int64()),
        *[(name, pa.float64()) for name in FEATURE_NAMES],
        ("ghosts_within_n", pa.int64()),
        ("probability_ghost_within_n", pa.float64()),
        ("is_finished", pa.bool_()),
    ],
    metadata={"schema_version": str(TRACE_SCHEMA_VERSION)},
)

TRACE_COLUMN_NAMES: list[str] = [field.name for field in TRACE_SCHEMA]
