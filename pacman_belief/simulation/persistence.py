"""Parquet persistence helper for the replay trace stream."""

from __future__ import annotations

from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from pacman_belief.io.schemas import TRACE_SCHEMA


def new_trace_columns() -> dict[str, list[object]]:
    """Empty column buffers matching ``TRACE_SCHEMA``."""
    return {field.name: [] for field in TRACE_SCHEMA}


def flush_trace_columns(
    trace_columns: dict[str, list[object]],
    trace_log_path: Path,
    trace_writer: pq.ParquetWriter | None,
) -> pq.ParquetWriter | None:
    """Write accumulated trace rows to Parquet and clear in-memory buffers."""
    if not trace_columns["tick"]:
        return trace_writer
    table = pa.Table.from_pydict(trace_columns, schema=TRACE_SCHEMA)
    if trace_writer is None:
        trace_writer = pq.ParquetWriter(trace_log_path, TRACE_SCHEMA)
    trace_writer.write_table(table)
    for values in trace_columns.values():
        values.clear()
    return trace_writer
