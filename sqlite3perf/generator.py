"""
Record Generator

(Re-)builds the 'bench' table: the table is DROPPED, recreated and filled
with `num_recs` records, inserted one row at a time in ascending ID order.
Each insert commits on its own, there is no batching.

Usage:
    generate(SQLiteAdapter("./sqlite3perf.db"), 100000, vacuum=True)
"""

import os
import time
from typing import Callable

from .adapters import TABLE_NAME, StorageAdapter
from .errors import ConfigError, StoreError
from .progress import DEFAULT_INTERVAL, ProgressReporter, ProgressState, Sink, format_duration, stdout_sink
from .records import new_record
from .results import RunResult, rates


def generate(
    adapter: StorageAdapter,
    num_recs: int,
    interval: float = DEFAULT_INTERVAL,
    vacuum: bool = False,
    sink: Sink = stdout_sink,
    random_bytes: Callable[[int], bytes] = os.urandom,
) -> RunResult:
    """Generate `num_recs` records. Any store or randomness error is fatal."""
    if num_recs < 0:
        raise ConfigError(f"Number of records must not be negative, got {num_recs}")

    sink(f"Generating {num_recs:,} records")

    sink("Opening database")
    with adapter:
        sink(f"Dropping table '{TABLE_NAME}' if already present")
        adapter.drop_table()

        sink(f"(Re-)creating table '{TABLE_NAME}'")
        adapter.create_table()

        state = ProgressState(total=num_recs)
        sink("Starting inserts")
        with ProgressReporter(state, sink, interval, verb="written"):
            for i in range(num_recs):
                adapter.insert(new_record(i, random_bytes))
                state.increment()
            stop = time.perf_counter()

        duration = stop - state.start_time
        per_record, per_second = rates(num_recs, duration)
        pct = state.processed / num_recs * 100 if num_recs else 0.0
        sink(f"{state.processed:,}/{num_recs:,} ({pct:6.2f}%) written in {format_duration(duration)}")
        sink(f"Average time per record: {format_duration(per_record)}, {per_second:.2f} records/s")

        vacuum_seconds = None
        if vacuum:
            vacuum_seconds = _vacuum(adapter, sink)

    return RunResult(
        command="generate",
        engine=adapter.engine,
        db_path=adapter.db_path,
        total=num_recs,
        processed=state.processed,
        elapsed_seconds=duration,
        loop_seconds=duration,
        seconds_per_record=per_record,
        records_per_second=per_second,
        vacuum_seconds=vacuum_seconds,
    )


def _vacuum(adapter: StorageAdapter, sink: Sink) -> float:
    """Compact the database file. Failures are reported, never raised."""
    sink("Vacuuming database file")
    start = time.perf_counter()
    try:
        adapter.vacuum()
    except StoreError as e:
        sink(f"Vacuuming database caused an error: {e}")
        sink("Proceed with according caution.")
    took = time.perf_counter() - start
    sink(f"Vacuum took {format_duration(took)}")
    return took
