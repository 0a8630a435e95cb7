"""
Benchmark (Verifier)

Reads every row of the 'bench' table, decodes the stored random value from
hex, hashes it with SHA256 and compares the result with the stored hash.

- A value that is not valid hex is logged and skipped.
- A hash mismatch aborts the run (HashMismatchError).
- Query and row iteration errors abort the run (StoreError).

Usage:
    bench(SQLiteAdapter("./sqlite3perf.db"))
"""

import time

from .adapters import StorageAdapter
from .progress import DEFAULT_INTERVAL, ProgressReporter, ProgressState, Sink, format_duration, stdout_sink
from .records import verify_row
from .results import RunResult, rates


def bench(adapter: StorageAdapter, interval: float = DEFAULT_INTERVAL, sink: Sink = stdout_sink) -> RunResult:
    """Verify all persisted records and time the scan."""
    sink("Running benchmark")

    with adapter:
        start = time.perf_counter()
        rows = adapter.scan()
        sink(f"Time after query: {format_duration(time.perf_counter() - start)}")

        sink("Beginning loop")
        state = ProgressState()
        skipped = 0
        first = True
        with ProgressReporter(state, sink, interval, verb="verified", unit="row"):
            for row_id, rand, stored_hash in rows:
                if first:
                    first = False
                    sink(
                        f"Accessing the first result set\n\tID {row_id},\n\trand: {rand},\n\thash: {stored_hash}\n"
                        f"took {format_duration(time.perf_counter() - state.start_time)}"
                    )

                try:
                    verify_row(row_id, rand, stored_hash)
                except (ValueError, TypeError) as e:
                    sink(f"Could not decode hex string of original value (ID {row_id}) to bytes: {e}")
                    skipped += 1
                    continue

                state.increment()
            stop = time.perf_counter()

    elapsed = stop - start
    loop_seconds = stop - state.start_time
    per_record, per_second = rates(state.processed, elapsed)

    sink(f"{state.processed:,} rows processed, {skipped:,} skipped")
    sink(f"Finished loop after {format_duration(loop_seconds)}")
    sink(f"Average {format_duration(per_record)} per record, {format_duration(elapsed)} overall")

    return RunResult(
        command="bench",
        engine=adapter.engine,
        db_path=adapter.db_path,
        total=state.processed + skipped,
        processed=state.processed,
        skipped=skipped,
        elapsed_seconds=elapsed,
        loop_seconds=loop_seconds,
        seconds_per_record=per_record,
        records_per_second=per_second,
    )
