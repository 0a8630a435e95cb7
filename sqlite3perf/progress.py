"""
Progress Reporting

The generator and the verifier are single threaded loops. While they run, a
ProgressReporter thread samples the loop's ProgressState every few seconds
and writes one throughput line to the output sink. The loop signals
completion exactly once; after complete() returns no further line is
written.

Rates are cumulative: time elapsed since the start of the loop divided by
the current count, not a windowed rate.
"""

import threading
import time
from datetime import datetime
from typing import Callable, Optional

Sink = Callable[[str], None]

DEFAULT_INTERVAL = 2.0


def stdout_sink(message: str) -> None:
    """Print a timestamped log line."""
    print(f"[{datetime.now().strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]}] {message}", flush=True)


def format_duration(seconds: float) -> str:
    """Render a duration in the largest unit that keeps it readable."""
    if seconds <= 0:
        return "0s"
    if seconds < 1e-6:
        return f"{seconds * 1e9:.0f}ns"
    if seconds < 1e-3:
        return f"{seconds * 1e6:.3f}µs"
    if seconds < 1:
        return f"{seconds * 1e3:.3f}ms"
    if seconds < 60:
        return f"{seconds:.3f}s"
    minutes, rest = divmod(seconds, 60)
    if minutes < 60:
        return f"{int(minutes)}m{rest:.3f}s"
    hours, minutes = divmod(int(minutes), 60)
    return f"{hours}h{minutes}m{rest:.3f}s"


class ProgressState:
    """Processed counter of one run.

    Written only by the driving loop, read by the reporter thread. A plain
    int attribute is enough: reads never observe a torn value and a stale
    read only affects the displayed figures.
    """

    def __init__(self, total: Optional[int] = None, start_time: Optional[float] = None):
        self.total = total
        self.start_time = time.perf_counter() if start_time is None else start_time
        self._processed = 0

    @property
    def processed(self) -> int:
        return self._processed

    def increment(self) -> None:
        self._processed += 1

    def elapsed(self, now: Optional[float] = None) -> float:
        return (time.perf_counter() if now is None else now) - self.start_time


class ProgressReporter:
    """Background thread writing periodic progress snapshots.

    Usage:
        state = ProgressState(total=1000)
        with ProgressReporter(state, sink, interval=2, verb="written"):
            for ...:
                state.increment()
    """

    def __init__(
        self,
        state: ProgressState,
        sink: Sink = stdout_sink,
        interval: float = DEFAULT_INTERVAL,
        verb: str = "processed",
        unit: str = "record",
    ):
        if not 0 < interval < float("inf"):
            raise ValueError(f"interval must be positive and finite, got {interval}")
        self.state = state
        self.sink = sink
        self.interval = interval
        self.verb = verb
        self.unit = unit
        self._done = threading.Event()
        # Held while a tick is written and while completion is signalled
        self._lock = threading.Lock()
        self._thread = threading.Thread(target=self._run, name=f"progress-{verb}", daemon=True)

    def start(self) -> "ProgressReporter":
        self._thread.start()
        return self

    def complete(self) -> None:
        """Signal the end of the driving loop. Does not wait for the thread."""
        with self._lock:
            self._done.set()

    def snapshot(self, now: Optional[float] = None) -> str:
        """Format the current progress line."""
        processed = self.state.processed
        total = self.state.total
        elapsed = self.state.elapsed(now)
        avg = elapsed / processed if processed else 0.0
        rate = processed / elapsed if processed and elapsed > 0 else 0.0
        tail = f"avg: {format_duration(avg)}/{self.unit}, {rate:.2f} {self.unit}s/s"

        if total is None:
            return f"{processed:,} {self.unit}s {self.verb}, {tail}"

        width = len(f"{total:,}")
        pct = processed / total * 100 if total else 0.0
        return f"{processed:>{width},}/{total:>{width},} ({pct:6.2f}%) {self.verb}, {tail}"

    def _run(self) -> None:
        if self.state.total == 0:
            return
        while not self._done.wait(self.interval):
            with self._lock:
                if self._done.is_set():
                    return
                self.sink(self.snapshot())

    def __enter__(self) -> "ProgressReporter":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.complete()
