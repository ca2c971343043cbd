import threading
import time
from dataclasses import dataclass, replace


@dataclass
class Totals:
    fetches: int = 0
    pages: int = 0
    bytes: int = 0
    errors: int = 0
    fetch_ms_sum: float = 0.0


class Metrics:
    """Crawl counters shared between fetch workers and the page stream."""

    def __init__(self):
        self._totals = Totals()
        self._lock = threading.Lock()
        self._start = time.time()

    def record_fetch(self, ok: bool, bytes_read: int, fetch_ms: float) -> None:
        with self._lock:
            self._totals.fetches += 1
            self._totals.bytes += max(0, bytes_read)
            if not ok:
                self._totals.errors += 1
            self._totals.fetch_ms_sum += fetch_ms

    def record_page(self) -> None:
        with self._lock:
            self._totals.pages += 1

    def snapshot(self) -> tuple[Totals, float]:
        with self._lock:
            t = replace(self._totals)
        elapsed = max(1e-6, time.time() - self._start)
        return t, elapsed


class StatsLogger(threading.Thread):
    daemon = True

    def __init__(self, metrics: Metrics, interval_s: float, log_fn):
        super().__init__(name="stats-logger")
        self._metrics = metrics
        self._interval = max(0.5, interval_s)
        self._log = log_fn
        self._stop_event = threading.Event()

    def run(self) -> None:
        while not self._stop_event.wait(self._interval):
            totals, elapsed = self._metrics.snapshot()
            self._log(
                "Perf: fetches=%d, pages=%d, errors=%d, MB=%.2f, avg_fetch_ms=%.1f, pages/sec=%.2f",
                totals.fetches,
                totals.pages,
                totals.errors,
                totals.bytes / (1024 * 1024),
                totals.fetch_ms_sum / max(1, totals.fetches),
                totals.pages / elapsed,
            )

    def stop(self) -> None:
        self._stop_event.set()
