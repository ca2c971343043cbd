import logging
import threading
from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, start_http_server

from .metrics import Metrics


logger = logging.getLogger(__name__)


class PrometheusExporter:
    """Mirror Metrics totals into prometheus_client collectors."""

    def __init__(
        self,
        metrics: Metrics,
        port: int = 8000,
        registry: Optional[CollectorRegistry] = None,
        update_interval: float = 5.0,
    ) -> None:
        self.metrics = metrics
        self.port = port
        self.registry = registry or REGISTRY
        self.update_interval = update_interval
        self._updater: threading.Thread | None = None
        self._stop_event = threading.Event()

        self.fetches_total = Counter(
            "textcrawl_fetches_total", "Total number of page fetches", registry=self.registry
        )
        self.pages_total = Counter(
            "textcrawl_pages_total", "Total number of non-empty pages yielded", registry=self.registry
        )
        self.bytes_total = Counter(
            "textcrawl_bytes_total", "Total number of bytes downloaded", registry=self.registry
        )
        self.errors_total = Counter(
            "textcrawl_errors_total", "Total number of failed fetches", registry=self.registry
        )
        self.pages_per_second = Gauge(
            "textcrawl_pages_per_second", "Pages yielded per second since start", registry=self.registry
        )
        self.avg_fetch_duration_seconds = Gauge(
            "textcrawl_avg_fetch_duration_seconds", "Average fetch duration in seconds", registry=self.registry
        )

        self._last_fetches = 0
        self._last_pages = 0
        self._last_bytes = 0
        self._last_errors = 0

    def start(self) -> None:
        start_http_server(self.port, registry=self.registry)
        logger.info("Prometheus metrics server started on port %d", self.port)

        self._updater = threading.Thread(
            target=self._update_metrics_loop,
            name="prometheus-updater",
            daemon=True,
        )
        self._updater.start()

    def _update_metrics_loop(self) -> None:
        while not self._stop_event.is_set():
            self.update()
            self._stop_event.wait(self.update_interval)

    def update(self) -> None:
        totals, elapsed = self.metrics.snapshot()

        for counter, current, last in (
            (self.fetches_total, totals.fetches, self._last_fetches),
            (self.pages_total, totals.pages, self._last_pages),
            (self.bytes_total, totals.bytes, self._last_bytes),
            (self.errors_total, totals.errors, self._last_errors),
        ):
            if current > last:
                counter.inc(current - last)

        self.pages_per_second.set(totals.pages / elapsed)
        if totals.fetches > 0:
            self.avg_fetch_duration_seconds.set(totals.fetch_ms_sum / totals.fetches / 1000.0)

        self._last_fetches = totals.fetches
        self._last_pages = totals.pages
        self._last_bytes = totals.bytes
        self._last_errors = totals.errors

    def stop(self) -> None:
        self._stop_event.set()
        if self._updater:
            self._updater.join(timeout=2.0)
        # Publish whatever accumulated since the last tick.
        self.update()
