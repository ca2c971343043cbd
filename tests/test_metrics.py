from prometheus_client import CollectorRegistry

from textcrawl.metrics import Metrics, StatsLogger
from textcrawl.prometheus_exporter import PrometheusExporter


def test_metrics_records_fetches_and_pages():
    m = Metrics()

    m.record_fetch(ok=True, bytes_read=1024, fetch_ms=50.0)
    m.record_page()
    totals, elapsed = m.snapshot()

    assert totals.fetches == 1
    assert totals.pages == 1
    assert totals.bytes == 1024
    assert totals.errors == 0
    assert totals.fetch_ms_sum == 50.0
    assert elapsed > 0

    m.record_fetch(ok=False, bytes_read=0, fetch_ms=100.0)
    totals, _ = m.snapshot()

    assert totals.fetches == 2
    assert totals.pages == 1
    assert totals.errors == 1
    assert totals.fetch_ms_sum == 150.0


def test_snapshot_is_a_copy():
    m = Metrics()
    totals, _ = m.snapshot()
    m.record_page()
    assert totals.pages == 0


def test_stats_logger_stops():
    lines = []
    logger = StatsLogger(Metrics(), 0.5, lambda fmt, *args: lines.append(fmt % args))
    logger.start()
    logger.stop()
    logger.join(timeout=2.0)
    assert not logger.is_alive()


def test_prometheus_exporter_publishes_deltas():
    registry = CollectorRegistry()
    m = Metrics()
    exporter = PrometheusExporter(m, registry=registry)

    m.record_fetch(ok=True, bytes_read=100, fetch_ms=20.0)
    m.record_fetch(ok=False, bytes_read=0, fetch_ms=40.0)
    m.record_page()
    exporter.update()

    assert registry.get_sample_value("textcrawl_fetches_total") == 2
    assert registry.get_sample_value("textcrawl_pages_total") == 1
    assert registry.get_sample_value("textcrawl_bytes_total") == 100
    assert registry.get_sample_value("textcrawl_errors_total") == 1
    assert registry.get_sample_value("textcrawl_avg_fetch_duration_seconds") == 0.03

    m.record_page()
    exporter.update()
    assert registry.get_sample_value("textcrawl_pages_total") == 2
    assert registry.get_sample_value("textcrawl_fetches_total") == 2


def test_stats_logger_line_format():
    lines = []
    m = Metrics()
    m.record_fetch(ok=True, bytes_read=10, fetch_ms=5.0)
    m.record_page()
    stats = StatsLogger(m, 0.5, lambda fmt, *args: lines.append(fmt % args))
    stats.start()
    stats.join(timeout=1.5)
    stats.stop()
    stats.join(timeout=2.0)

    assert lines
    assert lines[0].startswith("Perf: fetches=1, pages=1, errors=0, MB=0.00")
