"""Tests for common.metrics module."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from common.metrics import JOB_DURATION_SECONDS, SCRAPER_REQUESTS_TOTAL, Metrics


class TestMetrics:
    def test_counter_defaults_to_zero(self) -> None:
        assert Metrics().counter(SCRAPER_REQUESTS_TOTAL, "faz") == 0.0

    def test_inc(self) -> None:
        metrics = Metrics()
        metrics.inc(SCRAPER_REQUESTS_TOTAL, "faz")
        metrics.inc(SCRAPER_REQUESTS_TOTAL, "faz", 2)
        assert metrics.counter(SCRAPER_REQUESTS_TOTAL, "faz") == 3.0

    def test_concurrent_inc(self) -> None:
        metrics = Metrics()
        with ThreadPoolExecutor(max_workers=8) as executor:
            for _ in range(200):
                executor.submit(metrics.inc, SCRAPER_REQUESTS_TOTAL, "taz")
        assert metrics.counter(SCRAPER_REQUESTS_TOTAL, "taz") == 200.0

    def test_timer_records_on_error(self) -> None:
        metrics = Metrics()
        with pytest.raises(RuntimeError):
            with metrics.timer(JOB_DURATION_SECONDS, "ingest_articles"):
                raise RuntimeError("boom")
        observed = metrics.observations(JOB_DURATION_SECONDS, "ingest_articles")
        assert len(observed) == 1
        assert observed[0] >= 0.0

    def test_snapshot_groups_by_name(self) -> None:
        metrics = Metrics()
        metrics.inc(SCRAPER_REQUESTS_TOTAL, "faz")
        metrics.inc(SCRAPER_REQUESTS_TOTAL, "welt")
        assert metrics.snapshot() == {SCRAPER_REQUESTS_TOTAL: {"faz": 1.0, "welt": 1.0}}
