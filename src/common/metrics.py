"""In-process metrics recorder.

Counters and duration observations are keyed by metric name and a single
label (adapter or job name). Recording never raises and returns nothing the
pipeline depends on; exporters read `snapshot()`.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import defaultdict
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)

# Scraper metrics, labelled by adapter
SCRAPER_REQUESTS_TOTAL = "scraper_requests_total"
SCRAPER_ERRORS_TOTAL = "scraper_errors_total"
SCRAPER_DURATION_SECONDS = "scraper_duration_seconds"
ARTICLES_SCRAPED_TOTAL = "articles_scraped_total"

# Job metrics, labelled by job name
JOB_RUNS_TOTAL = "cron_job_runs_total"
JOB_ERRORS_TOTAL = "cron_job_errors_total"
JOB_DURATION_SECONDS = "cron_job_duration_seconds"


class Metrics:
    """Thread-safe counters and duration observations.

    Adapters record from worker threads, so every update takes the lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[tuple[str, str], float] = defaultdict(float)
        self._observations: dict[tuple[str, str], list[float]] = defaultdict(list)

    def inc(self, name: str, label: str, value: float = 1.0) -> None:
        with self._lock:
            self._counters[(name, label)] += value
        logger.debug("metric %s{%s} += %s", name, label, value)

    def observe(self, name: str, label: str, value: float) -> None:
        with self._lock:
            self._observations[(name, label)].append(value)
        logger.debug("metric %s{%s} observed %.3f", name, label, value)

    @contextmanager
    def timer(self, name: str, label: str) -> Iterator[None]:
        """Observe the wall-clock duration of the enclosed block, even on error."""
        start = time.monotonic()
        try:
            yield
        finally:
            self.observe(name, label, time.monotonic() - start)

    def counter(self, name: str, label: str) -> float:
        with self._lock:
            return self._counters.get((name, label), 0.0)

    def observations(self, name: str, label: str) -> list[float]:
        with self._lock:
            return list(self._observations.get((name, label), []))

    def snapshot(self) -> dict[str, dict[str, float]]:
        """Counter values grouped by metric name."""
        result: dict[str, dict[str, float]] = defaultdict(dict)
        with self._lock:
            for (name, label), value in sorted(self._counters.items()):
                result[name][label] = value
        return dict(result)
