"""Concurrent fan-out over the source adapters."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Optional, Sequence

from common.errors import AdapterError, ScrapeCycleError
from common.metrics import (
    ARTICLES_SCRAPED_TOTAL,
    SCRAPER_DURATION_SECONDS,
    SCRAPER_ERRORS_TOTAL,
    SCRAPER_REQUESTS_TOTAL,
    Metrics,
)
from common.models import Article
from ingest_articles.fetch_articles.sources import SOURCES, get_source_module
from ingest_articles.models import FetchResult

logger = logging.getLogger(__name__)


def resolve_adapters(source_ids: Optional[Sequence[str]] = None) -> list[Any]:
    """Adapter modules for the given source keys, or every registered source."""
    if not source_ids:
        return list(SOURCES.values())
    return [get_source_module(source_id) for source_id in source_ids]


def adapter_name(adapter) -> str:
    return adapter.SOURCE.value.lower()


def _run_adapter(adapter, metrics: Metrics, timeout: Optional[float]) -> list[Article]:
    name = adapter_name(adapter)
    metrics.inc(SCRAPER_REQUESTS_TOTAL, name)
    with metrics.timer(SCRAPER_DURATION_SECONDS, name):
        try:
            articles = adapter.fetch_articles(timeout=timeout)
        except Exception as e:
            metrics.inc(SCRAPER_ERRORS_TOTAL, name)
            logger.error("Failed to fetch articles from %s: %s", name, e)
            raise AdapterError(name, e) from e

    metrics.inc(ARTICLES_SCRAPED_TOTAL, name, len(articles))
    logger.info("Found %d articles from %s", len(articles), name)
    return articles


def fetch_all(
    adapters: Sequence[Any],
    metrics: Optional[Metrics] = None,
    max_workers: int = 0,
    timeout: Optional[float] = None,
) -> FetchResult:
    """Run every adapter concurrently and gather what they produce.

    A failing adapter never stops the others; its error is collected instead.
    Results keep the order of `adapters` regardless of completion order.
    `timeout` bounds each adapter's HTTP request; None uses the installed config.

    Raises:
        ScrapeCycleError: If no article was produced and at least one adapter failed.
    """
    metrics = metrics or Metrics()
    if not adapters:
        logger.warning("No adapters configured")
        return FetchResult()

    workers = max_workers if max_workers > 0 else len(adapters)
    batches: list[Optional[list[Article]]] = [None] * len(adapters)
    failures: list[Optional[AdapterError]] = [None] * len(adapters)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        future_map = {
            executor.submit(_run_adapter, adapter, metrics, timeout): idx
            for idx, adapter in enumerate(adapters)
        }
        for future in as_completed(future_map):
            idx = future_map[future]
            try:
                batches[idx] = future.result()
            except AdapterError as e:
                failures[idx] = e

    articles = [article for batch in batches if batch for article in batch]
    errors = [error for error in failures if error is not None]

    if not articles and errors:
        raise ScrapeCycleError(errors)

    logger.info(
        "Total articles collected: %d (%d of %d adapters failed)",
        len(articles),
        len(errors),
        len(adapters),
    )
    return FetchResult(articles=articles, errors=errors)
