"""Ingest articles from the feed sources, link them and persist them."""

import logging
from typing import Any, Optional, Sequence

from sqlalchemy.orm import Session

from article_store.gateway import run_in_transaction
from common.config import PipelineConfig, get_config
from common.errors import PipelineError
from common.metrics import JOB_DURATION_SECONDS, JOB_ERRORS_TOTAL, JOB_RUNS_TOTAL, Metrics
from ingest_articles.detect_language import LanguageClassifier, assign_languages
from ingest_articles.fetch_articles.fetch_articles import fetch_all, resolve_adapters
from ingest_articles.models import IngestSummary
from link_articles.link import resolve_links
from link_articles.similarity import SimilarityScorer

logger = logging.getLogger(__name__)

JOB_NAME = "ingest_articles"


def ingest_articles(
    session: Session,
    adapters: Optional[Sequence[Any]] = None,
    classifier: Optional[LanguageClassifier] = None,
    scorer: Optional[SimilarityScorer] = None,
    metrics: Optional[Metrics] = None,
    config: Optional[PipelineConfig] = None,
) -> IngestSummary:
    """Run one ingestion cycle.

    Fetches every adapter concurrently, classifies drafts without a language,
    links them against the stored articles and persists articles and links
    in a single transaction.

    Raises:
        ScrapeCycleError: If every adapter failed.
        PersistenceError: If the database rejected the write; nothing is kept.
    """
    config = config or get_config()
    metrics = metrics or Metrics()
    if adapters is None:
        adapters = resolve_adapters(config.ingest.sources)

    metrics.inc(JOB_RUNS_TOTAL, JOB_NAME)
    with metrics.timer(JOB_DURATION_SECONDS, JOB_NAME):
        try:
            return _run_cycle(session, adapters, classifier, scorer, metrics, config)
        except PipelineError as e:
            metrics.inc(JOB_ERRORS_TOTAL, JOB_NAME)
            logger.error("Ingestion cycle failed: %s", e)
            raise


def _run_cycle(
    session: Session,
    adapters: Sequence[Any],
    classifier: Optional[LanguageClassifier],
    scorer: Optional[SimilarityScorer],
    metrics: Metrics,
    config: PipelineConfig,
) -> IngestSummary:
    logger.info("Ingesting articles from %d sources", len(adapters))

    result = fetch_all(
        adapters,
        metrics,
        max_workers=config.ingest.max_workers,
        timeout=config.ingest.request_timeout,
    )
    adapter_errors = [str(error) for error in result.errors]
    if not result.articles:
        logger.warning("0 Articles ingested")
        return IngestSummary(
            articles_fetched=0,
            articles_inserted=0,
            links_created=0,
            adapter_errors=adapter_errors,
        )

    assign_languages(result.articles, classifier or LanguageClassifier())

    scorer = scorer or SimilarityScorer(config.similarity)
    link_result = run_in_transaction(
        session,
        lambda s: resolve_links(result.articles, s, scorer, config.link),
    )

    summary = IngestSummary(
        articles_fetched=len(result.articles),
        articles_inserted=link_result.articles_inserted,
        links_created=link_result.links_created,
        adapter_errors=adapter_errors,
    )
    logger.info(
        "%d articles fetched, %d inserted, %d links created",
        summary.articles_fetched,
        summary.articles_inserted,
        summary.links_created,
    )
    return summary
