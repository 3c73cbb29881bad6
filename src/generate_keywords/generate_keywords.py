"""Rebuild the keyword tags from the articles of the trailing window."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from article_store.gateway import (
    bulk_insert_keyword_links,
    bulk_insert_keywords,
    delete_all_keyword_links,
    delete_all_keywords,
    load_articles_since,
    resolve_keyword_ids,
    run_in_transaction,
)
from common.config import PipelineConfig, get_config
from common.datetime import ensure_utc, utc_now
from common.errors import PipelineError
from common.metrics import JOB_DURATION_SECONDS, JOB_ERRORS_TOTAL, JOB_RUNS_TOTAL, Metrics
from generate_keywords.keywords import mine_keywords
from generate_keywords.models import KeywordCandidate, MiningSummary
from link_articles.similarity import SimilarityScorer

logger = logging.getLogger(__name__)

JOB_NAME = "generate_keywords"


def persist_keywords(
    keywords: list[KeywordCandidate],
    session: Session,
    batch_size: int = 500,
) -> tuple[int, int]:
    """Replace every stored keyword and association with `keywords`.

    Does not commit; run it inside `run_in_transaction`.

    Returns:
        (keywords inserted, associations inserted)
    """
    removed_links = delete_all_keyword_links(session)
    removed_keywords = delete_all_keywords(session)
    logger.info("Removed %d keywords and %d associations", removed_keywords, removed_links)

    if not keywords:
        return 0, 0

    names = [keyword.keyword for keyword in keywords]
    bulk_insert_keywords(names, session, batch_size)
    ids = resolve_keyword_ids(names, session)

    rows = [
        {"key_words_id": ids[keyword.keyword], "article_id": article_id}
        for keyword in keywords
        if keyword.keyword in ids
        for article_id in sorted(keyword.article_ids)
    ]
    associations = bulk_insert_keyword_links(rows, session, batch_size)
    return len(ids), associations


def generate_keywords(
    session: Session,
    as_of: Optional[datetime] = None,
    scorer: Optional[SimilarityScorer] = None,
    metrics: Optional[Metrics] = None,
    config: Optional[PipelineConfig] = None,
) -> MiningSummary:
    """Mine keywords from articles published in the window ending at `as_of`.

    The previous keyword set is replaced atomically; on failure nothing changes.

    Raises:
        PersistenceError: If the rebuild transaction was rolled back.
    """
    config = config or get_config()
    metrics = metrics or Metrics()

    metrics.inc(JOB_RUNS_TOTAL, JOB_NAME)
    with metrics.timer(JOB_DURATION_SECONDS, JOB_NAME):
        try:
            return _run_cycle(session, as_of, scorer, config)
        except PipelineError as e:
            metrics.inc(JOB_ERRORS_TOTAL, JOB_NAME)
            logger.error("Keyword generation failed: %s", e)
            raise


def _run_cycle(
    session: Session,
    as_of: Optional[datetime],
    scorer: Optional[SimilarityScorer],
    config: PipelineConfig,
) -> MiningSummary:
    settings = config.keywords
    cutoff = ensure_utc(as_of or utc_now()) - timedelta(days=settings.window_days)

    articles = load_articles_since(cutoff, session)
    if as_of is not None:
        articles = [article for article in articles if article.published_at <= ensure_utc(as_of)]
    logger.info("Loaded %d articles published since %s", len(articles), cutoff.isoformat())

    scorer = scorer or SimilarityScorer(config.similarity)
    keywords, deduplicated, clusters = mine_keywords(
        articles,
        scorer,
        threshold=settings.cluster_threshold,
        top_k=settings.top_k,
    )

    persisted, associations = run_in_transaction(
        session,
        lambda s: persist_keywords(keywords, s, settings.batch_size),
    )

    summary = MiningSummary(
        articles_loaded=len(articles),
        articles_deduplicated=deduplicated,
        clusters=clusters,
        keywords_persisted=persisted,
        associations_persisted=associations,
    )
    logger.info(
        "Persisted %d keywords with %d associations from %d clusters",
        summary.keywords_persisted,
        summary.associations_persisted,
        summary.clusters,
    )
    return summary
