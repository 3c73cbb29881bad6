"""Retention job: drop articles older than the retention window."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from article_store.gateway import delete_articles_before, prune_sparse_keywords, run_in_transaction
from common.datetime import ensure_utc, utc_now
from common.errors import PipelineError
from common.metrics import JOB_DURATION_SECONDS, JOB_ERRORS_TOTAL, JOB_RUNS_TOTAL, Metrics

logger = logging.getLogger(__name__)

JOB_NAME = "cleanup_articles"
DEFAULT_RETENTION_DAYS = 7


def _delete_stale(session: Session, cutoff: datetime) -> int:
    deleted = delete_articles_before(cutoff, session)
    if deleted == 0:
        return 0
    pruned = prune_sparse_keywords(session, min_articles=2)
    logger.info("Pruned %d keywords left with fewer than 2 articles", pruned)
    return deleted


def cleanup_old_articles(
    session: Session,
    older_than_days: int = DEFAULT_RETENTION_DAYS,
    now: Optional[datetime] = None,
    metrics: Optional[Metrics] = None,
) -> int:
    """Delete articles published more than `older_than_days` ago.

    Their links (in either direction) and keyword associations go with them.
    Non-positive values fall back to the default retention.

    Returns:
        Number of deleted articles.
    """
    metrics = metrics or Metrics()
    if older_than_days <= 0:
        older_than_days = DEFAULT_RETENTION_DAYS
    cutoff = ensure_utc(now or utc_now()) - timedelta(days=older_than_days)

    metrics.inc(JOB_RUNS_TOTAL, JOB_NAME)
    with metrics.timer(JOB_DURATION_SECONDS, JOB_NAME):
        try:
            deleted = run_in_transaction(session, lambda s: _delete_stale(s, cutoff))
        except PipelineError as e:
            metrics.inc(JOB_ERRORS_TOTAL, JOB_NAME)
            logger.error("Cleanup failed: %s", e)
            raise

    if deleted == 0:
        logger.info("no old articles found")
    else:
        logger.info("Deleted %d articles published before %s", deleted, cutoff.isoformat())
    return deleted
