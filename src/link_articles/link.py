"""Link newly ingested articles to similar articles and persist them."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from article_store.gateway import append_links, load_all_articles, upsert_articles
from common.config import LinkConfig
from common.models import Article
from link_articles.similarity import SimilarityScorer

logger = logging.getLogger(__name__)


@dataclass
class LinkResult:
    articles_inserted: int
    links_found: int
    links_created: int


def find_links(
    new_articles: list[Article],
    existing_articles: list[Article],
    scorer: SimilarityScorer,
    threshold: float,
) -> int:
    """Append the ids of similar articles to each new article's `linked_to`.

    Each new article is compared against every existing article and against
    the new articles after it in the batch, so every unordered pair within the
    batch is scored once. Stored copies of batch articles are left to the
    in-batch scan, which keeps re-ingestion from adding reverse edges.
    Returns the number of edges found.
    """
    batch_ids = {article.id for article in new_articles}
    existing_articles = [other for other in existing_articles if other.id not in batch_ids]

    found = 0
    for i, article in enumerate(new_articles):
        for other in existing_articles:
            if other.id != article.id and scorer.is_similar(article, other, threshold):
                article.linked_to.append(other.id)
                found += 1

        for other in new_articles[i + 1:]:
            if other.id != article.id and scorer.is_similar(article, other, threshold):
                article.linked_to.append(other.id)
                found += 1

    logger.info(
        "Found %d links for %d new articles against %d existing",
        found,
        len(new_articles),
        len(existing_articles),
    )
    return found


def collect_unique_articles(
    new_articles: list[Article],
    existing_articles: list[Article],
) -> list[Article]:
    """New articles plus every article they link to, each id once."""
    by_id = {article.id: article for article in existing_articles if article.id}
    by_id.update((article.id, article) for article in new_articles if article.id)

    unique: dict[str, Article] = {}
    for article in new_articles:
        if not article.id:
            continue
        unique[article.id] = article
        for linked_id in article.linked_to:
            linked = by_id.get(linked_id)
            if linked is not None:
                unique.setdefault(linked_id, linked)
    return list(unique.values())


def save_links(new_articles: list[Article], session: Session, symmetric: bool = False) -> int:
    """Persist `linked_to` edges, skipping targets without an identity.

    With `symmetric`, the reverse edge is written as well.
    """
    created = 0
    for article in new_articles:
        valid = [linked_id for linked_id in article.linked_to if linked_id]
        if not valid:
            continue
        created += append_links(article.id, valid, session)
        if symmetric:
            for linked_id in valid:
                created += append_links(linked_id, [article.id], session)
    return created


def resolve_links(
    new_articles: list[Article],
    session: Session,
    scorer: SimilarityScorer,
    config: LinkConfig | None = None,
) -> LinkResult:
    """Link, upsert and persist edges for a batch of new articles.

    Nothing is committed; the caller owns the transaction.
    """
    config = config or LinkConfig()
    if not new_articles:
        return LinkResult(articles_inserted=0, links_found=0, links_created=0)

    existing = load_all_articles(session)
    found = find_links(new_articles, existing, scorer, config.threshold)

    to_upsert = collect_unique_articles(new_articles, existing)
    inserted = upsert_articles(to_upsert, session)
    created = save_links(new_articles, session, symmetric=config.symmetric)

    logger.info("Persisted %d new links (%d found)", created, found)
    return LinkResult(articles_inserted=inserted, links_found=found, links_created=created)
