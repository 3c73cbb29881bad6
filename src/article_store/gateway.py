"""Persistence gateway: the only place the pipelines touch the database.

Every function takes an explicit session. Writes are not committed here
unless the function says so; callers own the transaction boundary, either
by committing themselves or through `run_in_transaction`.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Iterable, TypeVar

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from article_store import models as db
from common.datetime import ensure_utc, utc_now
from common.errors import PersistenceError
from common.models import Article, Language, Source

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BATCH_SIZE = 500


def _insert(session: Session, table):
    """Dialect-specific INSERT supporting ON CONFLICT DO NOTHING."""
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise PersistenceError(f"Unsupported database dialect: {dialect}")
    return insert(table)


def _to_values(article: Article) -> dict[str, Any]:
    return {
        "id": article.id,
        "source": article.source.value,
        "title": article.title,
        "description": article.description,
        "url": article.url,
        "published_at": ensure_utc(article.published_at),
        "banner": article.banner,
        "category": list(article.category),
        "language": article.language.value,
    }


def _from_row(row: db.Article) -> Article:
    try:
        language = Language.parse(row.language)
    except ValueError:
        logger.warning("Unknown language %r on article %s", row.language, row.id)
        language = Language.UNKNOWN
    return Article(
        id=row.id,
        source=Source(row.source),
        title=row.title,
        description=row.description,
        url=row.url,
        published_at=ensure_utc(row.published_at),
        banner=row.banner,
        category=list(row.category or []),
        language=language,
    )


def load_all_articles(session: Session) -> list[Article]:
    """Load every persisted article, oldest first."""
    rows = session.scalars(
        select(db.Article).order_by(db.Article.published_at, db.Article.id)
    ).all()
    return [_from_row(row) for row in rows]


def load_articles_since(cutoff: datetime, session: Session) -> list[Article]:
    """Load articles published at or after `cutoff`, oldest first."""
    rows = session.scalars(
        select(db.Article)
        .where(db.Article.published_at >= ensure_utc(cutoff))
        .order_by(db.Article.published_at, db.Article.id)
    ).all()
    return [_from_row(row) for row in rows]


def upsert_articles(articles: Iterable[Article], session: Session) -> int:
    """Insert articles, ignoring any whose id already exists.

    Existing rows are never updated, so re-running a cycle is harmless.

    Returns:
        Number of rows actually inserted.
    """
    inserted = 0
    skipped = 0
    for article in articles:
        stmt = (
            _insert(session, db.Article.__table__)
            .values(**_to_values(article))
            .on_conflict_do_nothing(index_elements=["id"])
        )
        result = session.execute(stmt)
        if result.rowcount and result.rowcount > 0:
            inserted += 1
        else:
            skipped += 1

    logger.info("Upserted articles: %d inserted, %d already present", inserted, skipped)
    return inserted


def append_links(article_id: str, target_ids: Iterable[str], session: Session) -> int:
    """Record similarity edges from `article_id` to each target.

    Self-links, empty ids and edges that already exist are ignored.

    Returns:
        Number of new edges.
    """
    created = 0
    for target_id in dict.fromkeys(target_ids):
        if not target_id or target_id == article_id:
            continue
        stmt = (
            _insert(session, db.ArticleLink.__table__)
            .values(article_id=article_id, linked_article_id=target_id)
            .on_conflict_do_nothing(index_elements=["article_id", "linked_article_id"])
        )
        result = session.execute(stmt)
        if result.rowcount and result.rowcount > 0:
            created += 1
    return created


def load_links(session: Session, article_id: str | None = None) -> list[tuple[str, str]]:
    """Return stored edges as (article_id, linked_article_id) pairs."""
    stmt = select(db.ArticleLink.article_id, db.ArticleLink.linked_article_id)
    if article_id is not None:
        stmt = stmt.where(db.ArticleLink.article_id == article_id)
    stmt = stmt.order_by(db.ArticleLink.article_id, db.ArticleLink.linked_article_id)
    return [(row[0], row[1]) for row in session.execute(stmt).all()]


def run_in_transaction(session: Session, fn: Callable[[Session], T]) -> T:
    """Run `fn` and commit, or roll everything back.

    Raises:
        PersistenceError: If the database rejected any statement.
    """
    try:
        result = fn(session)
        session.commit()
        return result
    except SQLAlchemyError as exc:
        session.rollback()
        raise PersistenceError(f"transaction rolled back: {exc}") from exc
    except Exception:
        session.rollback()
        raise


def delete_all_keyword_links(session: Session) -> int:
    return session.execute(delete(db.ArticleKeyword)).rowcount or 0


def delete_all_keywords(session: Session) -> int:
    return session.execute(delete(db.KeyWord)).rowcount or 0


def bulk_insert_keywords(
    keywords: Iterable[str],
    session: Session,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> dict[str, str]:
    """Insert keyword rows with fresh ids.

    Returns:
        Mapping of keyword string to the id assigned to it.
    """
    now = utc_now()
    rows = [
        {"id": uuid.uuid4().hex, "keyword": keyword, "last_update": now}
        for keyword in keywords
    ]
    for start in range(0, len(rows), batch_size):
        session.execute(insert(db.KeyWord), rows[start:start + batch_size])
    return {row["keyword"]: row["id"] for row in rows}


def resolve_keyword_ids(keywords: Iterable[str], session: Session) -> dict[str, str]:
    """Look up persisted keyword ids by their canonical string."""
    names = list(keywords)
    if not names:
        return {}
    rows = session.execute(
        select(db.KeyWord.keyword, db.KeyWord.id).where(db.KeyWord.keyword.in_(names))
    ).all()
    return {row[0]: row[1] for row in rows}


def bulk_insert_keyword_links(
    rows: list[dict[str, str]],
    session: Session,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> int:
    """Insert keyword/article association rows in batches of at most `batch_size`.

    Each row needs `key_words_id` and `article_id`.
    """
    if batch_size <= 0:
        raise ValueError("batch_size must be positive")
    for start in range(0, len(rows), batch_size):
        session.execute(insert(db.ArticleKeyword), rows[start:start + batch_size])
    return len(rows)


def load_keywords(session: Session) -> dict[str, list[str]]:
    """Return every keyword with the sorted ids of its articles."""
    stmt = (
        select(db.KeyWord.keyword, db.ArticleKeyword.article_id)
        .join(db.ArticleKeyword, db.ArticleKeyword.key_words_id == db.KeyWord.id, isouter=True)
        .order_by(db.KeyWord.keyword, db.ArticleKeyword.article_id)
    )
    result: dict[str, list[str]] = {}
    for keyword, article_id in session.execute(stmt).all():
        articles = result.setdefault(keyword, [])
        if article_id is not None:
            articles.append(article_id)
    return result


def delete_articles_before(cutoff: datetime, session: Session) -> int:
    """Delete articles published before `cutoff` together with their link rows.

    Returns:
        Number of deleted articles.
    """
    stale_ids = select(db.Article.id).where(db.Article.published_at < ensure_utc(cutoff))
    options = {"synchronize_session": False}

    session.execute(
        delete(db.ArticleLink).where(
            db.ArticleLink.article_id.in_(stale_ids)
            | db.ArticleLink.linked_article_id.in_(stale_ids)
        ),
        execution_options=options,
    )
    session.execute(
        delete(db.ArticleKeyword).where(db.ArticleKeyword.article_id.in_(stale_ids)),
        execution_options=options,
    )
    result = session.execute(
        delete(db.Article).where(db.Article.published_at < ensure_utc(cutoff)),
        execution_options=options,
    )
    return result.rowcount or 0


def prune_sparse_keywords(session: Session, min_articles: int = 2) -> int:
    """Delete keywords associated with fewer than `min_articles` articles.

    Returns:
        Number of deleted keywords.
    """
    well_covered = (
        select(db.ArticleKeyword.key_words_id)
        .group_by(db.ArticleKeyword.key_words_id)
        .having(func.count(db.ArticleKeyword.article_id) >= min_articles)
    )
    sparse_ids = session.scalars(
        select(db.KeyWord.id).where(db.KeyWord.id.not_in(well_covered))
    ).all()
    if not sparse_ids:
        return 0

    options = {"synchronize_session": False}
    session.execute(
        delete(db.ArticleKeyword).where(db.ArticleKeyword.key_words_id.in_(sparse_ids)),
        execution_options=options,
    )
    session.execute(
        delete(db.KeyWord).where(db.KeyWord.id.in_(sparse_ids)),
        execution_options=options,
    )
    return len(sparse_ids)
