"""Handelsblatt feed adapter."""

from __future__ import annotations

from datetime import datetime

from common.models import Article, Source, make_article_id
from ingest_articles.fetch_articles.rss import (
    enclosure_image,
    entry_categories,
    entry_guid,
    fetch_feed,
    parse_entries,
)

SOURCE = Source.HANDELSBLATT
FEED_URL = "https://www.handelsblatt.com/contentexport/feed/schlagzeilen"
LANGUAGE = None


def fetch_articles(timeout: float | None = None) -> list[Article]:
    """Fetch articles from the Handelsblatt headline feed."""
    feed = fetch_feed(FEED_URL, timeout)
    return parse_entries(feed.entries, SOURCE, parse_entry)


def parse_entry(entry, published_at: datetime) -> Article:
    # Only the primary section is meaningful
    categories = entry_categories(entry)[:1]
    return Article(
        id=make_article_id(SOURCE, entry_guid(entry)),
        source=SOURCE,
        title=entry.get("title", ""),
        description=entry.get("summary", ""),
        url=entry.get("link", ""),
        published_at=published_at,
        banner=enclosure_image(entry),
        category=categories,
    )
