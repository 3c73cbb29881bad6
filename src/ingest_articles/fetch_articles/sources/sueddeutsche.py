"""Süddeutsche Zeitung feed adapter."""

from __future__ import annotations

from datetime import datetime

from common.models import Article, Source, make_article_id
from ingest_articles.clean_articles.clean import extract_image_url
from ingest_articles.fetch_articles.rss import entry_categories, entry_guid, fetch_feed, parse_entries

SOURCE = Source.SUEDDEUTSCHE
FEED_URL = "https://rss.sueddeutsche.de/rss/Topthemen"
LANGUAGE = None


def fetch_articles(timeout: float | None = None) -> list[Article]:
    """Fetch articles from the Süddeutsche top stories feed."""
    feed = fetch_feed(FEED_URL, timeout)
    return parse_entries(feed.entries, SOURCE, parse_entry)


def parse_entry(entry, published_at: datetime) -> Article:
    # The teaser image sits inside the description HTML
    raw_description = entry.get("summary", "")
    return Article(
        id=make_article_id(SOURCE, entry_guid(entry)),
        source=SOURCE,
        title=entry.get("title", ""),
        description=raw_description,
        url=entry.get("link", ""),
        published_at=published_at,
        banner=extract_image_url(raw_description),
        category=entry_categories(entry),
    )
