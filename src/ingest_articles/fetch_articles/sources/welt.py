"""WELT feed adapter."""

from __future__ import annotations

import logging
from datetime import datetime

from common.models import Article, Language, Source, make_article_id
from ingest_articles.fetch_articles.rss import (
    entry_categories,
    entry_guid,
    extension_value,
    fetch_feed,
    media_image,
    parse_entries,
)

logger = logging.getLogger(__name__)

SOURCE = Source.WELT
FEED_URL = "https://www.welt.de/feeds/topnews.rss"
LANGUAGE = Language.DE


def fetch_articles(timeout: float | None = None) -> list[Article]:
    """Fetch articles from the WELT top news feed."""
    feed = fetch_feed(FEED_URL, timeout)
    return parse_entries(feed.entries, SOURCE, parse_entry)


def parse_entry(entry, published_at: datetime) -> Article | None:
    if extension_value(entry, "premium").lower() == "true":
        logger.debug("Skipping premium article %s", entry_guid(entry))
        return None

    categories = entry_categories(entry)
    topic = extension_value(entry, "topic")
    if topic:
        categories.append(topic)

    return Article(
        id=make_article_id(SOURCE, entry_guid(entry)),
        source=SOURCE,
        title=entry.get("title", ""),
        description=entry.get("summary", ""),
        url=entry.get("link", ""),
        published_at=published_at,
        banner=media_image(entry),
        category=categories,
        language=LANGUAGE,
    )
