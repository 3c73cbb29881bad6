"""taz feed adapter."""

from __future__ import annotations

from datetime import datetime

from common.models import Article, Language, Source, make_article_id
from ingest_articles.clean_articles.clean import strip_cdata
from ingest_articles.fetch_articles.rss import entry_guid, fetch_feed, media_image, parse_entries

SOURCE = Source.TAZ
FEED_URL = "https://taz.de/!p4608;rss/"
LANGUAGE = Language.DE


def fetch_articles(timeout: float | None = None) -> list[Article]:
    """Fetch articles from the taz headline feed."""
    feed = fetch_feed(FEED_URL, timeout)
    return parse_entries(feed.entries, SOURCE, parse_entry)


def _description(raw: str) -> str:
    """Drop the trailing "read more" link taz appends to every teaser."""
    description = strip_cdata(raw)
    index = description.find("<a href")
    if index != -1:
        description = description[:index].strip()
    return description


def parse_entry(entry, published_at: datetime) -> Article:
    return Article(
        id=make_article_id(SOURCE, entry_guid(entry)),
        source=SOURCE,
        title=entry.get("title", ""),
        description=_description(entry.get("summary", "")),
        url=entry.get("link", ""),
        published_at=published_at,
        banner=media_image(entry, medium="image"),
        language=LANGUAGE,
    )
