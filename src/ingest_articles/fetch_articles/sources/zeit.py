"""ZEIT ONLINE feed adapter."""

from __future__ import annotations

from datetime import datetime

from common.models import Article, Source, make_article_id
from ingest_articles.clean_articles.clean import strip_cdata
from ingest_articles.fetch_articles.rss import (
    enclosure_image,
    entry_categories,
    entry_content,
    entry_guid,
    fetch_feed,
    parse_entries,
)

SOURCE = Source.ZEIT
FEED_URL = "https://newsfeed.zeit.de/index"
LANGUAGE = None


def fetch_articles(timeout: float | None = None) -> list[Article]:
    """Fetch articles from the ZEIT ONLINE index feed."""
    feed = fetch_feed(FEED_URL, timeout)
    return parse_entries(feed.entries, SOURCE, parse_entry)


def local_id(guid: str) -> str:
    """Strip the `{urn:uuid:...}` wrapper from a guid."""
    return guid.removeprefix("{urn:uuid:").removesuffix("}")


def _description(entry) -> str:
    description = strip_cdata(entry.get("summary"))
    if description:
        return description

    # Some entries only carry content:encoded, which is "None" when empty
    content = strip_cdata(entry_content(entry))
    if content == "None":
        return ""
    return content


def parse_entry(entry, published_at: datetime) -> Article:
    return Article(
        id=make_article_id(SOURCE, local_id(entry_guid(entry))),
        source=SOURCE,
        title=entry.get("title", ""),
        description=_description(entry),
        url=entry.get("link", ""),
        published_at=published_at,
        banner=enclosure_image(entry),
        category=entry_categories(entry),
    )
