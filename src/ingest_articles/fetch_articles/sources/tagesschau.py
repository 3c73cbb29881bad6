"""tagesschau.de feed adapter (RDF)."""

from __future__ import annotations

from datetime import datetime

from common.models import Article, Source, make_article_id
from ingest_articles.clean_articles.clean import extract_image_url
from ingest_articles.fetch_articles.rss import entry_content, entry_guid, fetch_feed, parse_entries

SOURCE = Source.TAGESSCHAU
FEED_URL = "https://www.tagesschau.de/infoservices/alle-meldungen-100~rdf.xml"
LANGUAGE = None


def fetch_articles(timeout: float | None = None) -> list[Article]:
    """Fetch articles from the tagesschau.de all-news feed."""
    feed = fetch_feed(FEED_URL, timeout)
    return parse_entries(feed.entries, SOURCE, parse_entry)


def parse_entry(entry, published_at: datetime) -> Article:
    return Article(
        id=make_article_id(SOURCE, entry_guid(entry)),
        source=SOURCE,
        title=entry.get("title", ""),
        description=entry.get("summary", ""),
        url=entry.get("link", ""),
        published_at=published_at,
        banner=extract_image_url(entry_content(entry)),
    )
