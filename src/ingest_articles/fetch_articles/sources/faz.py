"""FAZ.NET feed adapter."""

from __future__ import annotations

import re
from datetime import datetime

from common.models import Article, Language, Source, make_article_id
from ingest_articles.clean_articles.clean import strip_cdata
from ingest_articles.fetch_articles.rss import (
    entry_categories,
    entry_guid,
    fetch_feed,
    media_image,
    parse_entries,
)

SOURCE = Source.FAZ
FEED_URL = "https://www.faz.net/rss/aktuell/"
LANGUAGE = Language.DE

_IMAGE_PARAGRAPH_RE = re.compile(r"<p><img[^>]+></p>")
_PARAGRAPH_RE = re.compile(r"<p>(.*?)</p>", re.DOTALL)


def fetch_articles(timeout: float | None = None) -> list[Article]:
    """Fetch articles from the FAZ.NET headline feed."""
    feed = fetch_feed(FEED_URL, timeout)
    return parse_entries(feed.entries, SOURCE, parse_entry)


def local_id(guid: str) -> str:
    """Article number from a guid like `https://www.faz.net/...-110456789.html`."""
    return guid.split("-")[-1].removesuffix(".html")


def _description(raw: str) -> str:
    description = _IMAGE_PARAGRAPH_RE.sub("", strip_cdata(raw))
    match = _PARAGRAPH_RE.search(description)
    if match:
        return match.group(1).strip()
    return description


def parse_entry(entry, published_at: datetime) -> Article:
    return Article(
        id=make_article_id(SOURCE, local_id(entry_guid(entry))),
        source=SOURCE,
        title=entry.get("title", ""),
        description=_description(entry.get("summary", "")),
        url=entry.get("link", ""),
        published_at=published_at,
        banner=media_image(entry, medium="image"),
        category=entry_categories(entry),
        language=LANGUAGE,
    )
