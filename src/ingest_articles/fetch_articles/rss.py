"""Shared RSS feed fetching logic."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, Optional

import feedparser
import requests
from dateutil.parser import parse as parse_date

from common.config import get_config
from common.datetime import ensure_utc
from common.models import Article, Source
from ingest_articles.clean_articles.clean import clean_text

logger = logging.getLogger(__name__)

USER_AGENT = "news-ingest/1.0 (RSS reader)"
JPEG = "image/jpeg"

# Common timezone abbreviations, including the Central European ones German feeds use
TZINFOS = {
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "CET": timezone(timedelta(hours=1)),
    "MEZ": timezone(timedelta(hours=1)),
    "CEST": timezone(timedelta(hours=2)),
    "MESZ": timezone(timedelta(hours=2)),
    "BST": timezone(timedelta(hours=1)),
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
}

EntryParser = Callable[[Any, datetime], Optional[Article]]


def fetch_feed(feed_url: str, timeout: float | None = None) -> feedparser.FeedParserDict:
    """Download and parse a single feed.

    Raises:
        requests.RequestException: On network errors or non-2xx responses.
        ValueError: If the body is not a feed at all.
    """
    if timeout is None:
        timeout = get_config().ingest.request_timeout

    response = requests.get(feed_url, timeout=timeout, headers={"User-Agent": USER_AGENT})
    response.raise_for_status()

    feed = feedparser.parse(response.content)
    if feed.get("bozo") and not feed.get("entries"):
        raise ValueError(f"Malformed feed from {feed_url}: {feed.get('bozo_exception')}")
    return feed


def parse_entries(entries: Iterable[Any], source: Source, parse_entry: EntryParser) -> list[Article]:
    """Turn feed entries into articles with the outlet-specific `parse_entry`.

    Entries with a repeated guid, an unparseable date or an empty description
    are skipped; a broken entry never fails the whole feed.
    """
    articles = []
    seen_guids: set[str] = set()

    for entry in entries:
        guid = entry_guid(entry)
        if not guid:
            logger.debug("Skipping %s entry without guid", source.value)
            continue
        if guid in seen_guids:
            logger.debug("Skipping duplicate %s entry %s", source.value, guid)
            continue
        seen_guids.add(guid)

        published_at = parse_published_date(entry)
        if published_at is None:
            logger.warning("Skipping %s entry %s: unparseable date", source.value, guid)
            continue

        try:
            article = parse_entry(entry, published_at)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning("Failed to parse %s entry %s: %s", source.value, guid, e)
            continue
        if article is None:
            continue

        article.title = clean_text(article.title)
        article.description = clean_text(article.description)
        if not article.description:
            logger.debug("Skipping %s entry %s: empty description", source.value, guid)
            continue

        articles.append(article)

    logger.info("Parsed %d articles from %s", len(articles), source.value)
    return articles


def entry_guid(entry) -> str:
    """The entry's guid, or an empty string."""
    return (entry.get("id") or entry.get("guid") or "").strip()


def parse_published_date(entry) -> datetime | None:
    """Extract and parse the published date from an RSS entry, in UTC."""
    published = entry.get("published") or entry.get("updated")
    if not published:
        return None

    try:
        return ensure_utc(parse_date(published, tzinfos=TZINFOS))
    except (ValueError, OverflowError):
        return None


def entry_categories(entry) -> list[str]:
    return [tag["term"] for tag in entry.get("tags") or [] if tag.get("term")]


def entry_content(entry) -> str:
    """The first `content:encoded` block of an entry, or an empty string."""
    content = entry.get("content") or []
    if not content:
        return ""
    return content[0].get("value") or ""


def media_image(entry, medium: str | None = None) -> str | None:
    """URL of the first JPEG `media:content` element (optionally of a given medium)."""
    for media in entry.get("media_content") or []:
        if media.get("type") != JPEG:
            continue
        if medium is not None and media.get("medium") != medium:
            continue
        if media.get("url"):
            return media["url"]
    return None


def enclosure_image(entry) -> str | None:
    """URL of the first JPEG enclosure."""
    for enclosure in entry.get("enclosures") or []:
        if enclosure.get("type") == JPEG and enclosure.get("href"):
            return enclosure["href"]
    return None


def extension_value(entry, name: str) -> str:
    """Value of a feed extension element such as `<welt:premium>`.

    The parser stores namespaced elements under `<prefix>_<name>`.
    """
    if entry.get(name):
        return str(entry[name]).strip()
    suffix = f"_{name}"
    for key in entry.keys():
        if key.endswith(suffix) and entry[key]:
            return str(entry[key]).strip()
    return ""
