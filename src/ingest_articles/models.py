"""Data models for ingest_articles pipeline stage."""

from dataclasses import dataclass, field

from common.errors import AdapterError
from common.models import Article


@dataclass
class FetchResult:
    """Articles gathered from every adapter that succeeded, plus the failures."""
    articles: list[Article] = field(default_factory=list)
    errors: list[AdapterError] = field(default_factory=list)


@dataclass
class IngestSummary:
    """Outcome of one ingestion cycle."""
    articles_fetched: int
    articles_inserted: int
    links_created: int
    adapter_errors: list[str] = field(default_factory=list)
