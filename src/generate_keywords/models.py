"""Data models for generate_keywords pipeline stage."""

from dataclasses import dataclass, field


@dataclass
class KeywordCandidate:
    """Canonical keyword with the articles it covers and its accumulated score."""
    keyword: str
    frequency: int
    article_ids: set[str] = field(default_factory=set)


@dataclass
class MiningSummary:
    """Outcome of one keyword mining cycle."""
    articles_loaded: int
    articles_deduplicated: int
    clusters: int
    keywords_persisted: int
    associations_persisted: int
