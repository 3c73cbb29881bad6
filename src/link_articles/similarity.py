"""Composite fuzzy similarity between two articles.

score = title_weight * title + description_weight * description
      + time_weight * time + source_weight * source

Every sub-score is symmetric in its arguments, so the composite is too.
"""

from __future__ import annotations

import logging
from datetime import datetime

from rapidfuzz.distance import Levenshtein

from common.config import SimilarityConfig
from common.models import Article, Source
from common.stopwords import stopwords_for_pair
from common.text import normalize_text

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24.0


def _content_words(text: str, stopwords: frozenset[str]) -> set[str]:
    return {word for word in text.split() if word not in stopwords and len(word) > 2}


def text_similarity(
    first: str,
    second: str,
    min_length: int,
    stopwords: frozenset[str],
) -> float:
    """Blend of normalised edit distance and stopword-filtered word overlap.

    Identical texts (after lowercasing and trimming) score 1.0; texts shorter
    than `min_length` score 0.0.
    """
    first = normalize_text(first)
    second = normalize_text(second)

    if first == second:
        return 1.0
    if len(first) < min_length or len(second) < min_length:
        return 0.0

    distance = Levenshtein.distance(first, second)
    lev_sim = 1.0 - distance / max(len(first), len(second))

    words1 = _content_words(first, stopwords)
    words2 = _content_words(second, stopwords)
    if not words1 or not words2:
        return lev_sim * 0.5

    jaccard = len(words1 & words2) / len(words1 | words2)
    return lev_sim * 0.4 + jaccard * 0.6


def time_similarity(first: datetime, second: datetime, config: SimilarityConfig) -> float:
    """Bucketed closeness of two publish times.

    Past 30 days the score decays linearly with age, capped at the last bucket
    so it never rises as the gap grows.
    """
    hours = abs((first - second).total_seconds()) / 3600.0

    if hours < HOURS_PER_DAY:
        return config.same_day
    if hours < HOURS_PER_DAY * 7:
        return config.same_week
    if hours < HOURS_PER_DAY * 30:
        return config.same_month

    days = hours / HOURS_PER_DAY
    return max(0.0, min(config.same_month, 1.0 - days / 365.0))


def source_similarity(first: Source, second: Source, config: SimilarityConfig) -> float:
    if first == second:
        return config.same_source
    return config.different_source


class SimilarityScorer:
    """Scores article pairs with a fixed `SimilarityConfig`.

    Holds no mutable state, so one instance can be shared by link resolution
    and keyword clustering.
    """

    def __init__(self, config: SimilarityConfig | None = None):
        self.config = config or SimilarityConfig()

    def title_score(self, a: Article, b: Article) -> float:
        stopwords = stopwords_for_pair(a.language, b.language)
        return text_similarity(a.title, b.title, self.config.min_title_length, stopwords)

    def description_score(self, a: Article, b: Article) -> float:
        stopwords = stopwords_for_pair(a.language, b.language)
        return text_similarity(
            a.description, b.description, self.config.min_description_length, stopwords
        )

    def score(self, a: Article, b: Article) -> float:
        config = self.config
        title = self.title_score(a, b)
        description = self.description_score(a, b)
        timing = time_similarity(a.published_at, b.published_at, config)
        source = source_similarity(a.source, b.source, config)

        total = (
            title * config.title_weight
            + description * config.description_weight
            + timing * config.time_weight
            + source * config.source_weight
        )
        logger.debug(
            "score(%s, %s) = %.3f (title=%.3f, desc=%.3f, time=%.3f, source=%.3f)",
            a.id, b.id, total, title, description, timing, source,
        )
        return total

    def is_similar(self, a: Article, b: Article, threshold: float) -> bool:
        return self.score(a, b) >= threshold

