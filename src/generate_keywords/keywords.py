"""Keyword mining over clusters of recent articles.

dedup titles -> greedy seed clustering -> candidate scoring -> top-K per
cluster -> merge by canonical string -> dedup by identical article set ->
subset elimination. Every step is a pure function; persistence lives in
`generate_keywords.generate_keywords`.
"""

from __future__ import annotations

import logging
import re
from collections import Counter

from common.models import Article
from common.stopwords import ALL_STOPWORDS
from common.text import normalize_title_key, strip_edges, tokenize
from generate_keywords.models import KeywordCandidate
from link_articles.similarity import SimilarityScorer

logger = logging.getLogger(__name__)

# Composite score an article needs against a cluster seed to join it
DEFAULT_CLUSTER_THRESHOLD = 0.36
DEFAULT_TOP_K = 8
MIN_KEYWORD_LENGTH = 4
# Width of the key_words.keyword column
MAX_KEYWORD_LENGTH = 255

UNIGRAM_WEIGHT = 3
BIGRAM_WEIGHT = 5

BLACKLIST = frozenset({"news", "article", "report", "says", "heute"})

_WORD_PART_RE = re.compile(r"[^\s-]+")


def deduplicate_by_title(articles: list[Article]) -> list[Article]:
    """Keep the first article for every case/space-normalized title."""
    seen: set[str] = set()
    result = []
    for article in articles:
        key = normalize_title_key(article.title)
        if key in seen:
            continue
        seen.add(key)
        result.append(article)
    return result


def cluster_articles(
    articles: list[Article],
    scorer: SimilarityScorer,
    threshold: float = DEFAULT_CLUSTER_THRESHOLD,
) -> list[list[Article]]:
    """Greedy clustering around seeds.

    Each unvisited article seeds a cluster and absorbs every later unvisited
    article similar to the seed itself. Members are not compared with each
    other. Singleton clusters are dropped. O(n^2) in the number of articles.
    """
    clusters = []
    visited: set[str] = set()

    for i, seed in enumerate(articles):
        if seed.id in visited:
            continue
        visited.add(seed.id)
        cluster = [seed]

        for other in articles[i + 1:]:
            if other.id not in visited and scorer.is_similar(seed, other, threshold):
                cluster.append(other)
                visited.add(other.id)

        if len(cluster) > 1:
            clusters.append(cluster)

    logger.info("Built %d clusters from %d articles", len(clusters), len(articles))
    return clusters


def _is_candidate_word(word: str, stopwords: frozenset[str]) -> bool:
    return len(word) >= MIN_KEYWORD_LENGTH and word not in stopwords and word not in BLACKLIST


def extract_candidates(
    cluster: list[Article],
    stopwords: frozenset[str] = ALL_STOPWORDS,
) -> Counter:
    """Score unigrams (+3) and bigrams (+5) over every article in the cluster.

    A bigram counts whenever its second word would qualify as a unigram.
    """
    candidates: Counter = Counter()
    for article in cluster:
        words = tokenize(f"{article.title} {article.description}")
        for i, word in enumerate(words):
            if _is_candidate_word(word, stopwords):
                candidates[word] += UNIGRAM_WEIGHT
            if i + 1 < len(words) and _is_candidate_word(words[i + 1], stopwords):
                candidates[f"{word} {words[i + 1]}"] += BIGRAM_WEIGHT
    return candidates


def select_top_keywords(candidates: Counter, top_k: int = DEFAULT_TOP_K) -> list[str]:
    """Highest scores first, ties broken alphabetically."""
    ranked = sorted(candidates.items(), key=lambda item: (-item[1], item[0]))
    return [keyword for keyword, _ in ranked[:top_k]]


def format_keyword(keyword: str) -> str:
    """Title-case every whitespace- or hyphen-separated part: "us-wahl berlin" -> "Us-Wahl Berlin"."""
    return _WORD_PART_RE.sub(lambda m: m.group(0)[:1].upper() + m.group(0)[1:].lower(), keyword)


def extract_and_merge(
    clusters: list[list[Article]],
    top_k: int = DEFAULT_TOP_K,
    stopwords: frozenset[str] = ALL_STOPWORDS,
) -> dict[str, KeywordCandidate]:
    """Canonical keyword -> candidate, merged across all clusters."""
    merged: dict[str, KeywordCandidate] = {}

    for cluster in clusters:
        if len(cluster) < 2:
            continue
        article_ids = {article.id for article in cluster}
        candidates = extract_candidates(cluster, stopwords)

        for raw in select_top_keywords(candidates, top_k):
            cleaned = strip_edges(raw)
            if not MIN_KEYWORD_LENGTH <= len(cleaned) <= MAX_KEYWORD_LENGTH or cleaned.lower() in BLACKLIST:
                continue

            keyword = format_keyword(cleaned)
            existing = merged.get(keyword)
            if existing is None:
                merged[keyword] = KeywordCandidate(
                    keyword=keyword,
                    frequency=candidates[raw],
                    article_ids=set(article_ids),
                )
            else:
                existing.article_ids |= article_ids
                existing.frequency += candidates[raw]

    return merged


def deduplicate_by_article_set(candidates: dict[str, KeywordCandidate]) -> dict[str, KeywordCandidate]:
    """Among keywords covering the exact same articles, keep the strongest.

    Higher frequency wins; ties go to the alphabetically smaller keyword.
    """
    by_articles: dict[frozenset[str], KeywordCandidate] = {}
    for candidate in sorted(candidates.values(), key=lambda c: (-c.frequency, c.keyword)):
        by_articles.setdefault(frozenset(candidate.article_ids), candidate)
    return {candidate.keyword: candidate for candidate in by_articles.values()}


def remove_subsets(candidates: dict[str, KeywordCandidate]) -> list[KeywordCandidate]:
    """Drop every keyword whose article set is contained in a kept keyword's set.

    Broader keywords are considered first: (set size desc, frequency desc, keyword asc).
    """
    ordered = sorted(
        candidates.values(),
        key=lambda c: (-len(c.article_ids), -c.frequency, c.keyword),
    )
    kept: list[KeywordCandidate] = []
    for candidate in ordered:
        if any(candidate.article_ids <= other.article_ids for other in kept):
            logger.debug("Dropping %r: covered by a broader keyword", candidate.keyword)
            continue
        kept.append(candidate)
    return kept


def mine_keywords(
    articles: list[Article],
    scorer: SimilarityScorer,
    threshold: float = DEFAULT_CLUSTER_THRESHOLD,
    top_k: int = DEFAULT_TOP_K,
) -> tuple[list[KeywordCandidate], int, int]:
    """Run every in-memory mining step.

    Returns:
        (surviving keywords, articles left after title dedup, cluster count)
    """
    unique = deduplicate_by_title(articles)
    clusters = cluster_articles(unique, scorer, threshold)
    merged = extract_and_merge(clusters, top_k)
    deduplicated = deduplicate_by_article_set(merged)
    keywords = remove_subsets(deduplicated)

    logger.info(
        "Mined %d keywords (%d merged, %d after coverage dedup)",
        len(keywords),
        len(merged),
        len(deduplicated),
    )
    return keywords, len(unique), len(clusters)
