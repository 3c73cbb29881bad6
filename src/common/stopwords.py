"""Stopword sets used by similarity scoring and keyword extraction.

All sets are frozen at import time and shared read-only.
"""

from common.models import Language

STOPWORDS_EN = frozenset({
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from", "has", "he",
    "in", "is", "it", "its", "of", "on", "that", "the", "to", "was", "will", "with",
    "have", "this", "but", "or", "not", "been", "were", "they", "their", "can", "had",
})

STOPWORDS_DE = frozenset({
    "aber", "als", "am", "an", "auch", "auf", "aus", "bei", "bin", "bis", "bist",
    "da", "das", "dass", "dem", "den", "der", "des", "die", "dies", "diese",
    "diesem", "diesen", "dieser", "doch", "du", "durch", "ein", "eine", "einem",
    "einen", "einer", "eines", "er", "es", "für", "hab", "habe", "haben", "hat",
    "hatte", "hatten", "hier", "ich", "ihm", "ihn", "ihr", "im", "in", "ins",
    "ist", "ja", "kann", "machen", "mein", "mit", "nach", "nicht", "noch", "nur",
    "oder", "ohne", "sehr", "sein", "seine", "seinem", "seinen", "seiner", "sich",
    "sie", "sind", "so", "über", "um", "und", "uns", "von", "vor", "war", "waren",
    "warum", "was", "weil", "wenn", "wer", "wie", "wird", "wir", "wo", "wurde",
    "wurden", "zu", "zum", "zur",
})

ALL_STOPWORDS = STOPWORDS_EN | STOPWORDS_DE

_BY_LANGUAGE = {
    Language.EN: STOPWORDS_EN,
    Language.DE: STOPWORDS_DE,
}


def stopwords_for(language: Language) -> frozenset[str]:
    """Stopwords for a language, English when the language has no set."""
    return _BY_LANGUAGE.get(language, STOPWORDS_EN)


def stopwords_for_pair(first: Language, second: Language) -> frozenset[str]:
    """Stopwords for comparing two articles.

    Articles in different languages use the union of both sets so the result
    does not depend on argument order.
    """
    if first == second:
        return stopwords_for(first)
    return stopwords_for(first) | stopwords_for(second)
