"""Text normalisation helpers shared by scoring and keyword extraction."""

from __future__ import annotations


def normalize_text(text: str | None) -> str:
    """Lowercase and trim."""
    if not text:
        return ""
    return text.strip().lower()


def normalize_title_key(title: str | None) -> str:
    """Case/space-insensitive key for a title."""
    return " ".join(normalize_text(title).split())


def strip_edges(word: str) -> str:
    """Trim every leading and trailing character that is not a letter or digit."""
    start = 0
    end = len(word)
    while start < end and not word[start].isalnum():
        start += 1
    while end > start and not word[end - 1].isalnum():
        end -= 1
    return word[start:end]


def tokenize(text: str) -> list[str]:
    """Lowercased whitespace tokens with punctuation trimmed from their edges.

    Tokens that are pure punctuation disappear entirely.
    """
    tokens = []
    for raw in text.lower().split():
        token = strip_edges(raw)
        if token:
            tokens.append(token)
    return tokens
