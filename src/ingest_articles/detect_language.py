"""Language detection for article drafts."""

from __future__ import annotations

import logging
import threading

from langdetect import DetectorFactory, LangDetectException, detect

from common.models import Article, Language

logger = logging.getLogger(__name__)

# Too short to detect reliably
MIN_TEXT_LENGTH = 3

_seed_lock = threading.Lock()
_seeded = False


def _seed_detector() -> None:
    """Make langdetect deterministic; done once, before the first detection."""
    global _seeded
    with _seed_lock:
        if not _seeded:
            DetectorFactory.seed = 0
            _seeded = True


class LanguageClassifier:
    """Maps text to a `Language`, with an explicit not-found signal."""

    def __init__(self) -> None:
        _seed_detector()

    def classify(self, text: str) -> tuple[Language, bool]:
        """Detect the language of `text`.

        Returns:
            (language, found); `found` is False and the language UNKNOWN when
            the text is too short, undetectable or in an unsupported language.
        """
        text = (text or "").strip()
        if len(text) < MIN_TEXT_LENGTH:
            return Language.UNKNOWN, False

        try:
            code = detect(text)
        except LangDetectException as e:
            logger.debug("Language not detected: %s", e)
            return Language.UNKNOWN, False

        try:
            language = Language.parse(code)
        except ValueError:
            logger.debug("Unsupported language detected: %s", code)
            return Language.UNKNOWN, False
        return language, language != Language.UNKNOWN


def assign_languages(articles: list[Article], classifier: LanguageClassifier) -> int:
    """Classify every article whose language is still UNKNOWN.

    Articles whose adapter pre-assigned a language are left alone.

    Returns:
        Number of articles that received a concrete language.
    """
    assigned = 0
    for article in articles:
        if article.language != Language.UNKNOWN:
            continue
        language, found = classifier.classify(f"{article.title} {article.description}")
        article.language = language if found else Language.UNKNOWN
        if found:
            assigned += 1

    logger.info("Assigned languages to %d articles", assigned)
    return assigned
