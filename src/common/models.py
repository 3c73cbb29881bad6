"""Canonical article model shared by every pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Source(str, Enum):
    """Fixed set of feed outlets."""

    ZEIT = "ZEIT"
    FAZ = "FAZ"
    TAGESSCHAU = "TAGESSCHAU"
    SUEDDEUTSCHE = "SUEDDEUTSCHE"
    WELT = "WELT"
    HANDELSBLATT = "HANDELSBLATT"
    TAZ = "TAZ"


_LANGUAGE_NAMES = {
    "english": "EN",
    "german": "DE",
    "french": "FR",
    "spanish": "ES",
    "italian": "IT",
    "portuguese": "PT",
    "dutch": "NL",
    "polish": "PL",
    "russian": "RU",
    "turkish": "TR",
    "chinese": "ZH",
    "japanese": "JA",
    "arabic": "AR",
    "unknown": "UNKNOWN",
}


class Language(str, Enum):
    """Language tag assigned by an adapter or the language classifier."""

    EN = "EN"
    DE = "DE"
    FR = "FR"
    ES = "ES"
    IT = "IT"
    PT = "PT"
    NL = "NL"
    PL = "PL"
    RU = "RU"
    TR = "TR"
    ZH = "ZH"
    JA = "JA"
    AR = "AR"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | None) -> Language:
        """Parse a language code ("de") or name ("German").

        Raises:
            ValueError: If the value names no supported language.
        """
        if not value:
            return cls.UNKNOWN
        key = value.strip().lower()
        if not key:
            return cls.UNKNOWN
        if key in _LANGUAGE_NAMES:
            return cls(_LANGUAGE_NAMES[key])
        # langdetect reports regional variants such as "zh-cn"
        code = key.split("-")[0].upper()
        try:
            return cls(code)
        except ValueError:
            raise ValueError(f"Unknown language: {value}") from None


def make_article_id(source: Source, local_id: str) -> str:
    """Build the stable article identity `<SOURCE>-<local id>`."""
    return f"{source.value}-{local_id}"


@dataclass
class Article:
    """Canonical article as produced by a source adapter.

    `linked_to` holds the ids of articles this one was found similar to, in
    the direction discovered during link resolution.
    """

    id: str
    source: Source
    title: str
    description: str
    url: str
    published_at: datetime
    banner: str | None = None
    category: list[str] = field(default_factory=list)
    language: Language = Language.UNKNOWN
    linked_to: list[str] = field(default_factory=list)
