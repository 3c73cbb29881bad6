"""Tests for the per-outlet feed adapters."""

from datetime import datetime, timezone
from unittest.mock import Mock, patch

import pytest

from common.models import Language, Source
from ingest_articles.fetch_articles.sources import (
    SOURCES,
    faz,
    get_source_module,
    handelsblatt,
    sueddeutsche,
    tagesschau,
    taz,
    welt,
    zeit,
)

PUBLISHED = "Thu, 08 May 2025 19:51:16 +0200"


def _entry(guid: str, **kwargs) -> dict:
    entry = {
        "id": guid,
        "title": "Kanzler reist nach Paris",
        "summary": "Der Bundeskanzler trifft den französischen Präsidenten.",
        "link": "https://example.com/artikel",
        "published": PUBLISHED,
    }
    entry.update(kwargs)
    return entry


def _parse(module, *entries):
    return module.parse_entries(list(entries), module.SOURCE, module.parse_entry)


class TestRegistry:
    def test_every_source_registered(self) -> None:
        assert {module.SOURCE for module in SOURCES.values()} == set(Source)

    def test_keys_match_sources(self) -> None:
        for key, module in SOURCES.items():
            assert module.SOURCE.value.lower() == key

    def test_get_source_module(self) -> None:
        assert get_source_module("faz") is faz

    def test_unknown_source_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown source"):
            get_source_module("bild")

    @pytest.mark.parametrize("module", list(SOURCES.values()))
    def test_fetch_articles_uses_feed_url(self, module) -> None:
        with patch.object(module, "fetch_feed") as mock_fetch:
            mock_fetch.return_value = Mock(entries=[])
            assert module.fetch_articles(timeout=3) == []
        mock_fetch.assert_called_once_with(module.FEED_URL, 3)


class TestFaz:
    def test_parses_entry(self) -> None:
        entry = _entry(
            "https://www.faz.net/aktuell/politik/kanzler-reist-nach-paris-110456789.html",
            summary='<p><img src="https://media.faz.net/teaser.jpg"></p><p>Der Kanzler trifft Macron.</p><p>Mehr</p>',
            tags=[{"term": "Politik"}, {"term": "Ausland"}],
            media_content=[
                {"url": "https://media.faz.net/small.jpg", "type": "image/jpeg", "medium": "thumbnail"},
                {"url": "https://media.faz.net/banner.jpg", "type": "image/jpeg", "medium": "image"},
            ],
        )

        [article] = _parse(faz, entry)

        assert article.id == "FAZ-110456789"
        assert article.source == Source.FAZ
        assert article.description == "Der Kanzler trifft Macron."
        assert article.banner == "https://media.faz.net/banner.jpg"
        assert article.category == ["Politik", "Ausland"]
        assert article.language == Language.DE
        assert article.published_at == datetime(2025, 5, 8, 17, 51, 16, tzinfo=timezone.utc)

    def test_image_only_description_is_dropped(self) -> None:
        entry = _entry("https://www.faz.net/a-1.html", summary='<p><img src="https://media.faz.net/x.jpg"></p>')
        assert _parse(faz, entry) == []


class TestZeit:
    def test_strips_urn_wrapper(self) -> None:
        entry = _entry(
            "{urn:uuid:2f6c1e5a-1234-4bcd-9ef0-0123456789ab}",
            enclosures=[{"href": "https://img.zeit.de/1.jpg", "type": "image/jpeg"}],
        )

        [article] = _parse(zeit, entry)

        assert article.id == "ZEIT-2f6c1e5a-1234-4bcd-9ef0-0123456789ab"
        assert article.banner == "https://img.zeit.de/1.jpg"
        assert article.language == Language.UNKNOWN

    def test_falls_back_to_content(self) -> None:
        entry = _entry("{urn:uuid:1}", summary="", content=[{"value": "<p>Aus dem Inhalt</p>"}])

        [article] = _parse(zeit, entry)

        assert article.description == "Aus dem Inhalt"

    def test_literal_none_content_is_empty(self) -> None:
        entry = _entry("{urn:uuid:1}", summary="", content=[{"value": "None"}])
        assert _parse(zeit, entry) == []


class TestTagesschau:
    def test_banner_from_content(self) -> None:
        entry = _entry(
            "https://www.tagesschau.de/inland/paris-100.html",
            published="Mon, 05 May 2025 17:19:18 CEST",
            content=[{"value": '<p><img src="https://images.tagesschau.de/1.jpg" alt=""></p>'}],
        )

        [article] = _parse(tagesschau, entry)

        assert article.id == "TAGESSCHAU-https://www.tagesschau.de/inland/paris-100.html"
        assert article.banner == "https://images.tagesschau.de/1.jpg"
        assert article.category == []
        assert article.published_at == datetime(2025, 5, 5, 15, 19, 18, tzinfo=timezone.utc)


class TestSueddeutsche:
    def test_banner_from_description_and_html_stripped(self) -> None:
        entry = _entry(
            "sz-123",
            summary='<p><img src="https://www.sueddeutsche.de/img.jpg"> Merz in Paris</p>',
            tags=[{"term": "Politik"}],
        )

        [article] = _parse(sueddeutsche, entry)

        assert article.id == "SUEDDEUTSCHE-sz-123"
        assert article.description == "Merz in Paris"
        assert article.banner == "https://www.sueddeutsche.de/img.jpg"
        assert article.category == ["Politik"]


class TestWelt:
    def test_skips_premium(self) -> None:
        entries = [_entry("1", welt_premium="true"), _entry("2", welt_premium="false")]

        articles = _parse(welt, *entries)

        assert [a.id for a in articles] == ["WELT-2"]

    def test_categories_plus_topic(self) -> None:
        entry = _entry(
            "3",
            tags=[{"term": "Politik"}],
            welt_topic="Frankreich",
            media_content=[{"url": "https://img.welt.de/1.jpg", "type": "image/jpeg"}],
        )

        [article] = _parse(welt, entry)

        assert article.category == ["Politik", "Frankreich"]
        assert article.banner == "https://img.welt.de/1.jpg"
        assert article.language == Language.DE


class TestHandelsblatt:
    def test_keeps_first_category_only(self) -> None:
        entry = _entry("100001", tags=[{"term": "Finanzen"}, {"term": "Maerkte"}])

        [article] = _parse(handelsblatt, entry)

        assert article.id == "HANDELSBLATT-100001"
        assert article.category == ["Finanzen"]
        assert article.banner is None


class TestTaz:
    def test_truncates_trailing_link(self) -> None:
        entry = _entry(
            "https://taz.de/!6084123/",
            published="8 May 2025 20:19:00 +0200",
            summary='Die Koalition streitet weiter. <a href="https://taz.de/!6084123/">mehr</a>',
            tags=[{"term": "Politik"}],
        )

        [article] = _parse(taz, entry)

        assert article.id == "TAZ-https://taz.de/!6084123/"
        assert article.description == "Die Koalition streitet weiter."
        assert article.category == []
        assert article.language == Language.DE

    def test_link_only_description_is_dropped(self) -> None:
        entry = _entry("x", summary='<a href="https://taz.de/x">mehr</a>')
        assert _parse(taz, entry) == []
