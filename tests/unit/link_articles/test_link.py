"""Tests for link_articles.link module."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

from article_store.gateway import load_all_articles, load_links, upsert_articles
from common.config import LinkConfig
from common.models import Article, Language, Source
from link_articles.link import collect_unique_articles, find_links, resolve_links, save_links
from link_articles.similarity import SimilarityScorer

NOW = datetime(2025, 5, 8, 12, 0, tzinfo=timezone.utc)


def _article(article_id: str, title: str = "", description: str = "") -> Article:
    return Article(
        id=article_id,
        source=Source.TAZ,
        title=title or f"Title of {article_id}",
        description=description or f"Description of {article_id}",
        url=f"https://taz.de/{article_id}",
        published_at=NOW,
        language=Language.DE,
    )


def _pair_scorer(*similar_pairs: tuple[str, str]) -> MagicMock:
    """Scorer that treats exactly the given unordered pairs as similar."""
    pairs = {frozenset(pair) for pair in similar_pairs}
    scorer = MagicMock(spec=SimilarityScorer)
    scorer.is_similar.side_effect = lambda a, b, threshold: frozenset((a.id, b.id)) in pairs
    return scorer


class TestFindLinks:
    def test_links_new_to_existing(self) -> None:
        new = [_article("TAZ-new")]
        existing = [_article("TAZ-old"), _article("TAZ-other")]

        found = find_links(new, existing, _pair_scorer(("TAZ-new", "TAZ-old")), 0.3)

        assert found == 1
        assert new[0].linked_to == ["TAZ-old"]

    def test_within_batch_pairs_scored_once(self) -> None:
        new = [_article("TAZ-1"), _article("TAZ-2"), _article("TAZ-3")]
        scorer = _pair_scorer(("TAZ-1", "TAZ-3"), ("TAZ-2", "TAZ-3"))

        find_links(new, [], scorer, 0.3)

        assert new[0].linked_to == ["TAZ-3"]
        assert new[1].linked_to == ["TAZ-3"]
        assert new[2].linked_to == []
        assert scorer.is_similar.call_count == 3

    def test_never_links_to_itself(self) -> None:
        article = _article("TAZ-1")
        stored = _article("TAZ-1")
        scorer = MagicMock(spec=SimilarityScorer)
        scorer.is_similar.return_value = True

        find_links([article], [stored], scorer, 0.3)

        assert article.linked_to == []
        scorer.is_similar.assert_not_called()

    def test_passes_threshold(self) -> None:
        scorer = _pair_scorer()
        find_links([_article("TAZ-1")], [_article("TAZ-2")], scorer, 0.42)
        assert scorer.is_similar.call_args[0][2] == 0.42


class TestCollectUniqueArticles:
    def test_includes_linked_existing_articles_once(self) -> None:
        old = _article("TAZ-old")
        a = _article("TAZ-a")
        b = _article("TAZ-b")
        a.linked_to = ["TAZ-old", "TAZ-b"]
        b.linked_to = ["TAZ-old"]

        result = collect_unique_articles([a, b], [old, _article("TAZ-unrelated")])

        assert [article.id for article in result] == ["TAZ-a", "TAZ-old", "TAZ-b"]

    def test_skips_articles_without_id(self) -> None:
        result = collect_unique_articles([_article("")], [])
        assert result == []


class TestSaveLinks:
    def test_directed_by_default(self, session) -> None:
        a, b = _article("TAZ-a"), _article("TAZ-b")
        upsert_articles([a, b], session)
        a.linked_to = ["TAZ-b", ""]

        created = save_links([a, b], session)

        assert created == 1
        assert load_links(session) == [("TAZ-a", "TAZ-b")]

    def test_symmetric(self, session) -> None:
        a, b = _article("TAZ-a"), _article("TAZ-b")
        upsert_articles([a, b], session)
        a.linked_to = ["TAZ-b"]

        created = save_links([a, b], session, symmetric=True)

        assert created == 2
        assert load_links(session) == [("TAZ-a", "TAZ-b"), ("TAZ-b", "TAZ-a")]


class TestResolveLinks:
    def test_links_against_store_and_batch(self, session) -> None:
        stored = _article(
            "TAZ-1",
            "Trump besucht Berlin",
            "Der US-Präsident trifft den Bundeskanzler im Kanzleramt",
        )
        upsert_articles([stored], session)
        session.commit()

        new = [
            _article(
                "TAZ-2",
                "Donald Trump in Berlin besucht",
                "Staatsbesuch mit militärischen Ehren vor dem Reichstag",
            ),
            _article(
                "TAZ-3",
                "Bundesliga: Bayern gewinnt deutlich gegen Bremen",
                "Das Spiel im Weserstadion endete mit vier zu null",
            ),
        ]

        result = resolve_links(new, session, SimilarityScorer(), LinkConfig())
        session.commit()

        assert result.articles_inserted == 2
        assert result.links_created >= 1
        assert ("TAZ-2", "TAZ-1") in load_links(session)
        assert [a.id for a in load_all_articles(session)] == ["TAZ-1", "TAZ-2", "TAZ-3"]

    def test_rerun_is_idempotent(self, session) -> None:
        scorer = _pair_scorer(("TAZ-1", "TAZ-2"))
        resolve_links([_article("TAZ-1"), _article("TAZ-2")], session, scorer)
        session.commit()

        result = resolve_links([_article("TAZ-1"), _article("TAZ-2")], session, scorer)
        session.commit()

        assert result.articles_inserted == 0
        assert result.links_created == 0
        assert load_links(session) == [("TAZ-1", "TAZ-2")]

    def test_empty_batch(self, session) -> None:
        result = resolve_links([], session, _pair_scorer())
        assert result.articles_inserted == 0
        assert result.links_found == 0
