"""Tests for cursor-paginated article retrieval."""

import base64
from datetime import UTC, datetime, timedelta

import pytest

from builders import NOW, articles_at, make_article
from news_curation.data import Category, Country, Language, PublicationTier
from news_curation.errors import DomainValidationError, InvalidCursorError
from news_curation.persistence import SqlArticleRepository
from news_curation.pipeline import ArticleQuery, GetArticles, decode_cursor, encode_cursor


class TestCursor:
    """Tests for cursor encoding."""

    def test_cursor_is_base64_epoch_millis(self) -> None:
        value = datetime(2026, 3, 10, 15, 30, 0, 123000, tzinfo=UTC)
        cursor = encode_cursor(value)
        assert base64.b64decode(cursor).decode() == str(round(value.timestamp() * 1000))
        assert decode_cursor(cursor) == value

    @pytest.mark.parametrize(
        "cursor",
        ["not a cursor!", base64.b64encode(b"yesterday").decode(), "AAAA", "é"],
    )
    def test_invalid_cursor(self, cursor: str) -> None:
        with pytest.raises(InvalidCursorError, match="Invalid cursor"):
            decode_cursor(cursor)


class TestGetArticles:
    """Tests for GetArticles."""

    @pytest.fixture
    def get_articles(self, article_repository: SqlArticleRepository) -> GetArticles:
        return GetArticles(article_repository)

    async def test_following_cursors_visits_every_article_once(
        self, get_articles: GetArticles, article_repository: SqlArticleRepository
    ) -> None:
        articles = articles_at(25)
        await article_repository.create_many(articles)

        seen = []
        pages = 0
        cursor = None
        while True:
            page = await get_articles.execute(ArticleQuery(cursor=cursor, limit=10))
            pages += 1
            assert page.total == 25
            seen.extend(page.items)
            cursor = page.next_cursor
            if cursor is None:
                break

        assert pages == 3
        assert len({a.id for a in seen}) == 25
        times = [a.created_at for a in seen]
        assert all(a > b for a, b in zip(times, times[1:], strict=False))

    async def test_exact_multiple_has_no_empty_last_page(
        self, get_articles: GetArticles, article_repository: SqlArticleRepository
    ) -> None:
        await article_repository.create_many(articles_at(20))

        first = await get_articles.execute(ArticleQuery(limit=10))
        second = await get_articles.execute(ArticleQuery(cursor=first.next_cursor, limit=10))

        assert len(second.items) == 10
        assert second.next_cursor is None

    async def test_default_limit(
        self, get_articles: GetArticles, article_repository: SqlArticleRepository
    ) -> None:
        await article_repository.create_many(articles_at(12))
        page = await get_articles.execute(ArticleQuery())
        assert len(page.items) == 10
        assert page.next_cursor == encode_cursor(page.items[-1].created_at)

    async def test_far_future_cursor_returns_newest(
        self, get_articles: GetArticles, article_repository: SqlArticleRepository
    ) -> None:
        articles = articles_at(3)
        await article_repository.create_many(articles)

        cursor = encode_cursor(datetime(2100, 1, 1, tzinfo=UTC))
        page = await get_articles.execute(ArticleQuery(cursor=cursor))

        assert [a.id for a in page.items] == [a.id for a in reversed(articles)]

    async def test_cursor_before_everything_returns_empty(
        self, get_articles: GetArticles, article_repository: SqlArticleRepository
    ) -> None:
        await article_repository.create_many(articles_at(3))

        cursor = encode_cursor(NOW - timedelta(days=1))
        page = await get_articles.execute(ArticleQuery(cursor=cursor))

        assert page.items == []
        assert page.next_cursor is None
        assert page.total == 3

    @pytest.mark.parametrize("limit", [0, -1, 101])
    async def test_limit_out_of_range(self, get_articles: GetArticles, limit: int) -> None:
        with pytest.raises(DomainValidationError, match="between 1 and 100"):
            await get_articles.execute(ArticleQuery(limit=limit))

    async def test_invalid_cursor_is_rejected(self, get_articles: GetArticles) -> None:
        with pytest.raises(InvalidCursorError):
            await get_articles.execute(ArticleQuery(cursor="%%%"))

    async def test_only_published_tiers_are_returned(
        self, get_articles: GetArticles, article_repository: SqlArticleRepository
    ) -> None:
        standard = make_article(created_at=NOW)
        niche = make_article(created_at=NOW - timedelta(minutes=1), tier=PublicationTier.NICHE)
        await article_repository.create_many(
            [
                standard,
                niche,
                make_article(tier=PublicationTier.PENDING_REVIEW),
                make_article(tier=PublicationTier.ARCHIVED),
            ]
        )

        page = await get_articles.execute(ArticleQuery())

        assert [a.id for a in page.items] == [standard.id, niche.id]
        assert page.total == 2

    async def test_country_defaults_to_us(
        self, get_articles: GetArticles, article_repository: SqlArticleRepository
    ) -> None:
        us = make_article()
        fr = make_article(country=Country.FR, language=Language.FR)
        await article_repository.create_many([us, fr])

        assert [a.id for a in (await get_articles.execute(ArticleQuery())).items] == [us.id]
        french = await get_articles.execute(ArticleQuery(country=Country.FR))
        assert [a.id for a in french.items] == [fr.id]

    async def test_filters_by_category_and_language(
        self, get_articles: GetArticles, article_repository: SqlArticleRepository
    ) -> None:
        sports = make_article(category=Category.SPORTS)
        spanish = make_article(language=Language.ES)
        await article_repository.create_many([make_article(), sports, spanish])

        by_category = await get_articles.execute(ArticleQuery(category=Category.SPORTS))
        by_language = await get_articles.execute(ArticleQuery(language=Language.ES))

        assert [a.id for a in by_category.items] == [sports.id]
        assert [a.id for a in by_language.items] == [spanish.id]
