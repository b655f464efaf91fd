"""Tests for the HTTP API."""

from dataclasses import replace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from builders import NOW, make_article
from news_curation.data import (
    ArticleVariant,
    Category,
    Country,
    DiscourseType,
    Language,
    Stance,
)
from news_curation.errors import DomainValidationError, InvalidCursorError
from news_curation.http import create_app
from news_curation.pipeline import ArticlePage, ArticleQuery


@pytest.fixture
def use_case() -> MagicMock:
    get_articles = MagicMock()
    get_articles.execute = AsyncMock(return_value=ArticlePage(items=[], next_cursor=None, total=0))
    return get_articles


@pytest.fixture
def client(use_case: MagicMock) -> TestClient:
    return TestClient(create_app(use_case), raise_server_exceptions=False)


def _query(use_case: MagicMock) -> ArticleQuery:
    return use_case.execute.await_args.args[0]


class TestListArticles:
    """Tests for GET /articles."""

    def test_response_is_camel_case(self, client: TestClient, use_case: MagicMock) -> None:
        article = make_article(fake=True, story_ids=("s1",))
        variant = ArticleVariant(
            headline="Critics push back",
            body="Opponents argue that the bill adds to the deficit.",
            stance=Stance.CRITICAL,
            discourse=DiscourseType.ALTERNATIVE,
        )
        article = replace(article, variants=(variant,))
        use_case.execute.return_value = ArticlePage(items=[article], next_cursor="abc", total=7)

        response = client.get("/articles")

        assert response.status_code == 200
        body = response.json()
        assert body["nextCursor"] == "abc"
        assert body["total"] == 7
        item = body["items"][0]
        assert item["id"] == article.id
        assert item["isFake"] is True
        assert item["fakeReason"] == "Invented vote count"
        assert item["publicationTier"] == "STANDARD"
        assert item["storyIds"] == ["s1"]
        assert item["createdAt"].startswith(NOW.strftime("%Y-%m-%dT%H:%M:%S"))
        assert item["variants"][0]["stance"] == "critical"

    def test_last_page_has_null_cursor(self, client: TestClient) -> None:
        body = client.get("/articles").json()
        assert body == {"items": [], "nextCursor": None, "total": 0}

    def test_query_parameters_are_parsed(self, client: TestClient, use_case: MagicMock) -> None:
        response = client.get(
            "/articles",
            params={
                "category": "Sports",
                "country": "FR",
                "language": "fr",
                "cursor": "MTc3MzE1NjYwMDAwMA==",
                "limit": 25,
            },
        )

        assert response.status_code == 200
        query = _query(use_case)
        assert query.category == Category.SPORTS
        assert query.country == Country.FR
        assert query.language == Language.FR
        assert query.cursor == "MTc3MzE1NjYwMDAwMA=="
        assert query.limit == 25

    def test_defaults(self, client: TestClient, use_case: MagicMock) -> None:
        client.get("/articles")
        query = _query(use_case)
        assert query.country is None
        assert query.cursor is None
        assert query.limit == 10

    @pytest.mark.parametrize(
        ("params", "message"),
        [
            ({"country": "xx"}, "Invalid country: xx"),
            ({"language": "jp"}, "Invalid language: jp"),
            ({"category": "weather"}, "Invalid category: weather"),
            ({"limit": "many"}, "limit"),
        ],
    )
    def test_invalid_parameters(
        self, client: TestClient, use_case: MagicMock, params: dict, message: str
    ) -> None:
        response = client.get("/articles", params=params)

        assert response.status_code == 400
        assert message in response.json()["error"]
        use_case.execute.assert_not_awaited()

    def test_invalid_cursor(self, client: TestClient, use_case: MagicMock) -> None:
        use_case.execute.side_effect = InvalidCursorError()
        response = client.get("/articles", params={"cursor": "garbage"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid cursor"}

    def test_out_of_range_limit(self, client: TestClient, use_case: MagicMock) -> None:
        use_case.execute.side_effect = DomainValidationError("Limit must be between 1 and 100")
        response = client.get("/articles", params={"limit": 500})
        assert response.status_code == 400
        assert response.json() == {"error": "Limit must be between 1 and 100"}

    def test_unexpected_error_is_500(self, client: TestClient, use_case: MagicMock) -> None:
        use_case.execute.side_effect = RuntimeError("database is gone")
        response = client.get("/articles")
        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
