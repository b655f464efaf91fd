"""Tests for news acquisition: rate limiter, World News provider and cache."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from builders import NOW, make_news_item
from news_curation.data import Country, Language, NewsItem
from news_curation.news import CachedNewsProvider, RateLimiter, WorldNewsProvider, clear_cache
from news_curation.news.world_news import _WorldNewsArticle, select_median_article


class FakeClock:
    """Manually advanced clock returning seconds."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


# -- RateLimiter --


class TestRateLimiter:
    """Tests for RateLimiter."""

    async def test_first_call_does_not_wait(self) -> None:
        sleep = AsyncMock()
        limiter = RateLimiter(1.2, clock=FakeClock(), sleep=sleep)
        await limiter.wait()
        sleep.assert_not_awaited()

    async def test_waits_for_remaining_interval(self) -> None:
        clock = FakeClock()
        sleep = AsyncMock()
        limiter = RateLimiter(1.2, clock=clock, sleep=sleep)

        await limiter.wait()
        clock.now += 0.2
        await limiter.wait()

        sleep.assert_awaited_once()
        assert sleep.await_args.args[0] == pytest.approx(1.0)

    async def test_no_wait_after_interval_elapsed(self) -> None:
        clock = FakeClock()
        sleep = AsyncMock()
        limiter = RateLimiter(1.2, clock=clock, sleep=sleep)

        await limiter.wait()
        clock.now += 1.2
        await limiter.wait()

        sleep.assert_not_awaited()

    async def test_back_to_back_callers_are_spaced(self) -> None:
        clock = FakeClock()
        waits: list[float] = []

        async def sleep(seconds: float) -> None:
            waits.append(seconds)

        limiter = RateLimiter(1.2, clock=clock, sleep=sleep)
        await limiter.wait()
        await limiter.wait()
        await limiter.wait()

        # The second caller claims the slot at t+1.2, so the third waits 2.4.
        assert waits == [pytest.approx(1.2), pytest.approx(2.4)]


# -- WorldNewsProvider --


def _article(article_id: int, text: str, title: str | None = None) -> dict:
    return {
        "id": article_id,
        "title": title or f"Title {article_id}",
        "text": text,
        "publish_date": "2026-03-10 08:00:00",
    }


class TestSelectMedianArticle:
    """Tests for select_median_article."""

    def test_picks_lower_median_by_length(self) -> None:
        articles = [
            _WorldNewsArticle.model_validate(_article(i, "x" * n))
            for i, n in enumerate([50, 10, 40, 20])
        ]
        assert len(select_median_article(articles).text) == 20

    def test_single_article(self) -> None:
        only = _WorldNewsArticle.model_validate(_article(1, "text"))
        assert select_median_article([only]) is only


class TestWorldNewsProvider:
    """Tests for WorldNewsProvider."""

    @pytest.fixture
    def response_data(self) -> dict:
        return {
            "top_news": [
                {"news": [_article(1, "short"), _article(2, "medium text"), _article(3, "x" * 100)]},
                {"news": [_article(4, "single article body")]},
                {"news": []},
            ]
        }

    @pytest.fixture
    def provider(self) -> WorldNewsProvider:
        limiter = RateLimiter(0, sleep=AsyncMock())
        return WorldNewsProvider(api_key="test-key", rate_limiter=limiter, clock=lambda: NOW)

    def test_init_requires_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("WORLD_NEWS_API_KEY", raising=False)
        with pytest.raises(ValueError, match="API key required"):
            WorldNewsProvider()

    def test_init_uses_env_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WORLD_NEWS_API_KEY", "env-key")
        assert WorldNewsProvider()._api_key == "env-key"

    async def test_fetch_builds_items(
        self,
        provider: WorldNewsProvider,
        response_data: dict,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        captured: dict = {}
        mock_response = MagicMock()
        mock_response.json.return_value = response_data
        mock_response.raise_for_status = MagicMock()

        async def mock_get(self, url, params=None, **kwargs):
            captured["url"] = url
            captured["params"] = params
            return mock_response

        monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)

        items = await provider.fetch_news(country=Country.FR, language=Language.FR)

        assert len(items) == 2
        first = items[0]
        assert isinstance(first, NewsItem)
        assert first.coverage == 3
        assert first.headline == "Title 2"
        assert first.source_references == ("1", "2", "3")
        assert first.published_at.tzinfo is not None
        assert items[1].coverage == 1

        assert captured["url"].endswith("/top-news")
        assert captured["params"]["source-country"] == "fr"
        assert captured["params"]["language"] == "fr"
        assert captured["params"]["date"] == "2026-03-10"
        assert captured["params"]["api-key"] == "test-key"

    async def test_defaults_to_us_english(
        self, provider: WorldNewsProvider, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        captured: dict = {}
        mock_response = MagicMock()
        mock_response.json.return_value = {"top_news": []}
        mock_response.raise_for_status = MagicMock()

        async def mock_get(self, url, params=None, **kwargs):
            captured.update(params)
            return mock_response

        monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)

        assert await provider.fetch_news() == []
        assert captured["source-country"] == "us"
        assert captured["language"] == "en"

    async def test_http_error_returns_empty(
        self, provider: WorldNewsProvider, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        request = httpx.Request("GET", "https://api.worldnewsapi.com/top-news")
        error_response = httpx.Response(402, request=request)

        async def mock_get(self, url, params=None, **kwargs):
            return error_response

        monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)

        assert await provider.fetch_news() == []

    async def test_network_error_returns_empty(
        self, provider: WorldNewsProvider, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        async def mock_get(self, url, params=None, **kwargs):
            raise httpx.ConnectError("connection refused")

        monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)

        assert await provider.fetch_news() == []

    async def test_malformed_payload_returns_empty(
        self, provider: WorldNewsProvider, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        mock_response = MagicMock()
        mock_response.json.return_value = {"unexpected": True}
        mock_response.raise_for_status = MagicMock()

        async def mock_get(self, url, params=None, **kwargs):
            return mock_response

        monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)

        assert await provider.fetch_news() == []

    async def test_bad_publish_date_skips_only_that_cluster(
        self, provider: WorldNewsProvider, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        undated = {**_article(5, "body of the undated cluster"), "publish_date": "last tuesday"}
        mock_response = MagicMock()
        mock_response.json.return_value = {
            "top_news": [
                {"news": [undated]},
                {"news": [_article(6, "a dated cluster body"), _article(7, "another")]},
            ]
        }
        mock_response.raise_for_status = MagicMock()

        async def mock_get(self, url, params=None, **kwargs):
            return mock_response

        monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)

        items = await provider.fetch_news()

        assert len(items) == 1
        assert items[0].source_references == ("6", "7")

    async def test_waits_on_rate_limiter(
        self, response_data: dict, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        limiter = MagicMock()
        limiter.wait = AsyncMock()
        provider = WorldNewsProvider(api_key="k", rate_limiter=limiter, clock=lambda: NOW)
        mock_response = MagicMock()
        mock_response.json.return_value = response_data
        mock_response.raise_for_status = MagicMock()

        async def mock_get(self, url, params=None, **kwargs):
            return mock_response

        monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)

        await provider.fetch_news()
        await provider.fetch_news()
        assert limiter.wait.await_count == 2


# -- CachedNewsProvider --


class TestCachedNewsProvider:
    """Tests for the file cache decorator."""

    @pytest.fixture
    def inner(self) -> MagicMock:
        provider = MagicMock()
        provider.fetch_news = AsyncMock(return_value=[make_news_item()])
        return provider

    @pytest.fixture
    def clock(self) -> FakeClock:
        return FakeClock(start=1_700_000_000.0)

    @pytest.fixture
    def cache(self, inner: MagicMock, clock: FakeClock, tmp_path: Path) -> CachedNewsProvider:
        return CachedNewsProvider(inner, cache_dir=tmp_path, env="test", ttl=3600, clock=clock)

    def test_cache_path_layout(self, cache: CachedNewsProvider, tmp_path: Path) -> None:
        assert cache.cache_path(Language.EN) == tmp_path / "test" / "stories" / "en.json"

    async def test_miss_fetches_and_writes(
        self, cache: CachedNewsProvider, inner: MagicMock
    ) -> None:
        items = await cache.fetch_news(country=Country.US, language=Language.EN)

        assert items == [make_news_item()]
        inner.fetch_news.assert_awaited_once_with(country=Country.US, language=Language.EN)
        stored = json.loads(cache.cache_path(Language.EN).read_text())
        assert stored["timestamp"] == 1_700_000_000_000
        assert len(stored["data"]) == 1

    async def test_hit_before_ttl(
        self, cache: CachedNewsProvider, inner: MagicMock, clock: FakeClock
    ) -> None:
        await cache.fetch_news(language=Language.EN)
        clock.now += 3599.999

        items = await cache.fetch_news(language=Language.EN)

        assert inner.fetch_news.await_count == 1
        assert items[0].headline == make_news_item().headline
        assert items[0].source_references == ("1", "2")
        assert items[0].published_at == NOW

    async def test_refetch_at_ttl(
        self, cache: CachedNewsProvider, inner: MagicMock, clock: FakeClock
    ) -> None:
        await cache.fetch_news(language=Language.EN)
        clock.now += 3600

        await cache.fetch_news(language=Language.EN)

        assert inner.fetch_news.await_count == 2

    async def test_languages_are_cached_separately(
        self, cache: CachedNewsProvider, inner: MagicMock
    ) -> None:
        await cache.fetch_news(language=Language.EN)
        await cache.fetch_news(language=Language.FR)

        assert inner.fetch_news.await_count == 2
        assert cache.cache_path(Language.FR).exists()

    async def test_corrupt_file_is_deleted_and_refetched(
        self, cache: CachedNewsProvider, inner: MagicMock
    ) -> None:
        path = cache.cache_path(Language.EN)
        path.parent.mkdir(parents=True)
        path.write_text("{not json")

        items = await cache.fetch_news(language=Language.EN)

        assert len(items) == 1
        inner.fetch_news.assert_awaited_once()
        assert json.loads(path.read_text())["data"]

    async def test_empty_file_is_a_miss(
        self, cache: CachedNewsProvider, inner: MagicMock
    ) -> None:
        path = cache.cache_path(Language.EN)
        path.parent.mkdir(parents=True)
        path.write_text("")

        await cache.fetch_news(language=Language.EN)

        inner.fetch_news.assert_awaited_once()

    async def test_empty_upstream_result_is_not_cached(
        self, cache: CachedNewsProvider, inner: MagicMock
    ) -> None:
        inner.fetch_news.return_value = []

        assert await cache.fetch_news(language=Language.EN) == []
        assert not cache.cache_path(Language.EN).exists()

    async def test_write_failure_is_ignored(
        self, inner: MagicMock, clock: FakeClock, tmp_path: Path
    ) -> None:
        blocker = tmp_path / "blocked"
        blocker.write_text("a file where a directory is expected")
        cache = CachedNewsProvider(inner, cache_dir=blocker, env="test", clock=clock)

        items = await cache.fetch_news(language=Language.EN)

        assert len(items) == 1

    async def test_clear(self, cache: CachedNewsProvider, tmp_path: Path) -> None:
        await cache.fetch_news(language=Language.EN)
        cache.clear()
        assert not (tmp_path / "test").exists()

    def test_clear_cache_leaves_other_envs(self, tmp_path: Path) -> None:
        (tmp_path / "production" / "stories").mkdir(parents=True)
        (tmp_path / "test" / "stories").mkdir(parents=True)

        clear_cache(tmp_path, "test")

        assert (tmp_path / "production").exists()
        assert not (tmp_path / "test").exists()
