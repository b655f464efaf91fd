"""World News API provider."""

import logging
import os
from collections.abc import Callable
from datetime import UTC, datetime

import httpx
from pydantic import BaseModel, ValidationError

from news_curation.data import Country, Language, NewsArticle, NewsItem, utc_now
from news_curation.dates import local_time
from news_curation.news.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

WORLD_NEWS_API_URL = "https://api.worldnewsapi.com"
TOP_NEWS_ENDPOINT = "/top-news"
DEFAULT_COUNTRY = Country.US
DEFAULT_LANGUAGE = Language.EN


class _WorldNewsArticle(BaseModel):
    id: int | str
    title: str
    text: str
    publish_date: str


class _TopNewsSection(BaseModel):
    news: list[_WorldNewsArticle]


class _TopNewsResponse(BaseModel):
    top_news: list[_TopNewsSection]


def select_median_article(articles: list[_WorldNewsArticle]) -> _WorldNewsArticle:
    """Pick the article whose body length is the (lower) median of the cluster."""
    ordered = sorted(articles, key=lambda a: len(a.text))
    return ordered[(len(ordered) - 1) // 2]


def _parse_publish_date(raw: str) -> datetime:
    # World News returns "2026-02-01 10:00:00" in UTC.
    parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


class WorldNewsProvider:
    """Fetch top news clusters from worldnewsapi.com.

    Every request waits on the shared rate limiter first. Upstream failures
    are logged and produce an empty list, never an exception.

    Args:
        api_key: API key (defaults to WORLD_NEWS_API_KEY env var).
        rate_limiter: Limiter shared by all requests of this provider.
        base_url: API root URL.
        timeout: Request timeout in seconds.
        clock: Returns the current aware datetime.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        rate_limiter: RateLimiter | None = None,
        base_url: str = WORLD_NEWS_API_URL,
        timeout: float = 30.0,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._api_key = api_key or os.environ.get("WORLD_NEWS_API_KEY")
        if not self._api_key:
            raise ValueError(
                "World News API key required. Pass api_key or set WORLD_NEWS_API_KEY env var."
            )
        self._rate_limiter = rate_limiter or RateLimiter()
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._clock = clock

    async def fetch_news(
        self,
        *,
        country: Country | None = None,
        language: Language | None = None,
    ) -> list[NewsItem]:
        country = country or DEFAULT_COUNTRY
        language = language or DEFAULT_LANGUAGE
        logger.info("Starting news fetch for %s/%s", country, language)

        try:
            await self._rate_limiter.wait()
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(
                    f"{self._base_url}{TOP_NEWS_ENDPOINT}",
                    params=self._build_params(country, language),
                )
                response.raise_for_status()
                payload = _TopNewsResponse.model_validate(response.json())
            items = [item for section in payload.top_news if (item := self._to_item(section))]
        except httpx.HTTPStatusError as e:
            logger.error(
                "World News request failed for %s/%s: %s %s",
                country,
                language,
                e.response.status_code,
                e.response.reason_phrase,
            )
            return []
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            logger.error("Failed to fetch %s/%s news: %s", country, language, e)
            return []

        logger.info("Retrieved %d news items for %s/%s", len(items), country, language)
        return items

    def _build_params(self, country: Country, language: Language) -> dict[str, str]:
        country_date = local_time(country, self._clock()).strftime("%Y-%m-%d")
        return {
            "api-key": self._api_key,  # type: ignore[dict-item]
            "source-country": country.value,
            "language": language.value,
            "date": country_date,
        }

    def _to_item(self, section: _TopNewsSection) -> NewsItem | None:
        if not section.news:
            return None
        representative = select_median_article(section.news)
        try:
            published_at = _parse_publish_date(representative.publish_date)
        except ValueError:
            logger.warning(
                "Skipping cluster %s with unparsable publish date %r",
                representative.id,
                representative.publish_date,
            )
            return None
        return NewsItem(
            headline=representative.title,
            body=representative.text,
            published_at=published_at,
            coverage=len(section.news),
            articles=tuple(
                NewsArticle(id=str(a.id), headline=a.title, body=a.text) for a in section.news
            ),
        )
