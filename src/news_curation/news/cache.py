"""File-backed caching decorator for news providers."""

import logging
import shutil
import tempfile
import time
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ValidationError

from news_curation.data import Country, Language, NewsArticle, NewsItem
from news_curation.news.base import NewsProvider

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60 * 60
DEFAULT_LANGUAGE = Language.EN


class _CachedArticle(BaseModel):
    id: str
    headline: str
    body: str


class _CachedItem(BaseModel):
    headline: str
    body: str
    published_at: datetime
    coverage: int
    articles: list[_CachedArticle] = []


class CacheData(BaseModel):
    """On-disk cache entry: a timestamp (epoch ms) and the cached items."""

    timestamp: int
    data: list[_CachedItem]


def default_cache_dir() -> Path:
    return Path(tempfile.gettempdir()) / "news-curation"


def clear_cache(cache_dir: Path | str | None = None, env: str = "development") -> None:
    """Remove the cache directory of one environment."""
    env_dir = (Path(cache_dir) if cache_dir is not None else default_cache_dir()) / env
    try:
        if env_dir.exists():
            shutil.rmtree(env_dir)
            logger.info("Cleared news cache %s", env_dir)
    except OSError as e:
        logger.error("Failed to clear cache directory %s: %s", env_dir, e)


def _to_cached(item: NewsItem) -> _CachedItem:
    return _CachedItem(
        headline=item.headline,
        body=item.body,
        published_at=item.published_at,
        coverage=item.coverage,
        articles=[_CachedArticle(id=a.id, headline=a.headline, body=a.body) for a in item.articles],
    )


def _from_cached(item: _CachedItem) -> NewsItem:
    return NewsItem(
        headline=item.headline,
        body=item.body,
        published_at=item.published_at,
        coverage=item.coverage,
        articles=tuple(NewsArticle(id=a.id, headline=a.headline, body=a.body) for a in item.articles),
    )


class CachedNewsProvider:
    """Cache the results of another news provider on disk, one file per language.

    Fresh entries (younger than ``ttl``) are served without calling the
    wrapped provider. Expired, empty or corrupted files are deleted and
    refetched. The cache is an optimization: write failures are logged and
    ignored.

    Args:
        inner: The provider to call on a cache miss.
        cache_dir: Root cache directory.
        env: Environment name, isolates caches of different deployments.
        ttl: Entry lifetime in seconds.
        clock: Returns the current time in seconds since the epoch.
    """

    def __init__(
        self,
        inner: NewsProvider,
        *,
        cache_dir: Path | str | None = None,
        env: str = "development",
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._inner = inner
        self._root = Path(cache_dir) if cache_dir is not None else default_cache_dir()
        self._env = env
        self._ttl_ms = int(ttl * 1000)
        self._clock = clock
        logger.info("Initializing news cache in %s (ttl=%ss)", self.env_dir, ttl)

    @property
    def env_dir(self) -> Path:
        return self._root / self._env

    def cache_path(self, language: Language | str) -> Path:
        return self.env_dir / "stories" / f"{language}.json"

    async def fetch_news(
        self,
        *,
        country: Country | None = None,
        language: Language | None = None,
    ) -> list[NewsItem]:
        lang = language or DEFAULT_LANGUAGE
        cached = self._read(lang)
        if cached is not None:
            logger.info(
                "Cache hit for %s: %d items, %dms old",
                lang,
                len(cached.data),
                self._now_ms() - cached.timestamp,
            )
            return [_from_cached(item) for item in cached.data]

        logger.info("Cache miss for %s, fetching fresh news", lang)
        items = await self._inner.fetch_news(country=country, language=language)
        if items:
            self._write(lang, items)
        return items

    def clear(self) -> None:
        """Remove every cache file of this environment."""
        clear_cache(self._root, self._env)

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _read(self, language: Language | str) -> CacheData | None:
        path = self.cache_path(language)
        if not path.exists():
            return None
        try:
            content = path.read_text(encoding="utf-8")
            if not content.strip():
                logger.warning("Cache file %s is empty, removing it", path)
                self._remove(path)
                return None
            cache = CacheData.model_validate_json(content)
        except (OSError, ValidationError, ValueError) as e:
            logger.error("Failed to read news cache %s, removing it: %s", path, e)
            self._remove(path)
            return None

        if self._now_ms() - cache.timestamp >= self._ttl_ms:
            logger.info("Cache %s expired, removing it", path)
            self._remove(path)
            return None
        return cache

    def _write(self, language: Language | str, items: list[NewsItem]) -> None:
        path = self.cache_path(language)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            cache = CacheData(timestamp=self._now_ms(), data=[_to_cached(i) for i in items])
            path.write_text(cache.model_dump_json(indent=2), encoding="utf-8")
            logger.info("Wrote %d items to cache %s", len(items), path)
        except (OSError, ValueError) as e:
            logger.error("Failed to write news cache %s: %s", path, e)

    def _remove(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error("Failed to remove cache file %s: %s", path, e)
