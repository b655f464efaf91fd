"""News acquisition: upstream provider, caching and rate limiting."""

from news_curation.news.base import NewsProvider
from news_curation.news.cache import CachedNewsProvider, clear_cache
from news_curation.news.rate_limit import RateLimiter
from news_curation.news.world_news import WorldNewsProvider, select_median_article

__all__ = [
    "CachedNewsProvider",
    "NewsProvider",
    "RateLimiter",
    "WorldNewsProvider",
    "clear_cache",
    "select_median_article",
]
