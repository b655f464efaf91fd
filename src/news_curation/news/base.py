"""Protocol for news providers."""

from typing import Protocol

from news_curation.data import Country, Language, NewsItem


class NewsProvider(Protocol):
    """Interface for fetching raw news for a country and language."""

    async def fetch_news(
        self,
        *,
        country: Country | None = None,
        language: Language | None = None,
    ) -> list[NewsItem]:
        """Fetch the current top news.

        Args:
            country: Source country (provider default when omitted).
            language: Language of the news (provider default when omitted).

        Returns:
            News items, one per event cluster. Empty when the upstream fails.
        """
        ...
