"""Claude agent writing a mixed batch of real and fabricated articles from raw news."""

import logging

from pydantic import BaseModel, Field

from news_curation.agents.base import MIN_FAKE_ARTICLES, GeneratedArticle, PublishedSummary
from news_curation.agents.claude import ClaudeAgent
from news_curation.data import Authenticity, Category, Country, Language, NewsItem
from news_curation.data.models import ARTICLE_BODY_MIN_LENGTH
from news_curation.errors import DomainValidationError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You write articles for a news game where readers must spot fabricated \
stories among real ones. Real articles faithfully rephrase real news. \
Fabricated articles are plausible extensions of real current events with \
subtle twists that require fact-checking to disprove; they use the same \
journalistic tone, real organisations and credible details, and avoid \
sensational claims. Respond ONLY with a JSON object (no markdown fences, no \
commentary).\
"""

USER_PROMPT = """\
Write EXACTLY {count} articles in {language}, at least {min_fake} of them \
fabricated (isFake: true).

For real articles: an 8-12 word headline rephrasing the original, a ~70 word \
factual article, a 1-2 sentence summary.
For fabricated articles: the same format, plus "fakeReason" explaining the \
fictional elements and how they deviate from reality.

Do not repeat or closely paraphrase any recently published article listed \
below.

Return {{"articles": [{{"headline", "body", "summary", "category", "isFake", \
"fakeReason"}}]}} where category is one of: {categories} and fakeReason is \
null for real articles.

TODAY'S NEWS:
{news}

RECENTLY PUBLISHED:
{history}\
"""


class _GeneratedArticle(BaseModel):
    headline: str = Field(min_length=1)
    body: str = Field(min_length=ARTICLE_BODY_MIN_LENGTH)
    summary: str = Field(min_length=1)
    category: str
    isFake: bool
    fakeReason: str | None = None


class GeneratedBatchResponse(BaseModel):
    """Expected JSON shape of a generation response."""

    articles: list[_GeneratedArticle]


def build_user_prompt(
    news: list[NewsItem], history: list[PublishedSummary], count: int, language: Language
) -> str:
    news_lines = "\n".join(
        f'{i + 1}. "{item.headline}" (Context: {item.body[:500]})' for i, item in enumerate(news)
    )
    history_lines = (
        "\n".join(f'{i + 1}. "{h.headline}" - {h.summary}' for i, h in enumerate(history))
        or "(none)"
    )
    return USER_PROMPT.format(
        count=count,
        language=language.value.upper(),
        min_fake=min(MIN_FAKE_ARTICLES, count),
        categories=", ".join(c.value for c in Category),
        news=news_lines,
        history=history_lines,
    )


class ClaudeArticleGenerator(ClaudeAgent):
    """Generate an exact-size batch of real and fake articles."""

    name = "ArticleGeneratorAgent"

    async def generate(
        self,
        *,
        news: list[NewsItem],
        history: list[PublishedSummary],
        count: int,
        country: Country,
        language: Language,
    ) -> list[GeneratedArticle] | None:
        logger.info(
            "[%s] Generating %d articles for %s/%s from %d news items",
            self.name,
            count,
            country,
            language,
            len(news),
        )
        response = await self._run(
            SYSTEM_PROMPT,
            build_user_prompt(news, history, count, language),
            GeneratedBatchResponse,
        )
        if response is None:
            return None

        if len(response.articles) != count:
            logger.warning(
                "[%s] Expected %d articles, got %d", self.name, count, len(response.articles)
            )
            return None

        try:
            articles = [
                GeneratedArticle(
                    headline=a.headline,
                    body=a.body,
                    summary=a.summary,
                    category=Category.parse(a.category),
                    is_fake=a.isFake,
                    fake_reason=Authenticity(is_fake=a.isFake, reason=a.fakeReason).reason,
                )
                for a in response.articles
            ]
        except DomainValidationError as e:
            self._invalid(e)
            return None

        fake_count = sum(1 for a in articles if a.is_fake)
        if fake_count < min(MIN_FAKE_ARTICLES, count):
            logger.warning(
                "[%s] Batch has %d fabricated articles, need at least %d",
                self.name,
                fake_count,
                MIN_FAKE_ARTICLES,
            )
            return None
        return articles
