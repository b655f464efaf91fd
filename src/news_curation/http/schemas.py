"""Response models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from news_curation.data import Article


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ArticleVariantResponse(_CamelModel):
    headline: str
    body: str
    stance: str
    discourse: str


class ArticleResponse(_CamelModel):
    id: str
    headline: str
    body: str
    summary: str
    category: str
    country: str
    language: str
    is_fake: bool
    fake_reason: str | None
    publication_tier: str
    published_at: datetime
    created_at: datetime
    story_ids: list[str]
    variants: list[ArticleVariantResponse]

    @classmethod
    def from_article(cls, article: Article) -> "ArticleResponse":
        return cls(
            id=article.id,
            headline=article.headline,
            body=article.body,
            summary=article.summary,
            category=article.category.value,
            country=article.country.value,
            language=article.language.value,
            is_fake=article.authenticity.is_fake,
            fake_reason=article.authenticity.reason,
            publication_tier=article.publication_tier.value,
            published_at=article.published_at,
            created_at=article.created_at,
            story_ids=list(article.story_ids),
            variants=[
                ArticleVariantResponse(
                    headline=v.headline,
                    body=v.body,
                    stance=v.stance.value,
                    discourse=v.discourse.value,
                )
                for v in article.variants
            ],
        )


class ArticleListResponse(_CamelModel):
    items: list[ArticleResponse]
    next_cursor: str | None
    total: int


class ErrorResponse(BaseModel):
    error: str
