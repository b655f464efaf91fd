"""Article API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from news_curation.data import Category, Country, Language
from news_curation.errors import DomainValidationError
from news_curation.http.schemas import ArticleListResponse, ArticleResponse, ErrorResponse
from news_curation.pipeline.get_articles import DEFAULT_LIMIT, ArticleQuery, GetArticles

router = APIRouter(tags=["articles"])


def get_articles_use_case(request: Request) -> GetArticles:
    """Dependency returning the retrieval use case bound to the app."""
    return request.app.state.get_articles


def _parse_category(value: str) -> Category:
    try:
        return Category(value.strip().lower())
    except ValueError:
        supported = ", ".join(c.value for c in Category)
        raise DomainValidationError(
            f"Invalid category: {value}. Supported categories are: {supported}"
        ) from None


@router.get(
    "/articles",
    response_model=ArticleListResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def list_articles(
    use_case: Annotated[GetArticles, Depends(get_articles_use_case)],
    category: Annotated[str | None, Query(description="Filter by category")] = None,
    country: Annotated[str | None, Query(description="Country code (default: us)")] = None,
    cursor: Annotated[str | None, Query(description="Opaque cursor from a previous page")] = None,
    language: Annotated[str | None, Query(description="Filter by language")] = None,
    limit: Annotated[int, Query(description="Page size, 1-100")] = DEFAULT_LIMIT,
):
    """List published articles, newest first.

    Follow ``nextCursor`` to fetch the next page until it is null.
    """
    query = ArticleQuery(
        category=_parse_category(category) if category else None,
        country=Country.parse(country) if country else None,
        language=Language.parse(language) if language else None,
        cursor=cursor or None,
        limit=limit,
    )
    page = await use_case.execute(query)
    return ArticleListResponse(
        items=[ArticleResponse.from_article(a) for a in page.items],
        next_cursor=page.next_cursor,
        total=page.total,
    )


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
