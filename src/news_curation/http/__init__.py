"""HTTP API."""

from news_curation.http.app import create_app
from news_curation.http.schemas import ArticleListResponse, ArticleResponse, ErrorResponse

__all__ = [
    "ArticleListResponse",
    "ArticleResponse",
    "ErrorResponse",
    "create_app",
]
