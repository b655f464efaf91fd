"""FastAPI application factory."""

import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from news_curation.errors import DomainValidationError, InvalidCursorError
from news_curation.http.routes import router
from news_curation.pipeline.get_articles import GetArticles

logger = logging.getLogger(__name__)

Lifespan = Callable[[FastAPI], AbstractAsyncContextManager[None]]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _invalid_cursor(request: Request, exc: Exception) -> JSONResponse:
    return _error(400, "Invalid cursor")


async def _invalid_input(request: Request, exc: Exception) -> JSONResponse:
    return _error(400, str(exc))


async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = [
        f"{'.'.join(str(p) for p in err['loc'][1:]) or 'request'}: {err['msg']}"
        for err in exc.errors()
    ]
    return _error(400, "; ".join(messages) or "Invalid request")


async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error(500, "Internal server error")


def create_app(get_articles: GetArticles, *, lifespan: Lifespan | None = None) -> FastAPI:
    """Build the API around a retrieval use case.

    Args:
        get_articles: Use case serving ``GET /articles``.
        lifespan: Optional lifespan context, e.g. to connect the database and
            run the scheduler alongside the server.
    """
    app = FastAPI(title="News Curation API", lifespan=lifespan)
    app.state.get_articles = get_articles
    app.include_router(router)

    app.add_exception_handler(InvalidCursorError, _invalid_cursor)
    app.add_exception_handler(DomainValidationError, _invalid_input)
    app.add_exception_handler(RequestValidationError, _invalid_request)
    app.add_exception_handler(Exception, _unexpected)
    return app
