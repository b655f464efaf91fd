"""Shared fixtures for the test suite."""

from collections.abc import AsyncIterator
from pathlib import Path

import pytest

from builders import NOW
from news_curation.persistence import Database, SqlArticleRepository, SqlStoryRepository


@pytest.fixture
async def database(tmp_path: Path) -> AsyncIterator[Database]:
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.connect()
    yield db
    await db.disconnect()


@pytest.fixture
def story_repository(database: Database) -> SqlStoryRepository:
    return SqlStoryRepository(database, clock=lambda: NOW)


@pytest.fixture
def article_repository(database: Database) -> SqlArticleRepository:
    return SqlArticleRepository(database)
