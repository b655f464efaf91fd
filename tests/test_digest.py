"""Tests for the story digestion stage."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from builders import NOW, make_draft, make_news_item, make_story
from news_curation.agents import StoryDigest
from news_curation.data import Category, Country, InterestTier, Language, Stance
from news_curation.persistence import SqlStoryRepository, StoryCriteria
from news_curation.pipeline import DigestStories


def _digest(synopsis: str = "Lawmakers passed the bill.") -> StoryDigest:
    return StoryDigest(
        category=Category.POLITICS,
        synopsis=synopsis,
        perspectives=(make_draft(Stance.SUPPORTIVE), make_draft(Stance.CRITICAL)),
    )


@pytest.fixture
def agent() -> MagicMock:
    agent = MagicMock()
    agent.digest = AsyncMock(return_value=_digest())
    return agent


@pytest.fixture
def news() -> MagicMock:
    provider = MagicMock()
    provider.fetch_news = AsyncMock(return_value=[])
    return provider


@pytest.fixture
def digest_stories(
    agent: MagicMock, news: MagicMock, story_repository: SqlStoryRepository
) -> DigestStories:
    return DigestStories(agent, news, story_repository, clock=lambda: NOW)


class TestDigestStories:
    """Tests for DigestStories."""

    async def test_creates_one_pending_story_per_cluster(
        self,
        digest_stories: DigestStories,
        news: MagicMock,
        story_repository: SqlStoryRepository,
    ) -> None:
        news.fetch_news.return_value = [
            make_news_item(f"Event {i}", refs=(f"{i}a", f"{i}b")) for i in range(5)
        ]

        created = await digest_stories.execute(Country.US, Language.EN)

        assert len(created) == 5
        stored = await story_repository.find_many(StoryCriteria())
        assert len(stored) == 5
        assert all(s.interest_tier == InterestTier.PENDING_REVIEW for s in stored)
        assert all(s.countries == (Country.US,) for s in stored)
        assert all(len(s.perspectives) == 2 for s in stored)
        news.fetch_news.assert_awaited_once_with(country=Country.US, language=Language.EN)

    async def test_story_keeps_cluster_references_and_date(
        self, digest_stories: DigestStories, news: MagicMock
    ) -> None:
        item = make_news_item(refs=("x", "y", "z"))
        news.fetch_news.return_value = [item]

        [story] = await digest_stories.execute(Country.FR, Language.FR)

        assert story.source_references == ("x", "y", "z")
        assert story.dateline == item.published_at
        assert story.created_at == NOW
        assert story.countries == (Country.FR,)

    async def test_drops_uncorroborated_clusters(
        self, digest_stories: DigestStories, news: MagicMock, agent: MagicMock
    ) -> None:
        news.fetch_news.return_value = [
            make_news_item("Lonely report", refs=("solo",)),
            make_news_item("Widely reported", refs=("a", "b")),
        ]

        created = await digest_stories.execute(Country.US, Language.EN)

        assert len(created) == 1
        agent.digest.assert_awaited_once()
        assert agent.digest.await_args.args[0].headline == "Widely reported"

    async def test_skips_clusters_already_stored(
        self,
        digest_stories: DigestStories,
        news: MagicMock,
        agent: MagicMock,
        story_repository: SqlStoryRepository,
    ) -> None:
        await story_repository.create(make_story(refs=("1", "2")))
        news.fetch_news.return_value = [
            make_news_item("Known", refs=("1", "2")),
            make_news_item("Partly new", refs=("2", "3")),
        ]

        created = await digest_stories.execute(Country.US, Language.EN)

        assert [s.source_references for s in created] == [("2", "3")]
        assert agent.digest.await_count == 1

    async def test_skips_duplicate_clusters_within_a_batch(
        self, digest_stories: DigestStories, news: MagicMock
    ) -> None:
        news.fetch_news.return_value = [
            make_news_item("First", refs=("a", "b")),
            make_news_item("Repeat", refs=("a", "b")),
        ]

        created = await digest_stories.execute(Country.US, Language.EN)

        assert len(created) == 1

    async def test_agent_failures_do_not_stop_the_batch(
        self,
        digest_stories: DigestStories,
        news: MagicMock,
        agent: MagicMock,
        story_repository: SqlStoryRepository,
    ) -> None:
        news.fetch_news.return_value = [
            make_news_item(f"Event {i}", refs=(f"{i}a", f"{i}b")) for i in range(3)
        ]
        agent.digest.side_effect = [None, RuntimeError("boom"), _digest("Third")]

        created = await digest_stories.execute(Country.US, Language.EN)

        assert [s.synopsis for s in created] == ["Third"]
        assert len(await story_repository.find_many(StoryCriteria())) == 1

    async def test_no_news(
        self, digest_stories: DigestStories, agent: MagicMock
    ) -> None:
        assert await digest_stories.execute(Country.US, Language.EN) == []
        agent.digest.assert_not_awaited()
