"""Claude agents assigning interest tiers to stories and publication tiers to articles."""

import json
import logging
from typing import Literal

from pydantic import BaseModel, Field

from news_curation.agents.base import ClassificationResult
from news_curation.agents.claude import ClaudeAgent
from news_curation.data import Article, InterestTier, PublicationTier, Story

logger = logging.getLogger(__name__)

TIER_GUIDE = """\
You have three choices:
- STANDARD: broad, mainstream appeal. Big stories a general audience would \
find interesting or important. Roughly 70% of items belong here.
- NICHE: well-formed content on a topic of interest to a smaller, specific \
group (a regular-season match of a less popular team, a specialised \
scientific result). Roughly 30% or less.
- ARCHIVED: ONLY for content that is not real news (advertisements, tests, \
corrupted text).

The only factor is the topic's audience appeal: is this for everyone, or for \
a specific group of fans or experts? You MUST select one tier and give a \
brief, clear reason.

Respond ONLY with a JSON object: {"tier": "STANDARD" | "NICHE" | "ARCHIVED", \
"reason": "..."}\
"""

STORY_SYSTEM_PROMPT = (
    "You are an expert news editor deciding how much audience interest a story "
    "deserves before any article is written about it.\n\n" + TIER_GUIDE
)

ARTICLE_SYSTEM_PROMPT = (
    "You are an expert Senior Editor for a modern digital news platform. You "
    "classify content to ensure quality, relevance and proper placement in the "
    "app. You are discerning and understand what makes an article compelling "
    "for a broad audience versus a niche one.\n\n" + TIER_GUIDE
)


class ClassificationResponse(BaseModel):
    """Expected JSON shape of a classification response."""

    tier: Literal["STANDARD", "NICHE", "ARCHIVED"]
    reason: str = Field(min_length=1)


def story_prompt(story: Story) -> str:
    data = {
        "category": story.category.value,
        "countries": [c.value for c in story.countries],
        "synopsis": story.synopsis,
        "perspectives": [
            {
                "stance": p.tags.stance.value if p.tags.stance else None,
                "discourse": p.tags.discourse_type.value if p.tags.discourse_type else None,
            }
            for p in story.perspectives
        ],
    }
    return "STORY TO ANALYZE:\n" + json.dumps(data, indent=2, ensure_ascii=False)


def article_prompt(article: Article) -> str:
    data = {
        "category": article.category.value,
        "headline": article.headline,
        "body": article.body,
        "variants": [{"headline": v.headline, "stance": v.stance.value} for v in article.variants],
    }
    return "ARTICLE TO ANALYZE:\n" + json.dumps(data, indent=2, ensure_ascii=False)


class ClaudeStoryClassifier(ClaudeAgent):
    """Assign an interest tier to a story."""

    name = "StoryClassifierAgent"

    async def classify(self, entity: Story) -> ClassificationResult[InterestTier] | None:
        response = await self._run(STORY_SYSTEM_PROMPT, story_prompt(entity), ClassificationResponse)
        if response is None:
            logger.warning("[%s] No classification for story %s", self.name, entity.id)
            return None
        return ClassificationResult(tier=InterestTier(response.tier), reason=response.reason)


class ClaudeArticleClassifier(ClaudeAgent):
    """Assign a publication tier to an article."""

    name = "ArticleClassifierAgent"

    async def classify(self, entity: Article) -> ClassificationResult[PublicationTier] | None:
        response = await self._run(
            ARTICLE_SYSTEM_PROMPT, article_prompt(entity), ClassificationResponse
        )
        if response is None:
            logger.warning("[%s] No classification for article %s", self.name, entity.id)
            return None
        return ClassificationResult(tier=PublicationTier(response.tier), reason=response.reason)
