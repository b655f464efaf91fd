"""Claude agent composing a neutral article and stance variants from a story."""

import json
import logging

from pydantic import BaseModel, Field

from news_curation.agents.base import ArticleComposition
from news_curation.agents.claude import ClaudeAgent
from news_curation.data import (
    ArticleVariant,
    Category,
    Country,
    DiscourseType,
    Language,
    Stance,
    Story,
)
from news_curation.data.models import ARTICLE_BODY_MIN_LENGTH, MAX_ARTICLE_VARIANTS
from news_curation.errors import DomainValidationError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are an expert content composer and journalistic writer. You transform \
structured story data into articles: a neutral main article presenting only \
facts, plus variants representing different viewpoints. Base all content on \
the provided story data and never add information that is not in it. \
Respond ONLY with a JSON object (no markdown fences, no commentary).\
"""

USER_PROMPT = """\
CRITICAL: Output MUST be in {language} language.

Compose from the story data below:
1. MAIN ARTICLE: neutral and factual, 150-300 words, does not favour any \
perspective. Focus on what happened rather than interpretations.
2. VARIANTS: 0 to {max_variants} rewrites, one per provided perspective \
(stance + discourse), 100-250 words each, each with its own headline. \
Variants may be perspective-driven but must stay factually accurate.

Headlines are 60-80 characters. The summary is 1-2 sentences.

Return a JSON object with these fields:
- "headline", "body", "summary"
- "category": one of: {categories}
- "variants": array of {{"headline", "body", "stance", "discourse"}} where \
stance is one of {stances} and discourse is one of {discourses}

STORY DATA FOR COMPOSITION:
{story}\
"""


class _Variant(BaseModel):
    headline: str = Field(min_length=1)
    body: str = Field(min_length=ARTICLE_BODY_MIN_LENGTH)
    stance: Stance
    discourse: DiscourseType


class ArticleCompositionResponse(BaseModel):
    """Expected JSON shape of a composition response."""

    headline: str = Field(min_length=1)
    body: str = Field(min_length=ARTICLE_BODY_MIN_LENGTH)
    summary: str = Field(min_length=1)
    category: str
    variants: list[_Variant] = Field(default_factory=list, max_length=MAX_ARTICLE_VARIANTS)


def build_user_prompt(story: Story, language: Language) -> str:
    story_data = {
        "dateline": story.dateline.isoformat(),
        "synopsis": story.synopsis,
        "perspectives": [
            {
                "digest": p.holistic_digest,
                "stance": p.tags.stance.value if p.tags.stance else None,
                "discourse": p.tags.discourse_type.value if p.tags.discourse_type else None,
            }
            for p in story.perspectives
        ],
    }
    return USER_PROMPT.format(
        language=language.value.upper(),
        max_variants=MAX_ARTICLE_VARIANTS,
        categories=", ".join(c.value for c in Category),
        stances=", ".join(s.value for s in Stance),
        discourses=", ".join(d.value for d in DiscourseType),
        story=json.dumps(story_data, indent=2, ensure_ascii=False),
    )


class ClaudeArticleComposer(ClaudeAgent):
    """Compose an article for a target locale from a digested story."""

    name = "ArticleComposerAgent"

    async def compose(
        self, story: Story, *, country: Country, language: Language
    ) -> ArticleComposition | None:
        logger.info(
            "[%s] Composing %s/%s article for story %s with %d perspectives",
            self.name,
            country,
            language,
            story.id,
            len(story.perspectives),
        )
        response = await self._run(
            SYSTEM_PROMPT, build_user_prompt(story, language), ArticleCompositionResponse
        )
        if response is None:
            return None

        try:
            composition = ArticleComposition(
                headline=response.headline,
                body=response.body,
                summary=response.summary,
                category=Category.parse(response.category),
                variants=tuple(
                    ArticleVariant(
                        headline=v.headline, body=v.body, stance=v.stance, discourse=v.discourse
                    )
                    for v in response.variants
                ),
            )
        except DomainValidationError as e:
            self._invalid(e)
            return None

        logger.info(
            '[%s] Composed "%s" (%d chars) with %d variants',
            self.name,
            composition.headline,
            len(composition.body),
            len(composition.variants),
        )
        return composition
