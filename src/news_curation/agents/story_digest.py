"""Claude agent that digests a news cluster into a story with perspectives."""

import json
import logging

from pydantic import BaseModel, Field

from news_curation.agents.base import StoryDigest
from news_curation.agents.claude import ClaudeAgent
from news_curation.data import (
    Category,
    DiscourseType,
    NewsItem,
    PerspectiveDraft,
    PerspectiveTags,
    Stance,
)
from news_curation.data.models import (
    HOLISTIC_DIGEST_MAX_LENGTH,
    HOLISTIC_DIGEST_MIN_LENGTH,
    SYNOPSIS_MAX_LENGTH,
)
from news_curation.errors import DomainValidationError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are a master investigative journalist and media analyst. Your core mission \
is to analyze news articles and deconstruct them into a structured \
intelligence brief, identifying the core facts and the distinct perspectives \
presented. Base your analysis only on the provided articles. Write in English. \
Respond ONLY with a JSON object (no markdown fences, no commentary).\
"""

USER_PROMPT = """\
Analyze the following news articles about a single event and deconstruct them \
into a structured intelligence brief.

Return a JSON object with these fields:
- "category": one of: {categories}
- "synopsis": a neutral, information-dense summary of the core facts (what \
happened, who, where, when) in about 50 words
- "perspectives": an array of 1 or 2 of the most dominant, clearly distinct \
perspectives. Each perspective is an object with:
  - "holisticDigest": a complete inventory of every argument, fact, quote and \
piece of context needed to write an article from this viewpoint \
({min_digest}-{max_digest} characters). Completeness over style.
  - "tags": {{"stance": one of {stances}, "discourse_type": "mainstream" or \
"alternative"}}

Discourse definitions:
- mainstream: the dominant narrative seen across most major media outlets.
- alternative: a less prevalent viewpoint that is still visible in public media.

NEWS ARTICLES TO ANALYZE:
{articles}\
"""


class _Tags(BaseModel):
    stance: Stance
    discourse_type: DiscourseType


class _Perspective(BaseModel):
    holisticDigest: str = Field(
        min_length=HOLISTIC_DIGEST_MIN_LENGTH, max_length=HOLISTIC_DIGEST_MAX_LENGTH
    )
    tags: _Tags


class StoryDigestResponse(BaseModel):
    """Expected JSON shape of the digest response."""

    category: str
    synopsis: str = Field(min_length=1, max_length=SYNOPSIS_MAX_LENGTH)
    perspectives: list[_Perspective] = Field(min_length=1, max_length=2)


def build_user_prompt(item: NewsItem) -> str:
    articles = [{"headline": a.headline, "body": a.body} for a in item.articles] or [
        {"headline": item.headline, "body": item.body}
    ]
    return USER_PROMPT.format(
        categories=", ".join(c.value for c in Category),
        stances=", ".join(s.value for s in Stance),
        min_digest=HOLISTIC_DIGEST_MIN_LENGTH,
        max_digest=HOLISTIC_DIGEST_MAX_LENGTH,
        articles=json.dumps(articles, indent=2, ensure_ascii=False),
    )


class ClaudeStoryDigestAgent(ClaudeAgent):
    """Digest a news cluster into a synopsis, category and perspectives."""

    name = "StoryDigestAgent"

    async def digest(self, item: NewsItem) -> StoryDigest | None:
        logger.info("[%s] Digesting story with %d articles", self.name, len(item.articles))
        response = await self._run(SYSTEM_PROMPT, build_user_prompt(item), StoryDigestResponse)
        if response is None:
            return None

        try:
            result = StoryDigest(
                category=Category.parse(response.category),
                synopsis=response.synopsis,
                perspectives=tuple(
                    PerspectiveDraft(
                        holistic_digest=p.holisticDigest,
                        tags=PerspectiveTags(
                            stance=p.tags.stance, discourse_type=p.tags.discourse_type
                        ),
                    )
                    for p in response.perspectives
                ),
            )
        except DomainValidationError as e:
            self._invalid(e)
            return None

        logger.info(
            "[%s] Digested story: %s... with %d perspectives",
            self.name,
            result.synopsis[:100],
            len(result.perspectives),
        )
        return result
