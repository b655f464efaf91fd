"""Shared plumbing for Claude-backed agents using structured JSON output."""

import json
import logging
import os
from typing import TypeVar

import anthropic
from pydantic import BaseModel, ValidationError

from news_curation.errors import DomainValidationError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5-20251001"

ModelT = TypeVar("ModelT", bound=BaseModel)


def strip_code_fences(text: str) -> str:
    """Remove surrounding markdown code fences from a model response."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = [line for line in cleaned.split("\n") if not line.strip().startswith("```")]
        cleaned = "\n".join(lines)
    return cleaned


class ClaudeAgent:
    """Base class: send a prompt to Claude and validate the JSON answer.

    Subclasses build prompts and convert the validated response into domain
    values. Any failure along the way (API error, non-JSON output, schema
    mismatch, domain validation) is logged and reported as ``None``.

    Args:
        model: Anthropic model to use.
        api_key: API key (defaults to CLAUDE_API_KEY env var).
        max_tokens: Response token budget.
    """

    name = "ClaudeAgent"

    def __init__(
        self,
        *,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        max_tokens: int = 4096,
    ) -> None:
        resolved_key = api_key or os.environ.get("CLAUDE_API_KEY")
        self._client = anthropic.AsyncAnthropic(api_key=resolved_key)
        self._model = model
        self._max_tokens = max_tokens

    async def _complete(self, system: str, user: str) -> str:
        response = await self._client.messages.create(
            model=self._model,
            max_tokens=self._max_tokens,
            system=system,
            messages=[{"role": "user", "content": user}],
        )
        text = ""
        for block in response.content:
            if hasattr(block, "text"):
                text += block.text
        return text

    async def _run(self, system: str, user: str, schema: type[ModelT]) -> ModelT | None:
        try:
            text = await self._complete(system, user)
        except anthropic.APIError as e:
            logger.error("[%s] Model call failed: %s", self.name, e)
            return None

        try:
            return schema.model_validate(json.loads(strip_code_fences(text)))
        except json.JSONDecodeError:
            logger.warning("[%s] Response is not valid JSON", self.name)
        except ValidationError as e:
            logger.warning("[%s] Response does not match schema: %s", self.name, e)
        return None

    def _invalid(self, error: DomainValidationError) -> None:
        logger.warning("[%s] Response rejected by domain validation: %s", self.name, error)
