"""
Name generator - asks the model for candidate product names

One request per round, no streaming and no retries. A malformed reply
or provider failure raises GenerationError for that round only; the
caller reports it and the user can try again.
"""

import json
import logging
from typing import Optional

from .config import config
from .models import CandidateName, NameBrief
from .prompts import format_generate_prompt, format_iterative_prompt
from .providers.base import ModelProvider, ProviderError

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """The model call failed or its reply had no usable names."""
    pass


def _first_embedded_array(content: str) -> Optional[list]:
    """First substring starting at a '[' that decodes to a JSON array."""
    decoder = json.JSONDecoder()
    start = content.find("[")
    while start != -1:
        try:
            value, _ = decoder.raw_decode(content, start)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, list):
            return value
        start = content.find("[", start + 1)
    return None


def _load_array(content: str) -> list:
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        # Reply wrapped in prose or a code fence
        data = _first_embedded_array(content)
        if data is None:
            raise GenerationError("Failed to parse name suggestions from model response")

    if not isinstance(data, list):
        raise GenerationError("Expected a JSON array of name suggestions")
    return data


def parse_generated_names(content: str) -> list[CandidateName]:
    """
    Parse name suggestions from a model reply.

    Accepts a bare JSON array or one embedded in other text. Entries
    without a usable name are skipped; duplicates (case-insensitive)
    keep their first occurrence.

    Args:
        content: Raw model reply

    Returns:
        Candidate names in reply order

    Raises:
        GenerationError: If no array can be parsed or it holds no names
    """
    candidates = []
    seen = set()
    for item in _load_array(content):
        if isinstance(item, str):
            name, reasoning = item, None
        elif isinstance(item, dict) and isinstance(item.get("name"), str):
            name, reasoning = item["name"], item.get("reasoning")
        else:
            continue

        name = name.strip()
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        candidates.append(CandidateName(
            name=name,
            reasoning=reasoning.strip() if isinstance(reasoning, str) else None,
        ))

    if not candidates:
        raise GenerationError("Model response contained no name suggestions")
    return candidates


class NameGenerator:
    """
    Generates candidate names for a brief.

    Works with any ModelProvider; the CLI uses Claude, tests use the
    mock provider.
    """

    def __init__(
        self,
        provider: ModelProvider,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ):
        """
        Args:
            provider: AI model provider to use
            model: Optional model override (uses provider default if not specified)
            max_tokens: Reply budget
        """
        self.provider = provider
        self.model = model
        self.max_tokens = max_tokens or config.models.max_tokens
        self.last_usage: dict = {}

    async def generate(self, brief: NameBrief) -> list[CandidateName]:
        """First round of names for a brief."""
        return await self._request(format_generate_prompt(brief))

    async def generate_more(
        self,
        brief: NameBrief,
        previous_names: list[str],
        feedback: Optional[str] = None,
    ) -> list[CandidateName]:
        """
        Another round of names, steering away from ones already seen.

        Args:
            brief: Product brief
            previous_names: Generated and manually checked names so far
            feedback: Optional direction for this round

        Returns:
            New candidate names (names already seen are dropped)
        """
        unique_previous = list(dict.fromkeys(previous_names))
        prompt = format_iterative_prompt(brief, unique_previous, feedback)
        candidates = await self._request(prompt)

        seen = {n.lower() for n in unique_previous}
        fresh = [c for c in candidates if c.name.lower() not in seen]
        if len(fresh) < len(candidates):
            logger.debug(f"Dropped {len(candidates) - len(fresh)} repeated names")
        return fresh

    async def _request(self, prompt: str) -> list[CandidateName]:
        try:
            response = await self.provider.generate(
                prompt,
                model=self.model,
                max_tokens=self.max_tokens,
            )
        except ProviderError as e:
            raise GenerationError(str(e)) from e

        self.last_usage = {
            "input_tokens": response.input_tokens,
            "output_tokens": response.output_tokens,
        }

        candidates = parse_generated_names(response.content)
        logger.debug(f"Model returned {len(candidates)} names")
        return candidates
