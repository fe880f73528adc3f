"""
Offline provider for tests and --mock runs

Replies with a JSON list of invented brand names unless a fixed reply or
a reply function is configured. No network access.
"""

import asyncio
import json
import random
from dataclasses import dataclass, field
from typing import Callable, Optional

from ..prompts import NAMES_PER_ROUND
from .base import ModelProvider, ModelResponse, ProviderError

# Stems and endings combined into plausible brand names
NAME_STEMS = ["Lum", "Nov", "Vex", "Quill", "Brio", "Zen", "Kite", "Orb", "Flux", "Nim", "Sol", "Tandem"]
NAME_ENDINGS = ["ina", "ora", "ly", "io", "ara", "ix", "ent", "um", "ify", "o"]


def generate_mock_names(count: int = 10, seed: Optional[int] = None) -> list[dict]:
    """
    Build `count` distinct name records shaped like a model reply.

    Args:
        count: Number of names
        seed: Optional seed for repeatable output

    Returns:
        List of {"name", "reasoning"} dicts
    """
    rng = random.Random(seed)
    names = []
    seen = set()
    while len(names) < count:
        stem = rng.choice(NAME_STEMS)
        ending = rng.choice(NAME_ENDINGS)
        name = f"{stem}{ending}"
        if name.lower() in seen:
            continue
        seen.add(name.lower())
        names.append({
            "name": name,
            "reasoning": f"Blends '{stem}' with a soft '-{ending}' ending for a short, brandable sound",
        })
    return names


@dataclass
class MockProvider(ModelProvider):
    """
    Stand-in for ClaudeProvider.

    Reply source, in order: fixed_response, response_generator(prompt),
    then ten seeded mock names. Every prompt is kept in `prompts` so tests
    can inspect what the generator sent.
    """

    _name: str = "mock"
    _default_model: str = "mock-model-v1"
    fixed_response: Optional[str] = None
    response_generator: Optional[Callable[[str], str]] = None
    delay_seconds: float = 0.0
    fail_rate: float = 0.0
    token_count: int = 100
    seed: Optional[int] = None
    prompts: list[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self._name

    @property
    def default_model(self) -> str:
        return self._default_model

    def _reply(self, prompt: str) -> str:
        if self.fixed_response is not None:
            return self.fixed_response
        if self.response_generator is not None:
            return self.response_generator(prompt)
        return json.dumps(generate_mock_names(NAMES_PER_ROUND, self.seed), indent=2)

    async def generate(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: int = 2048,
        temperature: float = 0.7,
        **kwargs
    ) -> ModelResponse:
        self.prompts.append(prompt)
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)

        # fail_rate is a probability; 1.0 always fails
        if random.random() < self.fail_rate:
            raise ProviderError("Mock provider failure (fail_rate)")

        return ModelResponse(
            content=self._reply(prompt),
            model=model or self._default_model,
            provider=self._name,
            usage={"input_tokens": len(prompt.split()), "output_tokens": self.token_count},
        )
