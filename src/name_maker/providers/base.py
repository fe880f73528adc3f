"""
Provider interface for name generation

A provider takes one prompt and returns one complete text reply. The
generator only depends on this module, so a provider can be swapped
(Claude for real runs, the mock for tests) without touching it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional


class ProviderError(Exception):
    """The model call failed or returned nothing usable."""
    pass


class RateLimitError(ProviderError):
    """The provider throttled the request."""
    pass


class AuthenticationError(ProviderError):
    """Missing or rejected API key."""
    pass


@dataclass
class ModelResponse:
    """Text reply plus token accounting."""
    content: str
    model: str
    provider: str
    usage: dict = field(default_factory=dict)
    raw_response: Optional[Any] = None

    @property
    def input_tokens(self) -> int:
        return self.usage.get("input_tokens", 0)

    @property
    def output_tokens(self) -> int:
        return self.usage.get("output_tokens", 0)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class ModelProvider(ABC):
    """Common base for the Claude and mock providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used by get_provider()."""

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Model used when a call doesn't name one."""

    @abstractmethod
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
        """
        Send one prompt and wait for the full reply.

        Args:
            prompt: Naming prompt built by the prompts module
            system: Optional system instructions
            model: Model override
            max_tokens: Reply budget
            temperature: Sampling temperature

        Returns:
            ModelResponse whose content is the raw reply text

        Raises:
            AuthenticationError: Missing or rejected key
            RateLimitError: Provider throttling
            ProviderError: Any other failure
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.default_model!r})"
