"""
Claude provider

Sends naming prompts through the Anthropic SDK's async client and maps
SDK errors onto the ProviderError hierarchy.
"""

from typing import Optional

import anthropic

from ..config import config, get_api_key
from .base import AuthenticationError, ModelProvider, ModelResponse, ProviderError, RateLimitError


class ClaudeProvider(ModelProvider):
    """
    Claude via the Anthropic API.

    Key lookup order:
    1. api_key argument
    2. ANTHROPIC_API_KEY
    3. The saved user config file
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        default_model: Optional[str] = None,
    ):
        """
        Set up the provider; the SDK client is created on first use.

        Args:
            api_key: Anthropic API key (falls back to env var, then config file)
            default_model: Model override (defaults to config.models.model)
        """
        self._api_key = api_key or get_api_key()
        self._default_model = default_model or config.models.model
        self._client = None

    def _get_client(self) -> anthropic.AsyncAnthropic:
        """Create the SDK client on first use."""
        if self._client is None:
            if not self._api_key:
                raise AuthenticationError(
                    "No Anthropic API key configured. Set ANTHROPIC_API_KEY or run name-maker to sign in."
                )
            self._client = anthropic.AsyncAnthropic(api_key=self._api_key)
        return self._client

    @property
    def name(self) -> str:
        return "claude"

    @property
    def default_model(self) -> str:
        return self._default_model

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
        """One messages.create call; text blocks are joined into the reply."""
        client = self._get_client()
        model = model or self._default_model

        request_kwargs = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            request_kwargs["system"] = system
        if temperature is not None:
            request_kwargs["temperature"] = min(1.0, max(0.0, temperature))

        try:
            response = await client.messages.create(**request_kwargs)
        except anthropic.RateLimitError as e:
            raise RateLimitError(f"Claude rate limit exceeded: {e}")
        except anthropic.AuthenticationError as e:
            raise AuthenticationError(f"Claude authentication failed: {e}")
        except anthropic.APIError as e:
            raise ProviderError(f"Claude API error: {e}")

        # Only text blocks carry the answer
        content = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        if not content:
            raise ProviderError("Unexpected response type from Claude")

        return ModelResponse(
            content=content,
            model=response.model,
            provider=self.name,
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens,
            },
            raw_response=response,
        )
