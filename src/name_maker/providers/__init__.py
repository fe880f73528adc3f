"""
Model providers for name generation

Claude for real runs, the mock for tests and offline use. Pick one by
name with get_provider(); NAME_MAKER_PROVIDER sets the default.
"""

from .base import (
    AuthenticationError,
    ModelProvider,
    ModelResponse,
    ProviderError,
    RateLimitError,
)
from .claude import ClaudeProvider
from .mock import MockProvider

PROVIDERS = {
    "claude": ClaudeProvider,
    "mock": MockProvider,
}

__all__ = [
    "ModelProvider",
    "ModelResponse",
    "ProviderError",
    "RateLimitError",
    "AuthenticationError",
    "ClaudeProvider",
    "MockProvider",
    "PROVIDERS",
    "get_provider",
]


def get_provider(name: str, **kwargs) -> ModelProvider:
    """
    Build a provider by name.

    Raises:
        ValueError: For a name not in PROVIDERS
    """
    try:
        provider_cls = PROVIDERS[name]
    except KeyError:
        raise ValueError(f"Unknown provider: {name}. Valid options: {sorted(PROVIDERS)}") from None
    return provider_cls(**kwargs)
