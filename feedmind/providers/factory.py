"""
Provider factory for creating LLM provider instances.

Handles provider selection based on configuration and available API keys.
"""

import logging
from enum import Enum

from .base import LLMProvider
from .anthropic import AnthropicProvider
from .openai import OpenAIProvider
from .google import GoogleProvider

logger = logging.getLogger(__name__)


class ProviderType(Enum):
    """Available LLM provider types, in default preference order."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"


def create_provider(
    provider_type: ProviderType | str,
    api_key: str,
    default_model: str | None = None,
) -> LLMProvider:
    """
    Create an LLM provider instance.

    Raises:
        ValueError: If provider_type is unknown
    """
    if isinstance(provider_type, str):
        try:
            provider_type = ProviderType(provider_type.lower())
        except ValueError:
            raise ValueError(
                f"Unknown provider: {provider_type}. "
                f"Available: {[p.value for p in ProviderType]}"
            )

    kwargs = {"api_key": api_key}
    if default_model:
        kwargs["default_model"] = default_model

    if provider_type == ProviderType.OPENAI:
        return OpenAIProvider(**kwargs)
    elif provider_type == ProviderType.ANTHROPIC:
        return AnthropicProvider(**kwargs)
    elif provider_type == ProviderType.GOOGLE:
        return GoogleProvider(**kwargs)
    raise ValueError(f"Unknown provider type: {provider_type}")


def get_provider_from_env(
    openai_key: str | None = None,
    anthropic_key: str | None = None,
    google_key: str | None = None,
    preferred_provider: str | None = None,
    default_model: str | None = None,
) -> LLMProvider | None:
    """
    Create a provider from the configured API keys.

    The preferred provider wins if its key is set; otherwise the first
    provider with a key, in order OpenAI > Anthropic > Google.

    Returns:
        Configured LLMProvider or None if no keys available
    """
    keys = {
        ProviderType.OPENAI: openai_key,
        ProviderType.ANTHROPIC: anthropic_key,
        ProviderType.GOOGLE: google_key,
    }

    if preferred_provider:
        try:
            pref_type = ProviderType(preferred_provider.lower())
        except ValueError:
            logger.warning(f"Ignoring unknown LLM_PROVIDER '{preferred_provider}'")
        else:
            if keys[pref_type]:
                return create_provider(pref_type, keys[pref_type], default_model)
            logger.warning(f"LLM_PROVIDER '{pref_type.value}' has no API key configured")

    for provider_type, api_key in keys.items():
        if api_key:
            return create_provider(provider_type, api_key, default_model)

    return None
