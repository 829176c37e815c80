"""Completion provider implementations.

Supports two providers behind one interface:
- Groq: OpenAI-compatible chat completions over httpx (default)
- Anthropic: Messages API through the official SDK

Usage:
    from eri_chat.utils.providers import create_provider

    provider = create_provider(settings, http_client)
"""

import httpx

from eri_chat.config.settings import Settings
from eri_chat.utils.providers.anthropic import AnthropicProvider
from eri_chat.utils.providers.base import BaseLLMProvider
from eri_chat.utils.providers.groq import GroqProvider


def create_provider(
    settings: Settings,
    http_client: httpx.AsyncClient | None = None,
) -> BaseLLMProvider:
    """
    Factory function to create the completion provider from settings.

    Args:
        settings: Application settings
        http_client: Shared client for the Groq API (base_url = Groq root)

    Returns:
        Configured provider instance

    Raises:
        ValueError: If the provider is unknown or its API key is missing
    """
    if settings.llm_provider == "groq":
        if not settings.groq_api_key:
            raise ValueError(
                "Groq API key required. Set GROQ_API_KEY environment variable."
            )
        if http_client is None:
            raise ValueError("Groq provider requires an HTTP client")
        return GroqProvider(client=http_client, api_key=settings.groq_api_key)

    elif settings.llm_provider == "anthropic":
        if not settings.anthropic_api_key:
            raise ValueError(
                "Anthropic API key required. Set ANTHROPIC_API_KEY environment variable."
            )
        return AnthropicProvider(
            api_key=settings.anthropic_api_key,
            timeout=settings.http_timeout_seconds,
        )

    else:
        raise ValueError(
            f"Unknown LLM provider: {settings.llm_provider}. "
            f"Supported providers: groq, anthropic"
        )


__all__ = [
    "BaseLLMProvider",
    "GroqProvider",
    "AnthropicProvider",
    "create_provider",
]
