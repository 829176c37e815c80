"""Base interface for completion providers."""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator

from eri_chat.data.transcript import Completion, Transcript


class BaseLLMProvider(ABC):
    """
    Abstract base class for completion providers.

    All providers (Groq, Anthropic) implement this interface so the
    orchestrator can drive any of them through the same fallback cascade.

    Implementations must raise the completion error taxonomy from
    ``eri_chat.core.exceptions`` (CapacityExceeded, SchemaRejected,
    CapabilityMissing, ProviderError) rather than raw SDK or HTTP errors.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'groq', 'anthropic')."""
        ...

    @abstractmethod
    async def complete(
        self,
        transcript: Transcript,
        *,
        model: str,
        tools: list[dict[str, Any]] | None = None,
        max_tokens: int = 1500,
        temperature: float | None = None,
    ) -> Completion:
        """
        Request one completion.

        Args:
            transcript: Conversation so far, system turn first
            model: Provider model id
            tools: OpenAI-style function schemas; None disables tool use
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature; None keeps the provider default

        Returns:
            Completion with text and any structured tool calls
        """
        ...

    @abstractmethod
    def stream(
        self,
        transcript: Transcript,
        *,
        model: str,
        max_tokens: int = 1500,
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        """
        Stream a completion as text fragments.

        Errors raised while opening the stream surface on the first
        iteration, before any fragment is yielded.

        Yields:
            Response text fragments
        """
        ...

    async def close(self) -> None:
        """Release provider resources."""
        return None
