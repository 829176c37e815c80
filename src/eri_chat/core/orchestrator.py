"""Model fallback orchestration.

Drives completion requests across the ranked model tiers:

    primary (tools) --schema rejected x N--> primary (no tools)
        |
        capacity exceeded
        v
    secondary (tools) --capacity exceeded / capability missing--> tertiary (tools)

Any other failure falls through to one last attempt on the tertiary tier
without tools. If that fails too, CompletionUnavailable is raised.

Tiers are tried strictly in order; nothing is raced.
"""

from dataclasses import dataclass
from typing import Any, Literal

from eri_chat.config.models import ModelTiers
from eri_chat.core.exceptions import (
    CapabilityMissing,
    CapacityExceeded,
    CompletionError,
    CompletionUnavailable,
    SchemaRejected,
)
from eri_chat.data.transcript import Completion, Transcript
from eri_chat.tools.schema import TOOLS
from eri_chat.utils.logging import get_logger
from eri_chat.utils.providers.base import BaseLLMProvider


logger = get_logger(__name__)

AttemptOutcome = Literal["success", "rate_limited", "schema_rejected", "other_error"]


@dataclass(frozen=True)
class ModelAttempt:
    """Record of one completion attempt, kept only for the current call."""

    model_id: str
    used_tools: bool
    outcome: AttemptOutcome


def outcome_for(error: Exception) -> AttemptOutcome:
    if isinstance(error, CapacityExceeded):
        return "rate_limited"
    if isinstance(error, SchemaRejected):
        return "schema_rejected"
    return "other_error"


class ModelOrchestrator:
    """
    Completion fallback cascade over three model tiers.

    Stateless apart from its injected collaborators; safe to share between
    requests.
    """

    def __init__(
        self,
        provider: BaseLLMProvider,
        tiers: ModelTiers,
        tools: list[dict[str, Any]] | None = None,
        schema_retry_attempts: int = 3,
        temperature: float | None = 0.7,
        max_tokens: int = 1500,
    ):
        """
        Initialize the orchestrator.

        Args:
            provider: Completion provider
            tiers: Model ids per tier
            tools: Tool schemas offered when tools are enabled
            schema_retry_attempts: Total attempts on the primary tier while
                the provider keeps rejecting the request shape
            temperature: Sampling temperature for cascade requests
            max_tokens: Token cap for cascade requests
        """
        self._provider = provider
        self._tiers = tiers
        self._tools = tools if tools is not None else TOOLS
        self._schema_retry_attempts = max(1, schema_retry_attempts)
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def _attempt(
        self,
        attempts: list[ModelAttempt],
        transcript: Transcript,
        model: str,
        use_tools: bool,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> Completion:
        try:
            completion = await self._provider.complete(
                transcript,
                model=model,
                tools=self._tools if use_tools else None,
                max_tokens=max_tokens or self._max_tokens,
                temperature=temperature,
            )
        except CompletionError as e:
            attempts.append(ModelAttempt(model, use_tools, outcome_for(e)))
            raise
        attempts.append(ModelAttempt(model, use_tools, "success"))
        return completion

    async def _attempt_with_schema_retry(
        self,
        attempts: list[ModelAttempt],
        transcript: Transcript,
        model: str,
        use_tools: bool,
    ) -> Completion:
        for attempt in range(1, self._schema_retry_attempts + 1):
            try:
                return await self._attempt(
                    attempts, transcript, model, use_tools, temperature=self._temperature
                )
            except SchemaRejected:
                if attempt >= self._schema_retry_attempts:
                    raise
                logger.warning(
                    "Request shape rejected, retrying",
                    model=model,
                    attempt=attempt,
                    max_attempts=self._schema_retry_attempts,
                )
        raise AssertionError("unreachable")

    async def _cascade(
        self,
        attempts: list[ModelAttempt],
        transcript: Transcript,
        use_tools: bool,
    ) -> tuple[Completion, str]:
        tiers = self._tiers

        logger.info("Using primary model", model=tiers.primary, tools=use_tools)
        try:
            completion = await self._attempt_with_schema_retry(
                attempts, transcript, tiers.primary, use_tools
            )
            return completion, tiers.primary
        except CapacityExceeded:
            logger.warning("Primary model rate limited, falling back", model=tiers.primary)
        except SchemaRejected:
            if not use_tools:
                raise
            logger.warning(
                "Request shape still rejected, retrying without tools",
                model=tiers.primary,
            )
            completion = await self._attempt(
                attempts, transcript, tiers.primary, False, temperature=self._temperature
            )
            return completion, tiers.primary

        logger.info("Using secondary model", model=tiers.secondary, tools=use_tools)
        try:
            completion = await self._attempt(
                attempts, transcript, tiers.secondary, use_tools, temperature=self._temperature
            )
            return completion, tiers.secondary
        except (CapacityExceeded, CapabilityMissing) as e:
            logger.warning(
                "Secondary model failed, falling back",
                model=tiers.secondary,
                error=type(e).__name__,
            )

        logger.info("Using tertiary model", model=tiers.tertiary, tools=use_tools)
        completion = await self._attempt(
            attempts, transcript, tiers.tertiary, use_tools, temperature=self._temperature
        )
        return completion, tiers.tertiary

    async def complete(
        self,
        transcript: Transcript,
        allow_tools: bool = True,
    ) -> tuple[Completion, str]:
        """
        Get a completion from the first tier that can answer.

        Args:
            transcript: Conversation so far
            allow_tools: Offer the weather tool to the model

        Returns:
            (completion, model id that produced it)

        Raises:
            CompletionUnavailable: Every tier, including the last resort, failed
        """
        attempts: list[ModelAttempt] = []
        try:
            try:
                return await self._cascade(attempts, transcript, allow_tools)
            except CompletionError as e:
                logger.error(
                    "Completion cascade failed, last resort without tools",
                    model=self._tiers.tertiary,
                    error=str(e),
                )

            try:
                completion = await self._attempt(
                    attempts,
                    transcript,
                    self._tiers.tertiary,
                    False,
                    temperature=self._temperature,
                )
            except CompletionError as e:
                raise CompletionUnavailable("All model tiers failed") from e
            return completion, self._tiers.tertiary
        finally:
            logger.debug(
                "Completion attempts",
                attempts=[
                    f"{a.model_id}:{'tools' if a.used_tools else 'plain'}:{a.outcome}"
                    for a in attempts
                ],
            )

    async def complete_pinned(
        self,
        transcript: Transcript,
        model: str,
        use_tools: bool,
        max_tokens: int | None = None,
    ) -> Completion:
        """
        Single completion on a model already known to work, no fallback.

        Used for re-queries and follow-ups within one request so later turns
        stay on the same model.
        """
        attempts: list[ModelAttempt] = []
        return await self._attempt(
            attempts,
            transcript,
            model,
            use_tools,
            max_tokens=max_tokens,
            temperature=self._temperature if use_tools else None,
        )
