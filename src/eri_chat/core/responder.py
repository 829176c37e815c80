"""Final answer generation and delivery.

Produces the user-facing answer either as one buffered reply or as a stream
of ``StreamEvent`` objects:

    weather? -> text* -> done

Stream fragments are cleaned one at a time. Markup split across two
fragments can therefore leak partially; callers accept this.
"""

from dataclasses import dataclass
from typing import AsyncIterator

from eri_chat.config.models import ModelTiers
from eri_chat.config.prompts import EMPTY_RESPONSE, localized
from eri_chat.core.exceptions import CapacityExceeded, CompletionError, CompletionUnavailable
from eri_chat.data.transcript import Transcript
from eri_chat.events.models import StreamEvent
from eri_chat.tools import hallucination
from eri_chat.utils.logging import get_logger
from eri_chat.utils.providers.base import BaseLLMProvider
from eri_chat.weather.models import WeatherSnapshot


logger = get_logger(__name__)


@dataclass(frozen=True)
class ChatReply:
    """Buffered answer."""

    text: str
    weather: WeatherSnapshot | None = None


class Responder:
    """
    Generates the final answer with tools disabled.

    Uses the primary tier and falls back once to the secondary tier when the
    primary is over capacity.
    """

    def __init__(
        self,
        provider: BaseLLMProvider,
        tiers: ModelTiers,
        temperature: float | None = 0.7,
        max_tokens: int = 1500,
    ):
        self._provider = provider
        self._tiers = tiers
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def _complete(self, transcript: Transcript, model: str) -> str:
        completion = await self._provider.complete(
            transcript,
            model=model,
            tools=None,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        )
        return completion.content

    async def respond(
        self,
        transcript: Transcript,
        lang: str = "ja",
        weather: WeatherSnapshot | None = None,
    ) -> ChatReply:
        """
        Generate a buffered answer.

        Raises:
            CompletionUnavailable: Neither tier produced a completion
        """
        try:
            try:
                content = await self._complete(transcript, self._tiers.primary)
            except CapacityExceeded:
                logger.warning(
                    "Final answer rate limited, falling back",
                    model=self._tiers.primary,
                    fallback=self._tiers.secondary,
                )
                content = await self._complete(transcript, self._tiers.secondary)
        except CompletionError as e:
            logger.error("Final answer generation failed", error=str(e), model=e.model)
            raise CompletionUnavailable("Final answer generation failed") from e

        text = hallucination.clean(content)
        if not text:
            logger.warning("Empty final answer, using apology", lang=lang)
            text = localized(EMPTY_RESPONSE, lang)
        return ChatReply(text=text, weather=weather)

    async def _open_stream(
        self, transcript: Transcript, model: str
    ) -> tuple[AsyncIterator[str], str | None]:
        """Open a stream and pull its first fragment so setup errors surface here."""
        fragments = self._provider.stream(
            transcript,
            model=model,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        ).__aiter__()
        try:
            first = await fragments.__anext__()
        except StopAsyncIteration:
            return fragments, None
        return fragments, first

    async def respond_stream(
        self,
        transcript: Transcript,
        weather: WeatherSnapshot | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """
        Stream the answer as events.

        A capacity error before the first fragment reopens the stream on the
        secondary tier; errors after it propagate.

        Raises:
            CompletionUnavailable: The stream could not be opened on either tier
        """
        if weather is not None:
            yield StreamEvent.weather(weather.to_payload())

        try:
            try:
                fragments, first = await self._open_stream(transcript, self._tiers.primary)
            except CapacityExceeded:
                logger.warning(
                    "Primary stream rate limited, falling back",
                    model=self._tiers.primary,
                    fallback=self._tiers.secondary,
                )
                fragments, first = await self._open_stream(transcript, self._tiers.secondary)
        except CompletionError as e:
            logger.error("Answer stream could not be opened", error=str(e), model=e.model)
            raise CompletionUnavailable("Answer stream could not be opened") from e

        if first is not None:
            text = hallucination.strip(first)
            if text:
                yield StreamEvent.text(text)

            async for fragment in fragments:
                text = hallucination.strip(fragment)
                if text:
                    yield StreamEvent.text(text)

        yield StreamEvent.done()

    async def emit_answer(
        self,
        answer: str,
        weather: WeatherSnapshot | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """Stream an answer that is already final."""
        if weather is not None:
            yield StreamEvent.weather(weather.to_payload())
        if answer:
            yield StreamEvent.text(answer)
        yield StreamEvent.done()
