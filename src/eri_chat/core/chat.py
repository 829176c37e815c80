"""Request-level chat composition.

Wires one chat request through the pipeline:

    transcript assembly -> orchestrator (tools on) -> resolution graph
        -> responder (buffered or streamed)

Nothing is kept between requests; the caller re-supplies history and any
weather context every time.
"""

import json
from datetime import date
from typing import Any, AsyncIterator, Callable, Sequence

from eri_chat.config.prompts import (
    CURRENT_DATE_LINE,
    EMPTY_RESPONSE,
    SYSTEM_PROMPTS,
    WEATHER_CONTEXT_TEMPLATE,
    localized,
)
from eri_chat.core.orchestrator import ModelOrchestrator
from eri_chat.core.responder import ChatReply, Responder
from eri_chat.data.transcript import ConversationTurn, Transcript
from eri_chat.events.models import StreamEvent
from eri_chat.graph.builder import ResolutionPipeline
from eri_chat.graph.state import Resolution
from eri_chat.utils.dates import format_long_date
from eri_chat.utils.logging import get_logger


logger = get_logger(__name__)


def build_transcript(
    history: Sequence[ConversationTurn],
    weather: dict[str, Any] | None,
    lang: str,
    today: date,
) -> Transcript:
    """
    Assemble the transcript sent to the model.

    Order: system prompt with the current date, the caller's weather context
    (if any) as a user turn, then the conversation history.
    """
    system = (
        f"{localized(SYSTEM_PROMPTS, lang)}\n"
        f"{CURRENT_DATE_LINE.format(date=format_long_date(today, lang))}"
    )
    turns = [ConversationTurn(role="system", content=system)]

    if weather:
        turns.append(
            ConversationTurn(
                role="user",
                content=WEATHER_CONTEXT_TEMPLATE.format(
                    city=weather.get("city", ""),
                    weather=json.dumps(weather, ensure_ascii=False),
                ),
            )
        )

    turns.extend(history)
    return tuple(turns)


class ChatService:
    """Runs chat requests end to end."""

    def __init__(
        self,
        orchestrator: ModelOrchestrator,
        pipeline: ResolutionPipeline,
        responder: Responder,
        today: Callable[[], date],
    ):
        """
        Initialize the chat service.

        Args:
            orchestrator: Fallback cascade for the first completion
            pipeline: Tool-call resolution graph
            responder: Final answer generation
            today: Returns the requester's current date
        """
        self._orchestrator = orchestrator
        self._pipeline = pipeline
        self._responder = responder
        self._today = today

    async def _resolve(
        self,
        history: Sequence[ConversationTurn],
        weather: dict[str, Any] | None,
        lang: str,
    ) -> Resolution:
        transcript = build_transcript(history, weather, lang, self._today())
        completion, model_id = await self._orchestrator.complete(transcript, allow_tools=True)
        logger.info(
            "First completion received",
            model=model_id,
            tool_calls=len(completion.tool_calls),
        )
        return await self._pipeline.resolve(transcript, completion, model_id, lang)

    async def handle(
        self,
        history: Sequence[ConversationTurn],
        weather: dict[str, Any] | None = None,
        lang: str = "ja",
    ) -> tuple[ChatReply, str]:
        """
        Answer a chat request in one piece.

        Returns:
            (reply, id of the model that handled the request)

        Raises:
            CompletionUnavailable: No model tier could answer
        """
        resolution = await self._resolve(history, weather, lang)

        if resolution.answer is not None:
            text = resolution.answer or localized(EMPTY_RESPONSE, lang)
            return ChatReply(text=text, weather=resolution.weather), resolution.model_id

        reply = await self._responder.respond(resolution.transcript, lang, resolution.weather)
        return reply, resolution.model_id

    async def stream(
        self,
        history: Sequence[ConversationTurn],
        weather: dict[str, Any] | None = None,
        lang: str = "ja",
    ) -> tuple[AsyncIterator[StreamEvent], str]:
        """
        Answer a chat request as a stream of events.

        Resolution runs before this returns, so the model id is known before
        the first event is sent.

        Returns:
            (event iterator, id of the model that handled the request)

        Raises:
            CompletionUnavailable: No model tier could answer the first request
        """
        resolution = await self._resolve(history, weather, lang)

        if resolution.answer is not None:
            events = self._responder.emit_answer(resolution.answer, resolution.weather)
        else:
            events = self._responder.respond_stream(resolution.transcript, resolution.weather)
        return events, resolution.model_id
