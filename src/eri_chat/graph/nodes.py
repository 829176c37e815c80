"""LangGraph node functions for tool-call resolution.

Nodes are async functions that:
- Take the current state as input
- Return a partial state dict with updates

States: AwaitingStructuredCall (requery, classify) ->
StructuredCallFound | HallucinatedCallFound | NoCallFound.
"""

from __future__ import annotations

import json
from typing import Any, Literal

from eri_chat.config.prompts import HALLUCINATED_FOLLOW_UP_TEMPLATE
from eri_chat.core.exceptions import CompletionError, ParseFailed
from eri_chat.data.transcript import ConversationTurn, extend
from eri_chat.graph.state import ResolutionState
from eri_chat.tools import hallucination
from eri_chat.tools.calls import parse_weather_call
from eri_chat.utils.logging import get_logger
from eri_chat.weather.models import WeatherSnapshot


logger = get_logger(__name__)


def serialize_weather(weather: WeatherSnapshot | None) -> str:
    """JSON for a tool result; ``null`` when the lookup failed."""
    return json.dumps(weather.to_payload() if weather else None, ensure_ascii=False)


# =============================================================================
# AWAITING STRUCTURED CALL
# =============================================================================


async def requery_node(state: ResolutionState) -> dict[str, Any]:
    """
    Re-issue the request while the model writes its tool call as text.

    Structured calls are preferred over text-parsed ones, so a completion
    that mentions ``<function=get_weather>`` without a structured call is
    retried on the same model with tools on, bounded by
    ``requery_attempts`` total attempts.
    """
    orchestrator = state["orchestrator"]
    completion = state["completion"]
    max_attempts = state.get("requery_attempts", 3)
    attempt = 1

    while (
        not completion.has_tool_calls
        and hallucination.mentions_call(completion.content)
        and attempt < max_attempts
    ):
        logger.warning(
            "Tool call written as text, re-querying for a structured call",
            model=state["model_id"],
            attempt=attempt,
            max_attempts=max_attempts,
        )
        try:
            completion = await orchestrator.complete_pinned(
                state["transcript"], state["model_id"], use_tools=True
            )
        except CompletionError as e:
            logger.warning("Re-query failed", model=state["model_id"], error=str(e))
            break
        attempt += 1

    if completion.has_tool_calls and attempt > 1:
        logger.info("Got structured tool call", attempt=attempt)

    return {"completion": completion}


async def classify_node(state: ResolutionState) -> dict[str, Any]:
    """Decide which kind of call, if any, the completion carries."""
    completion = state["completion"]

    if completion.tool_calls:
        first = completion.tool_calls[0]
        if len(completion.tool_calls) > 1:
            logger.info(
                "Discarding extra simultaneous tool calls",
                kept=first.name,
                discarded=len(completion.tool_calls) - 1,
            )
        try:
            call = parse_weather_call(first)
        except ParseFailed as e:
            logger.warning("Structured tool call discarded", reason=str(e), raw=e.raw)
            return {"outcome": "none", "call": None}
        return {"outcome": "structured", "call": call}

    extracted = hallucination.extract(completion.content)
    if extracted is not None:
        try:
            call = parse_weather_call(extracted)
        except ParseFailed as e:
            logger.warning("Hallucinated tool call discarded", reason=str(e))
            return {"outcome": "none", "call": None}
        logger.info("Detected hallucinated tool call", city=call.city, days=call.days)
        return {"outcome": "hallucinated", "call": call}

    return {"outcome": "none", "call": None}


def route_outcome(state: ResolutionState) -> Literal["structured", "hallucinated", "none"]:
    """Route to the node handling the classified outcome."""
    return state.get("outcome", "none")


# =============================================================================
# CALL FOUND
# =============================================================================


async def structured_call_node(state: ResolutionState) -> dict[str, Any]:
    """
    Execute the first structured call and record it in the transcript.

    Appends the assistant turn (pre-call text plus the executed call) and a
    tool turn keyed by the call id. The final answer is generated afterwards
    with tools disabled.
    """
    call = state["call"]
    completion = state["completion"]
    executed = completion.tool_calls[0]

    weather = await state["aggregator"].fetch(call.city, state["lang"], call.days)

    transcript = extend(
        state["transcript"],
        ConversationTurn(
            role="assistant",
            content=completion.content,
            tool_calls=(executed,),
        ),
        ConversationTurn(
            role="tool",
            content=serialize_weather(weather),
            tool_call_id=executed.id,
        ),
    )

    return {"transcript": transcript, "weather": weather}


async def hallucinated_call_node(state: ResolutionState) -> dict[str, Any]:
    """
    Execute a call recovered from text and produce the answer directly.

    The dirty assistant text is replaced by its stripped form, the fetched
    data is handed back as a user-role instruction, and exactly one
    follow-up completion is requested. If it fails, the stripped original
    text is the answer.
    """
    call = state["call"]
    completion = state["completion"]

    weather = await state["aggregator"].fetch(call.city, state["lang"], call.days)

    stripped = hallucination.clean(completion.content)
    transcript = extend(
        state["transcript"],
        ConversationTurn(role="assistant", content=stripped),
        ConversationTurn(
            role="user",
            content=HALLUCINATED_FOLLOW_UP_TEMPLATE.format(
                city=call.city, weather=serialize_weather(weather)
            ),
        ),
    )

    answer = stripped
    try:
        follow_up = await state["orchestrator"].complete_pinned(
            transcript,
            state["model_id"],
            use_tools=False,
            max_tokens=state.get("follow_up_max_tokens"),
        )
    except CompletionError as e:
        logger.warning(
            "Follow-up generation failed, returning cleaned original response",
            model=state["model_id"],
            error=str(e),
        )
    else:
        follow_up_text = hallucination.clean(follow_up.content)
        if follow_up_text:
            answer = follow_up_text

    return {"transcript": transcript, "weather": weather, "answer": answer}
