"""Groq provider over the OpenAI-compatible chat completions API.

Requests go through a shared ``httpx.AsyncClient`` injected at construction.
HTTP failures are classified into the completion error taxonomy so the
orchestrator can decide on tier fallback.
"""

import json
from typing import Any, AsyncIterator

import httpx

from eri_chat.core.exceptions import ProviderError
from eri_chat.core.resilience import classify_http_error, wrap_completion_errors
from eri_chat.data.transcript import (
    Completion,
    ConversationTurn,
    ToolCallRequest,
    Transcript,
)
from eri_chat.utils.logging import get_logger
from eri_chat.utils.providers.base import BaseLLMProvider


logger = get_logger(__name__)


def to_openai_message(turn: ConversationTurn) -> dict[str, Any]:
    """Convert a transcript turn to an OpenAI-style message dict."""
    message: dict[str, Any] = {"role": turn.role, "content": turn.content}

    if turn.role == "assistant" and turn.tool_calls:
        message["tool_calls"] = [
            {
                "id": call.id,
                "type": "function",
                "function": {"name": call.name, "arguments": call.arguments},
            }
            for call in turn.tool_calls
        ]
    if turn.role == "tool":
        message["tool_call_id"] = turn.tool_call_id

    return message


def parse_completion(payload: dict[str, Any], model: str) -> Completion:
    """Build a Completion from a chat completions response body."""
    choices = payload.get("choices") or []
    if not choices:
        raise ProviderError("Completion response had no choices", model=model)

    choice = choices[0]
    message = choice.get("message") or {}

    tool_calls = tuple(
        ToolCallRequest(
            id=call.get("id", ""),
            name=(call.get("function") or {}).get("name", ""),
            arguments=(call.get("function") or {}).get("arguments") or "{}",
        )
        for call in message.get("tool_calls") or []
    )

    return Completion(
        content=message.get("content") or "",
        tool_calls=tool_calls,
        model=payload.get("model", model),
        finish_reason=choice.get("finish_reason") or "",
    )


class GroqProvider(BaseLLMProvider):
    """
    Groq chat completions provider.

    Uses raw HTTP against the OpenAI-compatible endpoint, so tool schemas
    and messages are passed through in OpenAI format.
    """

    def __init__(self, client: httpx.AsyncClient, api_key: str):
        """
        Initialize Groq provider.

        Args:
            client: Shared HTTP client whose base_url is the Groq API root
            api_key: Groq API key
        """
        self._client = client
        self._headers = {"Authorization": f"Bearer {api_key}"}

    @property
    def provider_name(self) -> str:
        return "groq"

    def _build_payload(
        self,
        transcript: Transcript,
        model: str,
        max_tokens: int,
        temperature: float | None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": model,
            "messages": [to_openai_message(turn) for turn in transcript],
            "max_tokens": max_tokens,
        }
        if temperature is not None:
            payload["temperature"] = temperature
        return payload

    @wrap_completion_errors
    async def complete(
        self,
        transcript: Transcript,
        *,
        model: str,
        tools: list[dict[str, Any]] | None = None,
        max_tokens: int = 1500,
        temperature: float | None = None,
    ) -> Completion:
        payload = self._build_payload(transcript, model, max_tokens, temperature)
        if tools:
            payload["tools"] = tools
            payload["tool_choice"] = "auto"

        logger.debug(
            "Calling Groq chat completions",
            model=model,
            turns=len(transcript),
            tools=bool(tools),
        )

        response = await self._client.post(
            "/chat/completions", json=payload, headers=self._headers
        )
        response.raise_for_status()
        completion = parse_completion(response.json(), model)

        logger.debug(
            "Groq completion received",
            model=model,
            finish_reason=completion.finish_reason,
            tool_calls=len(completion.tool_calls),
        )
        return completion

    async def stream(
        self,
        transcript: Transcript,
        *,
        model: str,
        max_tokens: int = 1500,
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        payload = self._build_payload(transcript, model, max_tokens, temperature)
        payload["stream"] = True

        logger.debug("Starting Groq stream", model=model, turns=len(transcript))

        try:
            async with self._client.stream(
                "POST", "/chat/completions", json=payload, headers=self._headers
            ) as response:
                if response.is_error:
                    body = (await response.aread()).decode("utf-8", "replace")
                    raise classify_http_error(response.status_code, body, model)

                async for line in response.aiter_lines():
                    if not line.startswith("data:"):
                        continue
                    data = line[len("data:"):].strip()
                    if data == "[DONE]":
                        break
                    try:
                        chunk = json.loads(data)
                    except json.JSONDecodeError:
                        logger.warning("Skipping malformed stream chunk", model=model)
                        continue
                    for choice in chunk.get("choices") or []:
                        text = (choice.get("delta") or {}).get("content")
                        if text:
                            yield text
        except httpx.HTTPError as e:
            raise ProviderError(f"Transport error: {e}", model=model) from e
