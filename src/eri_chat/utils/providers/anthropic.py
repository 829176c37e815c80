"""Anthropic Messages API provider.

Translates the OpenAI-shaped transcript and tool schema used throughout the
service into Anthropic's content-block format and back.
"""

import json
from typing import Any, AsyncIterator

from anthropic import AsyncAnthropic

from eri_chat.core.resilience import classify_anthropic_error, wrap_anthropic_errors
from eri_chat.data.transcript import Completion, ToolCallRequest, Transcript
from eri_chat.tools.schema import TOOLS
from eri_chat.utils.logging import get_logger
from eri_chat.utils.providers.base import BaseLLMProvider


logger = get_logger(__name__)


def to_anthropic_tools(tools: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Convert OpenAI function schemas to Anthropic tool definitions."""
    converted = []
    for tool in tools:
        function = tool.get("function", tool)
        converted.append(
            {
                "name": function["name"],
                "description": function.get("description", ""),
                "input_schema": function.get("parameters", {"type": "object"}),
            }
        )
    return converted


def to_anthropic_messages(transcript: Transcript) -> tuple[str, list[dict[str, Any]]]:
    """
    Split a transcript into Anthropic's system prompt and message list.

    Tool results travel as user messages holding ``tool_result`` blocks.
    """
    system_parts: list[str] = []
    messages: list[dict[str, Any]] = []

    for turn in transcript:
        if turn.role == "system":
            system_parts.append(turn.content)
        elif turn.role == "tool":
            messages.append(
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "tool_result",
                            "tool_use_id": turn.tool_call_id or "",
                            "content": turn.content,
                        }
                    ],
                }
            )
        elif turn.role == "assistant" and turn.tool_calls:
            blocks: list[dict[str, Any]] = []
            if turn.content:
                blocks.append({"type": "text", "text": turn.content})
            for call in turn.tool_calls:
                try:
                    arguments = json.loads(call.arguments or "{}")
                except json.JSONDecodeError:
                    arguments = {}
                blocks.append(
                    {
                        "type": "tool_use",
                        "id": call.id,
                        "name": call.name,
                        "input": arguments,
                    }
                )
            messages.append({"role": "assistant", "content": blocks})
        else:
            messages.append({"role": turn.role, "content": turn.content})

    return "\n\n".join(system_parts), messages


def has_tool_blocks(transcript: Transcript) -> bool:
    """True when the transcript carries tool_use or tool_result turns."""
    return any(turn.role == "tool" or turn.tool_calls for turn in transcript)


class AnthropicProvider(BaseLLMProvider):
    """
    Direct Anthropic API provider.

    Uses the official Anthropic Python SDK. SDK-level retries are disabled
    so that rate limits reach the orchestrator's fallback cascade at once.
    """

    def __init__(self, api_key: str, timeout: float | None = None):
        """
        Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key
            timeout: Request timeout in seconds; None keeps the SDK default
        """
        client_kwargs: dict[str, Any] = {"api_key": api_key, "max_retries": 0}
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        self._client = AsyncAnthropic(**client_kwargs)

    @property
    def provider_name(self) -> str:
        return "anthropic"

    def _build_params(
        self,
        transcript: Transcript,
        model: str,
        max_tokens: int,
        temperature: float | None,
        tools: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """
        Build Messages API parameters.

        The API rejects tool_use and tool_result blocks unless tools are
        declared, so a tool-free follow-up over such a transcript declares
        them with tool_choice "none".
        """
        system, messages = to_anthropic_messages(transcript)
        params: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": messages,
        }
        if system:
            params["system"] = system
        if temperature is not None:
            params["temperature"] = temperature
        if tools:
            params["tools"] = to_anthropic_tools(tools)
        elif has_tool_blocks(transcript):
            params["tools"] = to_anthropic_tools(TOOLS)
            params["tool_choice"] = {"type": "none"}
        return params

    @wrap_anthropic_errors
    async def complete(
        self,
        transcript: Transcript,
        *,
        model: str,
        tools: list[dict[str, Any]] | None = None,
        max_tokens: int = 1500,
        temperature: float | None = None,
    ) -> Completion:
        params = self._build_params(transcript, model, max_tokens, temperature, tools)

        logger.debug(
            "Calling Anthropic API",
            model=model,
            turns=len(transcript),
            tools=bool(tools),
        )

        response = await self._client.messages.create(**params)

        text_parts: list[str] = []
        tool_calls: list[ToolCallRequest] = []
        for block in response.content:
            if block.type == "text":
                text_parts.append(block.text)
            elif block.type == "tool_use":
                tool_calls.append(
                    ToolCallRequest(
                        id=block.id,
                        name=block.name,
                        arguments=json.dumps(block.input, ensure_ascii=False),
                    )
                )

        logger.debug(
            "Anthropic response received",
            model=model,
            stop_reason=response.stop_reason,
            tool_calls=len(tool_calls),
        )

        return Completion(
            content="".join(text_parts),
            tool_calls=tuple(tool_calls),
            model=response.model,
            finish_reason=response.stop_reason or "",
        )

    async def stream(
        self,
        transcript: Transcript,
        *,
        model: str,
        max_tokens: int = 1500,
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        import anthropic

        params = self._build_params(transcript, model, max_tokens, temperature)

        logger.debug("Starting Anthropic stream", model=model, turns=len(transcript))

        try:
            async with self._client.messages.stream(**params) as stream:
                async for text in stream.text_stream:
                    yield text
        except anthropic.APIError as e:
            raise classify_anthropic_error(e, model) from e

    async def close(self) -> None:
        await self._client.close()
