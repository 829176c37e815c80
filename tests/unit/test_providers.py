"""Tests for completion providers."""

import json
from types import SimpleNamespace

import httpx
import pytest

from eri_chat.core.exceptions import (
    CapabilityMissing,
    CapacityExceeded,
    ProviderError,
    SchemaRejected,
)
from eri_chat.data.transcript import ConversationTurn, ToolCallRequest
from eri_chat.tools.schema import TOOLS
from eri_chat.utils.providers import create_provider
from eri_chat.utils.providers.anthropic import (
    AnthropicProvider,
    has_tool_blocks,
    to_anthropic_messages,
)
from eri_chat.utils.providers.groq import GroqProvider, parse_completion, to_openai_message


def groq_provider(handler, requests: list | None = None) -> GroqProvider:
    def recording(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return handler(request)

    client = httpx.AsyncClient(
        base_url="https://api.groq.com/openai/v1",
        transport=httpx.MockTransport(recording),
    )
    return GroqProvider(client=client, api_key="test-key")


CALL = ToolCallRequest(id="call_1", name="get_weather", arguments='{"city": "Kyoto"}')


class TestMessageConversion:
    """Tests for OpenAI-format messages."""

    def test_assistant_turn_carries_tool_calls(self):
        message = to_openai_message(
            ConversationTurn(role="assistant", content="Checking.", tool_calls=(CALL,))
        )

        assert message["tool_calls"] == [
            {
                "id": "call_1",
                "type": "function",
                "function": {"name": "get_weather", "arguments": '{"city": "Kyoto"}'},
            }
        ]

    def test_tool_turn_carries_call_id(self):
        message = to_openai_message(ConversationTurn(role="tool", content="null", tool_call_id="call_1"))

        assert message == {"role": "tool", "content": "null", "tool_call_id": "call_1"}

    def test_wire_alias_accepted(self):
        turn = ConversationTurn.model_validate({"role": "tool", "content": "{}", "toolCallId": "call_1"})

        assert turn.tool_call_id == "call_1"

    def test_parse_completion_with_tool_calls(self):
        completion = parse_completion(
            {
                "model": "llama-3.3-70b-versatile",
                "choices": [
                    {
                        "finish_reason": "tool_calls",
                        "message": {
                            "content": None,
                            "tool_calls": [
                                {"id": "call_1", "function": {"name": "get_weather", "arguments": '{"city": "Kyoto"}'}}
                            ],
                        },
                    }
                ],
            },
            "llama-3.3-70b-versatile",
        )

        assert completion.content == ""
        assert completion.tool_calls == (CALL,)
        assert completion.finish_reason == "tool_calls"

    def test_parse_completion_without_choices(self):
        with pytest.raises(ProviderError):
            parse_completion({"choices": []}, "m")


class TestGroqProvider:
    """Tests for the Groq HTTP provider."""

    @pytest.mark.asyncio
    async def test_complete_sends_tools(self):
        requests: list[httpx.Request] = []
        provider = groq_provider(
            lambda request: httpx.Response(
                200,
                json={"choices": [{"message": {"content": "Hi"}, "finish_reason": "stop"}]},
            ),
            requests,
        )
        transcript = (ConversationTurn(role="user", content="Hello"),)

        completion = await provider.complete(
            transcript, model="primary-model", tools=TOOLS, max_tokens=100, temperature=0.7
        )

        assert completion.content == "Hi"
        body = json.loads(requests[0].content)
        assert body["model"] == "primary-model"
        assert body["tools"] == TOOLS
        assert body["tool_choice"] == "auto"
        assert body["temperature"] == 0.7
        assert requests[0].headers["Authorization"] == "Bearer test-key"

    @pytest.mark.asyncio
    async def test_complete_without_tools(self):
        requests: list[httpx.Request] = []
        provider = groq_provider(
            lambda request: httpx.Response(200, json={"choices": [{"message": {"content": "Hi"}}]}),
            requests,
        )

        await provider.complete((ConversationTurn(role="user", content="Hello"),), model="m")

        body = json.loads(requests[0].content)
        assert "tools" not in body
        assert "temperature" not in body

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,error_type",
        [
            (429, CapacityExceeded),
            (503, CapacityExceeded),
            (400, SchemaRejected),
            (404, CapabilityMissing),
            (500, ProviderError),
        ],
    )
    async def test_errors_classified(self, status, error_type):
        provider = groq_provider(lambda request: httpx.Response(status, json={"error": {"message": "x"}}))

        with pytest.raises(error_type) as exc_info:
            await provider.complete((ConversationTurn(role="user", content="Hi"),), model="m")

        assert exc_info.value.model == "m"
        assert exc_info.value.status_code == status

    @pytest.mark.asyncio
    async def test_stream_yields_fragments(self):
        body = "\n".join(
            [
                'data: {"choices": [{"delta": {"content": "Kyoto "}}]}',
                "",
                'data: {"choices": [{"delta": {}}]}',
                'data: {"choices": [{"delta": {"content": "is sunny"}}]}',
                "data: [DONE]",
                "",
            ]
        )
        provider = groq_provider(
            lambda request: httpx.Response(
                200, text=body, headers={"content-type": "text/event-stream"}
            )
        )

        fragments = [
            fragment
            async for fragment in provider.stream(
                (ConversationTurn(role="user", content="Hi"),), model="m"
            )
        ]

        assert fragments == ["Kyoto ", "is sunny"]

    @pytest.mark.asyncio
    async def test_stream_error_raised_before_fragments(self):
        provider = groq_provider(lambda request: httpx.Response(429, json={"error": "busy"}))

        with pytest.raises(CapacityExceeded):
            async for _ in provider.stream((ConversationTurn(role="user", content="Hi"),), model="m"):
                pass


class TestAnthropicConversion:
    """Tests for Anthropic message conversion."""

    def test_tool_turns_become_blocks(self):
        system, messages = to_anthropic_messages(
            (
                ConversationTurn(role="system", content="Be helpful."),
                ConversationTurn(role="user", content="京都の天気は？"),
                ConversationTurn(role="assistant", content="", tool_calls=(CALL,)),
                ConversationTurn(role="tool", content="null", tool_call_id="call_1"),
            )
        )

        assert "Be helpful." in system
        assert messages[1]["role"] == "assistant"
        assert messages[1]["content"][-1]["type"] == "tool_use"
        assert messages[1]["content"][-1]["input"] == {"city": "Kyoto"}
        assert messages[2]["role"] == "user"
        assert messages[2]["content"][0]["type"] == "tool_result"
        assert messages[2]["content"][0]["tool_use_id"] == "call_1"


class RecordingMessages:
    """Stands in for the SDK messages resource and keeps the last request."""

    def __init__(self):
        self.params: dict = {}

    async def create(self, **params):
        self.params = params
        return SimpleNamespace(
            content=[SimpleNamespace(type="text", text="Sunny in Kyoto.")],
            model=params["model"],
            stop_reason="end_turn",
        )


def anthropic_provider() -> tuple[AnthropicProvider, RecordingMessages]:
    provider = AnthropicProvider(api_key="sk-test")
    messages = RecordingMessages()
    provider._client = SimpleNamespace(messages=messages)
    return provider, messages


class TestAnthropicProvider:
    """Tests for Anthropic request parameters."""

    @pytest.mark.asyncio
    async def test_tool_blocks_without_tools_declare_tools_unused(self):
        """Test a tool-free answer over tool turns still declares the tool."""
        provider, messages = anthropic_provider()
        transcript = (
            ConversationTurn(role="system", content="Be helpful."),
            ConversationTurn(role="user", content="京都の天気は？"),
            ConversationTurn(role="assistant", content="", tool_calls=(CALL,)),
            ConversationTurn(role="tool", content="null", tool_call_id="call_1"),
        )

        completion = await provider.complete(transcript, model="claude-test")

        assert completion.content == "Sunny in Kyoto."
        assert [tool["name"] for tool in messages.params["tools"]] == ["get_weather"]
        assert messages.params["tool_choice"] == {"type": "none"}

    @pytest.mark.asyncio
    async def test_plain_transcript_sends_no_tools(self):
        provider, messages = anthropic_provider()
        transcript = (ConversationTurn(role="user", content="Hello"),)

        await provider.complete(transcript, model="claude-test")

        assert not has_tool_blocks(transcript)
        assert "tools" not in messages.params
        assert "tool_choice" not in messages.params

    @pytest.mark.asyncio
    async def test_requested_tools_are_offered(self):
        provider, messages = anthropic_provider()

        await provider.complete(
            (ConversationTurn(role="user", content="Hi"),), model="claude-test", tools=TOOLS
        )

        assert messages.params["tools"][0]["input_schema"] == TOOLS[0]["function"]["parameters"]
        assert "tool_choice" not in messages.params


class TestCreateProvider:
    """Tests for the provider factory."""

    def test_groq_requires_key(self, settings):
        with pytest.raises(ValueError):
            create_provider(settings.model_copy(update={"groq_api_key": ""}), httpx.AsyncClient())

    def test_groq_requires_client(self, settings):
        with pytest.raises(ValueError):
            create_provider(settings)

    def test_groq_default(self, settings):
        provider = create_provider(settings, httpx.AsyncClient())
        assert isinstance(provider, GroqProvider)
        assert provider.provider_name == "groq"

    def test_anthropic(self, settings):
        provider = create_provider(
            settings.model_copy(update={"llm_provider": "anthropic", "anthropic_api_key": "sk-test"})
        )
        assert isinstance(provider, AnthropicProvider)
        assert provider.provider_name == "anthropic"
