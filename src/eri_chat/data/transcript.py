"""Conversation transcript models.

A transcript is an immutable tuple of turns. Pipeline stages never mutate
a transcript; they return a new, extended one via ``extend``.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


Role = Literal["system", "user", "assistant", "tool"]


class ToolCallRequest(BaseModel):
    """A capability invocation requested by the model."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    arguments: str = "{}"


class ConversationTurn(BaseModel):
    """One message in the conversation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    role: Role
    content: str = ""
    tool_call_id: str | None = Field(default=None, alias="toolCallId")
    tool_calls: tuple[ToolCallRequest, ...] = ()


Transcript = tuple[ConversationTurn, ...]


class Completion(BaseModel):
    """Provider-independent completion result."""

    model_config = ConfigDict(frozen=True)

    content: str = ""
    tool_calls: tuple[ToolCallRequest, ...] = ()
    model: str = ""
    finish_reason: str = ""

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)


def extend(transcript: Transcript, *turns: ConversationTurn) -> Transcript:
    """Return a new transcript with ``turns`` appended."""
    return (*transcript, *turns)

