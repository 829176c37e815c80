"""API request/response models."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from eri_chat.data.transcript import ConversationTurn


class ChatRequest(BaseModel):
    """Request model for chat endpoint."""

    messages: list[ConversationTurn] = Field(
        default_factory=list, description="Conversation history, oldest first"
    )
    weather: dict[str, Any] | None = Field(
        default=None, description="Weather snapshot already shown to the user"
    )
    lang: Literal["ja", "en"] = Field(default="ja", description="Response language")
    stream: bool = Field(default=False, description="Stream the answer as SSE events")


class ChatResponse(BaseModel):
    """Response model for non-streaming chat."""

    response: str
    weather: dict[str, Any] | None = None


class TranscriptionResponse(BaseModel):
    """Response model for transcription endpoint."""

    text: str


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    version: str


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str
