"""Request-scoped data models."""

from eri_chat.data.transcript import (
    Completion,
    ConversationTurn,
    ToolCallRequest,
    Transcript,
    extend,
)

__all__ = [
    "Completion",
    "ConversationTurn",
    "ToolCallRequest",
    "Transcript",
    "extend",
]
