"""Core domain modules."""

from eri_chat.core.exceptions import (
    CapabilityMissing,
    CapacityExceeded,
    CompletionError,
    CompletionUnavailable,
    EriChatError,
    LookupFailed,
    ParseFailed,
    ProviderError,
    SchemaRejected,
    TranscriptionFailed,
)

__all__ = [
    "CapabilityMissing",
    "CapacityExceeded",
    "CompletionError",
    "CompletionUnavailable",
    "EriChatError",
    "LookupFailed",
    "ParseFailed",
    "ProviderError",
    "SchemaRejected",
    "TranscriptionFailed",
]
