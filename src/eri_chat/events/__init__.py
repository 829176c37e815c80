"""Stream events for SSE delivery."""

from .models import StreamEvent
from .types import StreamEventType

__all__ = ["StreamEvent", "StreamEventType"]
