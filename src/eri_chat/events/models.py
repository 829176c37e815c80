"""Event data models."""

import json
from typing import Any

from pydantic import BaseModel

from .types import StreamEventType


class StreamEvent(BaseModel):
    """One event of a streamed chat answer."""

    type: StreamEventType
    data: Any = None

    def to_json(self) -> str:
        """Serialize event to JSON string."""
        body: dict[str, Any] = {"type": self.type.value}
        if self.type is not StreamEventType.DONE:
            body["data"] = self.data
        return json.dumps(body, ensure_ascii=False)

    def to_sse(self) -> str:
        """Format event for SSE stream."""
        return f"data: {self.to_json()}\n\n"

    @classmethod
    def weather(cls, payload: dict[str, Any]) -> "StreamEvent":
        return cls(type=StreamEventType.WEATHER, data=payload)

    @classmethod
    def text(cls, fragment: str) -> "StreamEvent":
        return cls(type=StreamEventType.TEXT, data=fragment)

    @classmethod
    def done(cls) -> "StreamEvent":
        return cls(type=StreamEventType.DONE)
