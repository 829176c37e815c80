"""Event type enumerations."""

from enum import Enum


class StreamEventType(str, Enum):
    """Event types of a streamed chat answer."""

    # Weather side-payload, at most once and before any text
    WEATHER = "weather"

    # Answer text fragment
    TEXT = "text"

    # Terminal event, exactly once
    DONE = "done"
