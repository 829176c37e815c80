"""SSE stream helpers."""

from typing import AsyncIterator

from eri_chat.core.exceptions import CompletionUnavailable
from eri_chat.events.models import StreamEvent
from eri_chat.events.types import StreamEventType
from eri_chat.utils.logging import get_logger


logger = get_logger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


async def event_generator(events: AsyncIterator[StreamEvent]) -> AsyncIterator[str]:
    """
    Generate SSE lines from stream events.

    Failures end the stream without a ``done`` event; the client treats a
    stream without ``done`` as failed. Error details are never sent.

    Args:
        events: Events of one answer

    Yields:
        SSE formatted event strings
    """
    try:
        async for event in events:
            yield event.to_sse()

            if event.type is StreamEventType.DONE:
                break

    except CompletionUnavailable as e:
        logger.error("Answer stream unavailable", error=str(e))
    except Exception as e:
        logger.error("Answer stream failed", error=str(e), exc_info=True)


async def closed_stream() -> AsyncIterator[StreamEvent]:
    """An event stream that ends immediately."""
    return
    yield
