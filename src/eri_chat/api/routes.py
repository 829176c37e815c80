"""FastAPI routes for the chat API."""

from fastapi import APIRouter, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse, StreamingResponse

from eri_chat import __version__
from eri_chat.api.dependencies import AggregatorDep, ChatServiceDep, TranscriberDep
from eri_chat.api.models import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HealthResponse,
    TranscriptionResponse,
)
from eri_chat.api.sse import SSE_HEADERS, closed_stream, event_generator
from eri_chat.config.prompts import CHAT_FAILED, EMPTY_RESPONSE, localized
from eri_chat.core.exceptions import CompletionUnavailable, TranscriptionFailed
from eri_chat.utils.logging import get_logger


logger = get_logger(__name__)
router = APIRouter()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns application status and version.
    """
    return HealthResponse(
        status="ok",
        version=__version__,
    )


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def chat(
    chat_request: ChatRequest,
    chat_service: ChatServiceDep,
):
    """
    Chat endpoint.

    Buffered requests return ``{response, weather}``; ``weather`` is left out
    when no snapshot was fetched. Streaming requests
    return Server-Sent Events:

    - weather: snapshot fetched for this answer (at most once, first)
    - text: answer fragment
    - done: end of answer

    The ``X-Model-Used`` header names the model that handled the request.
    """
    history = chat_request.messages
    last_message = history[-1].content.strip() if history else ""
    if not last_message:
        return _error(400, "Message content cannot be empty")

    lang = chat_request.lang
    turns = tuple(history)

    if chat_request.stream:
        try:
            events, model_id = await chat_service.stream(turns, chat_request.weather, lang)
        except CompletionUnavailable as e:
            logger.error("Chat unavailable", error=str(e), stream=True)
            return StreamingResponse(
                event_generator(closed_stream()),
                media_type="text/event-stream",
                headers=SSE_HEADERS,
            )
        except Exception as e:
            logger.error("Chat failed", error=str(e), stream=True, exc_info=True)
            return _error(500, localized(CHAT_FAILED, lang))

        return StreamingResponse(
            event_generator(events),
            media_type="text/event-stream",
            headers={**SSE_HEADERS, "X-Model-Used": model_id},
        )

    try:
        reply, model_id = await chat_service.handle(turns, chat_request.weather, lang)
    except CompletionUnavailable as e:
        logger.error("Chat unavailable", error=str(e), stream=False)
        return _error(503, localized(EMPTY_RESPONSE, lang))
    except Exception as e:
        logger.error("Chat failed", error=str(e), stream=False, exc_info=True)
        return _error(500, localized(CHAT_FAILED, lang))

    response = ChatResponse(
        response=reply.text,
        weather=reply.weather.to_payload() if reply.weather else None,
    )
    return JSONResponse(
        content=response.model_dump(exclude_none=True),
        headers={"X-Model-Used": model_id},
    )


@router.post(
    "/transcribe",
    response_model=TranscriptionResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def transcribe(
    transcriber: TranscriberDep,
    audio: UploadFile | None = File(default=None),
    lang: str = Form(default="ja"),
):
    """Transcribe a recorded voice message."""
    if audio is None:
        return _error(400, "No audio file")

    content = await audio.read()
    try:
        text = await transcriber.transcribe(
            content,
            filename=audio.filename or "audio.webm",
            content_type=audio.content_type,
            lang=lang,
        )
    except TranscriptionFailed as e:
        logger.error("Transcription error", error=str(e))
        return _error(500, "Transcription failed")

    return TranscriptionResponse(text=text)


@router.get(
    "/weather",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def weather(
    aggregator: AggregatorDep,
    city: str | None = Query(default=None),
    lang: str = Query(default="ja"),
):
    """Current weather for a city, as shown on the weather card."""
    if not city or not city.strip():
        return _error(400, "City required")

    snapshot = await aggregator.fetch(city.strip(), lang, days=1)
    if snapshot is None:
        return _error(404, "City not found")

    return JSONResponse(content=snapshot.to_payload())
