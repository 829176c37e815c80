"""FastAPI dependency injection."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from eri_chat.core.chat import ChatService
from eri_chat.speech.client import TranscriptionClient
from eri_chat.weather.aggregator import ForecastAggregator


def _from_state(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(status_code=503, detail="Service is not ready")
    return service


async def get_chat_service(request: Request) -> ChatService:
    """Get chat service from application state."""
    return _from_state(request, "chat_service")


async def get_aggregator(request: Request) -> ForecastAggregator:
    """Get forecast aggregator from application state."""
    return _from_state(request, "aggregator")


async def get_transcriber(request: Request) -> TranscriptionClient:
    """Get transcription client from application state."""
    return _from_state(request, "transcriber")


# Type aliases for dependency injection
ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]
AggregatorDep = Annotated[ForecastAggregator, Depends(get_aggregator)]
TranscriberDep = Annotated[TranscriptionClient, Depends(get_transcriber)]
