"""Application class with startup/shutdown lifecycle."""

import httpx

from eri_chat.config.models import ModelTiers
from eri_chat.config.settings import Settings, get_settings
from eri_chat.core.chat import ChatService
from eri_chat.core.orchestrator import ModelOrchestrator
from eri_chat.core.responder import Responder
from eri_chat.graph.builder import ResolutionPipeline
from eri_chat.speech.client import TranscriptionClient
from eri_chat.utils.logging import configure_logging, get_logger
from eri_chat.utils.providers import BaseLLMProvider, create_provider
from eri_chat.weather.aggregator import ForecastAggregator
from eri_chat.weather.client import OpenWeatherClient


logger = get_logger(__name__)


class Application:
    """
    Owns the shared HTTP clients and the collaborators built on them.

    Handles:
    - Creating one httpx client per upstream (Groq, OpenWeatherMap)
    - Wiring provider, orchestrator, resolution graph and responder
    - Closing every client on shutdown
    """

    def __init__(self):
        """Initialize application."""
        self.groq_client: httpx.AsyncClient | None = None
        self.weather_client: httpx.AsyncClient | None = None
        self.provider: BaseLLMProvider | None = None
        self.chat_service: ChatService | None = None
        self.aggregator: ForecastAggregator | None = None
        self.transcriber: TranscriptionClient | None = None

    async def startup(self, settings: Settings | None = None) -> None:
        """Initialize resources on startup."""
        settings = settings or get_settings()

        configure_logging(settings.log_level)

        logger.info("Starting application...", provider=settings.llm_provider)

        timeout = httpx.Timeout(settings.http_timeout_seconds)
        self.groq_client = httpx.AsyncClient(
            base_url=settings.groq_base_url, timeout=timeout
        )
        self.weather_client = httpx.AsyncClient(
            base_url=settings.openweather_base_url, timeout=timeout
        )

        tiers = ModelTiers.from_settings(settings)
        self.provider = create_provider(settings, self.groq_client)

        orchestrator = ModelOrchestrator(
            self.provider,
            tiers,
            schema_retry_attempts=settings.schema_retry_attempts,
            temperature=settings.completion_temperature,
            max_tokens=settings.completion_max_tokens,
        )

        if not settings.openweather_api_key:
            logger.warning("OPENWEATHER_API_KEY is not set, weather lookups disabled")
        self.aggregator = ForecastAggregator(
            OpenWeatherClient(self.weather_client, settings.openweather_api_key),
            tz=settings.timezone,
        )

        pipeline = ResolutionPipeline(
            orchestrator,
            self.aggregator,
            requery_attempts=settings.tool_requery_attempts,
            follow_up_max_tokens=settings.follow_up_max_tokens,
        )
        responder = Responder(
            self.provider,
            tiers,
            temperature=settings.completion_temperature,
            max_tokens=settings.completion_max_tokens,
        )
        self.chat_service = ChatService(
            orchestrator, pipeline, responder, today=self.aggregator.today
        )

        self.transcriber = TranscriptionClient(
            self.groq_client,
            settings.groq_api_key,
            model=settings.transcription_model,
        )

        logger.info(
            "Application started",
            provider=self.provider.provider_name,
            primary=tiers.primary,
            secondary=tiers.secondary,
            tertiary=tiers.tertiary,
        )

    async def shutdown(self) -> None:
        """Close provider and HTTP clients."""
        logger.info("Shutdown initiated...")

        if self.provider:
            await self.provider.close()

        for client in (self.groq_client, self.weather_client):
            if client is not None:
                await client.aclose()

        logger.info("Shutdown complete")


app_instance = Application()
