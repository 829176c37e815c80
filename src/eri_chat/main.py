"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eri_chat import __version__
from eri_chat.api.routes import router
from eri_chat.app import app_instance
from eri_chat.config.settings import get_settings
from eri_chat.utils.logging import configure_logging, get_logger


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start the application and publish its services on ``app.state``."""
    await app_instance.startup()

    app.state.chat_service = app_instance.chat_service
    app.state.aggregator = app_instance.aggregator
    app.state.transcriber = app_instance.transcriber

    yield

    await app_instance.shutdown()


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Eri Chat API",
        description="Travel and weather chat assistant with model fallback",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Model-Used"],
    )

    app.include_router(router, prefix="/api")

    @app.get("/")
    async def root():
        return {
            "name": "Eri Chat API",
            "version": __version__,
            "docs": "/docs",
        }

    return app


app = create_app()


def main() -> None:
    """Entry point for running the application."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "eri_chat.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
