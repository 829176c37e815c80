"""FastAPI routes and API models."""

from eri_chat.api.routes import router

__all__ = ["router"]
