"""Configuration for the Eri Chat service."""

from eri_chat.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
