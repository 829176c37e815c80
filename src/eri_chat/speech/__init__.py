"""Speech-to-text."""

from eri_chat.speech.client import TranscriptionClient

__all__ = ["TranscriptionClient"]
