"""Eri Chat: weather-aware travel assistant backed by hosted LLMs."""

__version__ = "0.1.0"
