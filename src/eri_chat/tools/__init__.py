"""The get_weather capability: schema, argument parsing, leaked-markup handling."""

from eri_chat.tools.schema import TOOLS, WEATHER_TOOL, WEATHER_TOOL_NAME

__all__ = ["TOOLS", "WEATHER_TOOL", "WEATHER_TOOL_NAME"]
