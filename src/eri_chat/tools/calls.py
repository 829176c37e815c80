"""Parsing of ``get_weather`` call arguments."""

import json
import re
from dataclasses import dataclass
from typing import Any

from eri_chat.core.exceptions import ParseFailed
from eri_chat.data.transcript import ToolCallRequest
from eri_chat.tools.schema import WEATHER_TOOL_NAME

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class WeatherCall:
    """Validated arguments of one weather lookup."""

    call_id: str
    city: str
    days: int = 1


def parse_days(value: Any) -> int:
    """Interpret the ``days`` argument; anything unusable means 1."""
    if isinstance(value, bool) or value is None:
        return 1
    if isinstance(value, (int, float)):
        days = int(value)
    else:
        match = _LEADING_INT.match(str(value))
        if not match:
            return 1
        days = int(match.group(1))
    return days if days >= 1 else 1


def parse_weather_call(call: ToolCallRequest) -> WeatherCall:
    """
    Validate a tool call against the weather capability.

    Raises:
        ParseFailed: Wrong tool name, malformed JSON, or missing city
    """
    if call.name != WEATHER_TOOL_NAME:
        raise ParseFailed(f"Unknown tool: {call.name}", raw=call.arguments)

    try:
        arguments = json.loads(call.arguments or "{}")
    except json.JSONDecodeError as e:
        raise ParseFailed(f"Malformed tool arguments: {e}", raw=call.arguments) from e

    if not isinstance(arguments, dict):
        raise ParseFailed("Tool arguments are not an object", raw=call.arguments)

    city = arguments.get("city")
    if not isinstance(city, str) or not city.strip():
        raise ParseFailed("Tool arguments have no city", raw=call.arguments)

    return WeatherCall(
        call_id=call.id,
        city=city.strip(),
        days=parse_days(arguments.get("days")),
    )
