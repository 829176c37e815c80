"""Schema of the single capability offered to the model."""

from typing import Any

WEATHER_TOOL_NAME = "get_weather"

WEATHER_TOOL: dict[str, Any] = {
    "type": "function",
    "function": {
        "name": WEATHER_TOOL_NAME,
        "description": (
            "Get the current weather and 5-day forecast for a specific city. "
            "Use this when the user asks about weather, travel plans, outdoor "
            "activities, or any location-based question. Always include the "
            "country or region for accuracy (e.g., 'Patna, India' not just 'Bihar')."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "city": {
                    "type": "string",
                    "description": (
                        "The city name. When responding in Japanese, use the "
                        "ENGLISH name and append ', Japan' (e.g., 'Kyoto, Japan' "
                        "instead of '京都')."
                    ),
                },
                "days": {
                    "type": "string",
                    "description": (
                        "Number of forecast days to fetch ('1' or '5'). Defaults "
                        "to '1'. Use '5' ONLY when the user explicitly asks for "
                        "several days."
                    ),
                },
            },
            "required": ["city"],
        },
    },
}

TOOLS: list[dict[str, Any]] = [WEATHER_TOOL]
