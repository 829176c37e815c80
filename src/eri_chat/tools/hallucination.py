"""Detection and removal of tool-call markup leaked into answer text.

Some models, instead of using the structured tool-call field, write the call
into the answer body, e.g.::

    <function=get_weather>{"city": "Kyoto, Japan"}</function>

``extract`` recovers such a call; ``strip`` removes every known leakage
shape so no markup reaches the user.
"""

import json
import re
import uuid

from eri_chat.data.transcript import ToolCallRequest
from eri_chat.tools.schema import WEATHER_TOOL_NAME
from eri_chat.utils.logging import get_logger


logger = get_logger(__name__)

CALL_PATTERN = re.compile(
    r"<function=get_weather>\s*(\{[^}]+\})\s*</function>", re.IGNORECASE
)
MARKER_PATTERN = re.compile(r"<function=get_weather>", re.IGNORECASE)

LEAKAGE_PATTERNS: tuple[re.Pattern[str], ...] = (
    # <function=name>...</function>
    re.compile(r"<function=[^>]*>[\s\S]*?</function>", re.IGNORECASE),
    # stray opening tag
    re.compile(r"<function=[^>]*>", re.IGNORECASE),
    # stray closing tag
    re.compile(r"</function>", re.IGNORECASE),
    # [function ...] and [/function]
    re.compile(r"\[/?function[^\]]*\]", re.IGNORECASE),
    # <call>...</call>
    re.compile(r"<call>[\s\S]*?</call>", re.IGNORECASE),
    # <tag=value> residue
    re.compile(r"</?[a-z_]+=[^>]*>", re.IGNORECASE),
)


def mentions_call(text: str | None) -> bool:
    """Return True if ``text`` contains a hallucinated weather call marker."""
    return bool(text) and MARKER_PATTERN.search(text) is not None


def extract(text: str | None) -> ToolCallRequest | None:
    """
    Recover a weather call written as literal text.

    Returns:
        A ToolCallRequest with JSON arguments ``{"city", "days"}``, or None
        when there is no call, its JSON is malformed, or it has no city.
    """
    if not text:
        return None

    match = CALL_PATTERN.search(text)
    if not match:
        return None

    try:
        arguments = json.loads(match.group(1))
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse hallucinated tool call", error=str(e))
        return None

    if not isinstance(arguments, dict) or not arguments.get("city"):
        logger.warning("Hallucinated tool call has no city", arguments=match.group(1))
        return None

    return ToolCallRequest(
        id=f"hallucinated_{uuid.uuid4().hex[:12]}",
        name=WEATHER_TOOL_NAME,
        arguments=json.dumps(
            {"city": arguments["city"], "days": str(arguments.get("days") or "1")},
            ensure_ascii=False,
        ),
    )


def strip(text: str) -> str:
    """
    Remove all known tool-call leakage from ``text``.

    Patterns are reapplied until nothing changes, since removing one tag can
    join its neighbours into a new one. Whitespace is preserved, which keeps
    this usable on individual stream fragments.
    """
    previous = None
    while previous != text:
        previous = text
        for pattern in LEAKAGE_PATTERNS:
            text = pattern.sub("", text)
    return text


def clean(text: str | None) -> str:
    """Strip leakage and surrounding whitespace from a complete answer."""
    return strip(text or "").strip()
