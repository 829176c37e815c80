"""LangGraph state for tool-call resolution.

State flows through the graph as a plain TypedDict. Keys without a reducer
are overwritten by whichever node returns them last; the transcript is never
mutated in place, nodes return an extended copy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal
from typing_extensions import TypedDict

from eri_chat.core.orchestrator import ModelOrchestrator
from eri_chat.data.transcript import Completion, Transcript
from eri_chat.tools.calls import WeatherCall
from eri_chat.weather.aggregator import ForecastAggregator
from eri_chat.weather.models import WeatherSnapshot


Outcome = Literal["structured", "hallucinated", "none"]


class ResolutionState(TypedDict, total=False):
    """State of one resolution run."""

    # Collaborators
    orchestrator: ModelOrchestrator
    aggregator: ForecastAggregator

    # Limits
    requery_attempts: int
    follow_up_max_tokens: int

    # Request
    lang: str
    transcript: Transcript
    completion: Completion
    model_id: str

    # Results
    outcome: Outcome
    call: WeatherCall | None
    weather: WeatherSnapshot | None
    answer: str | None


@dataclass(frozen=True)
class Resolution:
    """
    Result of resolving the first completion.

    ``answer`` is set only when the pipeline already produced the final text
    (the hallucinated-call path); otherwise the responder generates it from
    ``transcript``.
    """

    transcript: Transcript
    model_id: str
    outcome: Outcome
    weather: WeatherSnapshot | None = None
    answer: str | None = None
