"""LangGraph builder for tool-call resolution.

Creates the StateGraph with all nodes and conditional edges, and wraps it in
``ResolutionPipeline`` which supplies collaborators and unpacks the result.
"""

from __future__ import annotations

from langgraph.graph import StateGraph, START, END
from langgraph.graph.state import CompiledStateGraph

from eri_chat.core.orchestrator import ModelOrchestrator
from eri_chat.data.transcript import Completion, Transcript
from eri_chat.graph.nodes import (
    classify_node,
    hallucinated_call_node,
    requery_node,
    route_outcome,
    structured_call_node,
)
from eri_chat.graph.state import Resolution, ResolutionState
from eri_chat.utils.logging import get_logger
from eri_chat.weather.aggregator import ForecastAggregator


logger = get_logger(__name__)


def create_resolution_graph() -> CompiledStateGraph:
    """
    Create the tool-call resolution graph.

    Flow Structure:
        START → requery → classify
            ├── "structured" → structured_call → END
            ├── "hallucinated" → hallucinated_call → END
            └── "none" → END

    Returns:
        Compiled StateGraph ready for execution
    """
    builder = StateGraph(ResolutionState)

    builder.add_node("requery", requery_node)
    builder.add_node("classify", classify_node)
    builder.add_node("structured_call", structured_call_node)
    builder.add_node("hallucinated_call", hallucinated_call_node)

    builder.add_edge(START, "requery")
    builder.add_edge("requery", "classify")

    builder.add_conditional_edges(
        "classify",
        route_outcome,
        {
            "structured": "structured_call",
            "hallucinated": "hallucinated_call",
            "none": END,
        },
    )

    builder.add_edge("structured_call", END)
    builder.add_edge("hallucinated_call", END)

    graph = builder.compile()
    logger.debug("Resolution graph compiled")
    return graph


class ResolutionPipeline:
    """
    Resolves the first completion of a request into either a transcript
    ready for the final answer or a finished answer.

    Only the first structured tool call is ever executed; further calls in
    the same turn are dropped.
    """

    def __init__(
        self,
        orchestrator: ModelOrchestrator,
        aggregator: ForecastAggregator,
        requery_attempts: int = 3,
        follow_up_max_tokens: int = 1000,
    ):
        self._orchestrator = orchestrator
        self._aggregator = aggregator
        self._requery_attempts = requery_attempts
        self._follow_up_max_tokens = follow_up_max_tokens
        self._graph = create_resolution_graph()

    async def resolve(
        self,
        transcript: Transcript,
        completion: Completion,
        model_id: str,
        lang: str = "ja",
    ) -> Resolution:
        """
        Run the resolution graph.

        Args:
            transcript: Transcript the completion answered
            completion: First completion (tools were offered)
            model_id: Model that produced it; later requests stay on it
            lang: Requester language

        Returns:
            Resolution with the extended transcript and any weather fetched
        """
        initial_state: ResolutionState = {
            "orchestrator": self._orchestrator,
            "aggregator": self._aggregator,
            "requery_attempts": self._requery_attempts,
            "follow_up_max_tokens": self._follow_up_max_tokens,
            "lang": lang,
            "transcript": transcript,
            "completion": completion,
            "model_id": model_id,
            "outcome": "none",
            "call": None,
            "weather": None,
            "answer": None,
        }

        final_state = await self._graph.ainvoke(initial_state)

        resolution = Resolution(
            transcript=final_state["transcript"],
            model_id=final_state["model_id"],
            outcome=final_state.get("outcome", "none"),
            weather=final_state.get("weather"),
            answer=final_state.get("answer"),
        )
        logger.info(
            "Tool call resolved",
            outcome=resolution.outcome,
            model=resolution.model_id,
            has_weather=resolution.weather is not None,
        )
        return resolution
