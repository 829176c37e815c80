"""LangGraph-based tool-call resolution.

Exports:
- create_resolution_graph: Build the resolution StateGraph
- ResolutionPipeline: Run it with injected collaborators
- Resolution: Result of one run
"""

from eri_chat.graph.builder import ResolutionPipeline, create_resolution_graph
from eri_chat.graph.state import Resolution, ResolutionState

__all__ = [
    "Resolution",
    "ResolutionPipeline",
    "ResolutionState",
    "create_resolution_graph",
]
