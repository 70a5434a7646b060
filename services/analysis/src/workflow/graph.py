"""LangGraph workflow definition for the analysis sequence.

lookup_profile -> p_tool_score -> fundamental_analysis -> technical_analysis
-> fetch_live_data -> forensic_checks -> news_sentiment -> peer_comparison
-> macro_analysis -> ai_recommendation

Conditional branching:
- After lookup: unknown symbol ends the run before any stage starts
- After live fetch: a provider failure ends the run, later stages stay pending
"""

import logging
from typing import Any, Literal
from uuid import uuid4

from langgraph.graph import END, StateGraph
from pydantic import BaseModel, ConfigDict

from ..models import MergedAnalysis, RecommendationResult
from .nodes import SequenceNodes
from .stages import StageProgress, StageTracker
from .state import SequencePhase, SequenceState

logger = logging.getLogger(__name__)


class AnalysisOutcome(BaseModel):
    """Result of one completed analysis sequence."""

    model_config = ConfigDict(frozen=True)

    request_id: str
    merged: MergedAnalysis
    recommendation: RecommendationResult
    stages: list[StageProgress]


def should_continue(state: SequenceState) -> Literal["continue", "error"]:
    """Conditional edge: stop at the first recorded error."""
    if state.get("error") is not None:
        return "error"
    return "continue"


def create_analysis_workflow(nodes: SequenceNodes) -> Any:
    """Create the analysis sequence graph.

    Returns:
        Compiled LangGraph workflow (CompiledGraph with ainvoke method)
    """
    workflow = StateGraph(SequenceState)

    workflow.add_node("lookup_profile", nodes.lookup_profile)
    workflow.add_node("p_tool_score", nodes.p_tool_score)
    workflow.add_node("fundamental_analysis", nodes.fundamental_analysis)
    workflow.add_node("technical_analysis", nodes.technical_analysis)
    workflow.add_node("fetch_live_data", nodes.fetch_live_data)
    workflow.add_node("forensic_checks", nodes.forensic_checks)
    workflow.add_node("news_sentiment", nodes.news_sentiment)
    workflow.add_node("peer_comparison", nodes.peer_comparison)
    workflow.add_node("macro_analysis", nodes.macro_analysis)
    workflow.add_node("ai_recommendation", nodes.ai_recommendation)

    workflow.set_entry_point("lookup_profile")

    workflow.add_conditional_edges(
        "lookup_profile",
        should_continue,
        {"continue": "p_tool_score", "error": END},
    )
    workflow.add_edge("p_tool_score", "fundamental_analysis")
    workflow.add_edge("fundamental_analysis", "technical_analysis")
    workflow.add_edge("technical_analysis", "fetch_live_data")

    workflow.add_conditional_edges(
        "fetch_live_data",
        should_continue,
        {"continue": "forensic_checks", "error": END},
    )
    workflow.add_edge("forensic_checks", "news_sentiment")
    workflow.add_edge("news_sentiment", "peer_comparison")
    workflow.add_edge("peer_comparison", "macro_analysis")
    workflow.add_edge("macro_analysis", "ai_recommendation")
    workflow.add_edge("ai_recommendation", END)

    return workflow.compile()


class AnalysisWorkflow:
    """Runs one analysis sequence per call."""

    def __init__(self, nodes: SequenceNodes):
        self.graph = create_analysis_workflow(nodes)

    async def run(
        self,
        symbol: str,
        tracker: StageTracker | None = None,
        request_id: str | None = None,
    ) -> AnalysisOutcome:
        """Run the full sequence for a symbol.

        Args:
            symbol: Symbol as entered by the user
            tracker: Stage tracker receiving progress (a fresh one if omitted)
            request_id: Identifier used in logs (generated if omitted)

        Returns:
            Merged record, recommendation and final stage snapshot

        Raises:
            AnalysisError: The first typed failure; no partial result is returned
        """
        tracker = tracker or StageTracker()
        request_id = request_id or uuid4().hex

        initial_state: SequenceState = {
            "request_id": request_id,
            "symbol": symbol,
            "tracker": tracker,
            "phase": SequencePhase.INIT,
            "profile": None,
            "merged": None,
            "recommendation": None,
            "error": None,
        }

        logger.info(f"[{request_id}] Starting analysis for {symbol}")
        final_state = await self.graph.ainvoke(initial_state)

        error = final_state.get("error")
        if error is not None:
            raise error

        return AnalysisOutcome(
            request_id=request_id,
            merged=final_state["merged"],
            recommendation=final_state["recommendation"],
            stages=tracker.snapshot(),
        )
