"""Workflow state definitions for the analysis sequence.

The state is passed through all LangGraph nodes. A typed AnalysisError stored
in ``error`` short-circuits the graph to END.
"""

from enum import StrEnum
from typing import TypedDict

from ..errors import AnalysisError
from ..models import AnalysisProfile, MergedAnalysis, RecommendationResult
from .stages import StageTracker


class SequencePhase(StrEnum):
    """Workflow progress phase tracking."""

    INIT = "init"
    BASELINE_STAGES = "baseline_stages"
    LIVE_DATA = "live_data"
    REVIEW_STAGES = "review_stages"
    RECOMMENDATION = "recommendation"
    COMPLETE = "complete"
    ERROR = "error"


class SequenceState(TypedDict, total=False):
    """LangGraph workflow state for one analysis request."""

    # Input
    request_id: str
    symbol: str
    tracker: StageTracker

    # Phase tracking
    phase: SequencePhase

    # Outputs
    profile: AnalysisProfile | None
    merged: MergedAnalysis | None
    recommendation: RecommendationResult | None

    # First typed failure; later nodes are skipped
    error: AnalysisError | None
