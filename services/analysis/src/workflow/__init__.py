"""Analysis sequence: stage tracking, LangGraph workflow and sessions."""

from .graph import AnalysisOutcome, AnalysisWorkflow, create_analysis_workflow
from .nodes import SequenceNodes
from .session import AnalysisSession, SessionState, SessionStatus
from .stages import STAGE_ORDER, Stage, StageProgress, StageStatus, StageTracker, StageTransitionError
from .state import SequencePhase, SequenceState

__all__ = [
    "STAGE_ORDER",
    "AnalysisOutcome",
    "AnalysisSession",
    "AnalysisWorkflow",
    "SequenceNodes",
    "SequencePhase",
    "SequenceState",
    "SessionState",
    "SessionStatus",
    "Stage",
    "StageProgress",
    "StageStatus",
    "StageTracker",
    "StageTransitionError",
    "create_analysis_workflow",
]
