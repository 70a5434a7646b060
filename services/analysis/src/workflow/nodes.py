"""Workflow nodes for the analysis sequence.

Node order:
- Profile lookup (before any stage, so an unknown symbol spends no API calls)
- Stages 1-3: P-Tool Score, Fundamental, Technical (presentation only)
- Live fetch + merge (belongs to no stage)
- Stages 4-7: Forensic, News & Sentiment, Peer, Macro (presentation only)
- Stage 8: AI Recommendation (spans the real model call)
"""

import asyncio
import logging

from ..agents.recommendation_agent import RecommendationAgent
from ..clients.alpha_vantage_client import AlphaVantageClient
from ..errors import AnalysisError
from ..merge import merge
from ..profile_store import ProfileStore
from .stages import Stage
from .state import SequencePhase, SequenceState

logger = logging.getLogger(__name__)


class SequenceNodes:
    """Node callables bound to the services one sequence needs."""

    def __init__(
        self,
        store: ProfileStore,
        live_client: AlphaVantageClient,
        agent: RecommendationAgent,
        stage_delay_seconds: float = 0.3,
    ):
        self.store = store
        self.live_client = live_client
        self.agent = agent
        self.stage_delay_seconds = stage_delay_seconds

    async def lookup_profile(self, state: SequenceState) -> dict:
        """Resolve the baseline profile for the requested symbol."""
        request_id = state["request_id"]
        logger.info(f"[{request_id}] Looking up profile for {state['symbol']}")

        try:
            profile = self.store.lookup(state["symbol"])
        except AnalysisError as e:
            logger.warning(f"[{request_id}] {e.message}")
            return {"error": e, "phase": SequencePhase.ERROR}

        return {"profile": profile, "phase": SequencePhase.BASELINE_STAGES}

    async def _cosmetic_stage(self, state: SequenceState, stage: Stage) -> None:
        tracker = state["tracker"]
        await tracker.start(stage)
        if self.stage_delay_seconds > 0:
            await asyncio.sleep(self.stage_delay_seconds)
        await tracker.complete(stage)

    async def p_tool_score(self, state: SequenceState) -> dict:
        await self._cosmetic_stage(state, Stage.P_TOOL_SCORE)
        return {"phase": SequencePhase.BASELINE_STAGES}

    async def fundamental_analysis(self, state: SequenceState) -> dict:
        await self._cosmetic_stage(state, Stage.FUNDAMENTAL_ANALYSIS)
        return {"phase": SequencePhase.BASELINE_STAGES}

    async def technical_analysis(self, state: SequenceState) -> dict:
        await self._cosmetic_stage(state, Stage.TECHNICAL_ANALYSIS)
        return {"phase": SequencePhase.LIVE_DATA}

    async def fetch_live_data(self, state: SequenceState) -> dict:
        """Fetch overview and quote concurrently, then merge onto the baseline."""
        request_id = state["request_id"]
        profile = state["profile"]
        assert profile is not None, "profile must be resolved before the live fetch"

        try:
            overview, quote = await self.live_client.fetch_overview_and_quote(profile.stock.symbol)
        except AnalysisError as e:
            logger.warning(f"[{request_id}] Live data failed: {e.error_type}: {e.message}")
            return {"error": e, "phase": SequencePhase.ERROR}

        merged = merge(profile, overview, quote)
        logger.info(
            f"[{request_id}] Merged analysis for {merged.stock.symbol}: "
            f"{len(merged.live_fields)} live fields"
        )
        return {"merged": merged, "phase": SequencePhase.REVIEW_STAGES}

    async def forensic_checks(self, state: SequenceState) -> dict:
        await self._cosmetic_stage(state, Stage.FORENSIC_CHECKS)
        return {"phase": SequencePhase.REVIEW_STAGES}

    async def news_sentiment(self, state: SequenceState) -> dict:
        await self._cosmetic_stage(state, Stage.NEWS_SENTIMENT)
        return {"phase": SequencePhase.REVIEW_STAGES}

    async def peer_comparison(self, state: SequenceState) -> dict:
        await self._cosmetic_stage(state, Stage.PEER_COMPARISON)
        return {"phase": SequencePhase.REVIEW_STAGES}

    async def macro_analysis(self, state: SequenceState) -> dict:
        await self._cosmetic_stage(state, Stage.MACRO_ANALYSIS)
        return {"phase": SequencePhase.RECOMMENDATION}

    async def ai_recommendation(self, state: SequenceState) -> dict:
        """Stage 8: request the recommendation; completes only on success."""
        request_id = state["request_id"]
        tracker = state["tracker"]
        merged = state["merged"]
        assert merged is not None, "merged analysis must exist before the recommendation"

        await tracker.start(Stage.AI_RECOMMENDATION)
        try:
            recommendation = await self.agent.recommend(merged)
        except AnalysisError as e:
            logger.warning(f"[{request_id}] Recommendation failed: {e.error_type}: {e.message}")
            return {"error": e, "phase": SequencePhase.ERROR}

        await tracker.complete(Stage.AI_RECOMMENDATION)
        logger.info(f"[{request_id}] Analysis complete: {recommendation.recommendation}")
        return {"recommendation": recommendation, "phase": SequencePhase.COMPLETE}
