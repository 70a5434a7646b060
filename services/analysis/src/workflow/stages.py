"""Analysis stage progress tracking.

Eight stages run in a fixed order. Each moves pending -> active -> complete,
never backwards, and at most one stage is active at a time.
"""

import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class Stage(StrEnum):
    """Analysis stages in execution order."""

    P_TOOL_SCORE = "P-Tool Score"
    FUNDAMENTAL_ANALYSIS = "Fundamental Analysis"
    TECHNICAL_ANALYSIS = "Technical Analysis"
    FORENSIC_CHECKS = "Forensic Checks"
    NEWS_SENTIMENT = "News & Sentiment"
    PEER_COMPARISON = "Peer Comparison"
    MACRO_ANALYSIS = "Macro Analysis"
    AI_RECOMMENDATION = "AI Recommendation"


STAGE_ORDER: tuple[Stage, ...] = tuple(Stage)


class StageStatus(StrEnum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETE = "complete"


class StageProgress(BaseModel):
    """Snapshot of one stage."""

    model_config = ConfigDict(frozen=True)

    stage: Stage
    status: StageStatus


class StageTransitionError(RuntimeError):
    """Raised on an out-of-order or backwards stage transition."""


ProgressListener = Callable[[list[StageProgress]], Awaitable[None]]


class StageTracker:
    """Enforces forward-only, in-order stage transitions.

    Every transition is pushed to the optional async listener as a full
    snapshot.
    """

    def __init__(self, listener: ProgressListener | None = None):
        self._status: dict[Stage, StageStatus] = {stage: StageStatus.PENDING for stage in STAGE_ORDER}
        self._listener = listener

    def status(self, stage: Stage) -> StageStatus:
        return self._status[stage]

    @property
    def active(self) -> Stage | None:
        for stage, status in self._status.items():
            if status is StageStatus.ACTIVE:
                return stage
        return None

    @property
    def completed(self) -> list[Stage]:
        return [s for s in STAGE_ORDER if self._status[s] is StageStatus.COMPLETE]

    def snapshot(self) -> list[StageProgress]:
        return [StageProgress(stage=s, status=self._status[s]) for s in STAGE_ORDER]

    async def start(self, stage: Stage) -> None:
        """Move a stage from pending to active.

        Raises:
            StageTransitionError: If the stage is not pending, another stage is
                active, or an earlier stage is not complete.
        """
        if self._status[stage] is not StageStatus.PENDING:
            raise StageTransitionError(f"Cannot start {stage}: already {self._status[stage]}")
        active = self.active
        if active is not None:
            raise StageTransitionError(f"Cannot start {stage}: {active} is still active")
        for earlier in STAGE_ORDER[: STAGE_ORDER.index(stage)]:
            if self._status[earlier] is not StageStatus.COMPLETE:
                raise StageTransitionError(f"Cannot start {stage}: {earlier} is not complete")

        self._status[stage] = StageStatus.ACTIVE
        logger.debug(f"Stage active: {stage}")
        await self._notify()

    async def complete(self, stage: Stage) -> None:
        """Move the active stage to complete.

        Raises:
            StageTransitionError: If the stage is not active.
        """
        if self._status[stage] is not StageStatus.ACTIVE:
            raise StageTransitionError(f"Cannot complete {stage}: it is {self._status[stage]}")

        self._status[stage] = StageStatus.COMPLETE
        logger.debug(f"Stage complete: {stage}")
        await self._notify()

    async def _notify(self) -> None:
        if self._listener is not None:
            await self._listener(self.snapshot())
