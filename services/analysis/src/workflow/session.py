"""Analysis session with request supersession.

A session shows one analysis at a time. Every ``begin`` mints a fresh request
token and cancels the in-flight run; every continuation checks its captured
token before touching session state, so results of superseded requests are
discarded.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum
from functools import partial
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from ..errors import AnalysisError
from ..models import MergedAnalysis, RecommendationResult
from .graph import AnalysisWorkflow
from .stages import StageProgress, StageTracker

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR = {
    "error": "InternalError",
    "message": "An unexpected error occurred during analysis.",
    "retryable": True,
}


class SessionStatus(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"
    FAILED = "failed"


class SessionState(BaseModel):
    """What the session currently presents."""

    model_config = ConfigDict(frozen=True)

    request_id: str | None = None
    symbol: str | None = None
    status: SessionStatus = SessionStatus.IDLE
    stages: list[StageProgress] = Field(default_factory=lambda: StageTracker().snapshot())
    merged: MergedAnalysis | None = None
    recommendation: RecommendationResult | None = None
    error: dict[str, Any] | None = None


SessionListener = Callable[[SessionState], Awaitable[None]]


class AnalysisSession:
    """Owns the current request token and the task running it."""

    def __init__(self, workflow: AnalysisWorkflow, listener: SessionListener | None = None):
        self.workflow = workflow
        self._listener = listener
        self._token: str | None = None
        self._task: asyncio.Task | None = None
        self._state = SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_token(self) -> str | None:
        return self._token

    def is_current(self, token: str) -> bool:
        return token == self._token

    async def begin(self, symbol: str) -> str:
        """Start analyzing a symbol, superseding any in-flight request.

        Returns:
            The new request token
        """
        token = uuid4().hex
        self._token = token
        self._cancel_task()

        tracker = StageTracker(listener=partial(self._on_progress, token))
        self._state = SessionState(
            request_id=token,
            symbol=symbol.strip().upper(),
            status=SessionStatus.RUNNING,
            stages=tracker.snapshot(),
        )
        await self._publish()

        self._task = asyncio.create_task(self._run(token, symbol, tracker))
        logger.info(f"[{token}] Session began analysis of {symbol}")
        return token

    async def close(self) -> None:
        """Invalidate the current request; late results are dropped."""
        self._token = None
        self._cancel_task()
        self._state = SessionState()

    async def wait(self) -> SessionState:
        """Wait for the in-flight run, if any, and return the session state."""
        task = self._task
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise
        return self._state

    def _cancel_task(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self, token: str, symbol: str, tracker: StageTracker) -> None:
        try:
            outcome = await self.workflow.run(symbol, tracker, request_id=token)
        except asyncio.CancelledError:
            logger.info(f"[{token}] Analysis cancelled")
            raise
        except AnalysisError as e:
            await self._apply(token, status=SessionStatus.FAILED, error=e.to_dict(), stages=tracker.snapshot())
            return
        except Exception as e:
            logger.error(f"[{token}] Unexpected analysis failure: {e}", exc_info=True)
            await self._apply(token, status=SessionStatus.FAILED, error=UNEXPECTED_ERROR, stages=tracker.snapshot())
            return

        await self._apply(
            token,
            status=SessionStatus.COMPLETE,
            merged=outcome.merged,
            recommendation=outcome.recommendation,
            stages=outcome.stages,
        )

    async def _on_progress(self, token: str, stages: list[StageProgress]) -> None:
        await self._apply(token, stages=stages)

    async def _apply(self, token: str, **updates: Any) -> bool:
        """Apply updates only if ``token`` is still the current request."""
        if not self.is_current(token):
            logger.debug(f"[{token}] Discarding update from superseded request")
            return False

        self._state = self._state.model_copy(update=updates)
        await self._publish()
        return True

    async def _publish(self) -> None:
        if self._listener is not None:
            await self._listener(self._state)
