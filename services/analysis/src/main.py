"""P-Tool Analysis Service - FastAPI HTTP/WebSocket Server.

Serves the dashboard catalog and runs analysis sequences:
- HTTP: one full sequence per request, errors mapped to status codes
- WebSocket: one session per connection, pushing stage and result snapshots;
  a new symbol supersedes the in-flight request
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import FastAPI, Query, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from shared.ai_clients import ClaudeClient
from shared.utils.logging import setup_logger

from .agents.recommendation_agent import RecommendationAgent
from .catalog import DEFAULT_MIN_SCORE, Catalog
from .clients.alpha_vantage_client import AlphaVantageClient
from .config import config
from .errors import AnalysisError
from .models import Recommendation
from .profile_store import ProfileStore
from .workflow.graph import AnalysisWorkflow
from .workflow.nodes import SequenceNodes
from .workflow.session import AnalysisSession, SessionState

setup_logger(config.service_name, level=config.log_level, log_format=config.log_format)
logger = logging.getLogger(__name__)

# Global instances
profile_store = ProfileStore.from_yaml(config.profiles_path)
catalog = Catalog.from_yaml(profile_store, config.dashboard_path)
alpha_vantage_client = AlphaVantageClient(
    api_key=config.alpha_vantage_api_key,
    base_url=config.alpha_vantage_base_url,
    timeout=config.alpha_vantage_timeout,
)
claude_client = ClaudeClient(api_key=config.anthropic_api_key)
workflow = AnalysisWorkflow(
    SequenceNodes(
        store=profile_store,
        live_client=alpha_vantage_client,
        agent=RecommendationAgent(claude_client),
        stage_delay_seconds=config.stage_delay_seconds,
    )
)

active_sessions = 0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Closes the live data client on shutdown.
    """
    logger.info(
        "Starting Analysis Service",
        extra={"service_name": config.service_name, "profiles": len(profile_store)},
    )

    yield

    logger.info("Shutting down Analysis Service")
    await alpha_vantage_client.close()
    logger.info("Analysis Service stopped")


app = FastAPI(
    title="P-Tool Analysis Service",
    description="Stock analysis pipeline with live data merge and AI recommendation",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError) -> JSONResponse:
    """Map typed analysis failures to their status code."""
    logger.warning(
        "Analysis request failed",
        extra={"path": request.url.path, "error": exc.error_type, "symbol": exc.symbol},
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/health")
async def health() -> dict[str, str | int | bool]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": config.service_name,
        "profiles": len(profile_store),
        "ai_configured": claude_client.is_configured,
        "sessions": active_sessions,
    }


@app.get("/api/stocks")
async def list_stocks() -> list[dict[str, Any]]:
    """Stocks available for analysis."""
    return [stock.model_dump(mode="json") for stock in catalog.available_stocks()]


@app.get("/api/sectors")
async def list_sectors() -> list[str]:
    return catalog.sectors()


@app.get("/api/top-picks")
async def list_top_picks(
    min_score: float = Query(DEFAULT_MIN_SCORE, ge=0, le=100, description="Minimum P-Tool score"),
    sector: str | None = Query(None, description="Exact sector; omit for all"),
    recommendation: Recommendation | None = Query(None, description="Exact recommendation; omit for all"),
) -> list[dict[str, Any]]:
    """Curated top picks, highest P-Tool score first."""
    picks = catalog.top_picks(min_score=min_score, sector=sector, recommendation=recommendation)
    return [pick.model_dump(mode="json") for pick in picks]


@app.get("/api/dashboard")
async def dashboard() -> dict[str, Any]:
    return catalog.dashboard_stats().model_dump(mode="json")


@app.get("/api/analysis/{symbol}")
async def analyze(symbol: str) -> dict[str, Any]:
    """Run one full analysis sequence.

    Raises:
        AnalysisError: Rendered by analysis_error_handler
    """
    outcome = await workflow.run(symbol)
    return outcome.model_dump(mode="json")


@app.websocket("/ws/analysis")
async def analysis_websocket(websocket: WebSocket) -> None:
    """WebSocket endpoint for live analysis progress.

    Clients send ``{"symbol": "TCS.NS"}``; the server pushes session
    snapshots as ``{"type": "session", "state": {...}}``.
    """
    global active_sessions

    await websocket.accept()

    async def push(state: SessionState) -> None:
        try:
            await websocket.send_json({"type": "session", "state": state.model_dump(mode="json")})
        except (WebSocketDisconnect, RuntimeError) as e:
            logger.debug("Dropped session update for closed socket", extra={"error": str(e)})

    session = AnalysisSession(workflow, listener=push)
    active_sessions += 1
    logger.info("Analysis session opened", extra={"sessions": active_sessions})

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except ValueError:
                logger.warning("Ignoring non-JSON client frame", extra={"length": len(raw)})
                message = None
            symbol = message.get("symbol") if isinstance(message, dict) else None
            if not isinstance(symbol, str) or not symbol.strip():
                await websocket.send_json(
                    {"type": "error", "message": 'Expected {"symbol": "<SYMBOL>"}'}
                )
                continue
            await session.begin(symbol)
    except WebSocketDisconnect:
        pass
    finally:
        await session.close()
        active_sessions -= 1
        logger.info("Analysis session closed", extra={"sessions": active_sessions})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=config.http_host,
        port=config.http_port,
    )
