"""Pytest fixtures for Analysis Service tests."""

import json
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest

from src.agents.recommendation_agent import RecommendationAgent
from src.clients.alpha_vantage_client import AlphaVantageClient
from src.config import config
from src.models import AnalysisProfile, RecommendationResult
from src.profile_store import ProfileStore
from src.workflow.graph import AnalysisWorkflow
from src.workflow.nodes import SequenceNodes

TEST_BASE_URL = "https://av.test/query"


@pytest.fixture
def profile_store() -> ProfileStore:
    """Profile store loaded from the shipped baseline table."""
    return ProfileStore.from_yaml(config.profiles_path)


@pytest.fixture
def tcs_profile(profile_store) -> AnalysisProfile:
    return profile_store.lookup("TCS.NS")


@pytest.fixture
def reliance_profile(profile_store) -> AnalysisProfile:
    return profile_store.lookup("RELIANCE.NS")


@pytest.fixture
def recommendation_payload() -> dict[str, Any]:
    """A valid tool input for the recommendation schema."""
    return {
        "recommendation": "BUY",
        "confidence_score": 78,
        "key_reasoning": ["Consistent double-digit growth", "Best-in-class ROE"],
        "strengths": ["Net cash balance sheet", "Strong deal pipeline"],
        "risks": ["Premium valuation vs peers"],
        "target_price": "4,250",
        "stop_loss": "3,600",
        "investment_horizon": "Long Term (12+ mo)",
        "position_size": "Moderate (3-5%)",
    }


@pytest.fixture
def recommendation(recommendation_payload) -> RecommendationResult:
    return RecommendationResult.model_validate_json(json.dumps(recommendation_payload))


@pytest.fixture
def make_av_transport() -> Callable[..., httpx.MockTransport]:
    """Factory for MockTransports answering OVERVIEW and GLOBAL_QUOTE with fixed payloads."""

    def factory(
        overview: dict[str, Any] | None = None,
        quote: dict[str, Any] | None = None,
    ) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            function = request.url.params.get("function")
            if function == "OVERVIEW":
                return httpx.Response(200, json=overview or {})
            if function == "GLOBAL_QUOTE":
                return httpx.Response(200, json=quote or {})
            return httpx.Response(400, json={})

        return httpx.MockTransport(handler)

    return factory


@pytest.fixture
def make_av_client() -> Callable[..., AlphaVantageClient]:
    """Factory for AlphaVantageClient instances backed by a MockTransport."""

    def factory(transport: httpx.MockTransport) -> AlphaVantageClient:
        return AlphaVantageClient(
            api_key="test-key",
            base_url=TEST_BASE_URL,
            client=httpx.AsyncClient(transport=transport),
        )

    return factory


@pytest.fixture
def mock_agent(recommendation) -> AsyncMock:
    """Mock RecommendationAgent returning a valid recommendation."""
    agent = AsyncMock(spec=RecommendationAgent)
    agent.recommend = AsyncMock(return_value=recommendation)
    return agent


@pytest.fixture
def mock_live_client() -> AsyncMock:
    """Mock AlphaVantageClient returning TCS overview and quote payloads."""
    client = AsyncMock(spec=AlphaVantageClient)
    client.fetch_overview_and_quote = AsyncMock(
        return_value=(
            {"Name": "Tata Consultancy Services", "QuarterlyRevenueGrowthYOY": "0.131"},
            {"Global Quote": {"05. price": "3912.45"}},
        )
    )
    return client


@pytest.fixture
def make_workflow(profile_store, mock_live_client, mock_agent) -> Callable[..., AnalysisWorkflow]:
    """Factory for workflows with zero stage delay and mocked providers."""

    def factory(live_client=None, agent=None, stage_delay_seconds: float = 0) -> AnalysisWorkflow:
        return AnalysisWorkflow(
            SequenceNodes(
                store=profile_store,
                live_client=live_client or mock_live_client,
                agent=agent or mock_agent,
                stage_delay_seconds=stage_delay_seconds,
            )
        )

    return factory
