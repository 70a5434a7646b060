"""Tests for main.py FastAPI application."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from src.errors import AuthenticationFailed, RateLimited


@pytest.fixture
def client() -> TestClient:
    from src.main import app

    return TestClient(app, raise_server_exceptions=False)


class TestHealthEndpoint:
    """Test cases for the /health endpoint."""

    def test_health_returns_healthy_status(self, client) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "analysis"
        assert data["profiles"] == 6
        assert data["sessions"] == 0


class TestCatalogEndpoints:
    """Test cases for the dashboard catalog endpoints."""

    def test_stocks(self, client) -> None:
        response = client.get("/api/stocks")

        assert response.status_code == 200
        assert [s["symbol"] for s in response.json()][:2] == ["RELIANCE.NS", "TCS.NS"]

    def test_sectors(self, client) -> None:
        assert client.get("/api/sectors").json() == ["Oil & Gas", "IT", "Banking", "Finance"]

    def test_top_picks_default(self, client) -> None:
        picks = client.get("/api/top-picks").json()

        assert [p["symbol"] for p in picks] == ["RELIANCE.NS", "TCS.NS", "INFY.NS", "HDFCBANK.NS"]

    def test_top_picks_filters(self, client) -> None:
        response = client.get(
            "/api/top-picks", params={"min_score": 80, "sector": "Banking", "recommendation": "BUY"}
        )

        assert [p["symbol"] for p in response.json()] == ["HDFCBANK.NS", "ICICIBANK.NS"]

    def test_top_picks_rejects_unknown_recommendation(self, client) -> None:
        response = client.get("/api/top-picks", params={"recommendation": "ACCUMULATE"})

        assert response.status_code == 422

    def test_dashboard(self, client) -> None:
        data = client.get("/api/dashboard").json()

        assert data == {
            "stocks_analyzed": 5248,
            "buy_signals": 89,
            "avg_ptool_score": 67.8,
            "red_flags": 23,
        }


class TestAnalysisEndpoint:
    """Test cases for GET /api/analysis/{symbol}."""

    def test_full_sequence(self, client, make_workflow) -> None:
        with patch("src.main.workflow", make_workflow()):
            response = client.get("/api/analysis/tcs.ns")

        assert response.status_code == 200
        data = response.json()
        assert data["merged"]["stock"]["symbol"] == "TCS.NS"
        assert data["merged"]["fundamental"]["revenue_growth"] == 13.1
        assert data["recommendation"]["recommendation"] == "BUY"
        assert [s["status"] for s in data["stages"]] == ["complete"] * 8

    def test_unknown_symbol_is_404(self, client, make_workflow) -> None:
        with patch("src.main.workflow", make_workflow()):
            response = client.get("/api/analysis/WIPRO.NS")

        assert response.status_code == 404
        assert response.json() == {
            "error": "ProfileNotFound",
            "message": 'Stock analysis profile for "WIPRO.NS" not found.',
            "retryable": False,
        }

    @pytest.mark.parametrize(
        "error, status",
        [(RateLimited("API call frequency limit reached."), 429), (AuthenticationFailed("no key"), 503)],
    )
    def test_errors_map_to_status(self, client, error, status) -> None:
        workflow = MagicMock()
        workflow.run = AsyncMock(side_effect=error)

        with patch("src.main.workflow", workflow):
            response = client.get("/api/analysis/TCS.NS")

        assert response.status_code == status
        assert response.json()["error"] == type(error).__name__


class TestAnalysisWebSocket:
    """Test cases for the /ws/analysis endpoint."""

    def test_pushes_snapshots_until_complete(self, client, make_workflow) -> None:
        with patch("src.main.workflow", make_workflow()):
            with client.websocket_connect("/ws/analysis") as websocket:
                websocket.send_json({"symbol": "INFY.NS"})

                messages = []
                while True:
                    message = websocket.receive_json()
                    messages.append(message)
                    if message["state"]["status"] in ("complete", "failed"):
                        break

        assert messages[0]["state"]["status"] == "running"
        final = messages[-1]["state"]
        assert final["status"] == "complete"
        assert final["symbol"] == "INFY.NS"
        assert final["recommendation"]["recommendation"] == "BUY"

    def test_failure_snapshot(self, client, make_workflow) -> None:
        with patch("src.main.workflow", make_workflow()):
            with client.websocket_connect("/ws/analysis") as websocket:
                websocket.send_json({"symbol": "WIPRO.NS"})

                while True:
                    state = websocket.receive_json()["state"]
                    if state["status"] != "running":
                        break

        assert state["status"] == "failed"
        assert state["error"]["error"] == "ProfileNotFound"

    def test_invalid_message(self, client) -> None:
        with client.websocket_connect("/ws/analysis") as websocket:
            websocket.send_json({"ticker": "TCS.NS"})

            message = websocket.receive_json()

        assert message["type"] == "error"

    def test_non_json_frame_keeps_session_open(self, client, make_workflow) -> None:
        """A malformed frame is answered with an error and the socket stays usable."""
        with patch("src.main.workflow", make_workflow()):
            with client.websocket_connect("/ws/analysis") as websocket:
                websocket.send_text("not json")
                error = websocket.receive_json()

                websocket.send_json({"symbol": "TCS.NS"})
                while True:
                    state = websocket.receive_json()["state"]
                    if state["status"] != "running":
                        break

        assert error["type"] == "error"
        assert state["status"] == "complete"
        assert state["symbol"] == "TCS.NS"
