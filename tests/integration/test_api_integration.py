"""
Integration tests for the ledger HTTP API.

Drives the FastAPI application over an in-memory portfolio.
"""

from datetime import date

import pytest
from fastapi.testclient import TestClient

from ledger.api.main import create_app
from ledger.core.models.dividend import Dividend
from ledger.core.models.holding import Holding
from ledger.core.models.portfolio import Portfolio
from ledger.core.models.snapshot import PortfolioSnapshot
from ledger.core.models.strategy import Strategy
from ledger.core.models.transaction import Transaction
from ledger.infrastructure.storage import InMemoryRepository


class TestLedgerApiIntegration:
    """Integration tests for the API endpoints."""

    @pytest.fixture
    def repository(self):
        holding = Holding(
            "0056",
            "元大高股息",
            36.0,
            (Transaction("b1", "BUY", 1000, 30.0, date(2023, 1, 10), fees=40.0),),
        )
        dividend = Dividend(id="d1", symbol="0056", amount=1000.0, date=date(2023, 7, 15))
        strategy = Strategy(
            id="growth",
            name="Growth",
            target_symbol="0050",
            initial_amount=100000.0,
            expected_annual_return=8.0,
        )
        snapshot = PortfolioSnapshot(
            holdings=(holding,), dividends=(dividend,), strategies=(strategy,)
        )
        return InMemoryRepository(snapshot)

    @pytest.fixture
    def client(self, repository):
        return TestClient(create_app(Portfolio(repository)))

    def test_should_report_health(self, client):
        """Test the health and root endpoints."""
        assert client.get("/health").json() == {"status": "healthy"}
        assert client.get("/").json()["status"] == "running"

    def test_should_list_holdings(self, client):
        """Test current cost-basis figures."""
        response = client.get("/api/holdings")

        assert response.status_code == 200
        (holding,) = response.json()
        assert holding["symbol"] == "0056"
        assert holding["current_shares"] == pytest.approx(1000)
        assert holding["total_cost"] == pytest.approx(30040.0)
        assert holding["market_value"] == pytest.approx(36000.0)
        assert holding["has_sell"] is False

    def test_should_record_transaction(self, client, repository):
        """Test that a posted trade is applied and persisted."""
        response = client.post(
            "/api/transactions",
            json={
                "symbol": "0056",
                "type": "SELL",
                "shares": 400,
                "price": 40.0,
                "date": "2024-03-01",
            },
        )

        assert response.status_code == 201
        assert response.json()["success"] is True
        assert repository.save_count == 1
        holding = client.get("/api/holdings").json()[0]
        assert holding["current_shares"] == pytest.approx(600)
        assert holding["realized_pnl"] == pytest.approx(3984.0)

    def test_should_reject_over_sell(self, client, repository):
        """Test that a trade selling more than held is refused."""
        response = client.post(
            "/api/transactions",
            json={
                "symbol": "0056",
                "type": "SELL",
                "shares": 5000,
                "price": 40.0,
                "date": "2024-03-01",
            },
        )

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error"] == "transaction_rejected"
        assert "Cannot sell 5000 shares of 0056" in detail["message"]
        assert repository.save_count == 0

    def test_should_validate_transaction_request(self, client):
        """Test request validation of non-positive shares."""
        response = client.post(
            "/api/transactions",
            json={
                "symbol": "0056",
                "type": "BUY",
                "shares": 0,
                "price": 40.0,
                "date": "2024-03-01",
            },
        )

        assert response.status_code == 422

    def test_should_report_all_time_statistics(self, client):
        """Test all-time figures valued at the current price."""
        stats = client.get("/api/statistics").json()

        assert stats["year"] is None
        assert stats["market_value"] == pytest.approx(36000.0)
        assert stats["total_cost"] == pytest.approx(30040.0)
        assert stats["unrealized_pnl"] == pytest.approx(5960.0)
        assert stats["dividends"] == pytest.approx(1000.0)
        assert stats["holdings"][0]["symbol"] == "0056"

    def test_should_reject_invalid_month(self, client):
        """Test query validation of the month."""
        assert client.get("/api/statistics", params={"year": 2024, "month": 13}).status_code == 422

    def test_should_group_dividends(self, client):
        """Test distributions grouped by instrument."""
        (group,) = client.get("/api/dividends").json()

        assert group["symbol"] == "0056"
        assert group["total_amount"] == pytest.approx(1000.0)
        assert len(group["details"]) == 1
        assert client.get("/api/dividends", params={"year": 2024}).json() == []

    def test_should_build_budget_ledger(self, client):
        """Test the cash ledger derived from trades and dividends."""
        budget = client.get("/api/budget").json()

        assert budget["total_outflow"] == pytest.approx(30040.0)
        assert budget["total_inflow"] == pytest.approx(1000.0)
        assert budget["final_balance"] == pytest.approx(-29040.0)
        assert {row["source"] for row in budget["rows"]} == {"stock", "dividend"}

        dividend_only = client.get("/api/budget", params={"source": "dividend"}).json()
        assert [row["source"] for row in dividend_only["rows"]] == ["dividend"]

    def test_should_report_net_worth(self, client):
        """Test the year-end series and its overlay."""
        response = client.get("/api/net-worth", params={"start_year": 2023})

        assert response.status_code == 200
        body = response.json()
        first = body["actual"][0]
        assert first["year"] == 2023
        assert first["market_value"] == pytest.approx(30000.0)
        assert first["cumulative_dividends"] == pytest.approx(1000.0)
        assert body["overlay"][0]["year"] == 2023

    def test_should_project_saved_strategy(self, client):
        """Test a compound growth projection."""
        response = client.get(
            "/api/strategies/growth/projection", params={"start_year": 2024, "years": 2}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["target_symbol"] == "0050"
        assert [p["year"] for p in body["points"]] == [2025, 2026]
        assert body["points"][1]["projected_balance"] == pytest.approx(100000.0 * 1.08**2)

    def test_should_return_404_for_unknown_strategy(self, client):
        """Test an unknown strategy id."""
        assert client.get("/api/strategies/missing/projection").status_code == 404

    def test_should_export_and_reimport_backup(self, client, repository):
        """Test that an exported document restores the same portfolio."""
        document = client.get("/api/export").json()

        response = client.post("/api/import", json=document)

        assert response.status_code == 200
        assert response.json()["message"] == "Restored backup"
        assert document["stocks"][0]["symbol"] == "0056"
        assert repository.load().get_holding("0056").current_price == 36.0

    def test_should_reject_invalid_backup(self, client, repository):
        """Test that a malformed document leaves the portfolio unchanged."""
        response = client.post("/api/import", json={"stocks": "not a list"})

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error"] == "invalid_backup"
        assert detail["details"]
        assert repository.save_count == 0
