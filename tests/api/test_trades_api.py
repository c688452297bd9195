"""
API tests for trade endpoints.

Tests cover:
- Execute buy/sell (success)
- Precondition and compliance rejections with their status codes
- List trades
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from tests.conftest import TEST_DAY_TRADER


@pytest.fixture
def account_id(client: TestClient) -> str:
    response = client.post(
        "/accounts",
        json={"owner_id": "alice", "account_type": TEST_DAY_TRADER, "initial_cash": "10000"},
    )
    return response.json()["account_id"]


def _trade(client: TestClient, account_id: str, side: str, quantity: str, symbol: str = "X"):
    return client.post(
        f"/accounts/{account_id}/trades",
        json={"symbol": symbol, "side": side, "quantity": quantity},
    )


# =============================================================================
# EXECUTE TESTS
# =============================================================================


class TestExecuteTradeAPI:
    """Tests for POST /accounts/{id}/trades."""

    def test_buy_then_sell_round_trip(self, client: TestClient, account_id: str, price_source):
        """
        GIVEN an account with $10,000
        WHEN I buy 10 X at $100 and sell them at $120 the same day
        THEN both return 201 and the sell is a day trade with $200 realized
        """
        buy = _trade(client, account_id, "buy", "10")
        price_source.set_price("X", Decimal("120"))
        sell = _trade(client, account_id, "sell", "10")

        assert buy.status_code == 201
        assert buy.json()["side"] == "BUY"
        assert buy.json()["status"] == "EXECUTED"
        assert Decimal(buy.json()["total_amount"]) == Decimal("1000")
        assert sell.status_code == 201
        assert sell.json()["is_day_trade"] is True
        assert Decimal(sell.json()["realized_pnl"]) == Decimal("200")
        account = client.get(f"/accounts/{account_id}").json()
        assert Decimal(account["cash_balance"]) == Decimal("10200")
        assert account["day_trade_count"] == 1

    def test_symbol_is_uppercased(self, client: TestClient, account_id: str):
        response = _trade(client, account_id, "buy", "1", symbol=" x ")

        assert response.status_code == 201
        assert response.json()["symbol"] == "X"

    @pytest.mark.parametrize(
        "side, quantity, symbol, status, error",
        [
            ("buy", "1000", "X", 400, "INSUFFICIENT_FUNDS"),
            ("sell", "1", "X", 400, "INSUFFICIENT_SHARES"),
            ("buy", "0", "X", 422, "VALIDATION_ERROR"),
            ("buy", "0.123456789", "X", 422, "VALIDATION_ERROR"),
            ("hold", "1", "X", 422, "VALIDATION_ERROR"),
            ("buy", "1", "NOPE", 422, "VALIDATION_ERROR"),
        ],
    )
    def test_rejections_map_to_status_codes(
        self,
        client: TestClient,
        account_id: str,
        side,
        quantity,
        symbol,
        status,
        error,
    ):
        response = _trade(client, account_id, side, quantity, symbol=symbol)

        assert response.status_code == status
        assert response.json()["error"] == error

    def test_day_trade_on_small_account_is_403(self, client: TestClient):
        account = client.post(
            "/accounts",
            json={"owner_id": "bob", "account_type": "SMALL_ACCOUNT_BASIC", "initial_cash": "1000"},
        ).json()
        _trade(client, account["account_id"], "buy", "1")

        response = _trade(client, account["account_id"], "sell", "1")

        assert response.status_code == 403
        assert response.json()["error"] == "DAY_TRADING_NOT_ALLOWED"

    def test_fourth_day_trade_is_429(self, client: TestClient, account_id: str):
        """
        GIVEN three same-day round trips
        WHEN a fourth sell is attempted
        THEN response is 429 DAY_TRADE_LIMIT_EXCEEDED
        """
        for _ in range(3):
            _trade(client, account_id, "buy", "1")
            _trade(client, account_id, "sell", "1")
        _trade(client, account_id, "buy", "1")

        response = _trade(client, account_id, "sell", "1")

        assert response.status_code == 429
        assert response.json()["error"] == "DAY_TRADE_LIMIT_EXCEEDED"

    def test_trade_on_closed_account_is_409(self, client: TestClient, account_id: str):
        client.delete(f"/accounts/{account_id}")

        response = _trade(client, account_id, "buy", "1")

        assert response.status_code == 409
        assert response.json()["error"] == "ACCOUNT_INACTIVE"

    def test_trade_on_missing_account_is_404(self, client: TestClient):
        assert _trade(client, "missing", "buy", "1").status_code == 404

    def test_malformed_quantity_is_422(self, client: TestClient, account_id: str):
        assert _trade(client, account_id, "buy", "lots").status_code == 422


# =============================================================================
# LIST TESTS
# =============================================================================


class TestListTradesAPI:
    """Tests for GET /accounts/{id}/trades."""

    def test_list_trades(self, client: TestClient, account_id: str):
        _trade(client, account_id, "buy", "2")
        _trade(client, account_id, "buy", "3", symbol="Y")

        response = client.get(f"/accounts/{account_id}/trades")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert [t["symbol"] for t in data["trades"]] == ["X", "Y"]

    def test_list_trades_missing_account_is_404(self, client: TestClient):
        assert client.get("/accounts/missing/trades").status_code == 404

    def test_list_trades_with_window(self, client: TestClient, account_id: str, clock):
        _trade(client, account_id, "buy", "2")
        clock.advance(days=1)
        _trade(client, account_id, "buy", "3", symbol="Y")

        response = client.get(
            f"/accounts/{account_id}/trades",
            params={"since": "2024-06-11T00:00:00-04:00"},
        )

        assert response.status_code == 200
        assert [t["symbol"] for t in response.json()["trades"]] == ["Y"]

    def test_list_trades_bad_timestamp_is_422(self, client: TestClient, account_id: str):
        response = client.get(f"/accounts/{account_id}/trades", params={"until": "soon"})

        assert response.status_code == 422
        assert response.json()["error"] == "VALIDATION_ERROR"
