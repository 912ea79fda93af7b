"""Tests for the JSON API endpoints using FastAPI's TestClient."""

import pytest
from fastapi.testclient import TestClient

from contract_calc.api.app import create_app
from contract_calc.config import AppSettings


@pytest.fixture
def client(app_settings: AppSettings) -> TestClient:
    return TestClient(create_app(app_settings))


@pytest.fixture
def martingale_body() -> dict[str, object]:
    return {
        "direction": "long",
        "initial_price": "100",
        "add_diff_percent": "5",
        "tp_percent": "10",
        "initial_margin": "100",
        "add_margin_base": "100",
        "max_adds": 1,
        "leverage": "10",
        "taker_fee": "0",
        "maker_fee": "0",
        "maintenance_margin_rate": "0",
    }


class TestDefaults:
    def test_defaults(self, client: TestClient) -> None:
        response = client.get("/api/defaults")
        assert response.status_code == 200
        assert response.json() == {
            "taker_fee": "0.05",
            "maker_fee": "0.02",
            "maintenance_margin_rate": "0.5",
        }


class TestMartingaleEndpoint:
    """POST /api/martingale."""

    def test_success(self, client: TestClient, martingale_body: dict[str, object]) -> None:
        response = client.post("/api/martingale", json=martingale_body)
        assert response.status_code == 200
        data = response.json()
        assert len(data["steps"]) == 2
        assert data["steps"][0]["add_quantity"] == "10"
        assert data["summary"]["has_adds"] is True
        assert data["summary"]["total_margin"] == "200"
        assert data["aborted"] is False
        assert data["liq_risk"] == "adverse"
        assert data["export_filename"].startswith("Martingale_Long_P100.000000_")

    def test_aborted_run_is_ok(
        self, client: TestClient, martingale_body: dict[str, object]
    ) -> None:
        martingale_body.update(add_diff_percent="40", max_adds=5)
        response = client.post("/api/martingale", json=martingale_body)
        assert response.status_code == 200
        data = response.json()
        assert data["aborted"] is True
        assert len(data["steps"]) == 3
        assert data["invalid_add_price"] == "-20.0"

    def test_validation_errors(
        self, client: TestClient, martingale_body: dict[str, object]
    ) -> None:
        martingale_body.update(initial_price="-5", leverage="0")
        response = client.post("/api/martingale", json=martingale_body)
        assert response.status_code == 422
        assert set(response.json()["errors"]) == {"initial_price", "leverage"}

    def test_invalid_json(self, client: TestClient) -> None:
        response = client.post(
            "/api/martingale",
            content=b"not json",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body"}

    def test_non_object_body(self, client: TestClient) -> None:
        response = client.post("/api/martingale", json=[1, 2, 3])
        assert response.status_code == 400

    def test_defaults_applied(
        self, client: TestClient, martingale_body: dict[str, object]
    ) -> None:
        del martingale_body["taker_fee"]
        response = client.post("/api/martingale", json=martingale_body)
        assert response.status_code == 200
        assert response.json()["parameters"]["taker_fee"] == "0.05"


class TestMartingaleReportEndpoint:
    def test_plain_text(self, client: TestClient, martingale_body: dict[str, object]) -> None:
        response = client.post("/api/martingale/report", json=martingale_body)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "MARTINGALE PROJECTION (LONG)" in response.text

    def test_validation_errors(self, client: TestClient) -> None:
        response = client.post("/api/martingale/report", json={"direction": "long"})
        assert response.status_code == 422
        assert "initial_price" in response.json()["errors"]


class TestStandardEndpoint:
    """POST /api/standard."""

    def test_success(self, client: TestClient) -> None:
        response = client.post(
            "/api/standard",
            json={
                "direction": "long",
                "entry_price": 100,
                "exit_price": 110,
                "quantity": 1,
                "leverage": 10,
                "taker_fee": 0,
                "maintenance_margin_rate": 0,
            },
        )
        assert response.status_code == 200
        result = response.json()["result"]
        assert result["pnl"] == "10"
        assert result["roe"] == "100"
        assert result["liquidation_price"] == "90.0"

    def test_validation_errors(self, client: TestClient) -> None:
        response = client.post(
            "/api/standard",
            json={"direction": "up", "entry_price": "0", "exit_price": "1", "quantity": "1",
                  "leverage": "2"},
        )
        assert response.status_code == 422
        assert set(response.json()["errors"]) == {"direction", "entry_price"}


class TestStandardReportEndpoint:
    """POST /api/standard/report."""

    def test_plain_text(self, client: TestClient) -> None:
        response = client.post(
            "/api/standard/report",
            json={
                "direction": "long",
                "entry_price": "100",
                "exit_price": "110",
                "quantity": "1",
                "leverage": "1",
                "taker_fee": "0",
                "maintenance_margin_rate": "0",
            },
        )
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "PnL:               10.00" in response.text
        assert "Liquidation price: <=0.000000" in response.text

    def test_validation_errors(self, client: TestClient) -> None:
        response = client.post("/api/standard/report", json={"direction": "long"})
        assert response.status_code == 422
        assert set(response.json()["errors"]) == {"entry_price", "exit_price", "quantity",
                                                  "leverage"}

    def test_invalid_json(self, client: TestClient) -> None:
        response = client.post("/api/standard/report", json="not an object")
        assert response.status_code == 400


class TestOutOfRangeInputs:
    """Inputs beyond the supported range are reported as 422 field errors."""

    def test_huge_amount_multiplier(
        self, client: TestClient, martingale_body: dict[str, object]
    ) -> None:
        martingale_body.update(direction="short", amount_multiplier="1e500000", max_adds=3)
        response = client.post("/api/martingale", json=martingale_body)
        assert response.status_code == 422
        assert list(response.json()["errors"]) == ["amount_multiplier"]

    def test_huge_initial_margin(
        self, client: TestClient, martingale_body: dict[str, object]
    ) -> None:
        martingale_body["initial_margin"] = "1e999999"
        response = client.post("/api/martingale", json=martingale_body)
        assert response.status_code == 422
        assert list(response.json()["errors"]) == ["initial_margin"]

    def test_max_adds_over_limit(
        self, client: TestClient, martingale_body: dict[str, object]
    ) -> None:
        martingale_body.update(max_adds="1e12")
        response = client.post("/api/martingale/report", json=martingale_body)
        assert response.status_code == 422
        assert list(response.json()["errors"]) == ["max_adds"]
