from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.testclient import TestClient

from pacecast.consts import VERSION
from pacecast.domain.exceptions import MalformedRecordError, SourceUnavailableError
from pacecast.server import app

client = TestClient(app)


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == VERSION


def test_get_version():
    response = client.get("/version")
    assert response.status_code == 200
    assert response.json() == {"version": VERSION}


def test_forecast_demo(mock_home):
    response = client.post("/forecast", json={"demo": True, "demo_seed": 3, "pace": "recent"})

    assert response.status_code == 200
    data = response.json()
    assert data["is_demo"] is True
    assert data["current_level"] == 32
    assert data["active_pace"] == "recent"
    assert data["predicted_date"] == data["scenarios"]["recent"]
    assert data["speedup"]["levels_remaining"] == 28


def test_forecast_custom_ceiling(mock_home):
    response = client.post("/forecast", json={"demo": True, "ceiling_level": 40})

    assert response.status_code == 200
    assert response.json()["levels_remaining"] == 8


def test_forecast_without_token(mock_home):
    response = client.post("/forecast", json={})

    assert response.status_code == 401
    assert "No API token" in response.json()["detail"]


def test_forecast_invalid_timezone(mock_home):
    response = client.post("/forecast", json={"demo": True, "timezone": "Nowhere/Land"})
    assert response.status_code == 422


def test_forecast_invalid_pace(mock_home):
    response = client.post("/forecast", json={"demo": True, "pace": "turbo"})
    assert response.status_code == 422


def _failing_service(error):
    service = MagicMock()
    service.build_session = AsyncMock(side_effect=error)
    service.close = AsyncMock()
    return service


@patch("pacecast.application.factory.get_forecast_service")
def test_forecast_source_unavailable(mock_get_service, mock_home):
    service = _failing_service(SourceUnavailableError("API error 503", 503))
    mock_get_service.return_value = service

    response = client.post("/forecast", json={"token": "abc"})

    assert response.status_code == 502
    assert response.json()["detail"] == "API error 503"
    service.close.assert_awaited_once()


@patch("pacecast.application.factory.get_forecast_service")
def test_forecast_malformed_records(mock_get_service, mock_home):
    mock_get_service.return_value = _failing_service(MalformedRecordError("bad record"))

    response = client.post("/forecast", json={"token": "abc"})

    assert response.status_code == 500
