"""
Tests for the HTTP surface: scanner ingestion and the admin routes.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from api.main import app
from attendance.errors import RepositoryError

AUTH = {"Authorization": "Bearer test-key"}
MAC = "AA:BB:CC:DD:EE:01"


@pytest.fixture
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DB_PATH", str(tmp_path / "api.db"))
    monkeypatch.setenv("API_KEYS", "test-key, other-key")
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "")
    for name in ("AUTHORIZED_CHAT_ID", "RSSI_THRESHOLD", "GRACE_MINUTES"):
        monkeypatch.delenv(name, raising=False)

    with TestClient(app) as test_client:
        yield test_client


def register(client: TestClient, mac: str = MAC) -> dict:
    response = client.post(
        "/employees",
        json={"mac_address": mac, "name": "Alice", "chat_id": 1001, "work_start_time": "08:00:00"},
        headers=AUTH,
    )
    assert response.status_code == 201
    return response.json()


def detect(client: TestClient, mac: str = MAC, rssi: int = -60):
    return client.post(
        "/api/detect",
        json={"scanner_mac": "esp32-door", "mac_address": mac, "rssi": rssi, "device_type": "tag", "itag03": True},
    )


def test_health_needs_no_auth(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_detection_of_unknown_device_is_acknowledged(client: TestClient) -> None:
    response = detect(client, "00:11:22:33:44:55")
    assert response.status_code == 200
    assert response.text == "OK"


def test_detection_records_todays_arrival_once(client: TestClient) -> None:
    employee = register(client)

    assert detect(client).text == "OK"
    assert detect(client).text == "OK"

    today = client.get(f"/employees/{employee['id']}/today", headers=AUTH)
    assert today.status_code == 200
    assert today.json()["scanner_mac"] == "esp32-door"
    assert today.json()["status"] in ("ontime", "late")

    history = client.get(f"/employees/{employee['id']}/history", headers=AUTH)
    assert len(history.json()) == 1


def test_far_detection_records_no_arrival(client: TestClient) -> None:
    employee = register(client)

    assert detect(client, rssi=-90).status_code == 200

    today = client.get(f"/employees/{employee['id']}/today", headers=AUTH)
    assert today.status_code == 404


def test_pipeline_errors_are_still_acknowledged(client: TestClient, monkeypatch) -> None:
    register(client)
    arrivals = client.app.state.repositories.attendance

    def broken(*args, **kwargs):
        raise RepositoryError("database is locked")

    monkeypatch.setattr(arrivals, "has_arrived_today", broken)

    response = detect(client)
    assert response.status_code == 200
    assert response.text == "OK"


def test_malformed_detection_is_rejected(client: TestClient) -> None:
    response = client.post("/api/detect", json={"scanner_mac": "x", "rssi": "near"})
    assert response.status_code == 422


def test_scanners_are_listed_after_detection(client: TestClient) -> None:
    detect(client, "00:11:22:33:44:55")
    assert client.get("/scanners", headers=AUTH).json() == []

    register(client)
    detect(client, rssi=-90)
    response = client.get("/scanners", headers=AUTH)
    assert [s["scanner_mac"] for s in response.json()] == ["esp32-door"]


def test_admin_routes_require_api_key(client: TestClient) -> None:
    assert client.get("/employees").status_code == 401
    assert client.get("/employees", headers={"Authorization": "Bearer nope"}).status_code == 401
    assert client.get("/employees", headers={"Authorization": "other-key"}).status_code == 200


def test_admin_routes_disabled_without_keys(client: TestClient, monkeypatch) -> None:
    monkeypatch.setenv("API_KEYS", "")
    assert client.get("/employees", headers=AUTH).status_code == 503


def test_duplicate_registration_conflicts(client: TestClient) -> None:
    register(client)
    response = client.post(
        "/employees", json={"mac_address": MAC.lower(), "name": "Bob"}, headers=AUTH
    )
    assert response.status_code == 409


def test_unknown_employee_is_404(client: TestClient) -> None:
    assert client.get("/employees/999", headers=AUTH).status_code == 404
    assert client.get("/employees/999/history", headers=AUTH).status_code == 404


def test_employee_lookup_by_chat_id(client: TestClient) -> None:
    employee = register(client)

    response = client.get("/employees/by-chat/1001", headers=AUTH)
    assert response.status_code == 200
    assert response.json() == employee

    assert client.get("/employees/by-chat/2002", headers=AUTH).status_code == 404
