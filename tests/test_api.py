from __future__ import annotations

import pytest

from timetrack.main import create_app

HEADERS = {"X-Company-Id": "1"}


@pytest.fixture
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container)
    app.config["TESTING"] = True
    return app.test_client()


def test_company_header_is_required(client):
    resp = client.get("/api/employees")

    assert resp.status_code == 401
    body = resp.get_json()
    assert body["success"] is False
    assert body["error"] == "AuthenticationError"


def test_list_employees_uses_the_envelope(client):
    resp = client.get("/api/employees?active_only=1", headers=HEADERS)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert [e["dni"] for e in body["data"]] == ["11111111A", "22222222B"]
    assert "pin_hash" not in body["data"][0]


def test_punch_and_read_back(client):
    resp = client.post("/api/time-entries", json={"employee_id": 1, "type": "IN"}, headers=HEADERS)

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["message"] == "Punch recorded"
    assert body["data"]["entry_type"] == "IN"

    entry_id = body["data"]["entry_id"]
    assert client.get(f"/api/time-entries/{entry_id}", headers=HEADERS).status_code == 200

    state = client.get("/api/time-entries/state/1", headers=HEADERS).get_json()["data"]
    assert state["is_working"] is True


def test_domain_errors_map_to_status_codes(client):
    missing = client.get("/api/time-entries/999", headers=HEADERS)
    invalid = client.post("/api/time-entries", json={"employee_id": 1, "type": "OUT"}, headers=HEADERS)

    assert missing.status_code == 404
    assert missing.get_json()["message"] == "Time entry not found"
    assert invalid.status_code == 400


def test_absence_approval_flow(client):
    created = client.post(
        "/api/absences",
        json={"employee_id": 2, "type": "VACATION", "start_date": "2025-03-10", "end_date": "2025-03-11"},
        headers=HEADERS,
    )
    absence_id = created.get_json()["data"]["absence_id"]

    approved = client.post(f"/api/absences/{absence_id}/approve", json={"approved_by": "boss"}, headers=HEADERS)
    again = client.post(f"/api/absences/{absence_id}/approve", json={}, headers=HEADERS)

    assert created.status_code == 201
    assert approved.status_code == 200
    assert approved.get_json()["data"]["status"] == "APPROVED"
    assert again.status_code == 409

    balance = client.get("/api/vacation-balances/2?year=2025", headers=HEADERS).get_json()["data"]
    assert balance["used_days"] == 2.0
    assert balance["available_days"] == 20.0


def test_report_needs_dates(client):
    resp = client.get("/api/reports/attendance", headers=HEADERS)

    assert resp.status_code == 400
    assert "start_date" in resp.get_json()["message"]


def test_report_endpoint(client):
    resp = client.get("/api/reports/hours-worked?start_date=2025-01-01&end_date=2025-01-31&group_by=week", headers=HEADERS)

    assert resp.status_code == 200
    assert resp.get_json()["data"]["summary"]["total_entries"] == 0


def test_unknown_route_returns_json(client):
    resp = client.get("/api/nothing-here", headers=HEADERS)

    assert resp.status_code == 404
    assert resp.get_json()["success"] is False
