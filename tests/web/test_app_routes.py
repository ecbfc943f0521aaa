from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from src.leave_management.leave_management.core.enums import Role
from src.leave_management.leave_management.main import create_app


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def accounts(profiles_repo):
    boss = profiles_repo.add(
        name="Marie Lefebvre",
        email="marie@entreprise.fr",
        role=Role.ADMIN,
        department="RH",
        password_hash=generate_password_hash("admin123"),
    )
    worker = profiles_repo.add(
        name="Sophie Martin",
        email="sophie@entreprise.fr",
        department="Développement",
        password_hash=generate_password_hash("employe123"),
    )
    return boss, worker


def _login(client, email, password):
    return client.post("/auth/login", json={"email": email, "password": password})


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}


def test_routes_require_login(client):
    resp = client.get("/leaves")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "authentication_error"


def test_bad_credentials_are_401(client, accounts):
    resp = _login(client, "sophie@entreprise.fr", "nope")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "authentication_error"


def test_register_creates_employee_session(client):
    resp = client.post(
        "/auth/register",
        json={"email": "new@entreprise.fr", "password": "secret1", "name": "Nouveau", "role": "admin"},
    )
    assert resp.status_code == 201
    assert resp.get_json()["role"] == "employee"

    me = client.get("/auth/me")
    assert me.get_json()["email"] == "new@entreprise.fr"


def test_submit_then_admin_approves(app, accounts):
    employee_client = app.test_client()
    admin_client = app.test_client()
    _login(employee_client, "sophie@entreprise.fr", "employe123")
    _login(admin_client, "marie@entreprise.fr", "admin123")

    created = employee_client.post(
        "/leaves",
        json={"type": "annual", "start_date": "2024-07-15", "end_date": "2024-07-26", "reason": "Été"},
    )
    assert created.status_code == 201
    body = created.get_json()
    assert body["status"] == "pending"
    assert body["duration"] == 12
    assert "error" not in body

    forbidden = employee_client.post(f"/admin/leaves/{body['id']}/approve")
    assert forbidden.status_code == 403

    approved = admin_client.post(f"/admin/leaves/{body['id']}/approve", json={})
    assert approved.status_code == 200
    assert approved.get_json()["status"] == "approved"

    again = admin_client.post(f"/admin/leaves/{body['id']}/reject", json={"comment": "trop tard"})
    assert again.status_code == 409
    assert again.get_json()["error"] == "invalid_state"

    inbox = employee_client.get("/notifications").get_json()
    assert inbox["unread_count"] == 1
    assert "du 15/07/2024 au 26/07/2024" in inbox["items"][0]["message"]


def test_invalid_dates_are_400(client, accounts):
    _login(client, "sophie@entreprise.fr", "employe123")
    resp = client.post("/leaves", json={"type": "annual", "start_date": "2024-07-26", "end_date": "2024-07-15"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


def test_admin_filters_and_missing_request(client, accounts, leaves_repo):
    from datetime import date

    boss, worker = accounts
    leaves_repo.add(employee_id=worker.profile_id, leave_type="sick", start_date=date(2024, 6, 25), end_date=date(2024, 6, 27))
    _login(client, "marie@entreprise.fr", "admin123")

    listed = client.get("/admin/leaves", query_string={"status": "pending", "department": "développement"}).get_json()
    assert listed["count"] == 1

    assert client.get("/admin/leaves?status=bogus").status_code == 400
    assert client.post("/admin/leaves/999/approve").status_code == 404


def test_presence_endpoint(client, accounts):
    _login(client, "marie@entreprise.fr", "admin123")
    data = client.get("/admin/presence?date=2024-06-26").get_json()
    assert data["date"] == "2024-06-26"
    assert data["counts"] == {"total": 1, "present": 1, "absent": 0}


def test_export_returns_csv_attachment(client, accounts, leaves_repo):
    from datetime import date

    boss, worker = accounts
    leaves_repo.add(employee_id=worker.profile_id, leave_type="annual", start_date=date(2024, 7, 1), end_date=date(2024, 7, 2))
    _login(client, "sophie@entreprise.fr", "employe123")

    resp = client.get("/export/leave_requests")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "demandes_conges.csv" in resp.headers["Content-Disposition"]
    assert resp.get_data(as_text=True).startswith('"id",')

    assert client.get("/export/notifications").status_code == 400
    assert client.get("/export/profiles").status_code == 403


def test_out_of_range_year_is_400(client, accounts):
    _login(client, "marie@entreprise.fr", "admin123")

    calendar = client.get("/admin/presence/calendar?year=0&month=6")
    balance = client.get("/balance?year=0")

    assert calendar.status_code == 400
    assert calendar.get_json()["error"] == "validation_error"
    assert balance.status_code == 400
    assert client.get("/admin/presence/calendar?year=2024&month=13").status_code == 400


def test_wrongly_typed_fields_are_client_errors(client, accounts, leaves_repo):
    _login(client, "sophie@entreprise.fr", "employe123")

    numeric_reason = client.post(
        "/leaves",
        json={"type": "annual", "start_date": "2024-07-15", "end_date": "2024-07-26", "reason": 5},
    )
    bad_id = client.patch("/profile", json={"id": "abc", "name": "Sophie"})
    list_department = client.patch("/profile", json={"department": ["RH"]})

    assert numeric_reason.status_code == 400
    assert numeric_reason.get_json()["error"] == "validation_error"
    assert leaves_repo.list_views() == []
    assert bad_id.status_code == 400
    assert list_department.status_code == 400

    client.post("/auth/logout")
    assert client.post("/auth/login", json={"email": 5, "password": "x"}).status_code == 401


def test_notification_stream_pushes_changes_and_releases_subscription(client, container, feed, accounts):
    boss, worker = accounts
    _login(client, "sophie@entreprise.fr", "employe123")

    resp = client.get("/notifications/stream")
    assert resp.mimetype == "text/event-stream"
    chunks = iter(resp.response)

    first = next(chunks)
    assert b"event: notifications" in first
    assert feed.subscriber_count("notifications") == 1

    container.notification_service.notify(
        user_id=worker.profile_id,
        type="approval",
        title="Demande approuvée",
        message="Votre demande a été approuvée.",
    )
    second = next(chunks)
    assert b"Demande approuv" in second
    assert b'"unread_count": 1' in second

    resp.close()
    assert feed.subscriber_count("notifications") == 0
