from datetime import datetime, timedelta

import pytest
import pytz
from fastapi.testclient import TestClient

from logbot import dashboard, db
from logbot.models import LogEntry


@pytest.fixture
def client(monkeypatch):
    monkeypatch.delenv("DASHBOARD_PASSWORD", raising=False)
    monkeypatch.delenv("TIMEZONE", raising=False)
    return TestClient(dashboard.app)


@pytest.fixture
def history(monkeypatch):
    today = datetime.now(pytz.UTC).date()
    rows = [LogEntry("42", today - timedelta(days=n), f"log {n}") for n in (3, 1, 0)]
    monkeypatch.setattr(db, "fetch_history", lambda user_id: rows if user_id == "42" else [])
    return rows


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_api_report(client, history):
    body = client.get("/api/users/42/logs", params={"limit": 2}).json()

    assert body["total"] == 3
    assert body["shown"] == 2
    assert body["streak"] == 2
    assert [e["day"] for e in body["entries"]] == [2, 3]
    assert body["entries"][-1]["message"] == "log 0"


def test_api_empty_history(client, history):
    body = client.get("/api/users/7/logs").json()
    assert body == {"user_id": "7", "total": 0, "shown": 0, "streak": 0, "entries": []}


def test_api_rejects_negative_limit(client, history):
    assert client.get("/api/users/42/logs", params={"limit": -1}).status_code == 422


def test_api_store_error(client, monkeypatch):
    def fail(user_id):
        raise db.StoreError("down")

    monkeypatch.setattr(db, "fetch_history", fail)
    assert client.get("/api/users/42/logs").status_code == 503


def test_password_required(monkeypatch, history):
    monkeypatch.setenv("DASHBOARD_PASSWORD", "secret")
    client = TestClient(dashboard.app)

    assert client.get("/api/users/42/logs").status_code == 403
    assert client.get("/users/42").status_code == 403
    assert client.get("/api/users/42/logs", params={"key": "secret"}).status_code == 200


def test_html_report(client, history):
    response = client.get("/users/42", params={"limit": 0})

    assert response.status_code == 200
    assert "Showing 3 out of 3 logged days" in response.text
    assert "2 Days" in response.text
    assert "log 3" in response.text


def test_html_report_empty(client, history):
    response = client.get("/users/7")
    assert response.status_code == 200
    assert "No logs yet" in response.text


def test_main_loads_settings_from_dotenv(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text("DASHBOARD_PASSWORD=from-dotenv\nDASHBOARD_PORT=9090\n")
    monkeypatch.chdir(tmp_path)
    for name in ("DASHBOARD_PASSWORD", "DASHBOARD_PORT"):
        # set first so the value written by load_dotenv is removed on teardown
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    started = []
    monkeypatch.setattr(dashboard.uvicorn, "run", lambda app, host, port, log_level: started.append(port))

    dashboard.main()

    assert started == [9090]
    assert not dashboard.check_auth("")
    assert dashboard.check_auth("from-dotenv")


def test_timezone_read_from_env(monkeypatch):
    monkeypatch.setenv("TIMEZONE", "Asia/Jakarta")
    assert dashboard.get_tz().zone == "Asia/Jakarta"
    monkeypatch.setenv("TIMEZONE", "Nowhere/Special")
    assert dashboard.get_tz() is pytz.UTC
