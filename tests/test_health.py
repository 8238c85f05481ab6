from unittest.mock import Mock

from fastapi.testclient import TestClient

from api import dependencies
from api.main import app
from src.jira_session import SessionRegistry


def test_root():
    response = TestClient(app).get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_health_reports_default_session(monkeypatch):
    registry = SessionRegistry()
    monkeypatch.setattr(dependencies, "session_registry", registry)

    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert response.json()["services"]["jira"] == "disconnected"


def test_health_reports_llm_configuration(monkeypatch):
    monkeypatch.setattr(dependencies, "session_registry", SessionRegistry())

    monkeypatch.setattr(dependencies, "llm_client", None)
    assert TestClient(app).get("/health").json()["services"]["llm"] == "not configured"

    monkeypatch.setattr(dependencies, "llm_client", Mock())
    assert TestClient(app).get("/health").json()["services"]["llm"] == "configured"


def test_health_unhealthy_before_startup(monkeypatch):
    monkeypatch.setattr(dependencies, "session_registry", None)

    response = TestClient(app).get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


def test_api_server_reexports_app():
    from api_server import app as server_app

    assert server_app is app
