"""
Tests for the service routes: health, root listing, diagnostics, table setup.
"""

from fastapi.testclient import TestClient
from sqlalchemy import inspect

from app.api.v1.public import reviews
from app.core.config import settings
from app.db.session import get_db
from app.main import app
from app.models.review import OWNED_TABLES


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert body["service"] == "review-service"
    assert body["version"] == settings.VERSION
    assert body["timestamp"]


def test_root_lists_endpoints(client):
    body = client.get("/").json()

    assert body["status"] == "running"
    assert body["endpoints"]["create-review"] == "/reviews (POST)"
    assert body["endpoints"]["review-stats"] == "/reviews/stats (GET)"


def test_diagnostics_reports_database(client, monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_URL", None)
    body = client.get("/test").json()
    assert body["database"] == "Not configured"
    assert body["port"] == settings.PORT

    monkeypatch.setattr(settings, "DATABASE_URL", "postgresql://reviews@db/reviews")
    assert client.get("/test").json()["database"] == "Connected"


def test_setup_database_creates_tables(client, engine):
    for table in reversed(OWNED_TABLES):
        table.drop(bind=engine)
    assert not inspect(engine).has_table("reviews")

    response = client.get("/setup-database")

    assert response.status_code == 200
    assert response.json()["tables"] == ["reviews", "landlord_responses", "review_helpfulness"]
    inspector = inspect(engine)
    for name in ("reviews", "landlord_responses", "review_helpfulness"):
        assert inspector.has_table(name)


def test_setup_database_is_idempotent(client):
    assert client.get("/setup-database").status_code == 200
    assert client.get("/setup-database").status_code == 200


def test_security_headers(client):
    response = client.get("/health")
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "SAMEORIGIN"


def test_unexpected_error_returns_json_500(session_factory, monkeypatch):
    def broken_search(db, params):
        raise RuntimeError("search exploded")

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    monkeypatch.setattr(reviews, "search_reviews", broken_search)
    app.dependency_overrides[get_db] = override_get_db
    try:
        with TestClient(app, raise_server_exceptions=False) as c:
            response = c.get("/reviews")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {
        "error": "Internal server error",
        "message": "An unexpected error occurred",
    }
