"""Tests for the operational endpoints."""


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_ready(client, db):
    response = client.get("/ready")
    assert response.status_code == 200
    assert ("churches", "select") in db.queries


def test_not_ready_when_storage_fails(client, db, monkeypatch):
    def broken(name):
        raise ConnectionError("supabase unreachable")

    monkeypatch.setattr(db, "table", broken)

    response = client.get("/ready")

    assert response.status_code == 503
