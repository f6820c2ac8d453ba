import logging

from fastapi.testclient import TestClient


def test_health_echoes_request_id(client):
    r = client.get("/api/v1/health", headers={"X-Request-Id": "req-123"})

    assert r.status_code == 200
    assert r.json() == {"status": "ok", "request_id": "req-123"}
    assert r.headers["X-Request-Id"] == "req-123"


def test_health_generates_request_id(client):
    r = client.get("/api/v1/health")

    assert r.status_code == 200
    assert r.headers["X-Request-Id"]


def test_failed_request_is_still_logged(client, caplog):
    def explode():
        raise RuntimeError("boom")

    client.app.add_api_route("/api/v1/explode", explode)
    caplog.set_level(logging.INFO, logger="gigmarket.request")

    with TestClient(client.app, raise_server_exceptions=False) as raw:
        r = raw.get("/api/v1/explode", headers={"X-Request-Id": "req-500"})

    assert r.status_code == 500
    assert r.json()["error"]["code"] == "SERVER_ERROR"
    completed = [rec for rec in caplog.records if rec.getMessage() == "request completed"]
    assert completed
    assert completed[-1].request_id == "req-500"
    assert completed[-1].status == 500
