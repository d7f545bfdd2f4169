from fastapi.testclient import TestClient

from app.core import logging as app_logging
from app.core.config import settings


def test_health_check(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "ok"
    assert response.headers.get("X-Request-ID")


def test_unknown_route_uses_error_envelope(client: TestClient):
    response = client.get("/does-not-exist")
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "NOT_FOUND"
    assert body["path"] == "/does-not-exist"
    assert body["requestId"] == response.headers["X-Request-ID"]


def test_logging_config_console_only(monkeypatch):
    monkeypatch.setattr(settings, "LOG_TO_FILE", False)
    config = app_logging.build_logging_config()
    assert list(config["handlers"]) == ["console"]
    assert config["loggers"]["app"]["handlers"] == ["console"]


def test_logging_config_with_files(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "LOG_TO_FILE", True)
    monkeypatch.setattr(settings, "LOG_DIR", str(tmp_path / "logs"))
    config = app_logging.build_logging_config()

    assert set(config["handlers"]) == {"console", "file", "error_file"}
    assert config["handlers"]["error_file"]["level"] == "ERROR"
    assert (tmp_path / "logs").is_dir()


def test_incoming_request_id_is_kept(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "trace-123"})
    assert response.headers["X-Request-ID"] == "trace-123"
