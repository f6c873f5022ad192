"""Tests for the application entry point."""
import pytest

from app import main


class DummySettings:
    app_host = "127.0.0.1"
    app_port = 9123
    log_level = "WARNING"


def test_run_serves_on_configured_address(monkeypatch: pytest.MonkeyPatch):
    captured: dict = {}

    def fake_run(application, **kwargs):
        captured["app"] = application
        captured.update(kwargs)

    monkeypatch.setattr("app.main.get_settings", lambda: DummySettings())
    monkeypatch.setattr("app.main.uvicorn.run", fake_run)

    main.run()

    assert captured["app"] is main.app
    assert captured["host"] == "127.0.0.1"
    assert captured["port"] == 9123
    assert captured["log_level"] == "warning"
