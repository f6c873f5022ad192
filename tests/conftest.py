"""Pytest configuration for global fixtures and logging setup."""
from __future__ import annotations

import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

os.environ["ANTHROPIC_API_KEY"] = os.environ.get("ANTHROPIC_API_KEY") or "test-anthropic-key"
os.environ["LOG_LEVEL"] = os.environ.get("LOG_LEVEL") or "DEBUG"

from app.logging_config import configure_logging

configure_logging()

from app.main import app
from app.models.schemas import Activity

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def test_client() -> TestClient:
    """Provide a FastAPI test client."""

    return TestClient(app)


@pytest.fixture
def activity() -> Activity:
    """A typical running activity."""

    return Activity(
        id="act-42",
        user_id="user-7",
        type="RUNNING",
        duration_minutes=45,
        calories_burned=520,
        additional_metrics={"distanceKm": 8.2, "avgHeartRate": 148},
    )


@pytest.fixture(scope="session")
def load_fixture():
    """Return a callable reading a raw response body from ``tests/fixtures``."""

    def _load(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")

    return _load
