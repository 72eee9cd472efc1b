"""Fixtures for the GeoJot test suite."""

from typing import Callable, Dict
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from geojot_api.app.core.config import settings
from geojot_api.app.services.music_service import MusicService
from geojot_client import GeoJotAPI
from geojot_ui.inflight import InFlightRequests
from geojot_ui.store import AppState, UserStore

from tests.utils import STRONG_PASSWORD


@pytest.fixture
def db_path(tmp_path, monkeypatch) -> str:
    path = str(tmp_path / "geojot-test.db")
    monkeypatch.setattr(settings, "database_url", path)
    return path


@pytest.fixture
def client(db_path) -> TestClient:
    """API client against a fresh database; migrations run on startup."""
    from geojot_api.app.main import create_app

    MusicService.reset_token()
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def register(client) -> Callable[..., Dict[str, str]]:
    """Register and log in a user; returns its Authorization header."""

    def _register(username: str, password: str = STRONG_PASSWORD, email: str = "") -> Dict[str, str]:
        email = email or f"{username}@example.com"
        response = client.post(
            "/api/register", json={"username": username, "email": email, "password": password}
        )
        assert response.status_code == 201, response.text
        response = client.post("/api/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _register


@pytest.fixture
def api() -> MagicMock:
    """A ``GeoJotAPI`` stand-in with harmless defaults."""
    mock = MagicMock(spec=GeoJotAPI)
    mock.recent_pins.return_value = ([], None)
    return mock


@pytest.fixture
def state(api) -> AppState:
    inflight = InFlightRequests(max_workers=4)
    app_state = AppState(api, users=UserStore("testuser", "token"), inflight=inflight)
    yield app_state
    inflight.shutdown()
