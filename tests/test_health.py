"""Tests for the service info and health endpoints, and application startup."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from employee_manager.config import DEFAULT_SECRET_KEY, Settings
from employee_manager.infrastructure.database import MongoStore, ReadyState
from employee_manager.main import check_secret, create_app


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "running"


def test_health_when_connected(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "store": {"status": "connected", "readyState": 1},
        "server": "running",
    }


@pytest.mark.parametrize("state", [ReadyState.DISCONNECTED, ReadyState.CONNECTING])
def test_health_when_not_connected(client, store, state):
    store.ready_state = state

    body = client.get("/health").json()

    assert body["status"] == "unhealthy"
    assert body["store"] == {"status": state.label, "readyState": int(state)}


def test_store_is_closed_on_shutdown(app, store):
    with TestClient(app):
        assert store.ready_state == ReadyState.CONNECTED
    assert store.ready_state == ReadyState.DISCONNECTED


def test_request_id_header(client):
    response = client.get("/health", headers={"X-Request-ID": "0d9f4b1c6a7e4e2f8a3b5c7d9e1f2a4b"})

    assert response.headers["x-request-id"] == "0d9f4b1c6a7e4e2f8a3b5c7d9e1f2a4b"


def test_default_secret_is_refused_in_production():
    with pytest.raises(RuntimeError):
        check_secret(Settings(ENVIRONMENT="production", SECRET_KEY=DEFAULT_SECRET_KEY))


def test_default_secret_is_tolerated_in_development():
    check_secret(Settings(ENVIRONMENT="development", SECRET_KEY=DEFAULT_SECRET_KEY))


def test_health_follows_driver_monitoring(settings):
    store = MongoStore(settings)
    app = create_app(settings, store)
    lost = MagicMock()
    lost.new_description.has_writable_server.return_value = False

    with patch.object(store, "connect", AsyncMock(side_effect=store.mark_reachable)), \
            patch.object(store, "close", AsyncMock()):
        with TestClient(app) as client:
            assert client.get("/health").json()["status"] == "healthy"

            store.topology_listener.description_changed(lost)

            body = client.get("/health").json()

    assert body["status"] == "unhealthy"
    assert body["store"] == {"status": "disconnected", "readyState": 0}


def test_create_app_configures_logging(settings, store):
    with patch("employee_manager.main.configure_logging") as configure_logging:
        create_app(settings, store)

    configure_logging.assert_called_once_with(settings)
