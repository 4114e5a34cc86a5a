"""Contract tests for the application factory."""

from __future__ import annotations

from fastapi.testclient import TestClient

from idp.core.config import IdPSettings
from idp.core.exceptions import InvalidTransactionError
from idp.core.messages import CatalogMessageResolver
from idp.main import create_app


def _settings() -> IdPSettings:
    return IdPSettings(service_name="idp-test", log_level="WARNING", messages_path=None)


def test_health_endpoint_is_served() -> None:
    with TestClient(create_app(_settings())) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_factory_installs_dispatcher_with_injected_resolver() -> None:
    app = create_app(_settings(), resolver=CatalogMessageResolver({"invalid_transaction": "Transaction timed out"}))

    @app.post("/oauth/token")
    def token() -> None:
        raise InvalidTransactionError()

    with TestClient(app) as client:
        response = client.post("/oauth/token")

    assert app.title == "idp-test"
    assert response.status_code == 400
    assert response.json() == {"error": "invalid_transaction", "error_description": "Transaction timed out"}
