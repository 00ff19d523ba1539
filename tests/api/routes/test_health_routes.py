"""Testes de /health, /ready e /auth/me."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from api.routes.auth.router import router as auth_router
from api.routes.health.router import SERVICE_LABEL
from api.routes.health.router import router as health_router
from app.services.credential_cache import CredentialCache
from tests.fakes.fake_app import build_router_app
from tests.fakes.fake_identity_verifier import FakeIdentityVerifier, make_identity

SWEEPING_CACHE = SimpleNamespace(is_sweeping=True)


def _firestore_client(exists: bool = True) -> MagicMock:
    client = MagicMock()
    client.collection.return_value.document.return_value.get.return_value = SimpleNamespace(
        exists=exists
    )
    return client


class TestHealth:
    def test_liveness(self) -> None:
        client = TestClient(build_router_app(health_router))

        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service"] == SERVICE_LABEL
        assert body["timestamp"]


class TestReadiness:
    def test_ready_with_memory_backend(self) -> None:
        app = build_router_app(
            health_router, store_backend="memory", credential_cache=SWEEPING_CACHE
        )

        response = TestClient(app).get("/ready")

        assert response.status_code == 200
        checks = response.json()["checks"]
        assert checks["firestore"]["status"] == "skipped"
        assert checks["credential_cache"]["status"] == "ok"

    def test_stopped_sweeper_is_degraded_but_ready(self) -> None:
        cache = CredentialCache(FakeIdentityVerifier())
        app = build_router_app(health_router, credential_cache=cache)

        response = TestClient(app).get("/ready")

        assert response.status_code == 200
        check = response.json()["checks"]["credential_cache"]
        assert check == {"status": "degraded", "latency_ms": None, "error": "sweeper_stopped"}

    def test_missing_cache_is_not_ready(self) -> None:
        response = TestClient(build_router_app(health_router)).get("/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"

    def test_firestore_readiness_check(self) -> None:
        firestore_client = _firestore_client()
        app = build_router_app(
            health_router,
            store_backend="firestore",
            firestore_client=firestore_client,
            credential_cache=SWEEPING_CACHE,
        )

        response = TestClient(app).get("/ready")

        assert response.status_code == 200
        check = response.json()["checks"]["firestore"]
        assert check["status"] == "ok"
        assert check["latency_ms"] is not None
        firestore_client.collection.assert_called_with("_health")

    def test_firestore_without_health_doc_is_degraded(self) -> None:
        app = build_router_app(
            health_router,
            store_backend="firestore",
            firestore_client=_firestore_client(exists=False),
            credential_cache=SWEEPING_CACHE,
        )

        response = TestClient(app).get("/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["firestore"]["status"] == "degraded"

    def test_firestore_error_is_not_ready(self) -> None:
        firestore_client = MagicMock()
        firestore_client.collection.side_effect = ConnectionError("offline")
        app = build_router_app(
            health_router,
            store_backend="firestore",
            firestore_client=firestore_client,
            credential_cache=SWEEPING_CACHE,
        )

        response = TestClient(app).get("/ready")

        assert response.status_code == 503
        check = response.json()["checks"]["firestore"]
        assert check["status"] == "failed"
        assert check["error"] == "ConnectionError"

    def test_firestore_backend_without_client(self) -> None:
        app = build_router_app(
            health_router, store_backend="firestore", credential_cache=SWEEPING_CACHE
        )

        response = TestClient(app).get("/ready")

        assert response.status_code == 503
        assert response.json()["checks"]["firestore"]["error"] == "not_configured"


class TestWhoAmI:
    def _client(self) -> TestClient:
        verifier = FakeIdentityVerifier({"t-ana": make_identity("ana", "ana@mail.com", "Ana")})
        return TestClient(build_router_app(auth_router, credential_cache=CredentialCache(verifier)))

    def test_anonymous(self) -> None:
        assert self._client().get("/auth/me").json() == {"authenticated": False}

    def test_authenticated(self) -> None:
        response = self._client().get("/auth/me", headers={"Authorization": "Bearer t-ana"})

        assert response.json() == {
            "authenticated": True,
            "uid": "ana",
            "email": "ana@mail.com",
            "name": "Ana",
        }
