"""Testes das dependências de autenticação (require_auth / optional_auth)."""

from __future__ import annotations

from typing import Annotated, Any

import pytest
from fastapi import APIRouter, Depends
from fastapi.testclient import TestClient

from api.dependencies.auth import (
    UNAUTHORIZED_ERROR,
    UNAUTHORIZED_MESSAGE,
    AuthenticationRequiredError,
    authenticated_call,
    optional_auth,
    require_auth,
)
from app.domain.identity import Identity
from app.services.credential_cache import CredentialCache
from tests.fakes.fake_app import build_router_app
from tests.fakes.fake_identity_verifier import FakeIdentityVerifier, make_identity

ANA = make_identity("ana", "ana@mail.com", "Ana")

router = APIRouter()


@router.get("/private")
async def private(identity: Annotated[Identity, Depends(require_auth)]) -> dict[str, Any]:
    return {"uid": identity.uid}


@router.get("/public")
async def public(identity: Annotated[Identity | None, Depends(optional_auth)]) -> dict[str, Any]:
    return {"uid": identity.uid if identity else None}


@pytest.fixture
def verifier() -> FakeIdentityVerifier:
    return FakeIdentityVerifier({"t-ana": ANA})


@pytest.fixture
def client(verifier: FakeIdentityVerifier) -> TestClient:
    app = build_router_app(router, credential_cache=CredentialCache(verifier))
    return TestClient(app)


class TestRequireAuth:
    def test_valid_token_reaches_handler(self, client: TestClient) -> None:
        response = client.get("/private", headers={"Authorization": "Bearer t-ana"})
        assert response.status_code == 200
        assert response.json() == {"uid": "ana"}

    @pytest.mark.parametrize(
        "headers",
        [{}, {"Authorization": "Bearer nope"}, {"Authorization": "Basic t-ana"}],
    )
    def test_rejections_share_the_same_body(
        self, client: TestClient, headers: dict[str, str]
    ) -> None:
        response = client.get("/private", headers=headers)

        assert response.status_code == 401
        assert response.json() == {"error": UNAUTHORIZED_ERROR, "message": UNAUTHORIZED_MESSAGE}
        assert response.headers["www-authenticate"] == "Bearer"

    def test_repeated_calls_verify_once(
        self, client: TestClient, verifier: FakeIdentityVerifier
    ) -> None:
        for _ in range(3):
            client.get("/private", headers={"Authorization": "Bearer t-ana"})
        assert verifier.calls == ["t-ana"]


class TestOptionalAuth:
    def test_anonymous_allowed(self, client: TestClient) -> None:
        assert client.get("/public").json() == {"uid": None}
        assert client.get("/public", headers={"Authorization": "Bearer nope"}).json() == {
            "uid": None
        }

    def test_identity_when_present(self, client: TestClient) -> None:
        response = client.get("/public", headers={"Authorization": "Bearer t-ana"})
        assert response.json() == {"uid": "ana"}


class TestAuthenticatedCall:
    @pytest.mark.asyncio
    async def test_runs_function_with_identity(self) -> None:
        cache = CredentialCache(FakeIdentityVerifier({"t-ana": ANA}))

        async def handler(identity: Identity) -> str:
            return identity.email or ""

        assert await authenticated_call(cache, "Bearer t-ana", handler) == "ana@mail.com"

    @pytest.mark.asyncio
    async def test_rejects_without_calling(self) -> None:
        cache = CredentialCache(FakeIdentityVerifier())
        called = False

        async def handler(identity: Identity) -> None:
            nonlocal called
            called = True

        with pytest.raises(AuthenticationRequiredError) as exc_info:
            await authenticated_call(cache, None, handler)

        assert not called
        assert exc_info.value.to_body()["error"] == UNAUTHORIZED_ERROR
