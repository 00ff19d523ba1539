"""Testes das rotas de convites de time."""

from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from api.routes.invites.router import router
from app.infra.stores import MemoryEntityStore
from app.services.credential_cache import CredentialCache
from app.services.invite_service import InviteService
from config.settings import InviteSettings
from tests.fakes.fake_app import build_router_app
from tests.fakes.fake_identity_verifier import FakeIdentityVerifier, make_identity
from tests.fakes.fake_notifier import RecordingNotifier
from utils.errors import StoreTimeoutError

CAPTAIN = {"Authorization": "Bearer t-cap"}
ATHLETE = {"Authorization": "Bearer t-atleta"}
STRANGER = {"Authorization": "Bearer t-outro"}


class TimeoutStore(MemoryEntityStore):
    async def get(self, collection: str, doc_id: str):  # type: ignore[override]
        raise StoreTimeoutError("firestore lento")


def _client(store: MemoryEntityStore) -> TestClient:
    verifier = FakeIdentityVerifier(
        {
            "t-cap": make_identity("cap", "carla@mail.com", "Carla"),
            "t-atleta": make_identity("atleta", "atleta@mail.com", "Atleta"),
            "t-outro": make_identity("outro", "outro@mail.com", "Outro"),
        }
    )
    service = InviteService(store, RecordingNotifier(), InviteSettings())
    app = build_router_app(
        router,
        credential_cache=CredentialCache(verifier),
        invite_service=service,
    )
    return TestClient(app)


@pytest.fixture
def store() -> MemoryEntityStore:
    store = MemoryEntityStore()
    asyncio.run(store.set("teams", "team-1", {"nome": "Alpha", "captainId": "cap", "atletas": []}))
    return store


@pytest.fixture
def client(store: MemoryEntityStore) -> TestClient:
    return _client(store)


def _invite(client: TestClient, email: str = "atleta@mail.com") -> str:
    response = client.post(
        "/invites",
        json={"teamId": "team-1", "invitedEmail": email, "invitedName": "Atleta"},
        headers=CAPTAIN,
    )
    assert response.status_code == 201, response.text
    return response.json()["invite"]["id"]


class TestCreateInviteRoute:
    def test_requires_authentication(self, client: TestClient) -> None:
        response = client.post("/invites", json={"teamId": "team-1", "invitedEmail": "a@b.com"})
        assert response.status_code == 401
        assert response.json()["error"] == "Não autorizado"

    def test_captain_creates_invite(self, client: TestClient) -> None:
        response = client.post(
            "/invites",
            json={"teamId": "team-1", "invitedEmail": "Atleta@Mail.com"},
            headers=CAPTAIN,
        )

        assert response.status_code == 201
        invite = response.json()["invite"]
        assert invite["status"] == "pendente"
        assert invite["invitedEmail"] == "atleta@mail.com"
        assert invite["captainId"] == "cap"
        assert invite["captainEmail"] == "carla@mail.com"

    def test_duplicate_is_409(self, client: TestClient) -> None:
        _invite(client)
        response = client.post(
            "/invites",
            json={"teamId": "team-1", "invitedEmail": "atleta@mail.com"},
            headers=CAPTAIN,
        )
        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    def test_non_captain_is_403(self, client: TestClient) -> None:
        response = client.post(
            "/invites",
            json={"teamId": "team-1", "invitedEmail": "x@mail.com"},
            headers=STRANGER,
        )
        assert response.status_code == 403

    def test_missing_fields_is_422(self, client: TestClient) -> None:
        response = client.post("/invites", json={"invitedEmail": "x@mail.com"}, headers=CAPTAIN)
        assert response.status_code == 422


class TestRespondRoutes:
    def test_accept_updates_roster(self, client: TestClient, store: MemoryEntityStore) -> None:
        invite_id = _invite(client)

        response = client.post(f"/invites/{invite_id}/accept", headers=ATHLETE)

        assert response.status_code == 200
        body = response.json()
        assert body["invite"]["status"] == "aceito"
        assert body["rosterUpdated"] is True
        team = asyncio.run(store.get("teams", "team-1"))
        assert team is not None
        assert team.data["atletas"] == ["atleta"]

    def test_decline_then_accept_conflicts(self, client: TestClient) -> None:
        invite_id = _invite(client)

        declined = client.post(f"/invites/{invite_id}/decline", headers=ATHLETE)
        again = client.post(f"/invites/{invite_id}/accept", headers=ATHLETE)

        assert declined.status_code == 200
        assert "rosterUpdated" not in declined.json()
        assert again.status_code == 409
        assert again.json()["error"] == "already_resolved"

    def test_other_user_cannot_respond(self, client: TestClient) -> None:
        invite_id = _invite(client)
        response = client.post(f"/invites/{invite_id}/accept", headers=STRANGER)
        assert response.status_code == 403

    def test_unknown_invite_is_404(self, client: TestClient) -> None:
        response = client.post("/invites/ghost/accept", headers=ATHLETE)
        assert response.status_code == 404


class TestCancelAndListRoutes:
    def test_captain_cancels(self, client: TestClient) -> None:
        invite_id = _invite(client)

        forbidden = client.post(f"/invites/{invite_id}/cancel", headers=ATHLETE)
        canceled = client.post(f"/invites/{invite_id}/cancel", headers=CAPTAIN)

        assert forbidden.status_code == 403
        assert canceled.status_code == 200
        assert canceled.json()["invite"]["status"] == "cancelado"

    def test_pending_list_for_caller_email(self, client: TestClient) -> None:
        invite_id = _invite(client)

        mine = client.get("/invites/pending", headers=ATHLETE)
        others = client.get("/invites/pending", headers=STRANGER)

        assert [i["id"] for i in mine.json()["invites"]] == [invite_id]
        assert others.status_code == 200
        assert others.json()["invites"] == []

    def test_team_list_for_captain_only(self, client: TestClient) -> None:
        _invite(client, "a@mail.com")
        _invite(client, "b@mail.com")

        listed = client.get("/teams/team-1/invites", headers=CAPTAIN)
        forbidden = client.get("/teams/team-1/invites", headers=ATHLETE)

        assert len(listed.json()["invites"]) == 2
        assert forbidden.status_code == 403


class TestStoreFailure:
    def test_store_timeout_is_503(self) -> None:
        client = _client(TimeoutStore())
        response = client.get("/teams/team-1/invites", headers=CAPTAIN)
        assert response.status_code == 503
        assert response.json()["error"] == "store_unavailable"
