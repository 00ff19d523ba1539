"""Testes das rotas POST /webhook/payment[/{gateway}]."""

from __future__ import annotations

import asyncio
import json
import time
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from api.connectors.payments import compute_flowpay_signature
from api.normalizers.payments import PaymentEventNormalizer
from api.routes.payments.webhook import router
from app.infra.stores import MemoryEntityStore
from app.services.rate_limiter import WebhookRateLimiter
from app.services.webhook_reconciler import WebhookReconciler
from config.settings import get_payment_settings
from tests.fakes.fake_app import build_router_app
from tests.fakes.fake_notifier import RecordingNotifier

SECRET = "whsec"


@pytest.fixture(autouse=True)
def _payment_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("FLOWPAY_WEBHOOK_SECRET", raising=False)
    monkeypatch.delenv("OPENPIX_WEBHOOK_SECRET", raising=False)
    get_payment_settings.cache_clear()
    yield
    get_payment_settings.cache_clear()


@pytest.fixture
def store() -> MemoryEntityStore:
    store = MemoryEntityStore()
    asyncio.run(
        store.set(
            "teams",
            "team-1",
            {"nome": "Alpha", "email": "cap@mail.com", "valor": 100, "paymentStatus": "pending"},
        )
    )
    return store


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def client(store: MemoryEntityStore, notifier: RecordingNotifier) -> TestClient:
    reconciler = WebhookReconciler(store, notifier, PaymentEventNormalizer())
    app = build_router_app(
        router,
        prefix="/webhook/payment",
        webhook_reconciler=reconciler,
        webhook_rate_limiter=WebhookRateLimiter(max_requests=3),
    )
    return TestClient(app)


def _status(store: MemoryEntityStore) -> str:
    doc = asyncio.run(store.get("teams", "team-1"))
    assert doc is not None
    return doc.data["paymentStatus"]


class TestGatewayRoute:
    def test_flowpay_paid_settles(
        self, client: TestClient, store: MemoryEntityStore, notifier: RecordingNotifier
    ) -> None:
        response = client.post(
            "/webhook/payment/flowpay",
            json={"charge": {"reference": "team-1", "status": "paid"}},
        )

        assert response.status_code == 200
        assert response.json()["result"] == "processed"
        assert _status(store) == "paid"
        assert len(notifier.sent) == 1

    def test_redelivery_returns_noop(self, client: TestClient, notifier: RecordingNotifier) -> None:
        payload = {"reference": "team-1", "status": "paid"}
        client.post("/webhook/payment/flowpay", json=payload)
        response = client.post("/webhook/payment/flowpay", json=payload)

        assert response.status_code == 200
        assert response.json()["result"] == "noop"
        assert len(notifier.sent) == 1

    def test_unknown_reference_is_404(self, client: TestClient) -> None:
        response = client.post(
            "/webhook/payment/openpix", json={"correlationID": "ghost", "status": "COMPLETED"}
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Documento não encontrado"

    def test_unknown_gateway_is_400(self, client: TestClient) -> None:
        response = client.post("/webhook/payment/paypal", json={"reference": "team-1"})
        assert response.status_code == 400

    @pytest.mark.parametrize("body", [b"{not json", b"[1]"])
    def test_invalid_json_is_400(
        self, client: TestClient, store: MemoryEntityStore, body: bytes
    ) -> None:
        response = client.post(
            "/webhook/payment/flowpay",
            content=body,
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400
        assert _status(store) == "pending"


class TestLegacyRoute:
    def test_infers_openpix_from_payload(self, client: TestClient, store: MemoryEntityStore) -> None:
        response = client.post(
            "/webhook/payment",
            json={"event": "OPENPIX:CHARGE_COMPLETED", "charge": {"correlationID": "team-1"}},
        )
        assert response.status_code == 200
        assert _status(store) == "paid"

    def test_infers_flowpay_by_default(self, client: TestClient) -> None:
        response = client.post("/webhook/payment", json={"status": "paid"})
        assert response.status_code == 400
        assert response.json()["result"] == "bad_request"


class TestSignatureEnforcement:
    def test_missing_signature_is_401(
        self, client: TestClient, store: MemoryEntityStore, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("FLOWPAY_WEBHOOK_SECRET", SECRET)
        get_payment_settings.cache_clear()

        response = client.post(
            "/webhook/payment/flowpay", json={"reference": "team-1", "status": "paid"}
        )

        assert response.status_code == 401
        assert response.json() == {
            "error": "Unauthorized",
            "message": "missing_security_headers",
        }
        assert _status(store) == "pending"

    def test_valid_signature_is_processed(
        self, client: TestClient, store: MemoryEntityStore, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("FLOWPAY_WEBHOOK_SECRET", SECRET)
        get_payment_settings.cache_clear()
        body = json.dumps({"reference": "team-1", "status": "paid"}).encode()

        response = client.post(
            "/webhook/payment/flowpay",
            content=body,
            headers={
                "content-type": "application/json",
                "x-flowpay-signature": compute_flowpay_signature(body, SECRET),
                "x-flowpay-timestamp": str(int(time.time())),
            },
        )

        assert response.status_code == 200
        assert _status(store) == "paid"

    def test_openpix_authorization(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("OPENPIX_WEBHOOK_SECRET", "opx")
        get_payment_settings.cache_clear()
        payload = {"correlationID": "team-1", "status": "COMPLETED"}

        denied = client.post("/webhook/payment/openpix", json=payload)
        allowed = client.post(
            "/webhook/payment/openpix", json=payload, headers={"Authorization": "opx"}
        )

        assert denied.status_code == 401
        assert allowed.status_code == 200


class TestRateLimit:
    def test_fourth_request_from_same_ip_is_429(
        self, client: TestClient, store: MemoryEntityStore
    ) -> None:
        headers = {"x-forwarded-for": "203.0.113.7, 10.0.0.1"}
        payload = {"reference": "ghost", "status": "paid"}
        for _ in range(3):
            client.post("/webhook/payment/flowpay", json=payload, headers=headers)

        limited = client.post(
            "/webhook/payment/flowpay",
            json={"reference": "team-1", "status": "paid"},
            headers=headers,
        )
        other_ip = client.post(
            "/webhook/payment/flowpay",
            json={"reference": "team-1", "status": "paid"},
            headers={"x-forwarded-for": "198.51.100.2"},
        )

        assert limited.status_code == 429
        assert limited.json() == {"error": "Too Many Requests", "message": "rate_limited"}
        assert int(limited.headers["retry-after"]) > 0
        assert other_ip.status_code == 200
        assert _status(store) == "paid"

    def test_limit_applies_before_signature_check(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("FLOWPAY_WEBHOOK_SECRET", SECRET)
        get_payment_settings.cache_clear()

        statuses = [
            client.post("/webhook/payment", json={"reference": "team-1"}).status_code
            for _ in range(4)
        ]

        assert statuses == [401, 401, 401, 429]
