"""Testes para config.settings (carga de env e validação)."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from config.settings import (
    AuthSettings,
    BaseSettings,
    EmailSettings,
    FirestoreSettings,
    InviteSettings,
    PaymentSettings,
    get_auth_settings,
    get_base_settings,
    get_email_settings,
    get_invite_settings,
    get_payment_settings,
)

_GETTERS = (
    get_auth_settings,
    get_base_settings,
    get_email_settings,
    get_invite_settings,
    get_payment_settings,
)


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    for getter in _GETTERS:
        getter.cache_clear()
    yield
    for getter in _GETTERS:
        getter.cache_clear()


class TestBaseSettings:
    def test_development_defaults_to_memory(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        monkeypatch.delenv("STORE_BACKEND", raising=False)
        settings = get_base_settings()
        assert settings.is_development
        assert settings.store_backend == "memory"
        assert settings.validate() == []

    def test_production_defaults_to_firestore(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "prod")
        monkeypatch.delenv("STORE_BACKEND", raising=False)
        monkeypatch.setenv("GCP_PROJECT", "interbox-prod")
        settings = get_base_settings()
        assert settings.is_production
        assert settings.store_backend == "firestore"
        assert settings.gcp_project == "interbox-prod"
        assert settings.validate() == []

    def test_memory_backend_forbidden_outside_development(self) -> None:
        settings = BaseSettings(environment="staging", store_backend="memory")
        assert any("STORE_BACKEND=memory" in e for e in settings.validate())

    def test_firestore_requires_project(self) -> None:
        settings = BaseSettings(store_backend="firestore")
        assert any("GCP_PROJECT" in e for e in settings.validate())

    def test_cached_instance(self) -> None:
        assert get_base_settings() is get_base_settings()


class TestAuthSettings:
    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUTH_CACHE_TTL_SECONDS", "60")
        monkeypatch.delenv("AUTH_SWEEP_INTERVAL_SECONDS", raising=False)
        monkeypatch.setenv("FIREBASE_PROJECT_ID", "interbox")
        settings = get_auth_settings()
        assert settings.cache_ttl_seconds == 60.0
        assert settings.sweep_interval_seconds == 60.0
        assert settings.validate() == []

    def test_missing_project_is_error(self) -> None:
        errors = AuthSettings(firebase_project_id="").validate()
        assert any("FIREBASE_PROJECT_ID" in e for e in errors)

    def test_non_positive_values_rejected(self) -> None:
        settings = AuthSettings(
            cache_ttl_seconds=0,
            verify_timeout_seconds=-1,
            cache_max_entries=0,
            firebase_project_id="p",
        )
        assert len(settings.validate()) == 3


class TestPaymentSettings:
    def test_strict_requires_flowpay_secret(self) -> None:
        settings = PaymentSettings()
        assert settings.validate() == []
        assert any("FLOWPAY_WEBHOOK_SECRET" in e for e in settings.validate(strict=True))

    def test_collections_must_be_distinct(self) -> None:
        settings = PaymentSettings(collection_audiovisual="teams")
        assert any("distintas" in e for e in settings.validate())

    def test_env_loading(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FLOWPAY_WEBHOOK_SECRET", "s3cret")
        monkeypatch.setenv("WEBHOOK_TIMESTAMP_TOLERANCE_SECONDS", "120")
        settings = get_payment_settings()
        assert settings.flowpay_webhook_secret == "s3cret"
        assert settings.timestamp_tolerance_seconds == 120

    def test_rate_limit_defaults_and_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        defaults = PaymentSettings()
        assert (defaults.rate_limit_requests, defaults.rate_limit_window_seconds) == (10, 60)
        assert defaults.rate_limit_max_entries == 1000

        monkeypatch.setenv("WEBHOOK_RATE_LIMIT", "5")
        assert get_payment_settings().rate_limit_requests == 5
        assert PaymentSettings(rate_limit_requests=0).validate() != []


class TestInviteAndEmailSettings:
    def test_invite_defaults(self) -> None:
        settings = InviteSettings()
        assert settings.expiry_days == 7
        assert settings.max_roster_size == 4
        assert settings.collection_invites == "convites_times"
        assert settings.collection_invite_slots == "convites_times_vagas"
        assert settings.validate() == []

    def test_invite_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INVITE_EXPIRY_DAYS", "3")
        assert get_invite_settings().expiry_days == 3

    def test_slot_collection_must_be_distinct(self) -> None:
        errors = InviteSettings(collection_invite_slots="convites_times").validate()
        assert any("INVITE_SLOTS_COLLECTION" in e for e in errors)

    def test_smtp_requires_password(self) -> None:
        errors = EmailSettings(backend="smtp", smtp_password="").validate()
        assert any("SMTP_PASSWORD" in e for e in errors)

    def test_unknown_backend_falls_back_to_log(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EMAIL_BACKEND", "sendgrid")
        assert get_email_settings().backend == "log"

    def test_firestore_settings_use_gcp_project(self) -> None:
        assert FirestoreSettings().validate("interbox") == []
        assert FirestoreSettings().validate("") != []
