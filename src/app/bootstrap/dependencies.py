"""Factories: criação das implementações concretas a partir das settings.

Cada factory recebe dependências opcionais (injeção em testes) e usa as
settings do ambiente para o resto.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from api.normalizers.payments import PaymentEventNormalizer
from app.bootstrap.clients import create_firestore_client
from app.domain.registration import RegistrationKind
from app.infra.identity import DisabledIdentityVerifier, FirebaseIdentityVerifier
from app.infra.notifications import LogNotifier, SmtpNotifier
from app.infra.stores import FirestoreEntityStore, MemoryEntityStore
from app.services.credential_cache import CredentialCache
from app.services.invite_service import InviteService
from app.services.rate_limiter import WebhookRateLimiter
from app.services.webhook_reconciler import WebhookReconciler
from config.settings import (
    get_auth_settings,
    get_base_settings,
    get_email_settings,
    get_firestore_settings,
    get_invite_settings,
    get_payment_settings,
)

if TYPE_CHECKING:
    from app.protocols.entity_store import EntityStoreProtocol
    from app.protocols.identity_verifier import IdentityVerifierProtocol
    from app.protocols.notifier import NotificationSinkProtocol

logger = logging.getLogger(__name__)


def create_entity_store(firestore_client: Any | None = None) -> EntityStoreProtocol:
    """Cria o entity store conforme STORE_BACKEND (memory|firestore)."""
    base = get_base_settings()

    if base.store_backend == "firestore":
        client = firestore_client or create_firestore_client()
        store = FirestoreEntityStore(client, get_firestore_settings().timeout_seconds)
        logger.info("entity_store_created", extra={"backend": "firestore"})
        return store

    if not base.is_development:
        logger.warning(
            "memory_store_in_non_dev",
            extra={"backend": "memory", "environment": base.environment},
        )
    logger.info("entity_store_created", extra={"backend": "memory"})
    return MemoryEntityStore()


def create_identity_verifier() -> IdentityVerifierProtocol:
    project_id = get_auth_settings().firebase_project_id
    if not project_id:
        logger.warning("identity_verifier_disabled", extra={"reason": "missing_project_id"})
        return DisabledIdentityVerifier()
    return FirebaseIdentityVerifier(project_id)


def create_credential_cache(verifier: IdentityVerifierProtocol | None = None) -> CredentialCache:
    settings = get_auth_settings()
    return CredentialCache(
        verifier or create_identity_verifier(),
        ttl_seconds=settings.cache_ttl_seconds,
        verify_timeout_seconds=settings.verify_timeout_seconds,
        sweep_interval_seconds=settings.sweep_interval_seconds,
        max_entries=settings.cache_max_entries,
    )


def create_notifier() -> NotificationSinkProtocol:
    settings = get_email_settings()
    if settings.backend == "smtp":
        logger.info("notifier_created", extra={"backend": "smtp"})
        return SmtpNotifier(settings)
    logger.info("notifier_created", extra={"backend": "log"})
    return LogNotifier()


def create_webhook_reconciler(
    store: EntityStoreProtocol,
    notifier: NotificationSinkProtocol,
) -> WebhookReconciler:
    settings = get_payment_settings()
    return WebhookReconciler(
        store,
        notifier,
        PaymentEventNormalizer(),
        collections={
            RegistrationKind.TEAM: settings.collection_teams,
            RegistrationKind.AUDIOVISUAL: settings.collection_audiovisual,
            RegistrationKind.GENERIC: settings.collection_generic,
        },
    )


def create_webhook_rate_limiter() -> WebhookRateLimiter:
    settings = get_payment_settings()
    return WebhookRateLimiter(
        max_requests=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
        max_entries=settings.rate_limit_max_entries,
    )


def create_invite_service(
    store: EntityStoreProtocol,
    notifier: NotificationSinkProtocol,
) -> InviteService:
    return InviteService(store, notifier, get_invite_settings())


@dataclass(slots=True)
class ServiceContainer:
    """Serviços compartilhados pela aplicação (um por processo)."""

    store: EntityStoreProtocol
    notifier: NotificationSinkProtocol
    credential_cache: CredentialCache
    webhook_reconciler: WebhookReconciler
    invite_service: InviteService
    webhook_rate_limiter: WebhookRateLimiter


def build_services(
    *,
    store: EntityStoreProtocol | None = None,
    notifier: NotificationSinkProtocol | None = None,
    verifier: IdentityVerifierProtocol | None = None,
) -> ServiceContainer:
    """Monta todos os serviços; argumentos explícitos substituem as factories."""
    store = store or create_entity_store()
    notifier = notifier or create_notifier()
    return ServiceContainer(
        store=store,
        notifier=notifier,
        credential_cache=create_credential_cache(verifier),
        webhook_reconciler=create_webhook_reconciler(store, notifier),
        invite_service=create_invite_service(store, notifier),
        webhook_rate_limiter=create_webhook_rate_limiter(),
    )
