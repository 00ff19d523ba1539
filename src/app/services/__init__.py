"""Serviços de aplicação.

Orquestração sobre os protocolos (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.credential_cache import CredentialCache, extract_bearer_token
from app.services.invite_service import InviteError, InviteResult, InviteService
from app.services.rate_limiter import WebhookRateLimiter
from app.services.webhook_reconciler import WebhookOutcome, WebhookReconciler, WebhookResult

__all__ = [
    "CredentialCache",
    "InviteError",
    "InviteResult",
    "InviteService",
    "WebhookOutcome",
    "WebhookRateLimiter",
    "WebhookReconciler",
    "WebhookResult",
    "extract_bearer_token",
]
