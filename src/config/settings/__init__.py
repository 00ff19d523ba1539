"""Agregador de settings do serviço.

Re-exporta as settings de cada domínio. Cada módulo carrega de variáveis
de ambiente e memoiza a instância com lru_cache.
"""

from __future__ import annotations

from config.settings.auth import AuthSettings, get_auth_settings
from config.settings.base import (
    BaseSettings,
    Environment,
    StoreBackend,
    get_base_settings,
)
from config.settings.email import EmailBackend, EmailSettings, get_email_settings
from config.settings.infra import FirestoreSettings, get_firestore_settings
from config.settings.invites import InviteSettings, get_invite_settings
from config.settings.payments import PaymentSettings, get_payment_settings

__all__ = [
    "AuthSettings",
    "BaseSettings",
    "EmailBackend",
    "EmailSettings",
    "Environment",
    "FirestoreSettings",
    "InviteSettings",
    "PaymentSettings",
    "StoreBackend",
    "get_auth_settings",
    "get_base_settings",
    "get_email_settings",
    "get_firestore_settings",
    "get_invite_settings",
    "get_payment_settings",
]
