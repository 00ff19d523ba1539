"""Protocolos e contratos do core da aplicação."""

from .entity_store import EntityStoreProtocol, StoredDocument
from .identity_verifier import IdentityVerifierProtocol
from .notifier import Notification, NotificationSinkProtocol
from .payment_normalizer import PaymentEventNormalizerProtocol, UnknownGatewayError

__all__ = [
    "EntityStoreProtocol",
    "IdentityVerifierProtocol",
    "Notification",
    "NotificationSinkProtocol",
    "PaymentEventNormalizerProtocol",
    "StoredDocument",
    "UnknownGatewayError",
]
