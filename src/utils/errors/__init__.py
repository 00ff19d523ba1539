"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    DocumentAlreadyExistsError,
    DocumentNotFoundError,
    FirestoreUnavailableError,
    IdentityVerificationError,
    InfrastructureError,
    NotificationError,
    StoreTimeoutError,
)

__all__ = [
    "DocumentAlreadyExistsError",
    "DocumentNotFoundError",
    "FirestoreUnavailableError",
    "IdentityVerificationError",
    "InfrastructureError",
    "NotificationError",
    "StoreTimeoutError",
]
