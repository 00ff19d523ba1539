"""Verificadores de identidade."""

from app.infra.identity.disabled_verifier import DisabledIdentityVerifier
from app.infra.identity.firebase_verifier import FirebaseIdentityVerifier

__all__ = ["DisabledIdentityVerifier", "FirebaseIdentityVerifier"]
