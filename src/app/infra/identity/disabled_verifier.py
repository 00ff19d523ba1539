"""Verificador para ambientes sem projeto Firebase: rejeita todo token."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.protocols.identity_verifier import IdentityVerifierProtocol
from utils.errors import IdentityVerificationError

if TYPE_CHECKING:
    from app.domain.identity import Identity


class DisabledIdentityVerifier(IdentityVerifierProtocol):
    async def verify(self, token: str) -> Identity:
        raise IdentityVerificationError("verificador não configurado (FIREBASE_PROJECT_ID)")
