"""Verificador de ID tokens Firebase via google-auth.

Valida assinatura (certificados públicos do securetoken), `aud` igual ao
projeto, `iss`, expiração e presença de uid. A chamada é síncrona (busca
de certificados via requests) e roda em `asyncio.to_thread`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import google.auth.transport.requests
from google.auth import exceptions as auth_exceptions
from google.oauth2 import id_token

from app.domain.identity import Identity
from app.protocols.identity_verifier import IdentityVerifierProtocol
from utils.errors import IdentityVerificationError

logger = logging.getLogger(__name__)


class FirebaseIdentityVerifier(IdentityVerifierProtocol):
    """Verifica ID tokens emitidos pelo Firebase Authentication.

    Args:
        project_id: ID do projeto Firebase (audience esperado)
        clock_skew_seconds: Tolerância de relógio para iat/exp
    """

    def __init__(self, project_id: str, clock_skew_seconds: int = 10) -> None:
        if not project_id:
            raise ValueError("project_id obrigatório para verificar tokens Firebase")
        self._project_id = project_id
        self._clock_skew = clock_skew_seconds
        self._request = google.auth.transport.requests.Request()

    async def verify(self, token: str) -> Identity:
        claims = await asyncio.to_thread(self._verify_sync, token)
        try:
            return Identity.from_claims(claims)
        except ValueError as exc:
            raise IdentityVerificationError(str(exc)) from exc

    def _verify_sync(self, token: str) -> dict[str, Any]:
        try:
            claims = id_token.verify_firebase_token(
                token,
                self._request,
                audience=self._project_id,
                clock_skew_in_seconds=self._clock_skew,
            )
        except (ValueError, auth_exceptions.GoogleAuthError) as exc:
            # ValueError cobre token malformado, expirado e aud/iss incorretos
            raise IdentityVerificationError(
                f"token rejeitado: {type(exc).__name__}"
            ) from exc
        if not claims:
            raise IdentityVerificationError("token sem claims")
        return dict(claims)
