"""Contrato do verificador remoto de credenciais."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.identity import Identity


class IdentityVerifierProtocol(ABC):
    """Valida um bearer token junto ao provedor de identidade.

    Levanta `IdentityVerificationError` para token inválido/expirado/revogado.
    Timeout fica a cargo do chamador (credential cache).
    """

    @abstractmethod
    async def verify(self, token: str) -> Identity: ...
