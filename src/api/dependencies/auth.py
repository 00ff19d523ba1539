"""Dependências FastAPI de autenticação sobre o CredentialCache.

- `require_auth`: identidade obrigatória; 401 `{"error", "message"}`.
- `optional_auth`: identidade ou None (acesso anônimo permitido).
- `authenticated_call`: mesmo contrato para chamadores fora do HTTP.

Todas usam a instância única do cache em `app.state.credential_cache`.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

from fastapi import Request
from fastapi.responses import JSONResponse

if TYPE_CHECKING:
    from app.domain.identity import Identity
    from app.services.credential_cache import CredentialCache

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNAUTHORIZED_ERROR = "Não autorizado"
UNAUTHORIZED_MESSAGE = "Token de autenticação inválido ou ausente"


class AuthenticationRequiredError(Exception):
    """Requisição sem credencial válida (vira 401)."""

    def __init__(self, message: str = UNAUTHORIZED_MESSAGE) -> None:
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict[str, str]:
        return {"error": UNAUTHORIZED_ERROR, "message": self.message}


async def authentication_error_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Exception handler registrado no app para AuthenticationRequiredError."""
    body = exc.to_body() if isinstance(exc, AuthenticationRequiredError) else {
        "error": UNAUTHORIZED_ERROR,
        "message": UNAUTHORIZED_MESSAGE,
    }
    return JSONResponse(body, status_code=401, headers={"WWW-Authenticate": "Bearer"})


def get_credential_cache(request: Request) -> CredentialCache:
    cache = getattr(request.app.state, "credential_cache", None)
    if cache is None:
        raise RuntimeError("credential_cache não inicializado (lifespan não executou)")
    return cache


async def optional_auth(request: Request) -> Identity | None:
    """Identidade do chamador, ou None sem credencial válida."""
    return await get_credential_cache(request).authenticate_header(
        request.headers.get("authorization")
    )


async def require_auth(request: Request) -> Identity:
    """Identidade obrigatória; levanta AuthenticationRequiredError (401)."""
    identity = await optional_auth(request)
    if identity is None:
        logger.info(
            "auth_rejected",
            extra={"path": request.url.path, "has_header": "authorization" in request.headers},
        )
        raise AuthenticationRequiredError()
    return identity


async def authenticated_call(
    cache: CredentialCache,
    authorization_header: str | None,
    fn: Callable[[Identity], Awaitable[T]],
) -> T:
    """Executa `fn(identity)` após autenticar; mesmo 401 do HTTP via exceção."""
    identity = await cache.authenticate_header(authorization_header)
    if identity is None:
        raise AuthenticationRequiredError()
    return await fn(identity)
