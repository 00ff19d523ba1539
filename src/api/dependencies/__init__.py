"""Dependências FastAPI compartilhadas pelas rotas."""

from api.dependencies.auth import (
    UNAUTHORIZED_ERROR,
    UNAUTHORIZED_MESSAGE,
    AuthenticationRequiredError,
    authenticated_call,
    authentication_error_handler,
    get_credential_cache,
    optional_auth,
    require_auth,
)

__all__ = [
    "UNAUTHORIZED_ERROR",
    "UNAUTHORIZED_MESSAGE",
    "AuthenticationRequiredError",
    "authenticated_call",
    "authentication_error_handler",
    "get_credential_cache",
    "optional_auth",
    "require_auth",
]
