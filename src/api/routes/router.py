"""Agregador de rotas: registra todos os routers.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.auth.router import router as auth_router
from api.routes.health.router import router as health_router
from api.routes.invites.router import router as invites_router
from api.routes.payments.webhook import router as payments_router


def create_api_router() -> APIRouter:
    """Cria router principal com todos os sub-routers registrados."""
    api_router = APIRouter()

    # Health checks (sem prefixo para /health e /ready na raiz)
    api_router.include_router(health_router, tags=["health"])

    api_router.include_router(
        payments_router,
        prefix="/webhook/payment",
        tags=["payments"],
    )
    api_router.include_router(invites_router, tags=["invites"])
    api_router.include_router(auth_router, tags=["auth"])

    return api_router
