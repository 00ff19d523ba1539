"""Entrypoint da aplicação Interbox Core.

Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies.auth import AuthenticationRequiredError, authentication_error_handler
from api.routes import create_api_router
from app.bootstrap import SERVICE_NAME, initialize_app, validate_runtime_settings
from app.bootstrap.clients import create_firestore_client
from app.bootstrap.dependencies import ServiceContainer, build_services, create_entity_store
from app.observability import (
    CORRELATION_HEADER,
    bound_correlation_id,
    correlation_id_from_headers,
)
from config.logging import get_logger
from config.settings import get_base_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from starlette.responses import Response

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)


async def _seed_firestore_health_doc(firestore_client: object) -> None:
    """Escreve documento mínimo de health para check de readiness."""

    def _write_doc() -> None:
        firestore_client.collection("_health").document("check").set(  # type: ignore[attr-defined]
            {
                "updated_at": datetime.now(UTC).isoformat(),
                "service": SERVICE_NAME,
            }
        )

    await asyncio.to_thread(_write_doc)


def _build_container(app: FastAPI) -> ServiceContainer:
    backend = get_base_settings().store_backend
    app.state.store_backend = backend
    app.state.firestore_client = None
    if backend == "firestore":
        app.state.firestore_client = create_firestore_client()
        return build_services(store=create_entity_store(app.state.firestore_client))
    return build_services()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Monta serviços (store, cache de credenciais, reconciliador, convites)
    - Inicia as varreduras do cache de credenciais e do limite de webhooks

    Shutdown:
    - Para as varreduras
    """
    logger.info("app_starting", extra={"service": SERVICE_NAME})
    validate_runtime_settings()

    container = getattr(app.state, "services", None) or _build_container(app)
    app.state.services = container
    app.state.credential_cache = container.credential_cache
    app.state.webhook_reconciler = container.webhook_reconciler
    app.state.invite_service = container.invite_service
    app.state.webhook_rate_limiter = container.webhook_rate_limiter

    if app.state.firestore_client is not None:
        try:
            await _seed_firestore_health_doc(app.state.firestore_client)
        except Exception as exc:
            logger.warning("firestore_health_seed_failed", extra={"error_type": type(exc).__name__})

    container.credential_cache.start()
    container.webhook_rate_limiter.start()

    yield

    logger.info("app_shutting_down", extra={"service": SERVICE_NAME})
    await container.credential_cache.stop()
    await container.webhook_rate_limiter.stop()


async def correlation_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Propaga x-correlation-id (ou o trace do Cloud Run) para logs e resposta."""
    with bound_correlation_id(correlation_id_from_headers(request.headers)) as correlation_id:
        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


def create_app(services: ServiceContainer | None = None) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Args:
        services: Serviços pré-montados (testes); senão montados no lifespan
    """
    fastapi_app = FastAPI(
        title="Interbox Core",
        description="Autenticação, conciliação de pagamentos e convites de time",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    fastapi_app.state.firestore_client = None
    fastapi_app.state.store_backend = get_base_settings().store_backend
    if services is not None:
        fastapi_app.state.services = services

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    fastapi_app.middleware("http")(correlation_middleware)
    fastapi_app.add_exception_handler(AuthenticationRequiredError, authentication_error_handler)

    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": SERVICE_NAME})
    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    logger.info("Starting Interbox Core in development mode")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()
