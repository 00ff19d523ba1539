"""Endpoints de health check para Cloud Run."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

router = APIRouter()

SERVICE_LABEL = "interbox-core"


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "degraded", "failed", "skipped"]
    latency_ms: float | None = None
    error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness: verifica se o serviço está rodando."""
    return HealthResponse(
        status="healthy",
        service=SERVICE_LABEL,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness: Firestore (quando em uso) e varredura do cache de credenciais."""
    state = request.app.state
    firestore_check = await _check_firestore(
        getattr(state, "firestore_client", None),
        required=getattr(state, "store_backend", "memory") == "firestore",
    )
    cache_check = _check_credential_cache(getattr(state, "credential_cache", None))

    ready = firestore_check.status in {"ok", "degraded", "skipped"} and cache_check.status != "failed"
    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {
            "firestore": firestore_check.as_dict(),
            "credential_cache": cache_check.as_dict(),
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


async def _check_firestore(firestore_client: Any | None, *, required: bool) -> DependencyCheck:
    if not required:
        return DependencyCheck(status="skipped")
    if firestore_client is None:
        return DependencyCheck(status="failed", error="not_configured")
    started_at = time.perf_counter()
    try:
        exists = await asyncio.wait_for(
            asyncio.to_thread(_read_firestore_health_doc, firestore_client),
            timeout=3.0,
        )
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        return DependencyCheck(status="failed", error=type(exc).__name__)
    latency_ms = (time.perf_counter() - started_at) * 1000
    status = "ok" if exists else "degraded"
    return DependencyCheck(status=status, latency_ms=round(latency_ms, 2))


def _read_firestore_health_doc(firestore_client: Any) -> bool:
    doc = firestore_client.collection("_health").document("check").get()
    return bool(getattr(doc, "exists", False))


def _check_credential_cache(cache: Any | None) -> DependencyCheck:
    if cache is None:
        return DependencyCheck(status="failed", error="not_configured")
    if not cache.is_sweeping:
        return DependencyCheck(status="degraded", error="sweeper_stopped")
    return DependencyCheck(status="ok")
