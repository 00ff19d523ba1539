"""Métricas via structured logging.

As métricas são logs com `metric_type`; a agregação fica no Cloud Logging
(log-based metrics) ou BigQuery.

Métricas:
- latency: tempo por componente/operação
- webhook_outcome: contador por gateway/resultado
- auth_cache: hit/miss/expired/evicted do cache de credenciais
- invite_transition: transições do ciclo de vida de convites
"""

from __future__ import annotations

import logging

from app.observability.correlation import get_correlation_id

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "webhook_reconciler")
        operation: Nome da operação (ex: "handle_webhook")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação (default: contexto atual)
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id or get_correlation_id(),
        },
    )


def record_webhook_outcome(
    gateway: str,
    result: str,
    status_code: int,
    entity_kind: str | None = None,
) -> None:
    """Conta um webhook processado por gateway e resultado."""
    logger.info(
        "metric_webhook_outcome",
        extra={
            "metric_type": "webhook_outcome",
            "component": "webhook_reconciler",
            "gateway": gateway,
            "result": result,
            "status_code": status_code,
            "entity_kind": entity_kind,
            "correlation_id": get_correlation_id(),
        },
    )


def record_cache_event(event: str, count: int = 1) -> None:
    """Conta eventos do cache de credenciais (hit, miss, expired, evicted, swept)."""
    logger.debug(
        "metric_auth_cache",
        extra={
            "metric_type": "auth_cache",
            "component": "credential_cache",
            "event": event,
            "count": count,
            "correlation_id": get_correlation_id(),
        },
    )


def record_invite_transition(from_status: str, to_status: str, trigger: str) -> None:
    logger.info(
        "metric_invite_transition",
        extra={
            "metric_type": "invite_transition",
            "component": "invite_service",
            "from_status": from_status,
            "to_status": to_status,
            "trigger": trigger,
            "correlation_id": get_correlation_id(),
        },
    )
