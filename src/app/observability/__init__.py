"""Observabilidade: correlation_id e métricas via logs estruturados.

Uso:
    from app.observability import get_correlation_id, bound_correlation_id
    from app.observability import record_latency, record_webhook_outcome
"""

from app.observability.correlation import (
    CORRELATION_HEADER,
    bound_correlation_id,
    correlation_id_from_headers,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.observability.metrics import (
    record_cache_event,
    record_invite_transition,
    record_latency,
    record_webhook_outcome,
)

__all__ = [
    "CORRELATION_HEADER",
    "bound_correlation_id",
    "correlation_id_from_headers",
    "generate_correlation_id",
    "get_correlation_id",
    "record_cache_event",
    "record_invite_transition",
    "record_latency",
    "record_webhook_outcome",
    "reset_correlation_id",
    "set_correlation_id",
]
