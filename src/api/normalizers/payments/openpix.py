"""Adapter OpenPix (Woovi): correlationID e status/evento da cobrança."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from api.normalizers.payments.extractors import Extractor, first_present, path_extractor
from app.domain.payment_event import OpenPixEvent
from fsm.states.payment import PaymentStatus

EVENT_CHARGE_COMPLETED = "OPENPIX:CHARGE_COMPLETED"
EVENT_PREFIX = "OPENPIX:"

CORRELATION_EXTRACTORS: tuple[Extractor, ...] = (
    path_extractor("correlationID"),
    path_extractor("charge", "correlationID"),
    path_extractor("pix", 0, "charge", "correlationID"),
)

# `reference` genérico só como último recurso; não identifica o gateway
REFERENCE_EXTRACTORS: tuple[Extractor, ...] = (
    *CORRELATION_EXTRACTORS,
    path_extractor("reference"),
)

STATUS_EXTRACTORS: tuple[Extractor, ...] = (
    path_extractor("status"),
    path_extractor("charge", "status"),
)

EVENT_EXTRACTOR: Extractor = path_extractor("event")

STATUS_MAP: dict[str, PaymentStatus] = {
    "COMPLETED": PaymentStatus.PAID,
    "ACTIVE": PaymentStatus.PENDING,
    "EXPIRED": PaymentStatus.EXPIRED,
}

EVENT_MAP: dict[str, PaymentStatus] = {
    EVENT_CHARGE_COMPLETED: PaymentStatus.PAID,
    "OPENPIX:CHARGE_EXPIRED": PaymentStatus.EXPIRED,
}


def parse_openpix_event(payload: Mapping[str, Any]) -> OpenPixEvent:
    return OpenPixEvent(
        reference_id=first_present(payload, REFERENCE_EXTRACTORS),
        status=first_present(payload, STATUS_EXTRACTORS),
        event=EVENT_EXTRACTOR(payload),
        raw_payload=dict(payload),
    )


def map_openpix_status(event: OpenPixEvent) -> PaymentStatus | None:
    """Status explícito tem prioridade; o tipo de evento é o fallback."""
    if event.status:
        mapped = STATUS_MAP.get(event.status.upper())
        if mapped is not None:
            return mapped
    if event.event:
        return EVENT_MAP.get(event.event.upper())
    return None


def looks_like_openpix(payload: Mapping[str, Any]) -> bool:
    event = EVENT_EXTRACTOR(payload) or ""
    return event.upper().startswith(EVENT_PREFIX) or first_present(
        payload, CORRELATION_EXTRACTORS
    ) is not None
