"""Adapter FlowPay: referência da cobrança e status."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from api.normalizers.payments.extractors import Extractor, first_present, path_extractor
from app.domain.payment_event import FlowPayEvent
from fsm.states.payment import PaymentStatus

REFERENCE_EXTRACTORS: tuple[Extractor, ...] = (
    path_extractor("charge", "reference"),
    path_extractor("reference"),
    path_extractor("custom_id"),
)

STATUS_EXTRACTORS: tuple[Extractor, ...] = (
    path_extractor("charge", "status"),
    path_extractor("status"),
)

STATUS_MAP: dict[str, PaymentStatus] = {
    "paid": PaymentStatus.PAID,
    "pending": PaymentStatus.PENDING,
    "waiting": PaymentStatus.PENDING,
    "failed": PaymentStatus.FAILED,
    "canceled": PaymentStatus.FAILED,
    "cancelled": PaymentStatus.FAILED,
    "expired": PaymentStatus.EXPIRED,
    "refunded": PaymentStatus.REFUNDED,
}


def parse_flowpay_event(payload: Mapping[str, Any]) -> FlowPayEvent:
    return FlowPayEvent(
        reference_id=first_present(payload, REFERENCE_EXTRACTORS),
        status=first_present(payload, STATUS_EXTRACTORS),
        raw_payload=dict(payload),
    )


def map_flowpay_status(event: FlowPayEvent) -> PaymentStatus | None:
    if not event.status:
        return None
    return STATUS_MAP.get(event.status.lower())
