"""Normalização de webhooks de pagamento para PaymentEvent."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from api.normalizers.payments.flowpay import map_flowpay_status, parse_flowpay_event
from api.normalizers.payments.openpix import (
    looks_like_openpix,
    map_openpix_status,
    parse_openpix_event,
)
from app.domain.payment_event import (
    FlowPayEvent,
    GatewayEvent,
    OpenPixEvent,
    PaymentEvent,
    PaymentGateway,
)
from app.protocols.payment_normalizer import UnknownGatewayError

logger = logging.getLogger(__name__)


def resolve_gateway(gateway_name: str) -> PaymentGateway:
    try:
        return PaymentGateway((gateway_name or "").strip().lower())
    except ValueError as exc:
        raise UnknownGatewayError(gateway_name) from exc


def detect_gateway(payload: Mapping[str, Any]) -> PaymentGateway:
    """Infere o gateway quando a rota não informa (endpoint legado único)."""
    return PaymentGateway.OPENPIX if looks_like_openpix(payload) else PaymentGateway.FLOWPAY


def parse_gateway_event(gateway: PaymentGateway, payload: Mapping[str, Any]) -> GatewayEvent:
    if gateway is PaymentGateway.OPENPIX:
        return parse_openpix_event(payload)
    return parse_flowpay_event(payload)


def normalize_gateway_event(event: GatewayEvent) -> PaymentEvent:
    match event:
        case OpenPixEvent():
            reported = map_openpix_status(event)
            raw_status = event.status or event.event
        case FlowPayEvent():
            reported = map_flowpay_status(event)
            raw_status = event.status
    return PaymentEvent(
        gateway=event.gateway,
        reference_id=event.reference_id,
        reported_status=reported,
        raw_status=raw_status,
        raw_payload=event.raw_payload,
    )


class PaymentEventNormalizer:
    """Implementação de PaymentEventNormalizerProtocol para FlowPay e OpenPix."""

    def normalize(self, gateway_name: str, payload: Mapping[str, Any]) -> PaymentEvent:
        gateway = resolve_gateway(gateway_name)
        event = normalize_gateway_event(parse_gateway_event(gateway, payload))
        logger.debug(
            "payment_event_normalized",
            extra={
                "gateway": str(gateway),
                "reference_id": event.reference_id,
                "raw_status": event.raw_status,
            },
        )
        return event
