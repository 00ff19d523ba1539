"""Parse e validação inicial do webhook de pagamento (sem PII)."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from api.connectors.payments.signature import (
    SignatureResult,
    verify_flowpay_signature,
    verify_openpix_authorization,
)
from app.domain.payment_event import PaymentGateway

if TYPE_CHECKING:
    from collections.abc import Mapping

    from config.settings import PaymentSettings


class InvalidJsonError(ValueError):
    """JSON inválido no payload do webhook."""


def verify_gateway_request(
    gateway: PaymentGateway,
    raw_body: bytes,
    headers: Mapping[str, str],
    settings: PaymentSettings,
) -> SignatureResult:
    if gateway is PaymentGateway.OPENPIX:
        return verify_openpix_authorization(headers, settings.openpix_webhook_secret)
    return verify_flowpay_signature(
        raw_body,
        headers,
        settings.flowpay_webhook_secret,
        tolerance_seconds=settings.timestamp_tolerance_seconds,
    )


def parse_json_object(raw_body: bytes) -> dict[str, object]:
    """Parseia o corpo; InvalidJsonError se não for objeto JSON."""
    try:
        payload = json.loads(raw_body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidJsonError("invalid_json") from exc
    if not isinstance(payload, dict):
        raise InvalidJsonError("payload_not_object")
    return payload
