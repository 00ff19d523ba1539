"""Normalizers de webhooks de pagamento (FlowPay, OpenPix)."""

from api.normalizers.payments.normalizer import (
    PaymentEventNormalizer,
    detect_gateway,
    normalize_gateway_event,
    parse_gateway_event,
    resolve_gateway,
)

__all__ = [
    "PaymentEventNormalizer",
    "detect_gateway",
    "normalize_gateway_event",
    "parse_gateway_event",
    "resolve_gateway",
]
