"""Normalizers: conversão de payloads externos para modelos internos.

Estrutura:
- payments/: FlowPay e OpenPix → PaymentEvent

Cada gateway tem seus próprios extratores, mantendo SRP.
"""

from .payments import PaymentEventNormalizer, detect_gateway, normalize_gateway_event

__all__ = [
    "PaymentEventNormalizer",
    "detect_gateway",
    "normalize_gateway_event",
]
