"""Webhooks de pagamento: autenticidade e parsing seguro."""

from api.connectors.payments.receive import (
    InvalidJsonError,
    parse_json_object,
    verify_gateway_request,
)
from api.connectors.payments.signature import (
    SignatureResult,
    compute_flowpay_signature,
    verify_flowpay_signature,
    verify_openpix_authorization,
)

__all__ = [
    "InvalidJsonError",
    "SignatureResult",
    "compute_flowpay_signature",
    "parse_json_object",
    "verify_flowpay_signature",
    "verify_gateway_request",
    "verify_openpix_authorization",
]
