"""Verificação de autenticidade dos webhooks de pagamento.

FlowPay: HMAC-SHA256 do corpo bruto em `x-flowpay-signature`
(`sha256=<hex>` ou só o hex) e `x-flowpay-timestamp` (epoch em segundos)
dentro da janela de tolerância.
OpenPix: header `authorization` igual ao secret configurado.

Sem secret configurado a checagem é pulada (desenvolvimento).
"""

from __future__ import annotations

import hashlib
import hmac
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

FLOWPAY_SIGNATURE_HEADER = "x-flowpay-signature"
FLOWPAY_TIMESTAMP_HEADER = "x-flowpay-timestamp"
OPENPIX_AUTH_HEADER = "authorization"
SIGNATURE_PREFIX = "sha256="


@dataclass(frozen=True, slots=True)
class SignatureResult:
    """Resultado da checagem; `skipped` quando não há secret configurado."""

    valid: bool
    skipped: bool = False
    error: str | None = None


def compute_flowpay_signature(raw_body: bytes, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_flowpay_signature(
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: str | None,
    *,
    tolerance_seconds: int = 300,
    now: Callable[[], float] = time.time,
) -> SignatureResult:
    if not secret:
        return SignatureResult(valid=True, skipped=True)

    signature = (headers.get(FLOWPAY_SIGNATURE_HEADER) or "").strip()
    timestamp = (headers.get(FLOWPAY_TIMESTAMP_HEADER) or "").strip()
    if not signature or not timestamp:
        return SignatureResult(valid=False, error="missing_security_headers")

    try:
        sent_at = int(timestamp)
    except ValueError:
        return SignatureResult(valid=False, error="invalid_timestamp")
    if abs(int(now()) - sent_at) > tolerance_seconds:
        return SignatureResult(valid=False, error="timestamp_expired")

    provided = signature.removeprefix(SIGNATURE_PREFIX)
    expected = compute_flowpay_signature(raw_body, secret).removeprefix(SIGNATURE_PREFIX)
    if not hmac.compare_digest(provided.lower().encode("utf-8"), expected.encode("utf-8")):
        return SignatureResult(valid=False, error="invalid_signature")
    return SignatureResult(valid=True)


def verify_openpix_authorization(
    headers: Mapping[str, str],
    secret: str | None,
) -> SignatureResult:
    if not secret:
        return SignatureResult(valid=True, skipped=True)
    provided = (headers.get(OPENPIX_AUTH_HEADER) or "").strip()
    if not provided:
        return SignatureResult(valid=False, error="missing_authorization")
    if not hmac.compare_digest(provided.encode("utf-8"), secret.encode("utf-8")):
        return SignatureResult(valid=False, error="invalid_authorization")
    return SignatureResult(valid=True)
