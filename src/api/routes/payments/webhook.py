"""Endpoints de webhook de pagamento.

Endpoints:
- POST /webhook/payment/{gateway}: gateway explícito (flowpay | openpix)
- POST /webhook/payment: endpoint legado único (gateway inferido do payload)

Fluxo:
1. Limite por IP do cliente (429 com Retry-After)
2. Parse do JSON (400 se não for objeto)
3. Autenticidade do gateway (401 quando há secret configurado e falha)
4. Reconciliação; o status HTTP vem do WebhookOutcome

Segurança:
- O gateway reenvia em 5xx; 4xx encerra as tentativas
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.connectors.payments import (
    InvalidJsonError,
    parse_json_object,
    verify_gateway_request,
)
from api.normalizers.payments import detect_gateway, resolve_gateway
from app.protocols.payment_normalizer import UnknownGatewayError
from config.settings import get_payment_settings

if TYPE_CHECKING:
    from app.services.rate_limiter import WebhookRateLimiter
    from app.services.webhook_reconciler import WebhookReconciler

logger = logging.getLogger(__name__)

router = APIRouter()

FORWARDED_FOR_HEADER = "x-forwarded-for"


def _get_reconciler(request: Request) -> WebhookReconciler:
    reconciler = getattr(request.app.state, "webhook_reconciler", None)
    if reconciler is None:
        raise RuntimeError("webhook_reconciler não inicializado (lifespan não executou)")
    return reconciler


def _get_rate_limiter(request: Request) -> WebhookRateLimiter:
    limiter = getattr(request.app.state, "webhook_rate_limiter", None)
    if limiter is None:
        raise RuntimeError("webhook_rate_limiter não inicializado (lifespan não executou)")
    return limiter


def client_ip(request: Request) -> str:
    """IP do cliente; atrás do proxy do Cloud Run vem em x-forwarded-for."""
    forwarded = request.headers.get(FORWARDED_FOR_HEADER, "")
    first = forwarded.split(",")[0].strip()
    if first:
        return first
    return request.client.host if request.client else "unknown"


@router.post("", response_model=None)
async def receive_payment_webhook(request: Request) -> JSONResponse:
    """Webhook legado: infere o gateway pelo formato do payload."""
    return await _process(request, gateway_name=None)


@router.post("/{gateway}", response_model=None)
async def receive_gateway_webhook(gateway: str, request: Request) -> JSONResponse:
    """Webhook com gateway explícito na rota."""
    return await _process(request, gateway_name=gateway)


async def _process(request: Request, gateway_name: str | None) -> JSONResponse:
    reconciler = _get_reconciler(request)
    limiter = _get_rate_limiter(request)
    ip = client_ip(request)
    if not limiter.allow(ip):
        return JSONResponse(
            {"error": "Too Many Requests", "message": "rate_limited"},
            status_code=429,
            headers={"Retry-After": str(limiter.retry_after(ip))},
        )

    raw_body = await request.body()

    try:
        payload = parse_json_object(raw_body)
    except InvalidJsonError as exc:
        logger.warning("payment_webhook_invalid_json", extra={"error": str(exc)})
        return JSONResponse(
            {"success": False, "result": "bad_request", "message": "payload deve ser objeto JSON"},
            status_code=400,
        )

    if gateway_name is None:
        gateway = detect_gateway(payload)
    else:
        try:
            gateway = resolve_gateway(gateway_name)
        except UnknownGatewayError:
            # O reconciliador registra e responde 400 para gateway desconhecido
            outcome = await reconciler.handle_webhook(gateway_name, payload)
            return JSONResponse(outcome.to_response(), status_code=outcome.status_code)

    signature = verify_gateway_request(gateway, raw_body, request.headers, get_payment_settings())
    if not signature.valid:
        logger.warning(
            "payment_webhook_rejected",
            extra={"gateway": str(gateway), "reason": signature.error},
        )
        return JSONResponse(
            {"error": "Unauthorized", "message": signature.error or "invalid_signature"},
            status_code=401,
        )

    logger.info(
        "payment_webhook_received",
        extra={"gateway": str(gateway), "signature_skipped": signature.skipped},
    )
    outcome = await reconciler.handle_webhook(str(gateway), payload)
    return JSONResponse(outcome.to_response(), status_code=outcome.status_code)
