"""Reconciliação de webhooks de pagamento com as inscrições persistidas.

Fluxo:
1. Normaliza o payload do gateway (referência + status).
2. Procura a referência nas coleções de inscrição, em ordem fixa
   (times → audiovisual → avulsos). Nunca cria documento.
3. Se o gateway reporta pago e a inscrição ainda não está paga, grava
   `paid` com escrita condicional na revisão lida. Quem perde a corrida
   relê e devolve no-op; a confirmação por e-mail sai uma única vez.
4. Notificação é best-effort: falha de envio não muda o resultado.

Status HTTP devolvido ao gateway: 200 processado/no-op/ignorado,
400 payload sem referência ou gateway desconhecido, 404 referência
desconhecida, 500 falha do store (o gateway reenvia).
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from app.domain.registration import (
    FIELD_LEGACY_STATUS,
    FIELD_PAID_AT,
    FIELD_PAYMENT_GATEWAY,
    FIELD_PAYMENT_STATUS,
    FIELD_UPDATED_AT,
    RegistrationEntity,
    RegistrationKind,
)
from app.observability.metrics import record_latency, record_webhook_outcome
from app.protocols.payment_normalizer import UnknownGatewayError
from app.services.notification_messages import build_payment_confirmation
from config.logging import log_suppressed_error
from fsm import PAYMENT_LIFECYCLE, PaymentStatus
from utils.errors import InfrastructureError

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.domain.payment_event import PaymentEvent
    from app.protocols.entity_store import EntityStoreProtocol
    from app.protocols.notifier import NotificationSinkProtocol
    from app.protocols.payment_normalizer import PaymentEventNormalizerProtocol

logger = logging.getLogger(__name__)

# Tentativas de escrita condicional antes de desistir (500, gateway reenvia)
MAX_WRITE_ATTEMPTS = 3

DEFAULT_COLLECTIONS: dict[RegistrationKind, str] = {
    RegistrationKind.TEAM: "teams",
    RegistrationKind.AUDIOVISUAL: "audiovisual",
    RegistrationKind.GENERIC: "pagamentos",
}


class WebhookResult(StrEnum):
    PROCESSED = "processed"
    NOOP = "noop"
    IGNORED = "ignored"
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    STORE_FAILURE = "store_failure"


_STATUS_CODES: dict[WebhookResult, int] = {
    WebhookResult.PROCESSED: 200,
    WebhookResult.NOOP: 200,
    WebhookResult.IGNORED: 200,
    WebhookResult.BAD_REQUEST: 400,
    WebhookResult.NOT_FOUND: 404,
    WebhookResult.STORE_FAILURE: 500,
}


@dataclass(frozen=True, slots=True)
class WebhookOutcome:
    """Resultado da reconciliação de um webhook.

    Attributes:
        status_code: Status HTTP para o gateway
        result: Classificação do resultado
        reference_id: Referência extraída (None se ausente)
        entity_kind: Coleção onde a referência foi encontrada
        transitioned: True somente quando esta entrega gravou `paid`
        message: Texto curto para o corpo da resposta
    """

    status_code: int
    result: WebhookResult
    reference_id: str | None = None
    entity_kind: RegistrationKind | None = None
    transitioned: bool = False
    message: str = ""

    @classmethod
    def of(
        cls,
        result: WebhookResult,
        message: str,
        reference_id: str | None = None,
        entity_kind: RegistrationKind | None = None,
        *,
        transitioned: bool = False,
    ) -> WebhookOutcome:
        return cls(
            status_code=_STATUS_CODES[result],
            result=result,
            reference_id=reference_id,
            entity_kind=entity_kind,
            transitioned=transitioned,
            message=message,
        )

    def to_response(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "success": self.status_code == 200,
            "result": str(self.result),
            "message": self.message,
        }
        if self.reference_id:
            body["reference_id"] = self.reference_id
        if self.entity_kind is not None:
            body["entity_kind"] = str(self.entity_kind)
        return body


class WebhookReconciler:
    """Aplica eventos de pagamento às inscrições.

    Args:
        store: Entity store
        notifier: Canal de notificação (best-effort)
        normalizer: Conversor de payload por gateway
        collections: Coleção por tipo; a ordem de RegistrationKind é a de busca
        clock: Relógio UTC (injetável em testes)
    """

    def __init__(
        self,
        store: EntityStoreProtocol,
        notifier: NotificationSinkProtocol,
        normalizer: PaymentEventNormalizerProtocol,
        collections: Mapping[RegistrationKind, str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._normalizer = normalizer
        self._collections = {**DEFAULT_COLLECTIONS, **(collections or {})}
        self._clock = clock or (lambda: datetime.now(UTC))

    async def handle_webhook(
        self,
        gateway_name: str,
        raw_payload: Mapping[str, Any],
    ) -> WebhookOutcome:
        """Processa uma entrega de webhook e devolve o resultado para o gateway."""
        started_at = time.perf_counter()
        outcome = await self._handle(gateway_name, raw_payload)
        record_webhook_outcome(
            gateway_name,
            str(outcome.result),
            outcome.status_code,
            str(outcome.entity_kind) if outcome.entity_kind else None,
        )
        record_latency(
            "webhook_reconciler",
            "handle_webhook",
            (time.perf_counter() - started_at) * 1000,
        )
        return outcome

    async def _handle(self, gateway_name: str, raw_payload: Mapping[str, Any]) -> WebhookOutcome:
        if not isinstance(raw_payload, Mapping):
            return WebhookOutcome.of(WebhookResult.BAD_REQUEST, "payload deve ser objeto JSON")

        try:
            event = self._normalizer.normalize(gateway_name, raw_payload)
        except UnknownGatewayError:
            logger.warning("payment_webhook_unknown_gateway", extra={"gateway": gateway_name})
            return WebhookOutcome.of(WebhookResult.BAD_REQUEST, "gateway desconhecido")

        reference_id = event.reference_id
        if not reference_id:
            logger.warning(
                "payment_webhook_missing_reference",
                extra={"gateway": str(event.gateway), "raw_status": event.raw_status},
            )
            return WebhookOutcome.of(WebhookResult.BAD_REQUEST, "referência ausente")

        try:
            entity = await self._locate(reference_id)
            if entity is None:
                logger.error(
                    "payment_reference_not_found",
                    extra={"gateway": str(event.gateway), "reference_id": reference_id},
                )
                return WebhookOutcome.of(
                    WebhookResult.NOT_FOUND, "Documento não encontrado", reference_id
                )

            if not event.reports_paid:
                logger.info(
                    "payment_status_ignored",
                    extra={
                        "gateway": str(event.gateway),
                        "reference_id": reference_id,
                        "raw_status": event.raw_status,
                        "reported_status": event.reported_status,
                    },
                )
                return WebhookOutcome.of(
                    WebhookResult.IGNORED,
                    f"status '{event.raw_status}' não altera a inscrição",
                    reference_id,
                    entity.kind,
                )

            return await self._settle(entity, event)
        except InfrastructureError as exc:
            logger.error(
                "payment_webhook_store_failure",
                extra={
                    "gateway": str(event.gateway),
                    "reference_id": reference_id,
                    "error_type": type(exc).__name__,
                },
            )
            return WebhookOutcome.of(
                WebhookResult.STORE_FAILURE, "falha temporária no armazenamento", reference_id
            )

    async def _locate(self, reference_id: str) -> RegistrationEntity | None:
        for kind in RegistrationKind:
            entity = await self._load(kind, reference_id)
            if entity is not None:
                return entity
        return None

    async def _load(self, kind: RegistrationKind, reference_id: str) -> RegistrationEntity | None:
        doc = await self._store.get(self._collections[kind], reference_id)
        if doc is None:
            return None
        return RegistrationEntity(kind, doc.doc_id, doc.data, doc.revision)

    async def _settle(self, entity: RegistrationEntity, event: PaymentEvent) -> WebhookOutcome:
        reference_id = entity.entity_id
        trigger = f"webhook:{event.gateway}"

        for _ in range(MAX_WRITE_ATTEMPTS):
            current = entity.payment_status
            if current is PaymentStatus.PAID:
                logger.info(
                    "payment_already_paid",
                    extra={"reference_id": reference_id, "entity_kind": str(entity.kind)},
                )
                return WebhookOutcome.of(
                    WebhookResult.NOOP, "pagamento já confirmado", reference_id, entity.kind
                )

            result = PAYMENT_LIFECYCLE.transition(
                reference_id, current, PaymentStatus.PAID, trigger, {"kind": str(entity.kind)}
            )
            if not result.success:
                logger.warning(
                    "payment_transition_rejected",
                    extra={
                        "reference_id": reference_id,
                        "from_status": str(current),
                        "reason": result.error_reason,
                    },
                )
                return WebhookOutcome.of(
                    WebhookResult.IGNORED,
                    f"inscrição em '{current}' não aceita confirmação",
                    reference_id,
                    entity.kind,
                )

            paid_at = self._clock()
            fields: dict[str, Any] = {
                FIELD_PAYMENT_STATUS: str(PaymentStatus.PAID),
                FIELD_PAYMENT_GATEWAY: str(event.gateway),
                FIELD_PAID_AT: paid_at,
                FIELD_UPDATED_AT: paid_at,
            }
            if FIELD_LEGACY_STATUS in entity.data:
                fields[FIELD_LEGACY_STATUS] = str(PaymentStatus.PAID)

            won = await self._store.update_if_match(
                self._collections[entity.kind], reference_id, fields, entity.revision
            )
            if won:
                transition_log = result.transition.to_log_dict() if result.transition else {}
                logger.info("payment_marked_paid", extra=transition_log)
                await self._notify(entity, paid_at)
                return WebhookOutcome.of(
                    WebhookResult.PROCESSED,
                    "pagamento confirmado",
                    reference_id,
                    entity.kind,
                    transitioned=True,
                )

            reloaded = await self._load(entity.kind, reference_id)
            if reloaded is None:
                return WebhookOutcome.of(
                    WebhookResult.NOT_FOUND, "Documento não encontrado", reference_id
                )
            entity = reloaded

        logger.error(
            "payment_write_conflict_exhausted",
            extra={"reference_id": reference_id, "attempts": MAX_WRITE_ATTEMPTS},
        )
        return WebhookOutcome.of(
            WebhookResult.STORE_FAILURE, "conflito de escrita", reference_id, entity.kind
        )

    async def _notify(self, entity: RegistrationEntity, paid_at: datetime) -> None:
        notification = build_payment_confirmation(entity, paid_at)
        if notification is None:
            logger.info(
                "payment_notification_skipped",
                extra={"reference_id": entity.entity_id, "reason": "missing_contact"},
            )
            return
        try:
            await self._notifier.send(notification)
        except Exception as exc:
            log_suppressed_error(
                logger,
                "payment_notification",
                exc,
                reference_id=entity.entity_id,
                entity_kind=str(entity.kind),
            )
