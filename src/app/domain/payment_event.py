"""Eventos de pagamento recebidos dos gateways.

Cada gateway produz sua variante (`FlowPayEvent`, `OpenPixEvent`), que é
normalizada em `PaymentEvent` antes da reconciliação. Nunca persistidos.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Literal

from fsm.states.payment import PaymentStatus


class PaymentGateway(StrEnum):
    """Gateways suportados."""

    FLOWPAY = "flowpay"
    OPENPIX = "openpix"


@dataclass(frozen=True, slots=True)
class FlowPayEvent:
    """Notificação FlowPay já extraída do payload."""

    reference_id: str | None
    status: str | None
    raw_payload: dict[str, Any] = field(default_factory=dict, repr=False)
    gateway: Literal[PaymentGateway.FLOWPAY] = PaymentGateway.FLOWPAY


@dataclass(frozen=True, slots=True)
class OpenPixEvent:
    """Notificação OpenPix já extraída do payload."""

    reference_id: str | None
    status: str | None
    event: str | None = None
    raw_payload: dict[str, Any] = field(default_factory=dict, repr=False)
    gateway: Literal[PaymentGateway.OPENPIX] = PaymentGateway.OPENPIX


GatewayEvent = FlowPayEvent | OpenPixEvent


@dataclass(frozen=True, slots=True)
class PaymentEvent:
    """Evento normalizado consumido pelo reconciliador.

    Attributes:
        gateway: Origem do evento
        reference_id: ID da inscrição referenciada (None se ausente)
        reported_status: Status no vocabulário canônico (None se desconhecido)
        raw_status: Valor literal reportado pelo gateway
        raw_payload: Payload original (somente leitura)
    """

    gateway: PaymentGateway
    reference_id: str | None
    reported_status: PaymentStatus | None
    raw_status: str | None = None
    raw_payload: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def reports_paid(self) -> bool:
        return self.reported_status is PaymentStatus.PAID
