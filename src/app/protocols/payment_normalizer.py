"""Contrato de normalização de payloads de gateway de pagamento."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.domain.payment_event import PaymentEvent


class UnknownGatewayError(ValueError):
    """Nome de gateway não suportado."""


class PaymentEventNormalizerProtocol(Protocol):
    """Converte (gateway, payload bruto) em PaymentEvent.

    Levanta `UnknownGatewayError` para gateway desconhecido.
    """

    def normalize(self, gateway_name: str, payload: Mapping[str, Any]) -> PaymentEvent: ...
