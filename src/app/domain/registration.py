"""Inscrições pagáveis: time, audiovisual ou pagamento avulso.

O reconciliador de webhooks procura a referência do gateway nas coleções
de inscrição, nesta ordem de prioridade.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from fsm.states.payment import PaymentStatus, parse_payment_status

# Campos persistidos
FIELD_PAYMENT_STATUS = "paymentStatus"
FIELD_LEGACY_STATUS = "statusPagamento"
FIELD_STATUS = "status"
FIELD_PAYMENT_GATEWAY = "paymentGateway"
FIELD_PAID_AT = "paidAt"
FIELD_UPDATED_AT = "updatedAt"


class RegistrationKind(StrEnum):
    """Tipo de inscrição; a ordem de declaração é a ordem de busca."""

    TEAM = "team"
    AUDIOVISUAL = "audiovisual"
    GENERIC = "generic"

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]


_KIND_LABELS: dict[RegistrationKind, str] = {
    RegistrationKind.TEAM: "Inscrição de Time",
    RegistrationKind.AUDIOVISUAL: "Credenciamento Audiovisual",
    RegistrationKind.GENERIC: "Pagamento",
}


@dataclass(slots=True)
class RegistrationEntity:
    """Snapshot de uma inscrição lida do store.

    Attributes:
        kind: Coleção de origem
        entity_id: ID do documento (também a referência do gateway)
        data: Campos brutos do documento
        revision: Token opaco de versão para escrita condicional
    """

    kind: RegistrationKind
    entity_id: str
    data: dict[str, Any] = field(default_factory=dict)
    revision: Any = None

    @property
    def payment_status(self) -> PaymentStatus:
        """Status atual; aceita os campos legados e ausente vira pending."""
        for name in (FIELD_PAYMENT_STATUS, FIELD_LEGACY_STATUS, FIELD_STATUS):
            raw = self.data.get(name)
            if raw is not None:
                return parse_payment_status(raw)
        return PaymentStatus.PENDING

    @property
    def contact_email(self) -> str | None:
        value = self.data.get("email")
        return value.strip() if isinstance(value, str) and value.strip() else None

    @property
    def contact_name(self) -> str | None:
        value = self.data.get("nome") or self.data.get("name")
        return value.strip() if isinstance(value, str) and value.strip() else None

    @property
    def amount(self) -> float | None:
        value = self.data.get("valor")
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    def kind_details(self) -> dict[str, str]:
        """Campos específicos do tipo para a notificação de confirmação."""
        if self.kind is RegistrationKind.TEAM:
            details = {"time": self.data.get("nome"), "categoria": self.data.get("categoria")}
        elif self.kind is RegistrationKind.AUDIOVISUAL:
            details = {"area": self.data.get("area")}
        else:
            details = {"descricao": self.data.get("descricao")}
        return {key: str(value) for key, value in details.items() if value}
