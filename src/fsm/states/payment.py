"""
Estados de pagamento de uma inscrição (time, audiovisual ou avulso).

O status só avança: pending → paid (→ refunded). Um webhook que reporta
"paid" para uma inscrição já paga é no-op, não erro.
"""

from enum import StrEnum
from typing import Any


class PaymentStatus(StrEnum):
    """Status canônico de pagamento persistido em `paymentStatus`."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"
    EXPIRED = "expired"

    def __str__(self) -> str:
        return self.value


# Valores legados gravados pelo frontend antigo (`statusPagamento`)
_LEGACY_ALIASES: dict[str, PaymentStatus] = {
    "pago": PaymentStatus.PAID,
    "pendente": PaymentStatus.PENDING,
    "confirmed": PaymentStatus.PAID,
    "falhou": PaymentStatus.FAILED,
    "expirado": PaymentStatus.EXPIRED,
    "reembolsado": PaymentStatus.REFUNDED,
}


def parse_payment_status(value: Any) -> PaymentStatus:
    """Normaliza status armazenado; ausente ou desconhecido vira PENDING."""
    if isinstance(value, PaymentStatus):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        try:
            return PaymentStatus(lowered)
        except ValueError:
            return _LEGACY_ALIASES.get(lowered, PaymentStatus.PENDING)
    return PaymentStatus.PENDING
