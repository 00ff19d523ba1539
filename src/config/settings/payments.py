"""Settings dos webhooks de pagamento (FlowPay e OpenPix)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class PaymentSettings:
    """Configurações de reconciliação de pagamentos.

    Attributes:
        flowpay_webhook_secret: Secret HMAC do webhook FlowPay (vazio = sem checagem)
        openpix_webhook_secret: Valor esperado no header Authorization do OpenPix
        timestamp_tolerance_seconds: Janela aceita para x-flowpay-timestamp
        collection_teams: Collection de inscrições de times
        collection_audiovisual: Collection de inscrições audiovisual
        collection_generic: Collection de pagamentos avulsos
        rate_limit_requests: Requisições por IP aceitas por janela
        rate_limit_window_seconds: Duração da janela do limite por IP
        rate_limit_max_entries: Máximo de IPs acompanhados
    """

    flowpay_webhook_secret: str = ""
    openpix_webhook_secret: str = ""
    timestamp_tolerance_seconds: int = 300
    collection_teams: str = "teams"
    collection_audiovisual: str = "audiovisual"
    collection_generic: str = "pagamentos"
    rate_limit_requests: int = 10
    rate_limit_window_seconds: int = 60
    rate_limit_max_entries: int = 1000

    def validate(self, *, strict: bool = False) -> list[str]:
        errors: list[str] = []
        if self.timestamp_tolerance_seconds <= 0:
            errors.append("WEBHOOK_TIMESTAMP_TOLERANCE_SECONDS deve ser > 0")
        if self.rate_limit_requests < 1 or self.rate_limit_window_seconds <= 0:
            errors.append("WEBHOOK_RATE_LIMIT e WEBHOOK_RATE_LIMIT_WINDOW_SECONDS devem ser > 0")
        if self.rate_limit_max_entries < 1:
            errors.append("WEBHOOK_RATE_LIMIT_MAX_ENTRIES deve ser >= 1")
        if strict and not self.flowpay_webhook_secret:
            errors.append("FLOWPAY_WEBHOOK_SECRET obrigatório fora de development")
        collections = [
            self.collection_teams,
            self.collection_audiovisual,
            self.collection_generic,
        ]
        if len(set(collections)) != len(collections):
            errors.append("Collections de pagamento devem ser distintas")
        return errors


def _load_payment_from_env() -> PaymentSettings:
    return PaymentSettings(
        flowpay_webhook_secret=os.getenv("FLOWPAY_WEBHOOK_SECRET", ""),
        openpix_webhook_secret=os.getenv("OPENPIX_WEBHOOK_SECRET", ""),
        timestamp_tolerance_seconds=int(
            os.getenv("WEBHOOK_TIMESTAMP_TOLERANCE_SECONDS", "300")
        ),
        collection_teams=os.getenv("PAYMENTS_COLLECTION_TEAMS", "teams"),
        collection_audiovisual=os.getenv("PAYMENTS_COLLECTION_AUDIOVISUAL", "audiovisual"),
        collection_generic=os.getenv("PAYMENTS_COLLECTION_GENERIC", "pagamentos"),
        rate_limit_requests=int(os.getenv("WEBHOOK_RATE_LIMIT", "10")),
        rate_limit_window_seconds=int(os.getenv("WEBHOOK_RATE_LIMIT_WINDOW_SECONDS", "60")),
        rate_limit_max_entries=int(os.getenv("WEBHOOK_RATE_LIMIT_MAX_ENTRIES", "1000")),
    )


@lru_cache(maxsize=1)
def get_payment_settings() -> PaymentSettings:
    """Retorna instância cacheada de PaymentSettings."""
    return _load_payment_from_env()
