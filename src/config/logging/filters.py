"""Filter que completa cada record com contexto e mascara e-mails."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.redaction import mask_email

if TYPE_CHECKING:
    from collections.abc import Callable

# Extras que carregam e-mail de atleta ou capitão
EMAIL_EXTRA_FIELDS = ("email", "to_email", "invited_email", "captain_email")


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service; e-mails em `extra` saem mascarados.

    Args:
        service_name: Valor do campo `service`
        correlation_id_getter: Lê o correlation_id do contexto da requisição
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = (
            getattr(record, "correlation_id", None) or self._get_correlation_id()
        )
        record.service = self._service_name
        for name in EMAIL_EXTRA_FIELDS:
            value = getattr(record, name, None)
            if isinstance(value, str) and "***@" not in value:
                setattr(record, name, mask_email(value))
        return True
