"""Contrato do canal de notificação (e-mail transacional)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Notification:
    """Mensagem pronta para envio.

    Attributes:
        kind: Tipo lógico (ex.: "payment_confirmation", "team_invite")
        to_email: Destinatário
        to_name: Nome do destinatário
        subject: Assunto
        body: Corpo em texto simples
        context: Campos estruturados usados para montar o corpo
    """

    kind: str
    to_email: str
    to_name: str
    subject: str
    body: str
    context: dict[str, Any] = field(default_factory=dict)


class NotificationSinkProtocol(ABC):
    """Entrega notificações. Levanta `NotificationError` em falha."""

    @abstractmethod
    async def send(self, notification: Notification) -> None: ...
