"""Notificador que apenas registra (desenvolvimento e EMAIL_BACKEND=log)."""

from __future__ import annotations

import logging

from app.protocols.notifier import Notification, NotificationSinkProtocol
from config.logging import mask_email

logger = logging.getLogger(__name__)


class LogNotifier(NotificationSinkProtocol):
    """Registra a notificação sem enviar; guarda as últimas para inspeção."""

    def __init__(self, max_history: int = 100) -> None:
        self._max_history = max_history
        self.sent: list[Notification] = []

    async def send(self, notification: Notification) -> None:
        self.sent.append(notification)
        if len(self.sent) > self._max_history:
            del self.sent[: len(self.sent) - self._max_history]
        logger.info(
            "email_logged",
            extra={
                "notification_kind": notification.kind,
                "to": mask_email(notification.to_email),
                "subject": notification.subject,
            },
        )
