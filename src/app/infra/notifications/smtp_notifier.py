"""Envio de e-mails transacionais via SMTP (Gmail app password em produção).

smtplib é síncrono; `send` roda o envio em `asyncio.to_thread`.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import TYPE_CHECKING

from app.protocols.notifier import Notification, NotificationSinkProtocol
from config.logging import mask_email
from utils.errors import NotificationError

if TYPE_CHECKING:
    from config.settings import EmailSettings

logger = logging.getLogger(__name__)


class SmtpNotifier(NotificationSinkProtocol):
    """Entrega notificações por SMTP com STARTTLS opcional."""

    def __init__(self, settings: EmailSettings) -> None:
        self._settings = settings

    def _build_message(self, notification: Notification) -> MIMEText:
        msg = MIMEText(notification.body, "plain", "utf-8")
        msg["Subject"] = notification.subject
        msg["From"] = formataddr((self._settings.from_name, self._settings.from_email))
        msg["To"] = formataddr((notification.to_name, notification.to_email))
        return msg

    def _send_sync(self, notification: Notification) -> None:
        settings = self._settings
        msg = self._build_message(notification)
        with smtplib.SMTP(
            settings.smtp_host, settings.smtp_port, timeout=settings.timeout_seconds
        ) as server:
            if settings.use_tls:
                server.starttls()
            if settings.smtp_user and settings.smtp_password:
                server.login(settings.smtp_user, settings.smtp_password)
            server.sendmail(settings.from_email, [notification.to_email], msg.as_string())

    async def send(self, notification: Notification) -> None:
        try:
            await asyncio.to_thread(self._send_sync, notification)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(f"SMTP falhou: {type(exc).__name__}") from exc
        logger.info(
            "email_sent",
            extra={
                "notification_kind": notification.kind,
                "to": mask_email(notification.to_email),
            },
        )
