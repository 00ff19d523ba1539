"""Canais de notificação."""

from app.infra.notifications.log_notifier import LogNotifier
from app.infra.notifications.smtp_notifier import SmtpNotifier

__all__ = ["LogNotifier", "SmtpNotifier"]
