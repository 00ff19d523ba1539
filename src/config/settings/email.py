"""Settings do envio de e-mails transacionais."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

EmailBackend = Literal["log", "smtp"]


@dataclass(frozen=True)
class EmailSettings:
    """Configurações de e-mail.

    Attributes:
        backend: log (apenas registra) ou smtp
        smtp_host: Host SMTP
        smtp_port: Porta SMTP (587 com STARTTLS)
        smtp_user: Usuário SMTP
        smtp_password: Senha SMTP (app password)
        from_email: Remetente
        from_name: Nome exibido do remetente
        use_tls: Usar STARTTLS
        timeout_seconds: Timeout da conexão SMTP
    """

    backend: EmailBackend = "log"
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    from_email: str = "interbox2025@gmail.com"
    from_name: str = "Interbox 2025"
    use_tls: bool = True
    timeout_seconds: float = 15.0

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.backend not in ("log", "smtp"):
            errors.append(f"EMAIL_BACKEND inválido: {self.backend}")
        if self.backend == "smtp":
            if not self.smtp_host:
                errors.append("EMAIL_BACKEND=smtp requer SMTP_HOST")
            if not self.smtp_password:
                errors.append("EMAIL_BACKEND=smtp requer SMTP_PASSWORD")
        return errors


def _load_email_from_env() -> EmailSettings:
    backend_str = os.getenv("EMAIL_BACKEND", "log").lower()
    backend: EmailBackend = "smtp" if backend_str == "smtp" else "log"
    return EmailSettings(
        backend=backend,
        smtp_host=os.getenv("SMTP_HOST", "smtp.gmail.com"),
        smtp_port=int(os.getenv("SMTP_PORT", "587")),
        smtp_user=os.getenv("SMTP_USER", os.getenv("EMAIL_USER", "")),
        smtp_password=os.getenv("SMTP_PASSWORD", os.getenv("EMAIL_PASSWORD", "")),
        from_email=os.getenv("EMAIL_FROM", "interbox2025@gmail.com"),
        from_name=os.getenv("EMAIL_FROM_NAME", "Interbox 2025"),
        use_tls=os.getenv("SMTP_USE_TLS", "true").lower() in ("true", "1"),
        timeout_seconds=float(os.getenv("EMAIL_TIMEOUT_SECONDS", "15")),
    )


@lru_cache(maxsize=1)
def get_email_settings() -> EmailSettings:
    """Retorna instância cacheada de EmailSettings."""
    return _load_email_from_env()
