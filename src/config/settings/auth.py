"""Settings do cache de credenciais e do verificador de ID tokens."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class AuthSettings:
    """Configurações de autenticação.

    Attributes:
        cache_ttl_seconds: Validade de uma identidade em cache
        verify_timeout_seconds: Timeout da verificação remota do token
        sweep_interval_seconds: Intervalo da limpeza periódica do cache
        cache_max_entries: Limite de entradas no cache
        firebase_project_id: Projeto Firebase (audience do ID token)
    """

    cache_ttl_seconds: float = 300.0  # 5 min
    verify_timeout_seconds: float = 10.0
    sweep_interval_seconds: float = 300.0
    cache_max_entries: int = 1000
    firebase_project_id: str = ""

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.cache_ttl_seconds <= 0:
            errors.append("AUTH_CACHE_TTL_SECONDS deve ser > 0")
        if self.verify_timeout_seconds <= 0:
            errors.append("AUTH_VERIFY_TIMEOUT_SECONDS deve ser > 0")
        if self.sweep_interval_seconds <= 0:
            errors.append("AUTH_SWEEP_INTERVAL_SECONDS deve ser > 0")
        if self.cache_max_entries < 1:
            errors.append("AUTH_CACHE_MAX_ENTRIES deve ser >= 1")
        if not self.firebase_project_id:
            errors.append("FIREBASE_PROJECT_ID ou GCP_PROJECT deve estar configurado")
        return errors


def _load_auth_from_env() -> AuthSettings:
    ttl = float(os.getenv("AUTH_CACHE_TTL_SECONDS", "300"))
    return AuthSettings(
        cache_ttl_seconds=ttl,
        verify_timeout_seconds=float(os.getenv("AUTH_VERIFY_TIMEOUT_SECONDS", "10")),
        sweep_interval_seconds=float(os.getenv("AUTH_SWEEP_INTERVAL_SECONDS", str(ttl))),
        cache_max_entries=int(os.getenv("AUTH_CACHE_MAX_ENTRIES", "1000")),
        firebase_project_id=(
            os.getenv("FIREBASE_PROJECT_ID")
            or os.getenv("GCP_PROJECT")
            or os.getenv("GOOGLE_CLOUD_PROJECT", "")
        ),
    )


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """Retorna instância cacheada de AuthSettings."""
    return _load_auth_from_env()
