"""Settings do Firestore."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class FirestoreSettings:
    """Configurações do Firestore.

    Attributes:
        project_id: ID do projeto GCP (usa GCP_PROJECT se não definido)
        database: ID do database Firestore
        timeout_seconds: Timeout aplicado a cada operação de IO
    """

    project_id: str = ""
    database: str = "(default)"
    timeout_seconds: float = 10.0

    def validate(self, gcp_project: str) -> list[str]:
        errors: list[str] = []
        if not (self.project_id or gcp_project):
            errors.append("FIRESTORE_PROJECT_ID ou GCP_PROJECT deve estar configurado")
        if self.timeout_seconds <= 0:
            errors.append("FIRESTORE_TIMEOUT_SECONDS deve ser > 0")
        return errors


def _load_firestore_from_env() -> FirestoreSettings:
    return FirestoreSettings(
        project_id=os.getenv("FIRESTORE_PROJECT_ID", ""),
        database=os.getenv("FIRESTORE_DATABASE", "(default)"),
        timeout_seconds=float(os.getenv("FIRESTORE_TIMEOUT_SECONDS", "10")),
    )


@lru_cache(maxsize=1)
def get_firestore_settings() -> FirestoreSettings:
    """Retorna instância cacheada de FirestoreSettings."""
    return _load_firestore_from_env()
