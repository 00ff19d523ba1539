"""Settings base do serviço.

Configurações comuns a todos os componentes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "staging", "production"]
StoreBackend = Literal["memory", "firestore"]


@dataclass(frozen=True)
class BaseSettings:
    """Configurações base do sistema.

    Attributes:
        environment: Ambiente de execução (development|staging|production)
        service_name: Nome do serviço para logs
        debug: Modo debug ativo
        gcp_project: ID do projeto GCP/Firebase
        store_backend: Backend do entity store (memory|firestore)
    """

    environment: Environment = "development"
    service_name: str = "interbox-core"
    debug: bool = False
    gcp_project: str = ""
    store_backend: StoreBackend = "memory"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    def validate(self) -> list[str]:
        """Valida configurações base.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []

        if self.environment not in {"development", "staging", "production"}:
            errors.append(f"ENVIRONMENT inválido: {self.environment}")

        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")

        if self.store_backend == "memory" and not self.is_development:
            errors.append("STORE_BACKEND=memory proibido em staging/production")

        if self.store_backend == "firestore" and not self.gcp_project:
            errors.append("STORE_BACKEND=firestore requer GCP_PROJECT configurado")

        return errors


def _parse_environment(env_str: str) -> Environment:
    env_lower = env_str.lower()
    if env_lower in ("production", "prod"):
        return "production"
    if env_lower in ("staging", "stage"):
        return "staging"
    return "development"


def _load_base_from_env() -> BaseSettings:
    environment = _parse_environment(os.getenv("ENVIRONMENT", "development"))
    default_backend = "memory" if environment == "development" else "firestore"
    backend_str = os.getenv("STORE_BACKEND", default_backend).lower()
    backend: StoreBackend = "firestore" if backend_str == "firestore" else "memory"
    return BaseSettings(
        environment=environment,
        service_name=os.getenv("SERVICE_NAME", "interbox-core"),
        debug=os.getenv("DEBUG", "").lower() in ("true", "1", "yes"),
        gcp_project=(
            os.getenv("GCP_PROJECT")
            or os.getenv("GOOGLE_CLOUD_PROJECT")
            or os.getenv("GCLOUD_PROJECT", "")
        ),
        store_backend=backend,
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings."""
    return _load_base_from_env()
