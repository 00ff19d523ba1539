"""Configuração centralizada de logging.

Logging estruturado JSON com campos obrigatórios (correlation_id, service,
severity, logger, message) e nível configurável por ambiente.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização do serviço (app/bootstrap/)
    configure_logging(level="INFO", service_name="interbox_core")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("payment_marked_paid", extra={"reference_id": "team-42"})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "interbox_core"


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
) -> None:
    """Configura logging JSON estruturado para o serviço.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id do
            contexto atual (ContextVar de app.observability).

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    root.handlers = [handler]

    # Clientes Google são verbosos em DEBUG e logam URLs com tokens
    for noisy in ("google.auth", "urllib3", "google.api_core"):
        logging.getLogger(noisy).setLevel(max(logging.INFO, root.level))


def get_logger(name: str) -> logging.Logger:
    """Retorna logger do módulo; o filter injeta service e correlation_id."""
    return logging.getLogger(name)


def log_suppressed_error(
    logger: logging.Logger,
    component: str,
    exc: BaseException,
    **fields: object,
) -> None:
    """Registra falha engolida de um efeito colateral best-effort.

    Usado quando a falha não pode interromper o fluxo principal
    (ex.: e-mail de confirmação após o pagamento já persistido).

    Args:
        logger: Logger do módulo chamador.
        component: Nome do componente (ex.: "payment_notification").
        exc: Exceção capturada.
        **fields: Campos extras sem PII.
    """
    logger.warning(
        "%s_failed",
        component,
        extra={
            "component": component,
            "suppressed": True,
            "error_type": type(exc).__name__,
            "error": str(exc),
            **fields,
        },
    )
