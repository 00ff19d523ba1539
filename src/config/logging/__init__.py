"""Configuração de logging estruturado.

Uso:
    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="interbox_core")
    logger = get_logger(__name__)
    logger.info("invite_created", extra={"invite_id": "abc"})

Campos em todo log: timestamp, severity, logger, message, correlation_id
e service.
"""

from config.logging.config import configure_logging, get_logger, log_suppressed_error
from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    LOG_FIELDS,
    create_json_formatter,
)
from config.logging.redaction import mask_email, token_fingerprint

__all__ = [
    "FIELD_RENAME_MAP",
    "LOG_FIELDS",
    "CorrelationIdFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "log_suppressed_error",
    "mask_email",
    "token_fingerprint",
]
