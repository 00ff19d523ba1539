"""Formatter JSON no formato lido pelo Cloud Logging."""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

# Cloud Run usa `severity` como nível da entrada
FIELD_RENAME_MAP = {
    "asctime": "timestamp",
    "levelname": "severity",
    "name": "logger",
}

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def create_json_formatter() -> JsonFormatter:
    return JsonFormatter(
        " ".join(f"%({field})s" for field in LOG_FIELDS),
        rename_fields=FIELD_RENAME_MAP,
        datefmt=TIMESTAMP_FORMAT,
    )
