"""Correlation ID por requisição, injetado em todos os logs.

Usa ContextVar (seguro para async). O middleware HTTP lê o header
`x-correlation-id` (ou o `x-cloud-trace-context` do Cloud Run) e devolve
o valor na resposta.

Uso:
    with bound_correlation_id(request.headers.get(CORRELATION_HEADER)):
        ...
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

CORRELATION_HEADER = "x-correlation-id"
CLOUD_TRACE_HEADER = "x-cloud-trace-context"

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Correlation ID do contexto atual ("" se não definido)."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id; gera UUID quando None/vazio."""
    return _correlation_id.set(correlation_id or generate_correlation_id())


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def correlation_id_from_headers(headers: Mapping[str, str]) -> str | None:
    """Extrai o ID dos headers; trace do Cloud Run vem como `TRACE/SPAN;o=1`."""
    explicit = (headers.get(CORRELATION_HEADER) or "").strip()
    if explicit:
        return explicit[:128]
    trace = (headers.get(CLOUD_TRACE_HEADER) or "").strip()
    if trace:
        return trace.split("/", 1)[0][:128] or None
    return None


@contextmanager
def bound_correlation_id(correlation_id: str | None = None) -> Iterator[str]:
    """Vincula um correlation_id ao bloco e restaura o anterior ao sair."""
    token = set_correlation_id(correlation_id)
    try:
        yield _correlation_id.get()
    finally:
        reset_correlation_id(token)
