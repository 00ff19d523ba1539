"""Extração de campos de payloads de gateway por caminho.

Cada gateway declara uma tupla ordenada de caminhos; vence o primeiro
valor não vazio.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

Extractor = Callable[[Mapping[str, Any]], str | None]


def dig(payload: Any, path: Sequence[str | int]) -> Any:
    """Percorre dicts/listas por chave ou índice; None se o caminho quebra."""
    current = payload
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, Sequence) or isinstance(current, str):
                return None
            if not -len(current) <= step < len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, Mapping):
                return None
            current = current.get(step)
    return current


def path_extractor(*path: str | int) -> Extractor:
    """Extrator de string não vazia no caminho (números viram string)."""

    def _extract(payload: Mapping[str, Any]) -> str | None:
        value = dig(payload, path)
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, int | float):
            value = str(value)
        if not isinstance(value, str):
            return None
        value = value.strip()
        return value or None

    _extract.__name__ = "extract_" + "_".join(str(step) for step in path)
    return _extract


def first_present(payload: Mapping[str, Any], extractors: Sequence[Extractor]) -> str | None:
    for extractor in extractors:
        value = extractor(payload)
        if value is not None:
            return value
    return None
