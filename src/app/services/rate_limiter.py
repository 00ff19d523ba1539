"""Limite de requisições por IP na entrada dos webhooks de pagamento.

Janela fixa por cliente: a primeira requisição abre a janela e até
`max_requests` passam até ela vencer. O mapa de clientes é limitado a
`max_entries`; quando enche, saem as janelas vencidas e depois as que
vencem primeiro. Uma varredura periódica (`start`/`stop`, ligada ao
lifespan) remove janelas vencidas de clientes que não voltaram.
"""

from __future__ import annotations

import asyncio
import contextlib
import heapq
import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_MAX_REQUESTS = 10
DEFAULT_WINDOW_SECONDS = 60.0
DEFAULT_MAX_ENTRIES = 1000
DEFAULT_SWEEP_INTERVAL_SECONDS = 300.0


@dataclass(slots=True)
class RateWindow:
    count: int
    reset_at: float

    def is_expired(self, now: float) -> bool:
        return now > self.reset_at


class WebhookRateLimiter:
    """Janela fixa de requisições por chave (IP do cliente).

    Args:
        max_requests: Requisições aceitas por janela
        window_seconds: Duração da janela
        max_entries: Limite de clientes acompanhados
        sweep_interval_seconds: Intervalo da varredura
        clock: Relógio monotônico (injetável em testes)
    """

    def __init__(
        self,
        *,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests deve ser >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds deve ser positivo")
        if max_entries < 1:
            raise ValueError("max_entries deve ser >= 1")
        self._max_requests = max_requests
        self._window = window_seconds
        self._max_entries = max_entries
        self._sweep_interval = sweep_interval_seconds
        self._clock = clock
        self._windows: dict[str, RateWindow] = {}
        self._sweep_task: asyncio.Task[None] | None = None
        self._rejected = 0

    def allow(self, key: str) -> bool:
        """Conta uma requisição de `key`; False quando a janela já está cheia."""
        now = self._clock()
        window = self._windows.get(key)
        if window is None or window.is_expired(now):
            if window is None and len(self._windows) >= self._max_entries:
                self._make_room(now)
            self._windows[key] = RateWindow(1, now + self._window)
            return True
        if window.count >= self._max_requests:
            self._rejected += 1
            logger.warning(
                "webhook_rate_limited",
                extra={"client_ip": key, "retry_after_seconds": self.retry_after(key)},
            )
            return False
        window.count += 1
        return True

    def retry_after(self, key: str) -> int:
        """Segundos até a janela de `key` reabrir (0 se não há janela)."""
        window = self._windows.get(key)
        if window is None:
            return 0
        return max(0, math.ceil(window.reset_at - self._clock()))

    def _make_room(self, now: float) -> None:
        self.sweep(now)
        overflow = len(self._windows) - self._max_entries + 1
        if overflow <= 0:
            return
        victims = heapq.nsmallest(
            overflow, self._windows.items(), key=lambda item: item[1].reset_at
        )
        for key, _ in victims:
            del self._windows[key]

    def sweep(self, now: float | None = None) -> int:
        """Remove janelas vencidas. Retorna quantas saíram."""
        now = self._clock() if now is None else now
        expired = [key for key, window in self._windows.items() if window.is_expired(now)]
        for key in expired:
            del self._windows[key]
        if expired:
            logger.debug(
                "webhook_rate_limiter_swept",
                extra={"removed": len(expired), "remaining": len(self._windows)},
            )
        return len(expired)

    def stats(self) -> dict[str, Any]:
        return {
            "clients": len(self._windows),
            "max_requests": self._max_requests,
            "window_seconds": self._window,
            "rejected": self._rejected,
            "sweeper_running": self.is_sweeping,
        }

    # ── varredura em background ────────────────────────────────────────────

    @property
    def is_sweeping(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    def start(self) -> None:
        """Agenda a varredura periódica no event loop atual (idempotente)."""
        if self.is_sweeping:
            return
        self._sweep_task = asyncio.create_task(
            self._sweep_loop(), name="webhook_rate_limiter_sweep"
        )
        self._sweep_task.add_done_callback(self._on_sweep_done)

    async def stop(self) -> None:
        task, self._sweep_task = self._sweep_task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            self.sweep()

    @staticmethod
    def _on_sweep_done(task: asyncio.Task[None]) -> None:
        with contextlib.suppress(asyncio.CancelledError):
            exc = task.exception()
            if exc is not None:
                logger.error(
                    "webhook_rate_limiter_sweeper_failed",
                    extra={"error_type": type(exc).__name__},
                )
