"""Cache de credenciais na frente do verificador remoto de ID tokens.

Evita uma verificação remota por requisição: um token validado fica em
memória por `ttl_seconds` (padrão 5 min) e nunca é servido após expirar.
Entradas vencidas são removidas na leitura e por uma varredura periódica
(`start`/`stop`, ligada ao lifespan da aplicação).

Não há single-flight: dois misses simultâneos para o mesmo token geram
duas verificações, ambas idempotentes; a última escrita vence.

Falhas de verificação (token inválido, timeout, erro do provedor) degradam
para `None`; quem chama decide entre 401 e acesso anônimo.
"""

from __future__ import annotations

import asyncio
import contextlib
import heapq
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from app.observability.metrics import record_cache_event
from config.logging import token_fingerprint
from utils.errors import IdentityVerificationError

if TYPE_CHECKING:
    from app.domain.identity import Identity
    from app.protocols.identity_verifier import IdentityVerifierProtocol

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
DEFAULT_TTL_SECONDS = 300.0
DEFAULT_VERIFY_TIMEOUT_SECONDS = 10.0
DEFAULT_MAX_ENTRIES = 1000


def extract_bearer_token(header: str | None) -> str | None:
    """Extrai o token de `Authorization: Bearer <token>`.

    Returns:
        Token ou None se header ausente, sem prefixo `Bearer ` ou vazio
    """
    if not header or not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX):].strip()
    return token or None


@dataclass(slots=True)
class CacheEntry:
    """Identidade validada e instante (monotônico) de expiração."""

    identity: Identity
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at


class CredentialCache:
    """Cache TTL de identidades verificadas.

    Args:
        verifier: Verificador remoto de tokens
        ttl_seconds: Validade de uma entrada
        verify_timeout_seconds: Limite para a verificação remota
        sweep_interval_seconds: Intervalo da varredura (default = TTL)
        max_entries: Limite de entradas; excedente sai por expiração mais próxima
        clock: Relógio monotônico (injetável em testes)
    """

    def __init__(
        self,
        verifier: IdentityVerifierProtocol,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        verify_timeout_seconds: float = DEFAULT_VERIFY_TIMEOUT_SECONDS,
        sweep_interval_seconds: float | None = None,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds deve ser positivo")
        if max_entries < 1:
            raise ValueError("max_entries deve ser >= 1")
        self._verifier = verifier
        self._ttl = ttl_seconds
        self._verify_timeout = verify_timeout_seconds
        self._sweep_interval = sweep_interval_seconds or ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()
        self._sweep_task: asyncio.Task[None] | None = None
        self._counters = {
            "hits": 0,
            "misses": 0,
            "expired": 0,
            "failures": 0,
            "evicted": 0,
            "swept": 0,
        }

    # ── consulta ───────────────────────────────────────────────────────────

    async def authenticate(self, token: str | None) -> Identity | None:
        """Resolve um bearer token para identidade (cache ou verificação remota)."""
        if not token:
            return None

        fingerprint = token_fingerprint(token)
        async with self._lock:
            entry = self._entries.get(token)
            if entry is not None:
                if not entry.is_expired(self._clock()):
                    self._counters["hits"] += 1
                    record_cache_event("hit")
                    logger.debug("auth_cache_hit", extra={"token_fingerprint": fingerprint})
                    return entry.identity
                del self._entries[token]
                self._counters["expired"] += 1
                record_cache_event("expired")
            self._counters["misses"] += 1

        record_cache_event("miss")
        logger.debug("auth_cache_miss", extra={"token_fingerprint": fingerprint})

        identity = await self._verify(token, fingerprint)
        if identity is None:
            return None

        async with self._lock:
            self._entries[token] = CacheEntry(identity, self._clock() + self._ttl)
            self._enforce_capacity()
        return identity

    async def authenticate_header(self, header: str | None) -> Identity | None:
        """Atalho: extrai o bearer token do header e autentica."""
        return await self.authenticate(extract_bearer_token(header))

    async def _verify(self, token: str, fingerprint: str) -> Identity | None:
        try:
            return await asyncio.wait_for(
                self._verifier.verify(token), timeout=self._verify_timeout
            )
        except TimeoutError:
            reason = "timeout"
        except IdentityVerificationError as exc:
            reason = str(exc) or "rejected"
        except Exception as exc:
            # Provedor indisponível ou erro de rede: autenticação falha fechada
            reason = type(exc).__name__
        self._counters["failures"] += 1
        logger.warning(
            "auth_verification_failed",
            extra={"token_fingerprint": fingerprint, "reason": reason},
        )
        return None

    # ── manutenção ─────────────────────────────────────────────────────────

    def _enforce_capacity(self) -> None:
        """Remove vencidas e, se ainda acima do limite, as de expiração mais próxima."""
        if len(self._entries) <= self._max_entries:
            return
        now = self._clock()
        for key in [k for k, e in self._entries.items() if e.is_expired(now)]:
            del self._entries[key]
        overflow = len(self._entries) - self._max_entries
        if overflow <= 0:
            return
        victims = heapq.nsmallest(
            overflow, self._entries.items(), key=lambda item: item[1].expires_at
        )
        for key, _ in victims:
            del self._entries[key]
        self._counters["evicted"] += overflow
        record_cache_event("evicted", overflow)

    async def sweep(self) -> int:
        """Remove entradas vencidas. Retorna quantas saíram."""
        async with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
            remaining = len(self._entries)
        if expired:
            self._counters["swept"] += len(expired)
            record_cache_event("swept", len(expired))
            logger.info(
                "auth_cache_swept",
                extra={"removed": len(expired), "remaining": remaining},
            )
        return len(expired)

    async def invalidate(self, token: str) -> bool:
        async with self._lock:
            return self._entries.pop(token, None) is not None

    async def clear(self) -> None:
        async with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info("auth_cache_cleared", extra={"items_cleared": count})

    def stats(self) -> dict[str, Any]:
        return {
            "entries": len(self._entries),
            "ttl_seconds": self._ttl,
            "max_entries": self._max_entries,
            "sweeper_running": self.is_sweeping,
            **self._counters,
        }

    # ── varredura em background ────────────────────────────────────────────

    @property
    def is_sweeping(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    def start(self) -> None:
        """Agenda a varredura periódica no event loop atual (idempotente)."""
        if self.is_sweeping:
            return
        self._sweep_task = asyncio.create_task(self._sweep_loop(), name="credential_cache_sweep")
        self._sweep_task.add_done_callback(self._on_sweep_done)
        logger.info(
            "auth_cache_sweeper_started",
            extra={"interval_seconds": self._sweep_interval},
        )

    async def stop(self) -> None:
        """Cancela a varredura e aguarda o término."""
        task, self._sweep_task = self._sweep_task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("auth_cache_sweeper_stopped")

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            await self.sweep()

    @staticmethod
    def _on_sweep_done(task: asyncio.Task[None]) -> None:
        with contextlib.suppress(asyncio.CancelledError):
            exc = task.exception()
            if exc is not None:
                logger.error(
                    "auth_cache_sweeper_failed",
                    extra={"error_type": type(exc).__name__},
                )
