"""Ciclo de vida dos convites de time.

Regras:
- Um convite pendente e não vencido por (time, e-mail) de cada vez. A
  garantia vem de um documento-vaga com ID determinístico por par: `create`
  falha se a vaga existe, e uma vaga cujo convite já saiu de `pendente`
  (ou venceu) é retomada com escrita condicional.
- Toda transição sai de `pendente` e é terminal; a escrita é condicional
  na revisão lida, então respostas concorrentes têm um único vencedor.
- Expiração é preguiçosa: quem encontra um pendente vencido grava
  `expirado` antes de responder.
- Aceite atualiza o roster numa segunda escrita (array-union). Se essa
  escrita falhar o convite continua `aceito` e o resultado traz
  `roster_updated=False`.

Violação de regra de negócio vira `InviteResult` com `InviteError`;
falha de infraestrutura propaga como `InfrastructureError`.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from app.domain.invite import Invite, normalize_email
from app.observability.metrics import record_invite_transition
from app.services.notification_messages import build_invite_response, build_team_invite
from config.logging import log_suppressed_error, mask_email
from fsm import INVITE_DECISIONS, INVITE_LIFECYCLE, InviteStatus
from utils.errors import DocumentAlreadyExistsError, DocumentNotFoundError, InfrastructureError

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.protocols.entity_store import EntityStoreProtocol, StoredDocument
    from app.protocols.notifier import Notification, NotificationSinkProtocol
    from config.settings import InviteSettings

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

ROSTER_FIELD = "atletas"

# Vaga sem convite gravado ainda: criação em andamento até vencer este prazo
SLOT_CLAIM_GRACE = timedelta(seconds=60)


class InviteError(StrEnum):
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    ALREADY_RESOLVED = "already_resolved"
    EXPIRED = "expired"
    TEAM_FULL = "team_full"
    INVALID_ARGUMENT = "invalid_argument"


@dataclass(frozen=True, slots=True)
class InviteResult:
    """Resultado de uma operação de convite.

    Attributes:
        ok: Operação concluída
        error: Motivo da recusa (quando ok=False)
        message: Texto curto para o cliente
        invite: Convite afetado (estado após a operação, ou atual na recusa)
        invites: Convites listados
        roster_updated: Só em aceite; False se a escrita no time falhou
    """

    ok: bool
    error: InviteError | None = None
    message: str = ""
    invite: Invite | None = None
    invites: tuple[Invite, ...] = ()
    roster_updated: bool | None = None

    @classmethod
    def success(cls, invite: Invite | None = None, **kwargs: Any) -> InviteResult:
        return cls(ok=True, invite=invite, **kwargs)

    @classmethod
    def failure(
        cls, error: InviteError, message: str, invite: Invite | None = None
    ) -> InviteResult:
        return cls(ok=False, error=error, message=message, invite=invite)


class InviteService:
    """Operações de convite sobre o entity store.

    Args:
        store: Entity store
        notifier: Canal de notificação (best-effort)
        settings: Validade, tamanho de roster e coleções
        clock: Relógio UTC (injetável em testes)
    """

    def __init__(
        self,
        store: EntityStoreProtocol,
        notifier: NotificationSinkProtocol,
        settings: InviteSettings,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._settings = settings
        self._clock = clock or (lambda: datetime.now(UTC))

    def now(self) -> datetime:
        """Instante atual segundo o relógio do serviço."""
        return self._clock()

    @property
    def _invites(self) -> str:
        return self._settings.collection_invites

    @property
    def _teams(self) -> str:
        return self._settings.collection_teams

    @property
    def _slots(self) -> str:
        return self._settings.collection_invite_slots

    # ── criação ────────────────────────────────────────────────────────────

    async def create_invite(
        self,
        team_id: str,
        invited_email: str,
        captain_id: str,
        *,
        captain_name: str = "",
        captain_email: str | None = None,
        invited_name: str = "",
        team_name: str | None = None,
    ) -> InviteResult:
        email = normalize_email(invited_email)
        if not team_id or not captain_id:
            return InviteResult.failure(InviteError.INVALID_ARGUMENT, "time e capitão obrigatórios")
        if not _EMAIL_RE.match(email):
            return InviteResult.failure(InviteError.INVALID_ARGUMENT, "e-mail inválido")

        team = await self._store.get(self._teams, team_id)
        if team is None:
            return InviteResult.failure(InviteError.NOT_FOUND, "time não encontrado")
        team_captain = team.data.get("captainId")
        if team_captain and team_captain != captain_id:
            return InviteResult.failure(InviteError.FORBIDDEN, "apenas o capitão pode convidar")
        roster = team.data.get(ROSTER_FIELD) or []
        if len(roster) >= self._settings.max_roster_size:
            return InviteResult.failure(InviteError.TEAM_FULL, "time completo")

        now = self._clock()
        existing = await self._store.query(self._invites, {"teamId": team_id, "invitedEmail": email})
        for doc in existing:
            other = self._from_doc(doc)
            if other.status is not InviteStatus.PENDENTE:
                continue
            if other.is_expired(now):
                await self._expire(other, now)
                continue
            return _conflict(other)

        invite_id = uuid.uuid4().hex[:20]
        blocked = await self._claim_slot(team_id, email, invite_id, now)
        if blocked is not None:
            return blocked

        invite = Invite(
            id=invite_id,
            team_id=team_id,
            team_name=team_name or team.data.get("nome") or "",
            captain_id=captain_id,
            captain_name=captain_name,
            captain_email=normalize_email(captain_email) or None,
            invited_email=email,
            invited_name=invited_name,
            status=InviteStatus.PENDENTE,
            created_at=now,
            expires_at=now + timedelta(days=self._settings.expiry_days),
            updated_at=now,
        )
        await self._store.create(self._invites, invite.to_firestore_dict(), doc_id=invite_id)

        logger.info(
            "invite_created",
            extra={
                "invite_id": invite_id,
                "team_id": team_id,
                "invited_email": mask_email(email),
            },
        )
        record_invite_transition("-", str(InviteStatus.PENDENTE), "create_invite")
        await self._notify(build_team_invite(invite), invite_id)
        return InviteResult.success(invite)

    # ── resposta e cancelamento ────────────────────────────────────────────

    async def respond_to_invite(
        self,
        invite_id: str,
        responder_id: str,
        decision: str | InviteStatus,
        *,
        responder_email: str | None = None,
        responder_name: str | None = None,
    ) -> InviteResult:
        target = _parse_decision(decision)
        if target is None or not responder_id:
            return InviteResult.failure(
                InviteError.INVALID_ARGUMENT, "resposta deve ser 'aceito' ou 'recusado'"
            )

        invite = await self._load(invite_id)
        if invite is None:
            return InviteResult.failure(InviteError.NOT_FOUND, "convite não encontrado")
        if responder_email and normalize_email(responder_email) != invite.invited_email:
            return InviteResult.failure(
                InviteError.FORBIDDEN, "convite destinado a outro e-mail", invite
            )

        now = self._clock()
        blocked = await self._guard_pending(invite, now)
        if blocked is not None:
            return blocked

        fields = {
            "status": str(target),
            "respondedAt": now,
            "respondedBy": responder_id,
            "updatedAt": now,
        }
        outcome = await self._apply(invite, target, fields, "invite_response", now)
        if not outcome.ok:
            return outcome
        updated = invite.model_copy(
            update={
                "status": target,
                "responded_at": now,
                "responded_by": responder_id,
                "updated_at": now,
                "invited_name": invite.invited_name or responder_name or "",
            }
        )

        roster_updated: bool | None = None
        if target is InviteStatus.ACEITO:
            roster_updated = await self._add_to_roster(updated, responder_id)

        notification = build_invite_response(updated, target)
        if notification is not None:
            await self._notify(notification, invite_id)
        return InviteResult.success(updated, roster_updated=roster_updated)

    async def cancel_invite(self, invite_id: str, captain_id: str) -> InviteResult:
        invite = await self._load(invite_id)
        if invite is None:
            return InviteResult.failure(InviteError.NOT_FOUND, "convite não encontrado")
        if invite.captain_id != captain_id:
            return InviteResult.failure(
                InviteError.FORBIDDEN, "apenas o capitão pode cancelar", invite
            )

        now = self._clock()
        blocked = await self._guard_pending(invite, now)
        if blocked is not None:
            return blocked

        fields = {
            "status": str(InviteStatus.CANCELADO),
            "canceledAt": now,
            "canceledBy": captain_id,
            "updatedAt": now,
        }
        outcome = await self._apply(invite, InviteStatus.CANCELADO, fields, "invite_cancel", now)
        if not outcome.ok:
            return outcome
        return InviteResult.success(
            invite.model_copy(
                update={
                    "status": InviteStatus.CANCELADO,
                    "canceled_at": now,
                    "canceled_by": captain_id,
                    "updated_at": now,
                }
            )
        )

    # ── listagens ──────────────────────────────────────────────────────────

    async def list_pending_invites(self, invited_email: str) -> InviteResult:
        """Convites logicamente pendentes do e-mail, mais recentes primeiro."""
        email = normalize_email(invited_email)
        if not _EMAIL_RE.match(email):
            return InviteResult.failure(InviteError.INVALID_ARGUMENT, "e-mail inválido")
        now = self._clock()
        docs = await self._store.query(
            self._invites, {"invitedEmail": email, "status": str(InviteStatus.PENDENTE)}
        )
        invites = [invite for invite in map(self._from_doc, docs) if not invite.is_expired(now)]
        return InviteResult.success(invites=_newest_first(invites))

    async def list_team_invites(self, team_id: str, captain_id: str) -> InviteResult:
        """Visão do capitão: todos os convites do time (status efetivo no to_public_dict)."""
        team = await self._store.get(self._teams, team_id)
        if team is None:
            return InviteResult.failure(InviteError.NOT_FOUND, "time não encontrado")
        team_captain = team.data.get("captainId")
        if team_captain and team_captain != captain_id:
            return InviteResult.failure(InviteError.FORBIDDEN, "apenas o capitão pode listar")

        docs = await self._store.query(self._invites, {"teamId": team_id})
        invites = [self._from_doc(doc) for doc in docs]
        if not team_captain:
            # Time legado sem captainId: só os convites emitidos por quem pede
            invites = [invite for invite in invites if invite.captain_id == captain_id]
        return InviteResult.success(invites=_newest_first(invites))

    # ── internos ───────────────────────────────────────────────────────────

    @staticmethod
    def _from_doc(doc: StoredDocument) -> Invite:
        return Invite.from_firestore_dict(doc.doc_id, doc.data, doc.revision)

    async def _load(self, invite_id: str) -> Invite | None:
        if not invite_id:
            return None
        doc = await self._store.get(self._invites, invite_id)
        return None if doc is None else self._from_doc(doc)

    async def _guard_pending(self, invite: Invite, now: datetime) -> InviteResult | None:
        """Recusa convites resolvidos ou vencidos (gravando a expiração)."""
        if invite.status is not InviteStatus.PENDENTE:
            return _resolved_failure(invite)
        if invite.is_expired(now):
            expired = await self._expire(invite, now)
            return InviteResult.failure(InviteError.EXPIRED, "convite expirado", expired)
        return None

    async def _apply(
        self,
        invite: Invite,
        target: InviteStatus,
        fields: dict[str, Any],
        trigger: str,
        now: datetime,
    ) -> InviteResult:
        result = INVITE_LIFECYCLE.transition(invite.id, invite.status, target, trigger)
        if not result.success:
            return _resolved_failure(invite)

        won = await self._store.update_if_match(self._invites, invite.id, fields, invite.revision)
        if not won:
            current = await self._load(invite.id)
            logger.info(
                "invite_transition_lost_race",
                extra={"invite_id": invite.id, "target": str(target)},
            )
            if current is None:
                return InviteResult.failure(InviteError.NOT_FOUND, "convite não encontrado")
            if current.effective_status(now) is InviteStatus.EXPIRADO:
                return InviteResult.failure(InviteError.EXPIRED, "convite expirado", current)
            return _resolved_failure(current)

        transition_log = result.transition.to_log_dict() if result.transition else {}
        logger.info("invite_transitioned", extra=transition_log)
        record_invite_transition(str(invite.status), str(target), trigger)
        return InviteResult.success(invite)

    async def _claim_slot(
        self, team_id: str, email: str, invite_id: str, now: datetime
    ) -> InviteResult | None:
        """Reserva a vaga do par para `invite_id`; devolve Conflict se ocupada."""
        slot_id = _slot_id(team_id, email)
        claim = {"inviteId": invite_id, "teamId": team_id, "invitedEmail": email, "claimedAt": now}
        try:
            await self._store.create(self._slots, claim, doc_id=slot_id)
            return None
        except DocumentAlreadyExistsError:
            pass

        slot = await self._store.get(self._slots, slot_id)
        holder = await self._slot_holder(slot)
        if slot is None or await self._slot_is_live(slot.data, holder, now):
            logger.info(
                "invite_slot_taken",
                extra={"team_id": team_id, "invited_email": mask_email(email)},
            )
            return _conflict(holder)

        if not await self._store.update_if_match(self._slots, slot_id, claim, slot.revision):
            logger.info("invite_slot_lost_race", extra={"team_id": team_id})
            winner = await self._store.get(self._slots, slot_id)
            return _conflict(await self._slot_holder(winner))
        return None

    async def _slot_holder(self, slot: StoredDocument | None) -> Invite | None:
        invite_id = slot.data.get("inviteId") if slot else None
        return await self._load(invite_id) if invite_id else None

    async def _slot_is_live(
        self, slot: dict[str, Any], holder: Invite | None, now: datetime
    ) -> bool:
        if holder is None:
            claimed_at = slot.get("claimedAt")
            return isinstance(claimed_at, datetime) and now - claimed_at < SLOT_CLAIM_GRACE
        if holder.status is not InviteStatus.PENDENTE:
            return False
        if holder.is_expired(now):
            await self._expire(holder, now)
            return False
        return True

    async def _expire(self, invite: Invite, now: datetime) -> Invite:
        """Grava `expirado` (condicional; se outro escritor venceu, mantém o dele)."""
        fields = {"status": str(InviteStatus.EXPIRADO), "expiredAt": now, "updatedAt": now}
        won = await self._store.update_if_match(self._invites, invite.id, fields, invite.revision)
        if won:
            logger.info("invite_expired", extra={"invite_id": invite.id})
            record_invite_transition(
                str(InviteStatus.PENDENTE), str(InviteStatus.EXPIRADO), "lazy_expiry"
            )
        return invite.model_copy(
            update={"status": InviteStatus.EXPIRADO, "expired_at": now, "updated_at": now}
        )

    async def _add_to_roster(self, invite: Invite, athlete_id: str) -> bool:
        try:
            await self._store.add_to_array(self._teams, invite.team_id, ROSTER_FIELD, [athlete_id])
        except (InfrastructureError, DocumentNotFoundError) as exc:
            logger.error(
                "invite_roster_update_failed",
                extra={
                    "invite_id": invite.id,
                    "team_id": invite.team_id,
                    "error_type": type(exc).__name__,
                },
            )
            return False
        logger.info(
            "invite_roster_updated",
            extra={"invite_id": invite.id, "team_id": invite.team_id},
        )
        return True

    async def _notify(self, notification: Notification, invite_id: str) -> None:
        try:
            await self._notifier.send(notification)
        except Exception as exc:
            log_suppressed_error(
                logger, "invite_notification", exc, invite_id=invite_id, kind=notification.kind
            )


def _parse_decision(decision: str | InviteStatus) -> InviteStatus | None:
    try:
        status = InviteStatus(str(decision).strip().lower())
    except ValueError:
        return None
    return status if status in INVITE_DECISIONS else None


def _slot_id(team_id: str, email: str) -> str:
    return f"{team_id}:{email}"


def _conflict(holder: Invite | None) -> InviteResult:
    return InviteResult.failure(
        InviteError.CONFLICT, "já existe convite pendente para este e-mail", holder
    )


def _resolved_failure(invite: Invite) -> InviteResult:
    if invite.status is InviteStatus.EXPIRADO:
        return InviteResult.failure(InviteError.EXPIRED, "convite expirado", invite)
    return InviteResult.failure(
        InviteError.ALREADY_RESOLVED, f"convite já {invite.status}", invite
    )


def _newest_first(invites: list[Invite]) -> tuple[Invite, ...]:
    return tuple(sorted(invites, key=lambda invite: invite.created_at, reverse=True))
