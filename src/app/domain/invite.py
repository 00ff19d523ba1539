"""Invite: convite para integrar o roster de um time.

Persistido na coleção `convites_times` com campos em camelCase.
E-mails são armazenados em minúsculas e comparados sem caixa.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from fsm.states.invite import InviteStatus

# camelCase persistido ← atributo Python
_FIELD_MAP: dict[str, str] = {
    "team_id": "teamId",
    "team_name": "teamName",
    "captain_id": "captainId",
    "captain_name": "captainName",
    "captain_email": "captainEmail",
    "invited_email": "invitedEmail",
    "invited_name": "invitedName",
    "status": "status",
    "created_at": "createdAt",
    "expires_at": "expiresAt",
    "responded_at": "respondedAt",
    "responded_by": "respondedBy",
    "canceled_at": "canceledAt",
    "canceled_by": "canceledBy",
    "expired_at": "expiredAt",
    "updated_at": "updatedAt",
}


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


class Invite(BaseModel):
    """Convite de time."""

    model_config = ConfigDict(frozen=True)

    id: str
    team_id: str
    team_name: str = ""
    captain_id: str
    captain_name: str = ""
    captain_email: str | None = None
    invited_email: str
    invited_name: str = ""
    status: InviteStatus = InviteStatus.PENDENTE
    created_at: datetime
    expires_at: datetime
    responded_at: datetime | None = None
    responded_by: str | None = None
    canceled_at: datetime | None = None
    canceled_by: str | None = None
    expired_at: datetime | None = None
    updated_at: datetime | None = None

    # Versão lida do store; não persistida
    revision: Any = Field(default=None, exclude=True, repr=False)

    def is_expired(self, now: datetime) -> bool:
        """Pendente com validade vencida (now > expiresAt)."""
        return self.status is InviteStatus.PENDENTE and now > self.expires_at

    def effective_status(self, now: datetime) -> InviteStatus:
        """Status lógico; pendente vencido conta como expirado."""
        if self.is_expired(now):
            return InviteStatus.EXPIRADO
        return self.status

    def to_firestore_dict(self) -> dict[str, Any]:
        data = self.model_dump(exclude={"id", "revision"})
        data["status"] = str(self.status)
        return {_FIELD_MAP[key]: value for key, value in data.items()}

    @classmethod
    def from_firestore_dict(
        cls,
        invite_id: str,
        data: dict[str, Any],
        revision: Any = None,
    ) -> Invite:
        values = {attr: data.get(stored) for attr, stored in _FIELD_MAP.items()}
        values = {key: value for key, value in values.items() if value is not None}
        values["invited_email"] = normalize_email(values.get("invited_email"))
        return cls(id=invite_id, revision=revision, **values)

    def to_public_dict(self, now: datetime) -> dict[str, Any]:
        """Representação para respostas HTTP (status efetivo, datas ISO)."""
        payload: dict[str, Any] = {"id": self.id}
        for attr, stored in _FIELD_MAP.items():
            value = getattr(self, attr)
            if isinstance(value, datetime):
                value = value.isoformat()
            payload[stored] = value
        payload["status"] = str(self.effective_status(now))
        return payload
