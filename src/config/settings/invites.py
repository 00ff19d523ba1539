"""Settings dos convites de time."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class InviteSettings:
    """Configurações de convites.

    Attributes:
        expiry_days: Validade de um convite pendente
        max_roster_size: Máximo de atletas por time
        collection_invites: Collection dos convites
        collection_teams: Collection dos times (roster)
        collection_invite_slots: Uma vaga por (time, e-mail) que aponta o convite pendente
    """

    expiry_days: int = 7
    max_roster_size: int = 4
    collection_invites: str = "convites_times"
    collection_teams: str = "teams"
    collection_invite_slots: str = "convites_times_vagas"

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.expiry_days < 1:
            errors.append("INVITE_EXPIRY_DAYS deve ser >= 1")
        if self.max_roster_size < 1:
            errors.append("TEAM_MAX_ROSTER deve ser >= 1")
        if self.collection_invite_slots in {self.collection_invites, self.collection_teams}:
            errors.append("INVITE_SLOTS_COLLECTION deve ser distinta das demais")
        return errors


def _load_invite_from_env() -> InviteSettings:
    return InviteSettings(
        expiry_days=int(os.getenv("INVITE_EXPIRY_DAYS", "7")),
        max_roster_size=int(os.getenv("TEAM_MAX_ROSTER", "4")),
        collection_invites=os.getenv("INVITES_COLLECTION", "convites_times"),
        collection_teams=os.getenv("PAYMENTS_COLLECTION_TEAMS", "teams"),
        collection_invite_slots=os.getenv("INVITE_SLOTS_COLLECTION", "convites_times_vagas"),
    )


@lru_cache(maxsize=1)
def get_invite_settings() -> InviteSettings:
    """Retorna instância cacheada de InviteSettings."""
    return _load_invite_from_env()
