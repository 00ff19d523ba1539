"""
Estados de um convite de time.

pendente → {aceito, recusado, cancelado, expirado}; todos terminais.
Expiração é derivada: um convite `pendente` com `expiresAt` no passado é
logicamente expirado mesmo antes de qualquer escrita.
"""

from enum import StrEnum


class InviteStatus(StrEnum):
    """Estados canônicos de convite (valores persistidos em português)."""

    PENDENTE = "pendente"
    ACEITO = "aceito"
    RECUSADO = "recusado"
    CANCELADO = "cancelado"
    EXPIRADO = "expirado"

    def __str__(self) -> str:
        return self.value


INVITE_TERMINAL_STATES: frozenset[InviteStatus] = frozenset({
    InviteStatus.ACEITO,
    InviteStatus.RECUSADO,
    InviteStatus.CANCELADO,
    InviteStatus.EXPIRADO,
})

# Respostas aceitas do convidado
INVITE_DECISIONS: frozenset[InviteStatus] = frozenset({
    InviteStatus.ACEITO,
    InviteStatus.RECUSADO,
})


def is_invite_terminal(status: InviteStatus) -> bool:
    """True se o convite já saiu de `pendente`."""
    return status in INVITE_TERMINAL_STATES
