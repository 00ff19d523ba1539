"""Estados das máquinas de ciclo de vida (pagamento e convite)."""

from fsm.states.invite import (
    INVITE_DECISIONS,
    INVITE_TERMINAL_STATES,
    InviteStatus,
    is_invite_terminal,
)
from fsm.states.payment import PaymentStatus, parse_payment_status

__all__ = [
    "INVITE_DECISIONS",
    "INVITE_TERMINAL_STATES",
    "InviteStatus",
    "PaymentStatus",
    "is_invite_terminal",
    "parse_payment_status",
]
