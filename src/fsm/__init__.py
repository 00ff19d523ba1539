"""
Módulo FSM: ciclos de vida de pagamento e de convite de time.

Estrutura:
    - states/: PaymentStatus e InviteStatus
    - transitions/: PAYMENT_TRANSITIONS e INVITE_TRANSITIONS
    - types/: StateTransition, TransitionResult
    - manager/: LifecycleMachine (sem estado; o estado vive no store)
"""

from fsm.manager import INVITE_LIFECYCLE, PAYMENT_LIFECYCLE, LifecycleMachine
from fsm.states import (
    INVITE_DECISIONS,
    INVITE_TERMINAL_STATES,
    InviteStatus,
    PaymentStatus,
    is_invite_terminal,
    parse_payment_status,
)
from fsm.transitions import (
    INVITE_TRANSITIONS,
    PAYMENT_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_all_transition_maps,
    validate_transition_map,
)
from fsm.types import StateTransition, TransitionResult

__all__ = [
    "INVITE_DECISIONS",
    "INVITE_LIFECYCLE",
    "INVITE_TERMINAL_STATES",
    "INVITE_TRANSITIONS",
    "PAYMENT_LIFECYCLE",
    "PAYMENT_TRANSITIONS",
    "InviteStatus",
    "LifecycleMachine",
    "PaymentStatus",
    "StateTransition",
    "TransitionResult",
    "get_valid_targets",
    "is_invite_terminal",
    "is_transition_valid",
    "parse_payment_status",
    "validate_all_transition_maps",
    "validate_transition_map",
]
