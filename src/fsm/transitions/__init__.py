"""Mapas de transição de pagamento e convite."""

from fsm.transitions.rules import (
    INVITE_TRANSITIONS,
    PAYMENT_TRANSITIONS,
    TransitionMap,
    get_valid_targets,
    is_transition_valid,
    validate_all_transition_maps,
    validate_transition_map,
)

__all__ = [
    "INVITE_TRANSITIONS",
    "PAYMENT_TRANSITIONS",
    "TransitionMap",
    "get_valid_targets",
    "is_transition_valid",
    "validate_all_transition_maps",
    "validate_transition_map",
]
