"""
Regras de transição válidas para pagamento e convite.

Chave: estado de origem. Valor: destinos permitidos.
"""

from enum import StrEnum

from fsm.states.invite import INVITE_TERMINAL_STATES, InviteStatus
from fsm.states.payment import PaymentStatus

TransitionMap = dict[StrEnum, frozenset[StrEnum]]

PAYMENT_TRANSITIONS: TransitionMap = {
    PaymentStatus.PENDING: frozenset({
        PaymentStatus.PAID,
        PaymentStatus.FAILED,
        PaymentStatus.EXPIRED,
    }),
    # Gateway confirmou liquidação após falha/expiração da cobrança
    PaymentStatus.FAILED: frozenset({PaymentStatus.PAID}),
    PaymentStatus.EXPIRED: frozenset({PaymentStatus.PAID}),
    PaymentStatus.PAID: frozenset({PaymentStatus.REFUNDED}),
    PaymentStatus.REFUNDED: frozenset(),
}

INVITE_TRANSITIONS: TransitionMap = {
    InviteStatus.PENDENTE: frozenset({
        InviteStatus.ACEITO,
        InviteStatus.RECUSADO,
        InviteStatus.CANCELADO,
        InviteStatus.EXPIRADO,
    }),
    InviteStatus.ACEITO: frozenset(),
    InviteStatus.RECUSADO: frozenset(),
    InviteStatus.CANCELADO: frozenset(),
    InviteStatus.EXPIRADO: frozenset(),
}


def get_valid_targets(transitions: TransitionMap, state: StrEnum) -> frozenset[StrEnum]:
    """Destinos permitidos a partir de `state` (vazio se terminal)."""
    return transitions.get(state, frozenset())


def is_transition_valid(
    transitions: TransitionMap,
    from_state: StrEnum,
    to_state: StrEnum,
) -> bool:
    """Verifica se a transição consta no mapa."""
    return to_state in get_valid_targets(transitions, from_state)


def validate_transition_map(
    transitions: TransitionMap,
    states: type[StrEnum],
    terminal: frozenset[StrEnum] = frozenset(),
) -> list[str]:
    """
    Valida a integridade de um mapa de transições.

    Verifica que todo estado do enum está no mapa, que estados terminais
    não têm saída e que nenhum destino é de outro enum.

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in states:
        if state not in transitions:
            errors.append(f"Estado {state.name} ausente no mapa de transições")

    for state in terminal:
        if transitions.get(state):
            errors.append(f"Estado terminal {state.name} não deveria ter transições")

    for from_state, targets in transitions.items():
        for target in targets:
            if not isinstance(target, states):
                errors.append(f"Transição {from_state.name} → {target}: destino inválido")

    return errors


def validate_all_transition_maps() -> list[str]:
    """Valida os dois mapas do serviço."""
    return [
        *validate_transition_map(PAYMENT_TRANSITIONS, PaymentStatus),
        *validate_transition_map(INVITE_TRANSITIONS, InviteStatus, INVITE_TERMINAL_STATES),
    ]
