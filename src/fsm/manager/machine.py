"""
Máquina de ciclo de vida sem estado próprio.

O estado vive no documento do store; a máquina apenas decide se uma
transição é permitida e produz o registro auditável correspondente.
"""

from enum import StrEnum
from typing import Any

from fsm.states.invite import INVITE_TERMINAL_STATES
from fsm.transitions.rules import (
    INVITE_TRANSITIONS,
    PAYMENT_TRANSITIONS,
    TransitionMap,
    get_valid_targets,
    is_transition_valid,
)
from fsm.types.transition import StateTransition, TransitionResult


class LifecycleMachine:
    """
    Avalia transições de uma entidade contra um mapa fixo.

    Attributes:
        entity: Nome da entidade governada (para logs)
        transitions: Mapa origem → destinos permitidos
    """

    __slots__ = ("_entity", "_terminal", "_transitions")

    def __init__(
        self,
        entity: str,
        transitions: TransitionMap,
        terminal: frozenset[StrEnum] = frozenset(),
    ) -> None:
        self._entity = entity
        self._transitions = transitions
        self._terminal = terminal

    @property
    def entity(self) -> str:
        return self._entity

    def is_terminal(self, state: StrEnum) -> bool:
        return state in self._terminal or not get_valid_targets(self._transitions, state)

    def can_transition(self, current: StrEnum, target: StrEnum) -> bool:
        return is_transition_valid(self._transitions, current, target)

    def transition(
        self,
        entity_id: str,
        current: StrEnum,
        target: StrEnum,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta uma transição de estado.

        Args:
            entity_id: ID do documento
            current: Estado atual lido do store
            target: Estado desejado
            trigger: Identificador do gatilho
            metadata: Dados para auditoria (nunca PII)

        Returns:
            TransitionResult com a transição ou o motivo da recusa
        """
        if not is_transition_valid(self._transitions, current, target):
            return TransitionResult(
                success=False,
                error_reason=f"Transição inválida: {current} → {target}",
            )
        return TransitionResult(
            success=True,
            transition=StateTransition(
                entity=self._entity,
                entity_id=entity_id,
                from_state=current,
                to_state=target,
                trigger=trigger,
                metadata=metadata or {},
            ),
        )


PAYMENT_LIFECYCLE = LifecycleMachine("registration", PAYMENT_TRANSITIONS)
INVITE_LIFECYCLE = LifecycleMachine("invite", INVITE_TRANSITIONS, INVITE_TERMINAL_STATES)
