"""
Tipos para registrar transições de estado de entidades persistidas.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


@dataclass(frozen=True, slots=True)
class StateTransition:
    """
    Registro imutável de uma mudança de estado.

    Attributes:
        entity: Tipo da entidade (ex.: "team", "invite")
        entity_id: ID do documento
        from_state: Estado de origem
        to_state: Estado de destino
        trigger: Gatilho (ex.: "webhook:flowpay", "invite_response")
        metadata: Dados adicionais para auditoria (nunca PII)
        timestamp: Momento da transição (UTC)
    """

    entity: str
    entity_id: str
    from_state: StrEnum
    to_state: StrEnum
    trigger: str
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if not self.trigger or not self.trigger.strip():
            raise ValueError("trigger não pode ser vazio")

    def to_log_dict(self) -> dict[str, Any]:
        """Representação segura para logs."""
        return {
            "entity": self.entity,
            "entity_id": self.entity_id,
            "from_state": str(self.from_state),
            "to_state": str(self.to_state),
            "trigger": self.trigger,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


@dataclass(frozen=True, slots=True)
class TransitionResult:
    """
    Resultado de uma tentativa de transição.

    Attributes:
        success: Se a transição é permitida
        transition: Dados da transição (se success=True)
        error_reason: Motivo da recusa (se success=False)
    """

    success: bool
    transition: StateTransition | None = None
    error_reason: str | None = None

    def __post_init__(self) -> None:
        if self.success and self.transition is None:
            raise ValueError("Transição bem-sucedida deve incluir transition")
        if not self.success and self.error_reason is None:
            raise ValueError("Transição falha deve incluir error_reason")
