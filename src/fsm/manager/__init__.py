"""Máquinas de ciclo de vida pré-configuradas."""

from fsm.manager.machine import INVITE_LIFECYCLE, PAYMENT_LIFECYCLE, LifecycleMachine

__all__ = ["INVITE_LIFECYCLE", "PAYMENT_LIFECYCLE", "LifecycleMachine"]
