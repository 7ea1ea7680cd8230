"""
Exports públicos do módulo fsm/manager.

Máquina de estados (GestureStateMachine) de um gesto de reagendamento.
"""

from fsm.manager.machine import (
    INITIAL_STATES,
    GestureStateMachine,
    TransitionError,
    create_gesture_fsm,
)

__all__ = [
    "INITIAL_STATES",
    "GestureStateMachine",
    "TransitionError",
    "create_gesture_fsm",
]
