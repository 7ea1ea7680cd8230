"""
Exports públicos do módulo fsm/states.

Estados de um gesto de reagendamento.
"""

from fsm.states.gesture import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    RescheduleState,
    is_terminal,
    is_valid_state,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "TERMINAL_STATES",
    "RescheduleState",
    "is_terminal",
    "is_valid_state",
]
